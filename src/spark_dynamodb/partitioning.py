"""Partitioning utilities for DynamoDB parallel scan."""

from pyspark.sql.datasource import InputPartition


class SegmentPartition(InputPartition):
    """
    Represents a DynamoDB parallel scan segment.

    DynamoDB Scan supports parallel reads by splitting the table into
    segments. Each partition corresponds to one segment of the scan and
    carries the capacity plan it was planned with, so executors never
    re-plan.
    """

    def __init__(self, segment, plan):
        """
        Initialize a segment partition.

        Args:
            segment: Segment number (0 to plan.total_segments - 1)
            plan: CapacityPlan shared by all segments of the scan
        """
        self.segment = segment
        self.plan = plan

    @property
    def total_segments(self):
        return self.plan.total_segments

    def __eq__(self, other):
        """Check equality based on partition content."""
        if not isinstance(other, SegmentPartition):
            return False
        return self.segment == other.segment and self.plan == other.plan

    def __hash__(self):
        """Return hash for use in sets/dicts."""
        return hash((self.segment, self.plan))

    def __repr__(self):
        """Return string representation."""
        return f"SegmentPartition(segment={self.segment}, total_segments={self.total_segments})"
