"""Capacity planning: segment count and throughput budgets for a table."""

import logging
import math
from dataclasses import dataclass

from .exceptions import ConfigurationError

log = logging.getLogger(__name__)

DEFAULT_CAPACITY_UNITS = 100


@dataclass(frozen=True)
class TableMetadata:
    """What DescribeTable tells us about a table."""

    table_name: str
    key_schema: object
    table_size_bytes: int
    item_count: int
    provisioned_read_units: int | None = None
    provisioned_write_units: int | None = None


@dataclass(frozen=True)
class CapacityPlan:
    """
    Read/write budget for one job against one table.

    Computed once on the driver and shipped by value to every task.

    Attributes:
        total_segments: Number of parallel scan segments
        read_rate_per_segment: Read capacity units per second for one segment
        write_rate_per_task: Write capacity units per second for one write task
        item_page_limit: Maximum items returned by one scan page
    """

    total_segments: int
    read_rate_per_segment: float
    write_rate_per_task: float
    item_page_limit: int


def plan_capacity(metadata, parallelism, options):
    """
    Derive the capacity plan for a table.

    Args:
        metadata: TableMetadata of the table
        parallelism: Cluster parallelism (number of concurrent tasks)
        options: ConnectorOptions

    Returns:
        CapacityPlan

    Raises:
        ConfigurationError: parallelism is not a positive integer
    """
    if not isinstance(parallelism, int) or parallelism < 1:
        raise ConfigurationError(f"parallelism must be a positive integer, got {parallelism!r}")

    read_capacity = effective_capacity(
        options.absolute_read, options.throughput, metadata.provisioned_read_units,
        options.target_capacity,
    )
    write_capacity = effective_capacity(
        options.absolute_write, options.throughput, metadata.provisioned_write_units,
        options.target_capacity,
    )

    total_segments = segment_count(
        metadata.table_size_bytes, options.max_partition_bytes, parallelism, options.read_partitions,
    )
    num_write_tasks = options.num_write_tasks or parallelism

    read_rate = read_capacity / total_segments
    write_rate = write_capacity / num_write_tasks

    # Eventually consistent reads cost half a unit, so a unit covers twice the items
    read_factor = 1 if options.consistent_read else 2
    avg_item_size = average_item_size(metadata.table_size_bytes, metadata.item_count)
    item_page_limit = max(1, round(options.bytes_per_rcu / avg_item_size * read_rate) * read_factor)

    plan = CapacityPlan(
        total_segments=total_segments,
        read_rate_per_segment=read_rate,
        write_rate_per_task=write_rate,
        item_page_limit=item_page_limit,
    )
    log.info(
        "Capacity plan for table %s: %d segments, %.2f RCU/s per segment, "
        "%.2f WCU/s per write task, %d items per page",
        metadata.table_name, plan.total_segments, plan.read_rate_per_segment,
        plan.write_rate_per_task, plan.item_page_limit,
    )
    return plan


def effective_capacity(absolute, throughput, provisioned, target_capacity):
    """
    Capacity units per second the job may use for one direction.

    An absolute override (non-negative) wins and is used as-is. Otherwise the
    ``throughput`` override, the provisioned units (when positive) or
    ``DEFAULT_CAPACITY_UNITS`` is scaled by ``target_capacity``. On-demand
    tables report zero provisioned units and take the default.
    """
    if absolute is not None and absolute >= 0:
        return float(absolute)

    if throughput is not None:
        units = throughput
    elif provisioned:
        units = provisioned
    else:
        units = DEFAULT_CAPACITY_UNITS
    return units * target_capacity


def segment_count(table_size_bytes, max_partition_bytes, parallelism, read_partitions=None):
    """
    Number of scan segments.

    An explicit ``read_partitions`` wins. Otherwise each segment holds at most
    ``max_partition_bytes`` and the count is rounded up to a multiple of
    ``parallelism`` so every worker gets the same number of segments.
    """
    if read_partitions is not None:
        return read_partitions

    size_based = max(1, math.ceil(table_size_bytes / max_partition_bytes))
    remainder = size_based % parallelism
    if remainder:
        return size_based + (parallelism - remainder)
    return size_based


def average_item_size(table_size_bytes, item_count):
    """Average item size in bytes, never below one byte."""
    if not item_count:
        return 1.0
    return max(1.0, table_size_bytes / item_count)
