"""DynamoDB - Python Data Source for AWS DynamoDB."""

from .capacity import CapacityPlan, TableMetadata, plan_capacity
from .column_schema import ColumnSchema
from .connector import TableConnector, UnprocessedItemsDropped
from .data_source import DynamoDbDataSource
from .exceptions import ConfigurationError
from .key_schema import HashAndRange, HashOnly, KeyComponent
from .options import ConnectorOptions
from .partitioning import SegmentPartition
from .rate_limiter import RateLimiter
from .reader import DynamoDbBatchReader, DynamoDbReader
from .writer import DynamoDbBatchWriter, DynamoDbCommitMessage, DynamoDbWriter

__all__ = [
    "CapacityPlan",
    "ColumnSchema",
    "ConfigurationError",
    "ConnectorOptions",
    "DynamoDbBatchReader",
    "DynamoDbBatchWriter",
    "DynamoDbCommitMessage",
    "DynamoDbDataSource",
    "DynamoDbReader",
    "DynamoDbWriter",
    "HashAndRange",
    "HashOnly",
    "KeyComponent",
    "RateLimiter",
    "SegmentPartition",
    "TableConnector",
    "TableMetadata",
    "UnprocessedItemsDropped",
    "plan_capacity",
]
