"""DynamoDB Data Source implementation."""

import logging

from pyspark.sql.datasource import DataSource

from .options import ConnectorOptions
from .reader import DynamoDbBatchReader
from .writer import DynamoDbBatchWriter

log = logging.getLogger(__name__)

FALLBACK_PARALLELISM_WARNING = (
    "Cluster parallelism is not visible from this process; planning with a parallelism of 1. "
    "Set the defaultParallelism option (and numInputDFPartitions for writes) to the number of "
    "concurrent tasks, otherwise every write task is given the whole table's write capacity"
)


def default_parallelism():
    """
    Default parallelism of the active SparkContext, or 1.

    Spark calls DataSource.reader() and writer() inside a Python worker,
    where there is no active session (nor under Spark Connect, which has no
    SparkContext). The fallback of 1 is logged as a warning; pass the
    ``defaultParallelism`` option there.
    """
    from pyspark.sql import SparkSession

    spark = SparkSession.getActiveSession()
    if spark is None:
        log.warning(FALLBACK_PARALLELISM_WARNING)
        return 1
    try:
        return spark.sparkContext.defaultParallelism
    except Exception:
        log.warning(FALLBACK_PARALLELISM_WARNING)
        return 1


class DynamoDbDataSource(DataSource):
    """PySpark Data Source for AWS DynamoDB."""

    @classmethod
    def name(cls):
        """Return the data source format name."""
        return "dynamodb"

    def __init__(self, options):
        """Initialize data source with options."""
        self.options = options

    def _parsed_options(self):
        return ConnectorOptions.from_options(self.options)

    def schema(self):
        """
        Return the schema of the data source.

        Connects to DynamoDB to derive the schema from sampled table items.
        This runs only once, never in the reader's forked worker processes.
        """
        from .connection import get_resource, resolve_credentials
        from .schema import derive_schema

        options = resolve_credentials(self._parsed_options())
        return derive_schema(get_resource(options), options.table_name)

    def reader(self, schema):
        """Return a batch reader instance."""
        options = self._parsed_options()
        return DynamoDbBatchReader(options, schema, options.default_parallelism or default_parallelism())

    def writer(self, schema, overwrite):
        """Return a batch writer instance."""
        options = self._parsed_options()
        return DynamoDbBatchWriter(options, schema, options.default_parallelism or default_parallelism())
