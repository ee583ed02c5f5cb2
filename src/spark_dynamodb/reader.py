"""DynamoDB reader implementations using boto3."""

from pyspark.sql.datasource import DataSourceReader

from .capacity import plan_capacity
from .connection import describe_table, get_resource, resolve_credentials
from .connector import TableConnector
from .filters import split_filters
from .options import ConnectorOptions
from .partitioning import SegmentPartition
from .type_conversion import convert_dynamodb_value


class DynamoDbReader:
    """Base reader class for DynamoDB data sources.

    IMPORTANT: The reader __init__ must NOT connect to DynamoDB (no boto3 calls).
    PySpark re-instantiates the reader in a forked Python worker process for
    partitions() and read(). Making boto3/SSL connections in __init__ causes the
    forked child process to crash due to non-fork-safe SSL state.

    The table is described and the capacity plan computed once, in
    partitions(); every SegmentPartition carries that plan to its executor.
    """

    def __init__(self, options, schema, parallelism=1):
        """
        Initialize reader with pre-resolved schema.

        Args:
            options: Configuration options dict or ConnectorOptions
            schema: Spark StructType schema (already resolved by DataSource.schema())
            parallelism: Cluster parallelism used for segment planning
        """
        if not isinstance(options, ConnectorOptions):
            options = ConnectorOptions.from_options(options)

        self.parallelism = options.default_parallelism or parallelism

        # Schema is always provided (resolved by DataSource.schema() or user)
        self.schema = schema
        self.columns = [field.name for field in schema.fields] if schema else []
        self.pushed_filters = []

        # Resolve credentials on init (runs on driver, not fork-sensitive)
        self.options = resolve_credentials(options)

    def pushFilters(self, filters):
        """
        Keep the filters DynamoDB can evaluate during the scan.

        Returns:
            Filters Spark still has to evaluate itself
        """
        if not self.options.filter_pushdown:
            return list(filters)

        self.pushed_filters, unsupported = split_filters(filters)
        return unsupported

    def partitions(self):
        """
        Plan the scan and return one partition per segment.

        Returns:
            List of SegmentPartition objects
        """
        dynamodb = get_resource(self.options)
        metadata = describe_table(dynamodb, self.options.table_name)
        plan = plan_capacity(metadata, self.parallelism, self.options)

        return [SegmentPartition(i, plan) for i in range(plan.total_segments)]

    def read(self, partition):
        """
        Read data from a DynamoDB table segment using Scan.

        Args:
            partition: SegmentPartition to read

        Yields:
            Tuples representing rows in schema column order
        """
        connector = TableConnector(self.options, partition.plan)
        table = get_resource(self.options).Table(self.options.table_name)
        fields = self.schema.fields if self.schema else []

        for item in connector.scan(table, partition.segment, self.columns, self.pushed_filters):
            yield tuple(convert_dynamodb_value(item.get(field.name), field.dataType) for field in fields)


class DynamoDbBatchReader(DynamoDbReader, DataSourceReader):
    """Batch reader for DynamoDB."""

    pass
