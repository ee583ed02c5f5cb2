"""DynamoDB writer implementations using boto3."""

import logging
from dataclasses import dataclass

from pyspark.sql.datasource import DataSourceWriter, WriterCommitMessage

from .capacity import plan_capacity
from .column_schema import ColumnSchema
from .connection import describe_table, get_resource, resolve_credentials
from .connector import TableConnector
from .exceptions import ConfigurationError
from .options import ConnectorOptions
from .rate_limiter import RateLimiter

log = logging.getLogger(__name__)


@dataclass
class DynamoDbCommitMessage(WriterCommitMessage):
    """What one write task did."""

    written: int = 0
    deleted: int = 0
    dropped: int = 0


class DynamoDbWriter:
    """Base writer class with shared write logic for DynamoDB."""

    def __init__(self, options, schema, parallelism=1):
        """
        Initialize writer, load table metadata and plan write capacity.

        Runs on the driver; the resulting writer is shipped to executors.

        Args:
            options: Configuration options dict or ConnectorOptions
            schema: Spark StructType of the rows being written
            parallelism: Cluster parallelism, the default number of write tasks
        """
        if not isinstance(options, ConnectorOptions):
            options = ConnectorOptions.from_options(options)

        self.schema = schema
        self.options = resolve_credentials(options)
        parallelism = options.default_parallelism or parallelism

        df_columns = [field.name for field in schema.fields]
        self.delete_flag_index = None
        if self.options.delete_flag_column:
            if self.options.delete_flag_column not in df_columns:
                raise ValueError(
                    f"delete_flag_column '{self.options.delete_flag_column}' not found in DataFrame schema. "
                    f"Available columns: {', '.join(sorted(df_columns))}"
                )
            self.delete_flag_index = df_columns.index(self.options.delete_flag_column)

        dynamodb = get_resource(self.options)
        metadata = describe_table(dynamodb, self.options.table_name)
        self.plan = plan_capacity(metadata, parallelism, self.options)
        if self.plan.write_rate_per_task <= 0:
            raise ConfigurationError(
                f"Write capacity for table {self.options.table_name} is zero; check abswrite"
            )

        exclude = [self.options.delete_flag_column] if self.options.delete_flag_column else []
        self.column_schema = ColumnSchema(schema, metadata.key_schema, exclude=exclude)

    def _is_delete(self, row):
        if self.options.delete:
            return True
        if self.delete_flag_index is None:
            return False
        flag_value = row[self.delete_flag_index]
        return str(flag_value).lower() == self.options.delete_flag_value.lower()

    def write(self, iterator):
        """
        Write one partition of rows to DynamoDB.

        This runs on executors. Each call owns its own rate limiter, seeded
        with the per-task write budget. Consecutive puts (or deletes) share a
        batch; a change of operation flushes the pending batch first, so
        batches go out in row order.
        """
        dynamodb = get_resource(self.options)
        connector = TableConnector(self.options, self.plan)
        rate_limiter = RateLimiter(self.plan.write_rate_per_task)
        batch_size = self.options.write_batch_size
        message = DynamoDbCommitMessage()

        pending = []
        pending_delete = False

        def flush():
            if pending_delete:
                message.dropped += connector.delete_items(dynamodb, self.column_schema, pending, rate_limiter)
                message.deleted += len(pending)
            else:
                message.dropped += connector.put_items(dynamodb, self.column_schema, pending, rate_limiter)
                message.written += len(pending)
            pending.clear()

        for row in iterator:
            if self.options.update:
                connector.update_item(dynamodb, self.column_schema, row, rate_limiter)
                message.written += 1
                continue

            is_delete = self._is_delete(row)
            if pending and is_delete != pending_delete:
                flush()
            pending_delete = is_delete
            pending.append(row)
            if len(pending) >= batch_size:
                flush()

        if pending:
            flush()

        return message

    def commit(self, messages):
        """Log what the job wrote."""
        messages = [m for m in messages if isinstance(m, DynamoDbCommitMessage)]
        written = sum(m.written for m in messages)
        deleted = sum(m.deleted for m in messages)
        dropped = sum(m.dropped for m in messages)

        log.info(
            "Wrote %d and deleted %d items in table %s", written, deleted, self.options.table_name,
        )
        if dropped:
            log.warning(
                "%d items of table %s were dropped after %d retries",
                dropped, self.options.table_name, self.options.max_retries,
            )

    def abort(self, messages):
        """Handle failed job."""
        log.warning("Write to table %s aborted", self.options.table_name)


class DynamoDbBatchWriter(DynamoDbWriter, DataSourceWriter):
    """Batch writer for DynamoDB."""

    pass
