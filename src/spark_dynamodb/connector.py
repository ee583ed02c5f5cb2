"""Scan, batch write and update operations against one DynamoDB table."""

import logging
from dataclasses import dataclass

from .filters import build_filter_expression
from .key_schema import HashAndRange, HashOnly, key_value, primary_key
from .type_conversion import convert_row_value

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class UnprocessedItemsDropped:
    """Items DynamoDB left unprocessed after every retry was spent."""

    table_name: str
    item_count: int


def log_dropped_items(event):
    """Default sink for UnprocessedItemsDropped events."""
    log.warning(
        "Maximum retries reached while writing items to DynamoDB. "
        "Number of unprocessed items of table \"%s\" = %d",
        event.table_name, event.item_count,
    )


class TableConnector:
    """
    Reads and writes one DynamoDB table within a capacity plan.

    The connector holds no connection; callers pass a boto3 DynamoDB
    resource (or a Table for scans) created in the task that uses it.
    """

    def __init__(self, options, plan, on_dropped=None):
        """
        Args:
            options: ConnectorOptions
            plan: CapacityPlan for the table
            on_dropped: Callable receiving UnprocessedItemsDropped events.
                Defaults to logging a warning.
        """
        self.table_name = options.table_name
        self.consistent_read = options.consistent_read
        self.filter_pushdown = options.filter_pushdown
        self.max_retries = options.max_retries
        self.plan = plan
        self.on_dropped = on_dropped or log_dropped_items

    def scan(self, table, segment, columns=(), filters=()):
        """
        Lazily scan one segment of the table.

        Args:
            table: boto3 DynamoDB Table
            segment: Segment number (0 to total_segments - 1)
            columns: Attribute names to project; empty means all attributes
            filters: Spark filters to push down when filter pushdown is on

        Yields:
            Items (dicts) in the order DynamoDB returns them
        """
        scan_kwargs = {
            "Segment": segment,
            "TotalSegments": self.plan.total_segments,
            "Limit": self.plan.item_page_limit,
            "ConsistentRead": self.consistent_read,
            "ReturnConsumedCapacity": "TOTAL",
        }

        if columns:
            # Aliases keep reserved words and odd characters out of the expression
            expr_attr_names = {}
            projection_parts = []
            for i, col in enumerate(columns):
                alias = f"#p{i}"
                expr_attr_names[alias] = col
                projection_parts.append(alias)
            scan_kwargs["ProjectionExpression"] = ", ".join(projection_parts)
            scan_kwargs["ExpressionAttributeNames"] = expr_attr_names

            if filters and self.filter_pushdown:
                filter_expression = build_filter_expression(filters)
                if filter_expression is not None:
                    scan_kwargs["FilterExpression"] = filter_expression

        # Paginate through all results
        while True:
            response = table.scan(**scan_kwargs)

            consumed = response.get("ConsumedCapacity")
            if consumed:
                log.debug(
                    "Scan page of segment %d/%d on %s consumed %s capacity units",
                    segment, self.plan.total_segments, self.table_name,
                    consumed.get("CapacityUnits"),
                )

            yield from response.get("Items", [])

            if "LastEvaluatedKey" not in response:
                break
            scan_kwargs["ExclusiveStartKey"] = response["LastEvaluatedKey"]

    def put_items(self, dynamodb, column_schema, rows, rate_limiter):
        """
        Write rows as one BatchWriteItem request.

        Null non-key columns are left out of the item.

        Returns:
            Number of items dropped after exhausting retries
        """
        requests = [{"PutRequest": {"Item": build_item(column_schema, row)}} for row in rows]
        return self._write_batch(dynamodb, requests, rate_limiter)

    def delete_items(self, dynamodb, column_schema, rows, rate_limiter):
        """
        Delete the rows' keys with one BatchWriteItem request.

        Returns:
            Number of keys dropped after exhausting retries
        """
        requests = [{"DeleteRequest": {"Key": key}} for key in delete_keys(column_schema.keys(), rows)]
        return self._write_batch(dynamodb, requests, rate_limiter)

    def update_item(self, dynamodb, column_schema, row, rate_limiter):
        """
        Update one item, setting every non-null non-key column.

        Null columns leave the stored attribute untouched. Failures are not
        retried here.
        """
        update_kwargs = {
            "Key": primary_key(column_schema.keys(), row, convert_row_value),
            "ReturnConsumedCapacity": "TOTAL",
        }

        set_clauses = []
        expr_attr_names = {}
        expr_attr_values = {}
        for i, (name, index, data_type) in enumerate(column_schema.attributes()):
            value = convert_row_value(row, index, data_type)
            if value is None:
                continue
            expr_attr_names[f"#a{i}"] = name
            expr_attr_values[f":v{i}"] = value
            set_clauses.append(f"#a{i} = :v{i}")

        if set_clauses:
            update_kwargs["UpdateExpression"] = "SET " + ", ".join(set_clauses)
            update_kwargs["ExpressionAttributeNames"] = expr_attr_names
            update_kwargs["ExpressionAttributeValues"] = expr_attr_values

        response = dynamodb.Table(self.table_name).update_item(**update_kwargs)

        consumed = response.get("ConsumedCapacity")
        if consumed:
            rate_limiter.acquire(max(1, int(consumed.get("CapacityUnits", 0))))

    def _write_batch(self, dynamodb, requests, rate_limiter):
        if not requests:
            return 0

        response = dynamodb.batch_write_item(
            RequestItems={self.table_name: requests},
            ReturnConsumedCapacity="TOTAL",
        )
        return self._handle_batch_write_response(dynamodb, rate_limiter, response)

    def _handle_batch_write_response(self, dynamodb, rate_limiter, response):
        """
        Rate limit on consumed capacity and resubmit unprocessed items.

        Resubmits at most ``max_retries`` times, then reports what is left
        through ``on_dropped`` and gives up on it.

        Returns:
            Number of items given up on
        """
        retries = 0
        while True:
            # Rate limit on write capacity
            units = consumed_units(response, self.table_name)
            if units is not None:
                rate_limiter.acquire(max(1, int(units)))

            unprocessed = {
                table: requests
                for table, requests in (response.get("UnprocessedItems") or {}).items()
                if requests
            }
            if not unprocessed:
                return 0

            if retries >= self.max_retries:
                dropped = 0
                for table, requests in unprocessed.items():
                    self.on_dropped(UnprocessedItemsDropped(table, len(requests)))
                    dropped += len(requests)
                return dropped

            retries += 1
            log.debug(
                "Retrying %d unprocessed items on %s (attempt %d of %d)",
                sum(len(r) for r in unprocessed.values()), self.table_name, retries, self.max_retries,
            )
            response = dynamodb.batch_write_item(
                RequestItems=unprocessed,
                ReturnConsumedCapacity="TOTAL",
            )


def build_item(column_schema, row):
    """Map a row to a DynamoDB item: key attributes plus non-null columns."""
    item = primary_key(column_schema.keys(), row, convert_row_value)

    for name, index, data_type in column_schema.attributes():
        value = convert_row_value(row, index, data_type)
        if value is not None:
            item[name] = value

    return item


def hash_only_keys(hash_key, rows):
    """Hash key values of ``rows``, in order."""
    return [key_value(hash_key, row, convert_row_value) for row in rows]


def alternating_keys(hash_key, range_key, rows):
    """Flat list of hash and range values: [h1, r1, h2, r2, ...]."""
    values = []
    for row in rows:
        values.append(key_value(hash_key, row, convert_row_value))
        values.append(key_value(range_key, row, convert_row_value))
    return values


def delete_keys(key_schema, rows):
    """Build the ``Key`` dicts of a delete batch."""
    match key_schema:
        case HashOnly(hash_key=hash_key):
            return [{hash_key.name: value} for value in hash_only_keys(hash_key, rows)]
        case HashAndRange(hash_key=hash_key, range_key=range_key):
            values = alternating_keys(hash_key, range_key, rows)
            return [
                {hash_key.name: values[i], range_key.name: values[i + 1]}
                for i in range(0, len(values), 2)
            ]
        case _:
            raise TypeError(f"Unknown key schema: {key_schema!r}")


def consumed_units(response, table_name):
    """Capacity units ``response`` reports for ``table_name``, or None."""
    capacities = response.get("ConsumedCapacity")
    if not capacities:
        return None

    units = None
    for capacity in capacities:
        if capacity.get("TableName") == table_name:
            units = (units or 0) + capacity.get("CapacityUnits", 0)
    return units
