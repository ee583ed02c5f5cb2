"""Schema inference for DynamoDB tables."""

from decimal import Decimal

from pyspark.sql.types import (
    ArrayType, BinaryType, BooleanType, DoubleType, LongType, MapType,
    StringType, StructField, StructType,
)

SAMPLE_SIZE = 100

# Key attribute types from AttributeDefinitions
KEY_ATTRIBUTE_TYPES = {"S": StringType(), "N": DoubleType(), "B": BinaryType()}


def infer_spark_type(value):
    """
    Infer the Spark type of a value returned by the boto3 resource API.

    Decimals become LongType when whole and DoubleType otherwise; sets and
    lists become arrays typed after their first element; maps become
    string-keyed maps of their first value's type. Anything unknown is a
    string.
    """
    # Bool check must come before int (bool is subclass of int in Python)
    if isinstance(value, bool):
        return BooleanType()
    if isinstance(value, int):
        return LongType()
    if isinstance(value, Decimal):
        return LongType() if value == value.to_integral_value() else DoubleType()
    if isinstance(value, float):
        return DoubleType()
    if isinstance(value, (bytes, bytearray)) or hasattr(value, "value"):
        return BinaryType()
    if isinstance(value, (list, set)):
        element = next(iter(value), None)
        return ArrayType(infer_spark_type(element) if element is not None else StringType())
    if isinstance(value, dict):
        element = next(iter(value.values()), None)
        return MapType(StringType(), infer_spark_type(element) if element is not None else StringType())
    return StringType()


def merge_types(left, right):
    """Widen two inferred types to one both fit into."""
    if left == right:
        return left
    if {type(left), type(right)} == {LongType, DoubleType}:
        return DoubleType()
    return StringType()


def derive_schema_from_items(items, key_types=None):
    """
    Derive a Spark schema from sample items.

    Args:
        items: List of DynamoDB items (dicts)
        key_types: Optional mapping of key attribute name to Spark type.
            Key attributes are always present, even if no item was sampled.

    Returns:
        StructType with fields sorted by name
    """
    attr_types = dict(key_types or {})

    for item in items:
        for attr_name, attr_value in item.items():
            if attr_value is None:
                continue
            inferred = infer_spark_type(attr_value)
            if attr_name in attr_types:
                attr_types[attr_name] = merge_types(attr_types[attr_name], inferred)
            else:
                attr_types[attr_name] = inferred

    return StructType([
        StructField(name, attr_types[name], nullable=True) for name in sorted(attr_types)
    ])


def derive_schema(dynamodb, table_name):
    """
    Derive a Spark schema by sampling up to ``SAMPLE_SIZE`` items.

    Falls back to the key attributes alone when the table is empty.

    Args:
        dynamodb: boto3 DynamoDB resource
        table_name: Name of the DynamoDB table
    """
    table = dynamodb.Table(table_name)
    items = table.scan(Limit=SAMPLE_SIZE).get("Items", [])

    if items:
        return derive_schema_from_items(items)

    key_types = {
        attr_def["AttributeName"]: KEY_ATTRIBUTE_TYPES.get(attr_def["AttributeType"], StringType())
        for attr_def in table.attribute_definitions
    }
    return derive_schema_from_items([], key_types)
