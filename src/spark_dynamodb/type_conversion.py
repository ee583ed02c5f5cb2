"""Type conversion between Spark rows and DynamoDB values."""

import datetime
from decimal import Decimal

from pyspark.sql import Row
from pyspark.sql.types import (
    ArrayType, BinaryType, BooleanType, DoubleType, FloatType, IntegralType,
    MapType, StringType, StructType,
)


def convert_dynamodb_value(value, data_type=None):
    """
    Convert a DynamoDB value to the Python type Spark expects for ``data_type``.

    DynamoDB (via boto3 resource) returns:
        - Numbers as Decimal
        - Sets as set
        - Binary as boto3.dynamodb.types.Binary or bytes

    Args:
        value: Value from a DynamoDB item
        data_type: Target Spark DataType, or None to convert by value only

    Returns:
        Converted value suitable for Spark
    """
    if value is None:
        return None

    if isinstance(data_type, StructType):
        if not isinstance(value, dict):
            return None
        return Row(**{
            field.name: convert_dynamodb_value(value.get(field.name), field.dataType)
            for field in data_type.fields
        })

    if isinstance(data_type, ArrayType):
        if not isinstance(value, (list, set)):
            return None
        return [convert_dynamodb_value(v, data_type.elementType) for v in value]

    if isinstance(data_type, MapType):
        if not isinstance(value, dict):
            return None
        return {k: convert_dynamodb_value(v, data_type.valueType) for k, v in value.items()}

    if isinstance(data_type, StringType) and not isinstance(value, str):
        return str(convert_dynamodb_value(value))

    if isinstance(value, Decimal):
        if isinstance(data_type, IntegralType):
            return int(value)
        if isinstance(data_type, (DoubleType, FloatType)):
            return float(value)
        if data_type is None:
            if value == value.to_integral_value():
                return int(value)
            return float(value)
        return value

    if isinstance(data_type, BinaryType) and hasattr(value, "value"):
        # boto3.dynamodb.types.Binary
        return bytearray(value.value)

    if isinstance(value, set):
        return [convert_dynamodb_value(v) for v in value]

    if isinstance(value, dict):
        return {k: convert_dynamodb_value(v) for k, v in value.items()}

    if isinstance(value, list):
        return [convert_dynamodb_value(v) for v in value]

    # Pass through str, bool, int, float, bytes
    return value


def convert_for_dynamodb(value):
    """
    Convert a Spark/Python value for writing to DynamoDB.

    DynamoDB requires Decimal instead of float, has no date or timestamp
    type (ISO-8601 strings are written instead) and stores nested rows as
    maps.

    Args:
        value: Value from a Spark Row

    Returns:
        Converted value suitable for DynamoDB put_item
    """
    if value is None:
        return None

    if isinstance(value, bool):
        return value

    if isinstance(value, float):
        return Decimal(str(value))

    if isinstance(value, (datetime.date, datetime.datetime)):
        return value.isoformat()

    if isinstance(value, bytearray):
        return bytes(value)

    if isinstance(value, Row):
        return {k: convert_for_dynamodb(v) for k, v in value.asDict(recursive=False).items()}

    if isinstance(value, dict):
        return {k: convert_for_dynamodb(v) for k, v in value.items()}

    if isinstance(value, (list, tuple)):
        return [convert_for_dynamodb(v) for v in value]

    return value


def convert_row_value(row, index, data_type):
    """Read column ``index`` of ``row`` and convert it for DynamoDB."""
    value = row[index]
    if value is None:
        return None
    if isinstance(data_type, BooleanType):
        return bool(value)
    return convert_for_dynamodb(value)
