"""Tests for DynamoDB type conversion utilities."""

import datetime
from decimal import Decimal

from pyspark.sql import Row
from pyspark.sql.types import (
    ArrayType, BooleanType, DoubleType, IntegerType, LongType, MapType, StringType,
    StructField, StructType,
)


def test_convert_decimal_without_type():
    """Test Decimals become int or float by value when no type is given."""
    from spark_dynamodb.type_conversion import convert_dynamodb_value

    assert convert_dynamodb_value(Decimal("42")) == 42
    assert isinstance(convert_dynamodb_value(Decimal("42")), int)
    assert isinstance(convert_dynamodb_value(Decimal("3.14")), float)


def test_convert_decimal_follows_schema_type():
    """Test the schema decides between int and float."""
    from spark_dynamodb.type_conversion import convert_dynamodb_value

    whole_double = convert_dynamodb_value(Decimal("2"), DoubleType())
    assert whole_double == 2.0
    assert isinstance(whole_double, float)

    assert convert_dynamodb_value(Decimal("7"), IntegerType()) == 7
    assert convert_dynamodb_value(Decimal("7"), LongType()) == 7


def test_convert_to_string_type():
    """Test non-string values read into a string column are stringified."""
    from spark_dynamodb.type_conversion import convert_dynamodb_value

    assert convert_dynamodb_value(Decimal("5"), StringType()) == "5"
    assert convert_dynamodb_value("red", StringType()) == "red"


def test_convert_set_to_array():
    """Test string sets become arrays."""
    from spark_dynamodb.type_conversion import convert_dynamodb_value

    result = convert_dynamodb_value({"a", "b"}, ArrayType(StringType()))
    assert sorted(result) == ["a", "b"]


def test_convert_nested_struct():
    """Test maps read into a struct column become Rows."""
    from spark_dynamodb.type_conversion import convert_dynamodb_value

    struct = StructType([StructField("city", StringType()), StructField("zip", LongType())])

    result = convert_dynamodb_value({"city": "Oslo", "zip": Decimal("150")}, struct)

    assert result == Row(city="Oslo", zip=150)


def test_convert_map_values():
    """Test map values follow the value type."""
    from spark_dynamodb.type_conversion import convert_dynamodb_value

    result = convert_dynamodb_value({"a": Decimal("1.5")}, MapType(StringType(), DoubleType()))

    assert result == {"a": 1.5}


def test_convert_mismatched_shape_is_null():
    """Test a scalar read into a struct column becomes null."""
    from spark_dynamodb.type_conversion import convert_dynamodb_value

    struct = StructType([StructField("city", StringType())])

    assert convert_dynamodb_value("Oslo", struct) is None


def test_convert_none():
    """Test None passes through."""
    from spark_dynamodb.type_conversion import convert_dynamodb_value

    assert convert_dynamodb_value(None, StringType()) is None


def test_convert_for_dynamodb_float_to_decimal():
    """Test float converts to Decimal for writing."""
    from spark_dynamodb.type_conversion import convert_for_dynamodb

    result = convert_for_dynamodb(19.99)
    assert result == Decimal("19.99")
    assert isinstance(result, Decimal)


def test_convert_for_dynamodb_dates():
    """Test dates and timestamps are written as ISO-8601 strings."""
    from spark_dynamodb.type_conversion import convert_for_dynamodb

    assert convert_for_dynamodb(datetime.date(2024, 2, 29)) == "2024-02-29"
    assert convert_for_dynamodb(datetime.datetime(2024, 2, 29, 12, 30)) == "2024-02-29T12:30:00"


def test_convert_for_dynamodb_nested():
    """Test nested rows, lists and binary values."""
    from spark_dynamodb.type_conversion import convert_for_dynamodb

    value = Row(weights=[1.5, 2.0], tags={"k": 0.5}, blob=bytearray(b"\x01"))

    assert convert_for_dynamodb(value) == {
        "weights": [Decimal("1.5"), Decimal("2.0")],
        "tags": {"k": Decimal("0.5")},
        "blob": b"\x01",
    }


def test_convert_for_dynamodb_bool_stays_bool():
    """Test booleans are not turned into numbers."""
    from spark_dynamodb.type_conversion import convert_for_dynamodb

    assert convert_for_dynamodb(True) is True


def test_convert_row_value():
    """Test reading a column by index."""
    from spark_dynamodb.type_conversion import convert_row_value

    row = Row(id="a", price=9.5, active=True, note=None)

    assert convert_row_value(row, 1, DoubleType()) == Decimal("9.5")
    assert convert_row_value(row, 2, BooleanType()) is True
    assert convert_row_value(row, 3, StringType()) is None
