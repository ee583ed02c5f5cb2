import pytest
from pyspark.sql.types import StructType, StructField, StringType, IntegerType, LongType
from unittest.mock import MagicMock


@pytest.fixture(scope="session")
def spark():
    """Create a Spark session for testing."""
    from pyspark.sql import SparkSession

    spark = SparkSession.builder \
        .appName("dynamodb-tests") \
        .master("local[2]") \
        .getOrCreate()
    yield spark
    spark.stop()


@pytest.fixture
def basic_options():
    """Basic connection options for testing."""
    return {
        "table_name": "test_table",
        "region": "us-east-1",
        "endpoint_url": "http://localhost:8000",
    }


@pytest.fixture
def sample_schema():
    """Sample Spark schema for testing."""
    return StructType([
        StructField("id", StringType(), False),
        StructField("name", StringType(), True),
        StructField("age", IntegerType(), True),
        StructField("score", LongType(), True)
    ])


def describe_response(key_schema=None, size=1_000_000, count=1000, read_units=100, write_units=100):
    """Build a DescribeTable response."""
    return {
        "Table": {
            "TableName": "test_table",
            "KeySchema": key_schema or [{"AttributeName": "id", "KeyType": "HASH"}],
            "TableSizeBytes": size,
            "ItemCount": count,
            "ProvisionedThroughput": {
                "ReadCapacityUnits": read_units,
                "WriteCapacityUnits": write_units,
            },
        }
    }


def mock_boto3(table=None, **describe_kwargs):
    """
    Create boto3 mocks: (session class, dynamodb resource, table).

    Patch ``boto3.Session`` with the returned session class.
    """
    mock_session_class = MagicMock()
    mock_session = MagicMock()
    mock_session_class.return_value = mock_session
    mock_dynamodb = MagicMock()
    mock_session.resource.return_value = mock_dynamodb

    mock_dynamodb.meta.client.describe_table.return_value = describe_response(**describe_kwargs)
    mock_dynamodb.batch_write_item.return_value = {"UnprocessedItems": {}}

    table = table or MagicMock()
    table.update_item.return_value = {}
    mock_dynamodb.Table.return_value = table

    return mock_session_class, mock_dynamodb, table


class FakeClock:
    """Stands in for the time module: sleep() advances monotonic()."""

    def __init__(self, start=1000.0):
        self.now = start
        self.sleeps = []

    def monotonic(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def make_boto3():
    """Factory fixture for boto3 mocks, see ``mock_boto3``."""
    return mock_boto3


@pytest.fixture
def make_describe():
    """Factory fixture for DescribeTable responses."""
    return describe_response
