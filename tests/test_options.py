"""Tests for DynamoDB data source option parsing."""

import pytest


def test_defaults():
    """Test defaults when only table_name is given."""
    from spark_dynamodb.options import ConnectorOptions

    options = ConnectorOptions.from_options({"table_name": "t"})

    assert options.table_name == "t"
    assert options.region is None
    assert options.consistent_read is False
    assert options.filter_pushdown is True
    assert options.max_retries == 3
    assert options.bytes_per_rcu == 4000
    assert options.max_partition_bytes == 128_000_000
    assert options.target_capacity == 1.0
    assert options.num_write_tasks is None
    assert options.read_partitions is None
    assert options.absolute_read is None
    assert options.absolute_write is None
    assert options.throughput is None
    assert options.write_batch_size == 25


def test_keys_are_case_insensitive():
    """Test option keys are matched regardless of case."""
    from spark_dynamodb.options import ConnectorOptions

    options = ConnectorOptions.from_options({
        "TableName": "t",
        "Region": "eu-west-1",
        "roleArn": "arn:aws:iam::123456789012:role/reader",
        "stronglyConsistentReads": "TRUE",
        "filterPushdown": "false",
        "maxRetries": "5",
        "bytesPerRCU": "8000",
        "maxPartitionBytes": "1000",
        "targetCapacity": "0.5",
        "numInputDFPartitions": "7",
        "readPartitions": "12",
        "absRead": "40",
        "absWrite": "20",
        "throughput": "300",
    })

    assert options.table_name == "t"
    assert options.region == "eu-west-1"
    assert options.role_arn == "arn:aws:iam::123456789012:role/reader"
    assert options.consistent_read is True
    assert options.filter_pushdown is False
    assert options.max_retries == 5
    assert options.bytes_per_rcu == 8000
    assert options.max_partition_bytes == 1000
    assert options.target_capacity == 0.5
    assert options.num_write_tasks == 7
    assert options.read_partitions == 12
    assert options.absolute_read == 40.0
    assert options.absolute_write == 20.0
    assert options.throughput == 300


def test_missing_required_option_table_name():
    """Test that missing table_name option raises ConfigurationError."""
    from spark_dynamodb.exceptions import ConfigurationError
    from spark_dynamodb.options import ConnectorOptions

    with pytest.raises(ConfigurationError, match="table_name"):
        ConnectorOptions.from_options({"region": "us-east-1"})


@pytest.mark.parametrize("key,value", [
    ("maxretries", "three"),
    ("bytesperrcu", "4k"),
    ("maxpartitionbytes", "1.5"),
    ("targetcapacity", "full"),
    ("readpartitions", ""),
    ("absread", "lots"),
    ("stronglyconsistentreads", "yes"),
    ("targetcapacity", "nan"),
    ("absread", "inf"),
    ("abswrite", "-inf"),
])
def test_malformed_values_raise_error(key, value):
    """Test malformed values fail fast."""
    from spark_dynamodb.exceptions import ConfigurationError
    from spark_dynamodb.options import ConnectorOptions

    with pytest.raises(ConfigurationError, match=key):
        ConnectorOptions.from_options({"table_name": "t", key: value})


@pytest.mark.parametrize("key,value", [
    ("maxretries", "-1"),
    ("bytesperrcu", "0"),
    ("maxpartitionbytes", "0"),
    ("readpartitions", "0"),
    ("numinputdfpartitions", "0"),
    ("writebatchsize", "26"),
    ("targetcapacity", "0"),
])
def test_out_of_range_values_raise_error(key, value):
    """Test out-of-range values fail fast."""
    from spark_dynamodb.exceptions import ConfigurationError
    from spark_dynamodb.options import ConnectorOptions

    with pytest.raises(ConfigurationError):
        ConnectorOptions.from_options({"table_name": "t", key: value})


def test_configuration_error_is_value_error():
    """Test ConfigurationError can be caught as ValueError."""
    from spark_dynamodb.exceptions import ConfigurationError

    assert issubclass(ConfigurationError, ValueError)


def test_delete_flag_column_without_value():
    """Test that delete_flag_column without value raises ConfigurationError."""
    from spark_dynamodb.exceptions import ConfigurationError
    from spark_dynamodb.options import ConnectorOptions

    with pytest.raises(ConfigurationError, match="must be specified together"):
        ConnectorOptions.from_options({"table_name": "t", "delete_flag_column": "is_deleted"})


def test_delete_flag_value_without_column():
    """Test that delete_flag_value without column raises ConfigurationError."""
    from spark_dynamodb.exceptions import ConfigurationError
    from spark_dynamodb.options import ConnectorOptions

    with pytest.raises(ConfigurationError, match="must be specified together"):
        ConnectorOptions.from_options({"table_name": "t", "delete_flag_value": "true"})


def test_update_with_delete_raises_error():
    """Test update cannot be combined with delete."""
    from spark_dynamodb.exceptions import ConfigurationError
    from spark_dynamodb.options import ConnectorOptions

    with pytest.raises(ConfigurationError, match="update"):
        ConnectorOptions.from_options({"table_name": "t", "update": "true", "delete": "true"})


def test_negative_absolute_override_is_kept_as_unset_marker():
    """Test a negative absRead parses; the planner treats it as unset."""
    from spark_dynamodb.options import ConnectorOptions

    options = ConnectorOptions.from_options({"table_name": "t", "absread": "-1"})

    assert options.absolute_read == -1.0
