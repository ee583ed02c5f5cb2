"""Option parsing for the DynamoDB data source."""

import math
from dataclasses import dataclass

from .exceptions import ConfigurationError

MAX_BATCH_SIZE = 25


@dataclass(frozen=True)
class ConnectorOptions:
    """Parsed, validated data source options.

    Built once on the driver and shipped to executors with the reader or
    writer, so it must stay picklable.
    """

    table_name: str
    region: str | None = None
    role_arn: str | None = None
    endpoint_url: str | None = None
    aws_access_key_id: str | None = None
    aws_secret_access_key: str | None = None
    aws_session_token: str | None = None
    credential_name: str | None = None

    # Read options
    consistent_read: bool = False
    filter_pushdown: bool = True

    # Capacity planning
    max_retries: int = 3
    bytes_per_rcu: int = 4000
    max_partition_bytes: int = 128_000_000
    target_capacity: float = 1.0
    num_write_tasks: int | None = None
    read_partitions: int | None = None
    absolute_read: float | None = None
    absolute_write: float | None = None
    throughput: int | None = None
    default_parallelism: int | None = None

    # Write options
    write_batch_size: int = MAX_BATCH_SIZE
    update: bool = False
    delete: bool = False
    delete_flag_column: str | None = None
    delete_flag_value: str | None = None

    @classmethod
    def from_options(cls, options):
        """
        Parse a Spark options mapping.

        Keys are matched case-insensitively.

        Raises:
            ConfigurationError: an option is missing, malformed or out of range
        """
        opts = {str(k).lower(): v for k, v in dict(options).items()}

        table_name = opts.get("table_name") or opts.get("tablename") or opts.get("path")
        if not table_name:
            raise ConfigurationError("Missing required options: table_name")

        parsed = cls(
            table_name=table_name,
            region=opts.get("region") or opts.get("aws_region"),
            role_arn=opts.get("rolearn"),
            endpoint_url=opts.get("endpoint_url"),
            aws_access_key_id=opts.get("aws_access_key_id"),
            aws_secret_access_key=opts.get("aws_secret_access_key"),
            aws_session_token=opts.get("aws_session_token"),
            credential_name=opts.get("credential_name"),
            consistent_read=_bool(opts, "stronglyconsistentreads", False),
            filter_pushdown=_bool(opts, "filterpushdown", True),
            max_retries=_int(opts, "maxretries", 3, minimum=0),
            bytes_per_rcu=_int(opts, "bytesperrcu", 4000, minimum=1),
            max_partition_bytes=_int(opts, "maxpartitionbytes", 128_000_000, minimum=1),
            target_capacity=_float(opts, "targetcapacity", 1.0),
            num_write_tasks=_int(opts, "numinputdfpartitions", None, minimum=1),
            read_partitions=_int(opts, "readpartitions", None, minimum=1),
            absolute_read=_float(opts, "absread", None),
            absolute_write=_float(opts, "abswrite", None),
            throughput=_int(opts, "throughput", None, minimum=1),
            default_parallelism=_int(opts, "defaultparallelism", None, minimum=1),
            write_batch_size=_int(opts, "writebatchsize", MAX_BATCH_SIZE, minimum=1),
            update=_bool(opts, "update", False),
            delete=_bool(opts, "delete", False),
            delete_flag_column=opts.get("delete_flag_column"),
            delete_flag_value=opts.get("delete_flag_value"),
        )
        parsed._validate()
        return parsed

    def _validate(self):
        if self.target_capacity <= 0:
            raise ConfigurationError(
                f"targetcapacity must be greater than zero, got {self.target_capacity}"
            )

        if self.write_batch_size > MAX_BATCH_SIZE:
            raise ConfigurationError(
                f"writebatchsize must be at most {MAX_BATCH_SIZE}, got {self.write_batch_size}"
            )

        if bool(self.delete_flag_column) != bool(self.delete_flag_value):
            raise ConfigurationError(
                "Both delete_flag_column and delete_flag_value must be specified together, or neither"
            )

        if self.update and (self.delete or self.delete_flag_column):
            raise ConfigurationError("update cannot be combined with delete or delete_flag_column")


def _bool(opts, key, default):
    raw = opts.get(key)
    if raw is None:
        return default
    if isinstance(raw, bool):
        return raw
    value = str(raw).strip().lower()
    if value == "true":
        return True
    if value == "false":
        return False
    raise ConfigurationError(f"Option '{key}' must be true or false, got '{raw}'")


def _int(opts, key, default, minimum=None):
    raw = opts.get(key)
    if raw is None:
        return default
    try:
        value = int(str(raw).strip())
    except ValueError:
        raise ConfigurationError(f"Option '{key}' must be an integer, got '{raw}'") from None
    if minimum is not None and value < minimum:
        raise ConfigurationError(f"Option '{key}' must be at least {minimum}, got {value}")
    return value


def _float(opts, key, default):
    raw = opts.get(key)
    if raw is None:
        return default
    try:
        value = float(str(raw).strip())
    except ValueError:
        raise ConfigurationError(f"Option '{key}' must be a number, got '{raw}'") from None
    if not math.isfinite(value):
        raise ConfigurationError(f"Option '{key}' must be a finite number, got '{raw}'")
    return value
