"""boto3 connection helpers and table metadata lookup."""

import logging
from dataclasses import replace

from .capacity import TableMetadata
from .key_schema import key_schema_from_description

log = logging.getLogger(__name__)

ROLE_SESSION_NAME = "spark-dynamodb"


def resolve_credentials(options):
    """Resolve AWS credentials from a Databricks Unity Catalog service credential.

    When credential_name is set, tries databricks.service_credentials
    (available on newer Databricks runtimes). If that is not available, the
    credentials already present in the options (or the default boto3 chain)
    are used.

    Returns:
        ConnectorOptions, with the resolved credentials filled in
    """
    if not options.credential_name:
        return options

    try:
        import databricks.service_credentials
    except ImportError:
        log.info("Using AWS credentials as Lakeflow Connect service credentials are not available")
        return options

    provider = databricks.service_credentials.getServiceCredentialsProvider(options.credential_name)
    credentials = provider.get_credentials().get_frozen_credentials()
    log.info("AWS credentials refreshed using service credential '%s'", options.credential_name)
    return replace(
        options,
        aws_access_key_id=credentials.access_key,
        aws_secret_access_key=credentials.secret_key,
        aws_session_token=credentials.token,
    )


def get_session(options):
    """Create a boto3 Session, assuming ``options.role_arn`` when set."""
    import boto3

    session_kwargs = {}
    if options.region:
        session_kwargs["region_name"] = options.region
    if options.aws_access_key_id:
        session_kwargs["aws_access_key_id"] = options.aws_access_key_id
    if options.aws_secret_access_key:
        session_kwargs["aws_secret_access_key"] = options.aws_secret_access_key
    if options.aws_session_token:
        session_kwargs["aws_session_token"] = options.aws_session_token

    session = boto3.Session(**session_kwargs)

    if not options.role_arn:
        return session

    response = session.client("sts").assume_role(
        RoleArn=options.role_arn,
        RoleSessionName=ROLE_SESSION_NAME,
    )
    credentials = response["Credentials"]
    log.info("Assumed role %s", options.role_arn)

    assumed_kwargs = {
        "aws_access_key_id": credentials["AccessKeyId"],
        "aws_secret_access_key": credentials["SecretAccessKey"],
        "aws_session_token": credentials["SessionToken"],
    }
    if options.region:
        assumed_kwargs["region_name"] = options.region
    return boto3.Session(**assumed_kwargs)


def get_resource(options):
    """Create boto3 DynamoDB resource."""
    resource_kwargs = {}
    if options.endpoint_url:
        resource_kwargs["endpoint_url"] = options.endpoint_url

    return get_session(options).resource("dynamodb", **resource_kwargs)


def describe_table(dynamodb, table_name):
    """
    Look up the metadata the capacity planner needs.

    Args:
        dynamodb: boto3 DynamoDB resource
        table_name: Name of the DynamoDB table

    Returns:
        TableMetadata
    """
    description = dynamodb.meta.client.describe_table(TableName=table_name)["Table"]
    throughput = description.get("ProvisionedThroughput") or {}

    return TableMetadata(
        table_name=table_name,
        key_schema=key_schema_from_description(description["KeySchema"]),
        table_size_bytes=description.get("TableSizeBytes", 0),
        item_count=description.get("ItemCount", 0),
        provisioned_read_units=throughput.get("ReadCapacityUnits"),
        provisioned_write_units=throughput.get("WriteCapacityUnits"),
    )
