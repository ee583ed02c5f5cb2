"""Translation of Spark data source filters into DynamoDB filter expressions."""

from functools import reduce

from boto3.dynamodb.conditions import Attr
from pyspark.sql.datasource import (
    EqualNullSafe, EqualTo, GreaterThan, GreaterThanOrEqual, In, IsNotNull, IsNull,
    LessThan, LessThanOrEqual, Not, StringContains, StringStartsWith,
)

from .type_conversion import convert_for_dynamodb

# DynamoDB rejects IN with more operands than this
MAX_IN_OPERANDS = 100


def translate_filter(spark_filter):
    """
    Translate one Spark filter into a boto3 condition.

    Args:
        spark_filter: A pyspark.sql.datasource.Filter

    Returns:
        boto3 ConditionBase, or None when DynamoDB cannot evaluate the filter
    """
    if isinstance(spark_filter, Not):
        child = translate_filter(spark_filter.child)
        return None if child is None else ~child

    # Attr reads dots as nested paths, so a dotted column name cannot be expressed
    if any("." in part for part in spark_filter.attribute):
        return None
    attr = Attr(".".join(spark_filter.attribute))

    if isinstance(spark_filter, (EqualTo, EqualNullSafe)):
        if spark_filter.value is None:
            return None
        return attr.eq(convert_for_dynamodb(spark_filter.value))
    if isinstance(spark_filter, GreaterThan):
        return attr.gt(convert_for_dynamodb(spark_filter.value))
    if isinstance(spark_filter, GreaterThanOrEqual):
        return attr.gte(convert_for_dynamodb(spark_filter.value))
    if isinstance(spark_filter, LessThan):
        return attr.lt(convert_for_dynamodb(spark_filter.value))
    if isinstance(spark_filter, LessThanOrEqual):
        return attr.lte(convert_for_dynamodb(spark_filter.value))
    if isinstance(spark_filter, In):
        values = [v for v in spark_filter.value if v is not None]
        if not values or len(values) > MAX_IN_OPERANDS:
            return None
        return attr.is_in([convert_for_dynamodb(v) for v in values])
    if isinstance(spark_filter, IsNull):
        return attr.not_exists() | attr.attribute_type("NULL")
    if isinstance(spark_filter, IsNotNull):
        return attr.exists() & ~attr.attribute_type("NULL")
    if isinstance(spark_filter, StringStartsWith):
        return attr.begins_with(spark_filter.value)
    if isinstance(spark_filter, StringContains):
        return attr.contains(spark_filter.value)

    return None


def split_filters(filters):
    """
    Partition filters into those DynamoDB can evaluate and the rest.

    Returns:
        Tuple (pushed, unsupported) of filter lists
    """
    pushed = []
    unsupported = []
    for spark_filter in filters:
        if translate_filter(spark_filter) is None:
            unsupported.append(spark_filter)
        else:
            pushed.append(spark_filter)
    return pushed, unsupported


def build_filter_expression(filters):
    """AND together the translatable filters, or None if there are none."""
    conditions = [c for c in (translate_filter(f) for f in filters) if c is not None]
    if not conditions:
        return None
    return reduce(lambda left, right: left & right, conditions)
