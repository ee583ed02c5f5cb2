"""Primary key description for DynamoDB tables."""

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class KeyComponent:
    """One key attribute and the row column it is read from.

    ``index`` and ``data_type`` stay ``None`` until the component is bound to
    a Spark schema (see ``ColumnSchema``).
    """

    name: str
    index: int | None = None
    data_type: object = None

    def bind(self, index, data_type):
        return replace(self, index=index, data_type=data_type)


@dataclass(frozen=True)
class HashOnly:
    """Key made of a partition (hash) attribute only."""

    hash_key: KeyComponent

    @property
    def components(self):
        return (self.hash_key,)


@dataclass(frozen=True)
class HashAndRange:
    """Key made of a partition (hash) attribute and a sort (range) attribute."""

    hash_key: KeyComponent
    range_key: KeyComponent

    @property
    def components(self):
        return (self.hash_key, self.range_key)


def key_schema_from_description(key_schema):
    """
    Build a key schema from a DescribeTable ``KeySchema`` list.

    Args:
        key_schema: e.g. [{"AttributeName": "id", "KeyType": "HASH"}, ...]

    Returns:
        HashOnly or HashAndRange with unbound components
    """
    hash_key = None
    range_key = None

    for key in key_schema:
        if key["KeyType"] == "HASH":
            hash_key = KeyComponent(key["AttributeName"])
        elif key["KeyType"] == "RANGE":
            range_key = KeyComponent(key["AttributeName"])

    if hash_key is None:
        raise ValueError(f"Key schema has no HASH attribute: {key_schema}")

    if range_key is None:
        return HashOnly(hash_key)
    return HashAndRange(hash_key, range_key)


def key_names(key_schema):
    """Return the key attribute names, hash first."""
    return [component.name for component in key_schema.components]


def primary_key(key_schema, row, convert):
    """
    Build the ``Key`` dict of a row.

    Args:
        key_schema: Bound HashOnly or HashAndRange
        row: Spark Row (indexable by column position)
        convert: Callable(row, index, data_type) returning a DynamoDB value

    Returns:
        Dict of key attribute name to value
    """
    match key_schema:
        case HashOnly(hash_key=hash_key):
            key = {hash_key.name: key_value(hash_key, row, convert)}
        case HashAndRange(hash_key=hash_key, range_key=range_key):
            key = {
                hash_key.name: key_value(hash_key, row, convert),
                range_key.name: key_value(range_key, row, convert),
            }
        case _:
            raise TypeError(f"Unknown key schema: {key_schema!r}")
    return key


def key_value(component, row, convert):
    value = convert(row, component.index, component.data_type)
    if value is None:
        raise ValueError(f"Key column '{component.name}' cannot be null")
    return value
