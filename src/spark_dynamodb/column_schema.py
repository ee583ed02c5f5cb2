"""Mapping between Spark columns and DynamoDB attributes."""

from .key_schema import HashAndRange, HashOnly, key_names


class ColumnSchema:
    """
    Spark schema bound to a table's primary key.

    ``keys()`` returns the key schema with every component carrying its
    column index and Spark type; ``attributes()`` lists the remaining
    (name, index, type) triples in schema order.
    """

    def __init__(self, schema, key_schema, exclude=()):
        """
        Args:
            schema: Spark StructType of the rows being written
            key_schema: Unbound HashOnly or HashAndRange of the table
            exclude: Column names that are never written (e.g. a delete flag)

        Raises:
            ValueError: the schema is missing a key column
        """
        positions = {field.name: (i, field.dataType) for i, field in enumerate(schema.fields)}

        required = key_names(key_schema)
        missing_keys = [k for k in required if k not in positions]
        if missing_keys:
            raise ValueError(
                f"DataFrame schema missing key columns: {', '.join(missing_keys)}. "
                f"Required key columns: {', '.join(required)}"
            )

        def bind(component):
            return component.bind(*positions[component.name])

        match key_schema:
            case HashOnly(hash_key=hash_key):
                self._keys = HashOnly(bind(hash_key))
            case HashAndRange(hash_key=hash_key, range_key=range_key):
                self._keys = HashAndRange(bind(hash_key), bind(range_key))
            case _:
                raise TypeError(f"Unknown key schema: {key_schema!r}")

        skipped = set(required) | set(exclude)
        self._attributes = [
            (field.name, i, field.dataType)
            for i, field in enumerate(schema.fields)
            if field.name not in skipped
        ]

    def keys(self):
        return self._keys

    def attributes(self):
        return list(self._attributes)
