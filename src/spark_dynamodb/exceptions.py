"""Exceptions raised by the DynamoDB data source."""


class ConfigurationError(ValueError):
    """An option is missing, malformed or out of range.

    Raised while options are parsed, before any call to DynamoDB is made.
    """
