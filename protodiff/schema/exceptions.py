"""Schema subsystem exceptions."""


class SchemaError(Exception):
    """Base class for schema and value model errors."""


class UnsupportedValueError(SchemaError):
    """Value is neither a record view, a protobuf message nor ``None``."""


class WireFormatError(SchemaError):
    """Raw unknown-field bytes are not valid protobuf wire format."""


class MessageLoadError(SchemaError):
    """Message type could not be resolved or a payload could not be parsed."""
