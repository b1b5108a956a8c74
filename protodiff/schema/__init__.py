"""Value model adapters consumed by the comparator and the formatter."""

from protodiff.schema.dynamic import (
    MessageSchema,
    Record,
    default_value,
    list_field,
    map_field,
    message_field,
    record,
    scalar_field,
)
from protodiff.schema.exceptions import (
    MessageLoadError,
    SchemaError,
    UnsupportedValueError,
    WireFormatError,
)
from protodiff.schema.protobuf import ProtobufRecord, as_record, describe_message
from protodiff.schema.view import (
    FieldDescriptor,
    MapKey,
    RecordView,
    Scalar,
    Value,
    iter_set_fields,
)
from protodiff.schema.wire import decode_unknown_fields

__all__ = [
    "FieldDescriptor",
    "MapKey",
    "Scalar",
    "Value",
    "RecordView",
    "iter_set_fields",
    "MessageSchema",
    "Record",
    "record",
    "default_value",
    "scalar_field",
    "message_field",
    "list_field",
    "map_field",
    "ProtobufRecord",
    "as_record",
    "describe_message",
    "decode_unknown_fields",
    "SchemaError",
    "UnsupportedValueError",
    "WireFormatError",
    "MessageLoadError",
]
