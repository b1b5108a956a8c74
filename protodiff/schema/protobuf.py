"""Adapter exposing ``google.protobuf`` messages as :class:`RecordView`."""

from __future__ import annotations

from collections.abc import Sequence
from functools import lru_cache
from typing import Any

from google.protobuf import descriptor as descriptor_mod
from google.protobuf import message as message_mod

from protodiff.core.types import FieldKind
from protodiff.schema.exceptions import UnsupportedValueError
from protodiff.schema.view import FieldDescriptor, RecordView, Value

_PB = descriptor_mod.FieldDescriptor

_KIND_BY_TYPE: dict[int, FieldKind] = {
    _PB.TYPE_DOUBLE: "double",
    _PB.TYPE_FLOAT: "float",
    _PB.TYPE_INT64: "int64",
    _PB.TYPE_UINT64: "uint64",
    _PB.TYPE_INT32: "int32",
    _PB.TYPE_FIXED64: "fixed64",
    _PB.TYPE_FIXED32: "fixed32",
    _PB.TYPE_BOOL: "bool",
    _PB.TYPE_STRING: "string",
    _PB.TYPE_GROUP: "group",
    _PB.TYPE_MESSAGE: "message",
    _PB.TYPE_BYTES: "bytes",
    _PB.TYPE_UINT32: "uint32",
    _PB.TYPE_ENUM: "enum",
    _PB.TYPE_SFIXED32: "sfixed32",
    _PB.TYPE_SFIXED64: "sfixed64",
    _PB.TYPE_SINT32: "sint32",
    _PB.TYPE_SINT64: "sint64",
}


class ProtobufRecord:
    """Read-only :class:`RecordView` over a present protobuf message."""

    __slots__ = ("_message", "_descriptor")

    def __init__(self, message: message_mod.Message) -> None:
        self._message = message
        self._descriptor = message.DESCRIPTOR

    def __repr__(self) -> str:
        return f"ProtobufRecord({self._descriptor.full_name})"

    @property
    def message(self) -> message_mod.Message:
        return self._message

    @property
    def schema(self) -> descriptor_mod.Descriptor:
        return self._descriptor

    @property
    def name(self) -> str:
        return self._descriptor.name

    @property
    def fields(self) -> Sequence[FieldDescriptor]:
        """Declared fields, then the populated extensions by field number."""
        declared = describe_message(self._descriptor)
        if not self._descriptor.extension_ranges:
            return declared
        extensions = tuple(
            _describe_extension(source)
            for source, _ in self._message.ListFields()
            if source.is_extension
        )
        return declared + extensions

    def has(self, field: FieldDescriptor) -> bool:
        raw = self._raw(field)
        if field.is_list or field.is_map:
            return len(raw) > 0
        if field.source.has_presence:
            return self._present(field)
        return raw != field.source.default_value

    def get(self, field: FieldDescriptor) -> Value:
        raw = self._raw(field)
        if field.is_list:
            if field.is_record:
                return [ProtobufRecord(item) for item in raw]
            return list(raw)
        if field.is_map:
            if field.map_value is not None and field.map_value.is_record:
                return {key: ProtobufRecord(raw[key]) for key in raw}
            return dict(raw.items())
        if field.is_record:
            if not self._present(field):
                return None
            return ProtobufRecord(raw)
        return raw

    def _raw(self, field: FieldDescriptor) -> Any:
        if field.source.is_extension:
            return self._message.Extensions[field.source]
        return getattr(self._message, field.name)

    def _present(self, field: FieldDescriptor) -> bool:
        if field.source.is_extension:
            return self._message.HasExtension(field.source)
        return self._message.HasField(field.name)

    def which_oneof(self, group: str) -> FieldDescriptor | None:
        active = self._message.WhichOneof(group)
        if active is None:
            return None
        return _fields_by_name(self._descriptor)[active]

    def unknown_fields(self) -> bytes:
        # Serializing a copy with every known field cleared leaves only the
        # preserved unknown records, in their original order.
        stripped = type(self._message)()
        stripped.CopyFrom(self._message)
        for descriptor, _ in stripped.ListFields():
            if descriptor.is_extension:
                stripped.ClearExtension(descriptor)
            else:
                stripped.ClearField(descriptor.name)
        return stripped.SerializeToString()


def as_record(value: Any) -> RecordView | None:
    """Normalize a comparator input to a record view (or ``None``)."""
    if value is None:
        return None
    if isinstance(value, message_mod.Message):
        return ProtobufRecord(value)
    if isinstance(value, RecordView):
        return value
    raise UnsupportedValueError(
        f"Expected a protobuf message, a RecordView or None; got {type(value).__name__}."
    )


@lru_cache(maxsize=None)
def describe_message(descriptor: descriptor_mod.Descriptor) -> tuple[FieldDescriptor, ...]:
    """Translate a protobuf message descriptor into field descriptors."""
    return tuple(_describe_field(field) for field in descriptor.fields)


@lru_cache(maxsize=None)
def _fields_by_name(descriptor: descriptor_mod.Descriptor) -> dict[str, FieldDescriptor]:
    return {field.name: field for field in describe_message(descriptor)}


@lru_cache(maxsize=None)
def _describe_extension(field: descriptor_mod.FieldDescriptor) -> FieldDescriptor:
    # Extensions are keyed by their qualified name, as in text format.
    return _describe_field(field, name=f"[{field.full_name}]")


def _describe_field(
    field: descriptor_mod.FieldDescriptor, *, name: str | None = None
) -> FieldDescriptor:
    name = name or field.name
    repeated = field.is_repeated
    if repeated and _is_map_entry(field):
        entry = field.message_type
        return FieldDescriptor(
            name=name,
            number=field.number,
            kind="message",
            cardinality="map",
            map_key=_describe_field(entry.fields_by_name["key"]),
            map_value=_describe_field(entry.fields_by_name["value"]),
            source=field,
        )

    return FieldDescriptor(
        name=name,
        number=field.number,
        kind=_KIND_BY_TYPE[field.type],
        cardinality="list" if repeated else "singular",
        oneof=_oneof_group(field),
        enum_names=_enum_names(field),
        message=field.message_type,
        source=field,
    )


def _is_map_entry(field: descriptor_mod.FieldDescriptor) -> bool:
    message_type = field.message_type
    return message_type is not None and message_type.GetOptions().map_entry


def _oneof_group(field: descriptor_mod.FieldDescriptor) -> str | None:
    group = field.containing_oneof
    # proto3 ``optional`` fields live in single-member synthetic oneofs;
    # collapsing a one-member group is a no-op, so those are skipped.
    if group is None or len(group.fields) < 2:
        return None
    return group.name


def _enum_names(field: descriptor_mod.FieldDescriptor) -> dict[int, str] | None:
    if field.enum_type is None:
        return None
    names: dict[int, str] = {}
    for value in field.enum_type.values:
        # First declared name wins for aliased numbers.
        names.setdefault(value.number, value.name)
    return names
