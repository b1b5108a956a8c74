"""In-memory record model implementing :class:`RecordView`.

Unlike generated protobuf classes, this model can hold absent (``None``)
records inside lists and maps, which makes it convenient for describing
fixtures by hand.

Presence is explicit: a field is set when its name is present in the
record's values with a non-``None`` value (and, for lists and maps, when
the container is non-empty).
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from protodiff.core.types import FLOAT_KINDS, INTEGER_KINDS, FieldKind
from protodiff.schema.exceptions import SchemaError
from protodiff.schema.view import FieldDescriptor, Value

_SCALAR_DEFAULTS: dict[str, Any] = {
    "bool": False,
    "string": "",
    "bytes": b"",
    "enum": 0,
}


@dataclass(slots=True, eq=False)
class MessageSchema:
    """A named record schema; identity is the object itself."""

    name: str
    fields: tuple[FieldDescriptor, ...] = ()
    full_name: str | None = None
    _by_name: dict[str, FieldDescriptor] = field(default_factory=dict, repr=False)

    def __post_init__(self) -> None:
        self.fields = tuple(self.fields)
        for descriptor in self.fields:
            if descriptor.name in self._by_name:
                raise SchemaError(f"Duplicate field {descriptor.name!r} in {self.name}.")
            self._by_name[descriptor.name] = descriptor
        if self.full_name is None:
            self.full_name = self.name

    def get_field(self, name: str) -> FieldDescriptor:
        try:
            return self._by_name[name]
        except KeyError:
            raise SchemaError(f"{self.name} has no field {name!r}.") from None

    def oneof_members(self, group: str) -> tuple[FieldDescriptor, ...]:
        return tuple(descriptor for descriptor in self.fields if descriptor.oneof == group)


def scalar_field(
    name: str,
    number: int,
    kind: FieldKind,
    *,
    oneof: str | None = None,
    enum_names: Mapping[int, str] | None = None,
) -> FieldDescriptor:
    return FieldDescriptor(
        name=name,
        number=number,
        kind=kind,
        oneof=oneof,
        enum_names=dict(enum_names) if enum_names is not None else None,
    )


def message_field(
    name: str,
    number: int,
    schema: MessageSchema,
    *,
    oneof: str | None = None,
) -> FieldDescriptor:
    return FieldDescriptor(name=name, number=number, kind="message", oneof=oneof, message=schema)


def list_field(
    name: str,
    number: int,
    kind: FieldKind,
    *,
    schema: MessageSchema | None = None,
    enum_names: Mapping[int, str] | None = None,
) -> FieldDescriptor:
    return FieldDescriptor(
        name=name,
        number=number,
        kind=kind,
        cardinality="list",
        enum_names=dict(enum_names) if enum_names is not None else None,
        message=schema,
    )


def map_field(
    name: str,
    number: int,
    key_kind: FieldKind,
    value_kind: FieldKind,
    *,
    schema: MessageSchema | None = None,
    enum_names: Mapping[int, str] | None = None,
) -> FieldDescriptor:
    key = FieldDescriptor(name="key", number=1, kind=key_kind)
    value = FieldDescriptor(
        name="value",
        number=2,
        kind=value_kind,
        enum_names=dict(enum_names) if enum_names is not None else None,
        message=schema,
    )
    return FieldDescriptor(
        name=name,
        number=number,
        kind="message",
        cardinality="map",
        map_key=key,
        map_value=value,
    )


@dataclass(slots=True, eq=False)
class Record:
    """A present record of ``schema`` holding field values by name."""

    message_schema: MessageSchema
    values: dict[str, Value] = field(default_factory=dict)
    unknown: bytes = b""

    def __post_init__(self) -> None:
        for name in self.values:
            self.message_schema.get_field(name)
        active_groups: dict[str, str] = {}
        for descriptor in self.message_schema.fields:
            if descriptor.oneof is None or not self.has(descriptor):
                continue
            other = active_groups.setdefault(descriptor.oneof, descriptor.name)
            if other != descriptor.name:
                raise SchemaError(
                    f"Oneof {descriptor.oneof!r} of {self.name} has both "
                    f"{other!r} and {descriptor.name!r} set."
                )

    @property
    def schema(self) -> MessageSchema:
        return self.message_schema

    @property
    def name(self) -> str:
        return self.message_schema.name

    @property
    def fields(self) -> Sequence[FieldDescriptor]:
        return self.message_schema.fields

    def has(self, field: FieldDescriptor) -> bool:
        value = self.values.get(field.name)
        if value is None:
            return False
        if field.is_list or field.is_map:
            return len(value) > 0
        return True

    def get(self, field: FieldDescriptor) -> Value:
        if self.has(field):
            return self.values[field.name]
        return default_value(field)

    def which_oneof(self, group: str) -> FieldDescriptor | None:
        for descriptor in self.message_schema.oneof_members(group):
            if self.has(descriptor):
                return descriptor
        return None

    def unknown_fields(self) -> bytes:
        return self.unknown


def default_value(field: FieldDescriptor) -> Value:
    """Value read from an unset field."""
    if field.is_list:
        return ()
    if field.is_map:
        return {}
    if field.is_record:
        return None
    if field.kind in FLOAT_KINDS:
        return 0.0
    if field.kind in INTEGER_KINDS:
        return 0
    return _SCALAR_DEFAULTS[field.kind]


def record(schema: MessageSchema, /, **values: Value) -> Record:
    """Shorthand constructor: ``record(Inner, id="1")``."""
    return Record(message_schema=schema, values=dict(values))
