"""Capability interface between the comparator and a schema provider.

A provider exposes each record through :class:`RecordView`. The comparator
and the formatter only ever talk to this interface, so any schema provider
(generated protobuf classes, the in-memory :mod:`protodiff.schema.dynamic`
model, ...) works as long as it answers these questions.

Values handed out by :meth:`RecordView.get` are plain Python objects whose
shape is given by the field descriptor:

- scalar fields: ``bool | int | float | str | bytes`` (enums as ``int``)
- list fields: a ``Sequence`` of element values
- map fields: a ``Mapping`` from ``str | bool | int`` keys to values
- record fields and record elements: a ``RecordView`` or ``None`` (absent)
"""

from __future__ import annotations

from collections.abc import Hashable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Protocol, Union, runtime_checkable

from protodiff.core.types import (
    CARDINALITIES,
    FIELD_KINDS,
    FLOAT_KINDS,
    INTEGER_KINDS,
    MAP_KEY_KINDS,
    RECORD_KINDS,
    Cardinality,
    FieldKind,
)
from protodiff.schema.exceptions import SchemaError

MapKey = Union[str, bool, int]
Scalar = Union[bool, int, float, str, bytes]
Value = Any


@dataclass(frozen=True, slots=True, eq=False)
class FieldDescriptor:
    """Identifies one declared field of a record schema.

    For ``list`` fields, ``kind`` is the element kind. For ``map`` fields,
    ``kind`` is ``"message"`` (the entry) and ``map_key`` / ``map_value``
    describe the entry's key and value.
    """

    name: str
    number: int
    kind: FieldKind
    cardinality: Cardinality = "singular"
    oneof: str | None = None
    enum_names: Mapping[int, str] | None = None
    map_key: FieldDescriptor | None = None
    map_value: FieldDescriptor | None = None
    message: Any = None
    source: Any = None

    def __post_init__(self) -> None:
        if self.kind not in FIELD_KINDS:
            raise SchemaError(f"Unsupported field kind for {self.name!r}: {self.kind}")
        if self.cardinality not in CARDINALITIES:
            raise SchemaError(
                f"Unsupported cardinality for {self.name!r}: {self.cardinality}"
            )
        if self.cardinality == "map" and (self.map_key is None or self.map_value is None):
            raise SchemaError(f"Map field {self.name!r} requires key and value descriptors.")
        if self.map_key is not None and self.map_key.kind not in MAP_KEY_KINDS:
            raise SchemaError(f"Map field {self.name!r} cannot use {self.map_key.kind} keys.")

    @property
    def is_list(self) -> bool:
        return self.cardinality == "list"

    @property
    def is_map(self) -> bool:
        return self.cardinality == "map"

    @property
    def is_record(self) -> bool:
        """True when a singular value (or list element) of this field is a record."""
        return self.cardinality != "map" and self.kind in RECORD_KINDS

    @property
    def is_float(self) -> bool:
        return self.kind in FLOAT_KINDS

    @property
    def is_integer(self) -> bool:
        return self.kind in INTEGER_KINDS


@runtime_checkable
class RecordView(Protocol):
    """Read-only view over one present record."""

    @property
    def schema(self) -> Hashable:
        """Schema identity; two records are comparable only if these are equal."""

    @property
    def name(self) -> str:
        """Short type name of the record (for example ``Outer``)."""

    @property
    def fields(self) -> Sequence[FieldDescriptor]:
        """All declared fields, in declaration order."""

    def has(self, field: FieldDescriptor) -> bool: ...

    def get(self, field: FieldDescriptor) -> Value: ...

    def which_oneof(self, group: str) -> FieldDescriptor | None: ...

    def unknown_fields(self) -> bytes: ...


def iter_set_fields(record: RecordView) -> Iterator[FieldDescriptor]:
    """Yield the fields set on ``record`` in declaration order.

    Each oneof group is collapsed to its active member, emitted at the
    position of the group's first declared member.
    """
    seen_groups: set[str] = set()
    for field in record.fields:
        if field.oneof is None:
            if record.has(field):
                yield field
            continue

        if field.oneof in seen_groups:
            continue
        seen_groups.add(field.oneof)
        active = record.which_oneof(field.oneof)
        if active is not None and record.has(active):
            yield active
