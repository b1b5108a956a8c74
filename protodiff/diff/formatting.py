"""Canonical single-line rendering of records and field values.

The output is only used for the expected/actual text attached to a
mismatch; comparisons never look at it.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
import json
import math

from protodiff.diff.ordering import sorted_map_items, sorted_map_keys
from protodiff.schema.view import FieldDescriptor, MapKey, RecordView, Value, iter_set_fields

NIL = "<nil>"


def quote_string(value: str) -> str:
    return json.dumps(value, ensure_ascii=False)


def format_record(record: RecordView | None) -> str:
    """``<field:value ...>`` over set fields in declaration order."""
    if record is None:
        return NIL
    parts = [
        f"{field.name}:{format_value(record.get(field), field)}"
        for field in iter_set_fields(record)
    ]
    return "<" + " ".join(parts) + ">"


def format_value(value: Value, field: FieldDescriptor) -> str:
    if field.is_list:
        return format_list(value, field)
    if field.is_map:
        return format_map(value, field)
    return format_scalar(value, field)


def format_list(values: Sequence[Value], field: FieldDescriptor) -> str:
    return "[" + " ".join(format_scalar(item, field) for item in values) + "]"


def format_map(values: Mapping[MapKey, Value], field: FieldDescriptor) -> str:
    """``map[k:v ...]`` with keys in deterministic order."""
    key_field = field.map_key
    value_field = field.map_value
    parts = [
        f"{format_map_key(key, key_field)}:{format_scalar(item, value_field)}"
        for key, item in sorted_map_items(values, key_field.kind)
    ]
    return "map[" + " ".join(parts) + "]"


def format_map_key(key: MapKey, key_field: FieldDescriptor) -> str:
    if key_field.kind == "string":
        return str(key)
    if key_field.kind == "bool":
        return _format_bool(key)
    return str(int(key))


def format_scalar(value: Value, field: FieldDescriptor) -> str:
    """Render one singular value (or one list element / map value)."""
    if field.is_record:
        return format_record(value)

    kind = field.kind
    if kind == "string":
        return quote_string(value)
    if kind == "bytes":
        return format_bytes(value)
    if kind == "bool":
        return _format_bool(value)
    if kind == "enum":
        names = field.enum_names or {}
        name = names.get(int(value))
        return name if name is not None else str(int(value))
    if field.is_float:
        return _format_float(value)
    return str(int(value))


def format_bytes(value: bytes) -> str:
    return "[" + " ".join(str(byte) for byte in bytes(value)) + "]"


def format_unknown_fields(fields: Mapping[int, bytes]) -> str:
    """``map[number:[bytes] ...]`` ordered by field number."""
    parts = [
        f"{number}:{format_bytes(fields[number])}"
        for number in sorted_map_keys(fields.keys(), "uint32")
    ]
    return "map[" + " ".join(parts) + "]"


def _format_bool(value: object) -> str:
    return "true" if value else "false"


def _format_float(value: float) -> str:
    number = float(value)
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "+Inf" if number > 0 else "-Inf"
    return repr(number)


def render_first_divergence(mismatch: object) -> str:
    """CLI text for a comparison outcome (a ``MismatchResult`` or ``None``)."""
    if mismatch is None:
        return "no divergence detected"
    return str(mismatch)
