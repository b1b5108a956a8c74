"""Type definitions for record schemas."""

from typing import Literal

FieldKind = Literal[
    "bool",
    "int32",
    "int64",
    "sint32",
    "sint64",
    "sfixed32",
    "sfixed64",
    "uint32",
    "uint64",
    "fixed32",
    "fixed64",
    "float",
    "double",
    "string",
    "bytes",
    "enum",
    "message",
    "group",
]

FIELD_KINDS: tuple[str, ...] = (
    "bool",
    "int32",
    "int64",
    "sint32",
    "sint64",
    "sfixed32",
    "sfixed64",
    "uint32",
    "uint64",
    "fixed32",
    "fixed64",
    "float",
    "double",
    "string",
    "bytes",
    "enum",
    "message",
    "group",
)

Cardinality = Literal["singular", "list", "map"]

CARDINALITIES: tuple[str, ...] = ("singular", "list", "map")

SIGNED_INTEGER_KINDS = frozenset(
    {"int32", "int64", "sint32", "sint64", "sfixed32", "sfixed64"}
)

# Bit width per unsigned kind, used to read keys with unsigned semantics.
UNSIGNED_INTEGER_BITS: dict[str, int] = {
    "uint32": 32,
    "fixed32": 32,
    "uint64": 64,
    "fixed64": 64,
}

INTEGER_KINDS = SIGNED_INTEGER_KINDS | frozenset(UNSIGNED_INTEGER_BITS)

FLOAT_KINDS = frozenset({"float", "double"})

RECORD_KINDS = frozenset({"message", "group"})

MAP_KEY_KINDS = INTEGER_KINDS | frozenset({"bool", "string"})
