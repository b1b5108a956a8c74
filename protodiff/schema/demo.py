"""Deterministic sample records used by the CLI demo and the test suite.

Both providers describe the same ``sample.Outer`` shape: a record with
scalars, a oneof group, repeated and map fields of scalars and records,
well-known-type style timestamps/durations/any and a two-level nested
record. ``sample.Legacy`` is a protobuf-only proto2 message with a group
and extensions.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from google.protobuf import any_pb2, descriptor_pb2, descriptor_pool, duration_pb2
from google.protobuf import message as message_mod
from google.protobuf import message_factory, timestamp_pb2

from protodiff.schema.dynamic import (
    MessageSchema,
    Record,
    list_field,
    map_field,
    message_field,
    record,
    scalar_field,
)

DEMO_TIMESTAMP_SECONDS = 1598814300
DEMO_STATUS_NAMES = {0: "OK", 1: "NOT_OK"}

INNER = MessageSchema(
    "Inner",
    (scalar_field("id", 1, "string"),),
    full_name="sample.Outer.Inner",
)
NESTED_INNER_INNER = MessageSchema(
    "Inner",
    (scalar_field("id", 1, "string"),),
    full_name="sample.Outer.NestedInner.Inner",
)
NESTED_INNER = MessageSchema(
    "NestedInner",
    (message_field("inner", 1, NESTED_INNER_INNER),),
    full_name="sample.Outer.NestedInner",
)
TIMESTAMP = MessageSchema(
    "Timestamp",
    (scalar_field("seconds", 1, "int64"), scalar_field("nanos", 2, "int32")),
    full_name="google.protobuf.Timestamp",
)
DURATION = MessageSchema(
    "Duration",
    (scalar_field("seconds", 1, "int64"), scalar_field("nanos", 2, "int32")),
    full_name="google.protobuf.Duration",
)
ANY = MessageSchema(
    "Any",
    (scalar_field("type_url", 1, "string"), scalar_field("value", 2, "bytes")),
    full_name="google.protobuf.Any",
)
OUTER = MessageSchema(
    "Outer",
    (
        scalar_field("str_val", 1, "string"),
        scalar_field("int_val", 2, "int32"),
        scalar_field("bool_val", 3, "bool"),
        scalar_field("double_val", 4, "double"),
        scalar_field("bytes_val", 5, "bytes"),
        list_field("repeated_type", 6, "message", schema=INNER),
        map_field("map_type", 7, "string", "message", schema=INNER),
        scalar_field("enum_type", 8, "enum", enum_names=DEMO_STATUS_NAMES),
        scalar_field("oneof_string", 9, "string", oneof="oneof_type"),
        message_field("oneof_message", 10, INNER, oneof="oneof_type"),
        message_field("timestamp_type", 11, TIMESTAMP),
        message_field("duration_type", 12, DURATION),
        message_field("any_type", 13, ANY),
        list_field("repeated_type_simple", 14, "int32"),
        map_field("map_type_simple", 15, "string", "int32"),
        message_field("nested_message", 16, NESTED_INNER),
    ),
    full_name="sample.Outer",
)


def build_demo_values() -> dict[str, Any]:
    """Fresh, mutable field values for a populated ``Outer`` record."""
    return {
        "str_val": "foo",
        "int_val": 1,
        "bool_val": True,
        "double_val": 1.1,
        "bytes_val": b"\x01\x02",
        "repeated_type": [record(INNER, id="1"), record(INNER, id="2"), None],
        "map_type": {
            "A": record(INNER, id="AA"),
            "B": record(INNER, id="BB"),
            "C": None,
        },
        "enum_type": 1,
        "oneof_string": "1",
        "timestamp_type": record(TIMESTAMP, seconds=DEMO_TIMESTAMP_SECONDS),
        "duration_type": record(DURATION, seconds=1),
        "any_type": record(ANY, type_url="mytype/v1", value=b"\x05"),
        "repeated_type_simple": [9, 10, 11],
        "map_type_simple": {"A": 20, "B": 30, "C": 40},
        "nested_message": record(NESTED_INNER, inner=record(NESTED_INNER_INNER, id="123")),
    }


def build_demo_record(values: dict[str, Any] | None = None, *, unknown: bytes = b"") -> Record:
    """Build an ``Outer`` record from ``values`` (defaults to the demo values)."""
    return Record(
        message_schema=OUTER,
        values=build_demo_values() if values is None else values,
        unknown=unknown,
    )


_FIELD = descriptor_pb2.FieldDescriptorProto


@lru_cache(maxsize=None)
def demo_message_class() -> type[message_mod.Message]:
    """Runtime-built protobuf class for ``sample.Outer`` in a private pool."""
    pool = descriptor_pool.DescriptorPool()
    for file_proto in build_demo_descriptor_set().file:
        pool.AddSerializedFile(file_proto.SerializeToString())
    return message_factory.GetMessageClass(pool.FindMessageTypeByName("sample.Outer"))


def build_demo_message() -> message_mod.Message:
    """A populated ``sample.Outer`` protobuf message."""
    message = demo_message_class()(
        str_val="foo",
        int_val=1,
        bool_val=True,
        double_val=1.1,
        bytes_val=b"\x01\x02",
        enum_type=1,
        oneof_string="1",
        repeated_type_simple=[9, 10, 11],
    )
    for ident in ("1", "2", "3"):
        message.repeated_type.add(id=ident)
    for key in ("A", "B", "C"):
        message.map_type[key].id = key * 2
    message.map_type_simple.update({"A": 20, "B": 30, "C": 40})
    message.timestamp_type.seconds = DEMO_TIMESTAMP_SECONDS
    message.duration_type.seconds = 1
    message.any_type.type_url = "mytype/v1"
    message.any_type.value = b"\x05"
    message.nested_message.inner.id = "123"
    return message


def build_demo_descriptor_set() -> descriptor_pb2.FileDescriptorSet:
    """``sample.proto`` plus its imports, as written by ``protoc --include_imports``."""
    descriptor_set = descriptor_pb2.FileDescriptorSet()
    for dependency in (timestamp_pb2, duration_pb2, any_pb2):
        descriptor_set.file.add().MergeFromString(dependency.DESCRIPTOR.serialized_pb)
    descriptor_set.file.append(build_demo_file())
    return descriptor_set


def build_demo_file() -> descriptor_pb2.FileDescriptorProto:
    """``sample.proto`` as a file descriptor, equivalent to compiling it."""
    sample = descriptor_pb2.FileDescriptorProto(
        name="protodiff/demo/sample.proto",
        package="sample",
        syntax="proto3",
        dependency=[
            timestamp_pb2.DESCRIPTOR.name,
            duration_pb2.DESCRIPTOR.name,
            any_pb2.DESCRIPTOR.name,
        ],
    )
    outer = sample.message_type.add(name="Outer")

    inner = outer.nested_type.add(name="Inner")
    _add_field(inner, "id", 1, _FIELD.TYPE_STRING)

    nested = outer.nested_type.add(name="NestedInner")
    nested_inner = nested.nested_type.add(name="Inner")
    _add_field(nested_inner, "id", 1, _FIELD.TYPE_STRING)
    _add_field(
        nested, "inner", 1, _FIELD.TYPE_MESSAGE, type_name=".sample.Outer.NestedInner.Inner"
    )

    _add_map_entry(
        outer,
        "MapTypeEntry",
        _FIELD.TYPE_STRING,
        _FIELD.TYPE_MESSAGE,
        value_type_name=".sample.Outer.Inner",
    )
    _add_map_entry(outer, "MapTypeSimpleEntry", _FIELD.TYPE_STRING, _FIELD.TYPE_INT32)

    status = outer.enum_type.add(name="Status")
    for number, name in sorted(DEMO_STATUS_NAMES.items()):
        status.value.add(name=name, number=number)

    outer.oneof_decl.add(name="oneof_type")

    repeated = _FIELD.LABEL_REPEATED
    _add_field(outer, "str_val", 1, _FIELD.TYPE_STRING)
    _add_field(outer, "int_val", 2, _FIELD.TYPE_INT32)
    _add_field(outer, "bool_val", 3, _FIELD.TYPE_BOOL)
    _add_field(outer, "double_val", 4, _FIELD.TYPE_DOUBLE)
    _add_field(outer, "bytes_val", 5, _FIELD.TYPE_BYTES)
    _add_field(
        outer,
        "repeated_type",
        6,
        _FIELD.TYPE_MESSAGE,
        label=repeated,
        type_name=".sample.Outer.Inner",
    )
    _add_field(
        outer,
        "map_type",
        7,
        _FIELD.TYPE_MESSAGE,
        label=repeated,
        type_name=".sample.Outer.MapTypeEntry",
    )
    _add_field(outer, "enum_type", 8, _FIELD.TYPE_ENUM, type_name=".sample.Outer.Status")
    _add_field(outer, "oneof_string", 9, _FIELD.TYPE_STRING, oneof_index=0)
    _add_field(
        outer,
        "oneof_message",
        10,
        _FIELD.TYPE_MESSAGE,
        type_name=".sample.Outer.Inner",
        oneof_index=0,
    )
    _add_field(
        outer, "timestamp_type", 11, _FIELD.TYPE_MESSAGE, type_name=".google.protobuf.Timestamp"
    )
    _add_field(
        outer, "duration_type", 12, _FIELD.TYPE_MESSAGE, type_name=".google.protobuf.Duration"
    )
    _add_field(outer, "any_type", 13, _FIELD.TYPE_MESSAGE, type_name=".google.protobuf.Any")
    _add_field(outer, "repeated_type_simple", 14, _FIELD.TYPE_INT32, label=repeated)
    _add_field(
        outer,
        "map_type_simple",
        15,
        _FIELD.TYPE_MESSAGE,
        label=repeated,
        type_name=".sample.Outer.MapTypeSimpleEntry",
    )
    _add_field(
        outer, "nested_message", 16, _FIELD.TYPE_MESSAGE, type_name=".sample.Outer.NestedInner"
    )
    return sample


def _add_field(
    message: descriptor_pb2.DescriptorProto,
    name: str,
    number: int,
    field_type: int,
    *,
    label: int = _FIELD.LABEL_OPTIONAL,
    type_name: str | None = None,
    oneof_index: int | None = None,
) -> None:
    field = message.field.add(name=name, number=number, type=field_type, label=label)
    if type_name is not None:
        field.type_name = type_name
    if oneof_index is not None:
        field.oneof_index = oneof_index


def _add_map_entry(
    message: descriptor_pb2.DescriptorProto,
    entry_name: str,
    key_type: int,
    value_type: int,
    *,
    value_type_name: str | None = None,
) -> None:
    entry = message.nested_type.add(name=entry_name)
    entry.options.map_entry = True
    _add_field(entry, "key", 1, key_type)
    _add_field(entry, "value", 2, value_type, type_name=value_type_name)


LEGACY_FILE_NAME = "protodiff/demo/legacy.proto"


@lru_cache(maxsize=None)
def _legacy_pool() -> descriptor_pool.DescriptorPool:
    pool = descriptor_pool.DescriptorPool()
    pool.AddSerializedFile(build_legacy_file().SerializeToString())
    return pool


@lru_cache(maxsize=None)
def legacy_message_class() -> type[message_mod.Message]:
    """Runtime-built proto2 ``sample.Legacy`` with its extensions registered."""
    classes = message_factory.GetMessageClassesForFiles([LEGACY_FILE_NAME], _legacy_pool())
    return classes["sample.Legacy"]


def legacy_extension(name: str) -> Any:
    """Extension handle for ``message.Extensions[...]`` (``priority`` or ``tags``)."""
    legacy_message_class()
    return _legacy_pool().FindExtensionByName(f"sample.{name}")


def build_legacy_file() -> descriptor_pb2.FileDescriptorProto:
    """proto2 ``legacy.proto``: explicit presence, a custom default, a group and extensions.

    Equivalent to::

        message Legacy {
          optional int32 count = 1 [default = 7];
          optional string title = 2;
          optional group Payload = 3 { optional string id = 4; }
          extensions 100 to 199;
        }
        extend Legacy {
          optional int32 priority = 100;
          repeated string tags = 101;
        }
    """
    legacy_file = descriptor_pb2.FileDescriptorProto(
        name=LEGACY_FILE_NAME,
        package="sample",
        syntax="proto2",
    )
    legacy = legacy_file.message_type.add(name="Legacy")
    payload = legacy.nested_type.add(name="Payload")
    _add_field(payload, "id", 4, _FIELD.TYPE_STRING)

    _add_field(legacy, "count", 1, _FIELD.TYPE_INT32)
    legacy.field[-1].default_value = "7"
    _add_field(legacy, "title", 2, _FIELD.TYPE_STRING)
    _add_field(legacy, "payload", 3, _FIELD.TYPE_GROUP, type_name=".sample.Legacy.Payload")
    legacy.extension_range.add(start=100, end=200)

    for name, number, field_type, label in (
        ("priority", 100, _FIELD.TYPE_INT32, _FIELD.LABEL_OPTIONAL),
        ("tags", 101, _FIELD.TYPE_STRING, _FIELD.LABEL_REPEATED),
    ):
        legacy_file.extension.add(
            name=name,
            number=number,
            type=field_type,
            label=label,
            extendee=".sample.Legacy",
        )
    return legacy_file
