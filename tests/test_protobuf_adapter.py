from google.protobuf import duration_pb2, timestamp_pb2

from protodiff.diff import diff_records, format_record
from protodiff.schema import ProtobufRecord, as_record, describe_message
from protodiff.schema.demo import (
    build_demo_message,
    build_demo_record,
    legacy_extension,
    legacy_message_class,
)

FULL_MESSAGE_RENDER = (
    '<str_val:"foo" int_val:1 bool_val:true double_val:1.1 bytes_val:[1 2] '
    'repeated_type:[<id:"1"> <id:"2"> <id:"3">] '
    'map_type:map[A:<id:"AA"> B:<id:"BB"> C:<id:"CC">] '
    'enum_type:NOT_OK oneof_string:"1" timestamp_type:<seconds:1598814300> '
    'duration_type:<seconds:1> any_type:<type_url:"mytype/v1" value:[5]> '
    "repeated_type_simple:[9 10 11] map_type_simple:map[A:20 B:30 C:40] "
    'nested_message:<inner:<id:"123">>>'
)


def _fields_by_name(message) -> dict:
    return {field.name: field for field in describe_message(message.DESCRIPTOR)}


def _legacy(**values):
    return legacy_message_class()(**values)


def test_protobuf_messages_are_wrapped_as_record_views() -> None:
    view = as_record(build_demo_message())

    assert isinstance(view, ProtobufRecord)
    assert view.name == "Outer"
    assert as_record(view) is view
    assert as_record(None) is None


def test_describe_message_maps_cardinality_and_oneofs() -> None:
    fields = _fields_by_name(build_demo_message())

    assert fields["repeated_type"].cardinality == "list"
    assert fields["repeated_type"].is_record
    assert fields["map_type"].is_map
    assert fields["map_type"].map_key.kind == "string"
    assert fields["map_type"].map_value.is_record
    assert fields["map_type_simple"].map_value.kind == "int32"
    assert fields["oneof_string"].oneof == "oneof_type"
    assert fields["oneof_message"].oneof == "oneof_type"
    assert fields["str_val"].oneof is None
    assert fields["enum_type"].enum_names == {0: "OK", 1: "NOT_OK"}


def test_identical_messages_have_no_divergence() -> None:
    assert diff_records(build_demo_message(), build_demo_message()) is None


def test_full_message_render() -> None:
    assert format_record(as_record(build_demo_message())) == FULL_MESSAGE_RENDER


def test_string_mismatch_on_messages() -> None:
    actual = build_demo_message()
    actual.str_val = "invalid"

    result = diff_records(build_demo_message(), actual)

    assert str(result) == 'str_val: value mismatch\n+ "foo"\n- "invalid"'


def test_repeated_length_mismatch_on_messages() -> None:
    actual = build_demo_message()
    del actual.repeated_type[1:]

    result = diff_records(build_demo_message(), actual)

    assert str(result) == "repeated_type: length mismatch\n+ 3\n- 1"


def test_map_record_value_mismatch_on_messages() -> None:
    actual = build_demo_message()
    actual.map_type["B"].id = "XX"

    result = diff_records(build_demo_message(), actual)

    assert str(result) == 'map_type.[B].id: value mismatch\n+ "BB"\n- "XX"'


def test_map_insertion_order_does_not_matter_for_messages() -> None:
    actual = build_demo_message()
    actual.ClearField("map_type_simple")
    for key, value in (("C", 40), ("B", 30), ("A", 20)):
        actual.map_type_simple[key] = value

    assert diff_records(build_demo_message(), actual) is None


def test_cleared_proto3_scalar_is_a_missing_field() -> None:
    actual = build_demo_message()
    actual.ClearField("int_val")

    result = diff_records(build_demo_message(), actual)

    assert str(result) == "int_val: missing field\n+ 1\n- 0"


def test_switched_oneof_on_messages() -> None:
    actual = build_demo_message()
    actual.oneof_message.id = "x"

    result = diff_records(build_demo_message(), actual)

    assert str(result) == 'oneof_string: missing field\n+ "1"\n- ""'


def test_unknown_fields_are_preserved_and_compared() -> None:
    actual = build_demo_message()
    actual.MergeFromString(b"\xa0\x06\x01")

    assert as_record(actual).unknown_fields() == b"\xa0\x06\x01"
    result = diff_records(build_demo_message(), actual)
    assert str(result) == ": length mismatch\n+ 0\n- 3"


def test_absent_message_root() -> None:
    result = diff_records(build_demo_message(), None)

    assert str(result) == f"Outer: value mismatch\n+ {FULL_MESSAGE_RENDER}\n- <nil>"


def test_different_message_types_do_not_match() -> None:
    result = diff_records(timestamp_pb2.Timestamp(seconds=1), duration_pb2.Duration(seconds=1))

    assert result.message == "descriptors don't match"
    assert result.field_path == ""


def test_protobuf_and_dynamic_records_never_share_a_schema() -> None:
    result = diff_records(build_demo_message(), build_demo_record())

    assert result.message == "descriptors don't match"


def test_describe_message_maps_repeated_labels() -> None:
    fields = _fields_by_name(build_demo_message())

    assert fields["repeated_type_simple"].cardinality == "list"
    assert fields["str_val"].cardinality == "singular"


def test_proto2_unset_field_reports_its_declared_default() -> None:
    result = diff_records(_legacy(count=3), _legacy())

    assert str(result) == "count: missing field\n+ 3\n- 7"


def test_proto2_field_set_to_its_default_is_still_present() -> None:
    assert str(diff_records(_legacy(count=7), _legacy())) == "count: missing field\n+ 7\n- 7"
    assert str(diff_records(_legacy(title=""), _legacy())) == 'title: missing field\n+ ""\n- ""'
    assert diff_records(_legacy(count=7), _legacy(count=7)) is None


def test_group_fields_are_compared_as_records() -> None:
    expected = _legacy()
    expected.payload.id = "a"
    actual = _legacy()
    actual.payload.id = "b"

    assert _fields_by_name(expected)["payload"].kind == "group"
    assert format_record(as_record(expected)) == '<payload:<id:"a">>'
    assert str(diff_records(expected, actual)) == 'payload.id: value mismatch\n+ "a"\n- "b"'


def test_extension_values_are_compared() -> None:
    priority = legacy_extension("priority")
    expected = _legacy()
    expected.Extensions[priority] = 5
    actual = _legacy()
    actual.Extensions[priority] = 6

    result = diff_records(expected, actual)

    assert str(result) == "[sample.priority]: value mismatch\n+ 5\n- 6"
    assert result.path == ("[sample.priority]",)


def test_extension_set_on_one_side_is_a_missing_field() -> None:
    expected = _legacy()
    expected.Extensions[legacy_extension("priority")] = 5

    assert str(diff_records(expected, _legacy())) == "[sample.priority]: missing field\n+ 5\n- 0"
    assert str(diff_records(_legacy(), expected)) == "[sample.priority]: missing field\n+ 0\n- 5"


def test_repeated_extensions_render_after_declared_fields() -> None:
    priority = legacy_extension("priority")
    tags = legacy_extension("tags")
    expected = _legacy(count=1)
    expected.Extensions[priority] = 5
    expected.Extensions[tags].extend(["a", "b"])
    actual = _legacy(count=1)
    actual.Extensions[priority] = 5
    actual.Extensions[tags].extend(["a", "c"])

    assert format_record(as_record(expected)) == '<count:1 [sample.priority]:5 [sample.tags]:["a" "b"]>'
    assert str(diff_records(expected, actual)) == '[sample.tags].[1]: value mismatch\n+ "b"\n- "c"'


def test_extensions_are_not_part_of_the_unknown_tail() -> None:
    message = _legacy()
    message.Extensions[legacy_extension("priority")] = 5
    copy = _legacy()
    copy.CopyFrom(message)

    assert as_record(message).unknown_fields() == b""
    assert diff_records(message, copy) is None
