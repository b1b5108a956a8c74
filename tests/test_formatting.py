import math

from protodiff.diff import NIL, format_record, format_unknown_fields, format_value, render_first_divergence
from protodiff.diff.formatting import format_scalar, quote_string
from protodiff.schema import MessageSchema, list_field, map_field, record, scalar_field
from protodiff.schema.demo import INNER, OUTER, build_demo_record

FLOATS = MessageSchema(
    "Floats",
    (scalar_field("value", 1, "double"), list_field("values", 2, "float")),
)
KEYED = MessageSchema(
    "Keyed",
    (
        map_field("by_flag", 1, "bool", "string"),
        map_field("by_offset", 2, "sint64", "int32"),
        map_field("by_id", 3, "uint32", "message", schema=INNER),
    ),
)


def test_full_record_render() -> None:
    rendered = format_record(build_demo_record())

    assert rendered.startswith('<str_val:"foo" int_val:1 bool_val:true double_val:1.1 bytes_val:[1 2] ')
    assert 'repeated_type:[<id:"1"> <id:"2"> <nil>]' in rendered
    assert 'map_type:map[A:<id:"AA"> B:<id:"BB"> C:<nil>]' in rendered
    assert rendered.endswith('nested_message:<inner:<id:"123">>>')


def test_absent_and_empty_records() -> None:
    assert format_record(None) == NIL == "<nil>"
    assert format_record(record(INNER)) == "<>"


def test_only_set_fields_in_declaration_order() -> None:
    value = record(OUTER, enum_type=0, str_val="x", int_val=3)

    assert format_record(value) == '<str_val:"x" int_val:3 enum_type:OK>'


def test_strings_are_quoted_with_escapes() -> None:
    assert quote_string('a"b\n') == '"a\\"b\\n"'
    assert quote_string("") == '""'
    assert format_record(record(INNER, id="tab\there")) == '<id:"tab\\there">'


def test_unknown_enum_number_renders_as_number() -> None:
    assert format_record(record(OUTER, enum_type=7)) == "<enum_type:7>"


def test_float_special_values() -> None:
    field = FLOATS.get_field("value")

    assert format_scalar(math.nan, field) == "NaN"
    assert format_scalar(math.inf, field) == "+Inf"
    assert format_scalar(-math.inf, field) == "-Inf"
    assert format_scalar(1.0, field) == "1.0"
    assert format_value([0.5, -2.0], FLOATS.get_field("values")) == "[0.5 -2.0]"


def test_maps_render_sorted_unquoted_keys() -> None:
    by_flag = KEYED.get_field("by_flag")
    by_offset = KEYED.get_field("by_offset")
    by_id = KEYED.get_field("by_id")

    assert format_value({True: "on", False: "off"}, by_flag) == 'map[false:"off" true:"on"]'
    assert format_value({5: 1, -3: 2, 0: 3}, by_offset) == "map[-3:2 0:3 5:1]"
    assert format_value({2: record(INNER, id="b"), 1: None}, by_id) == 'map[1:<nil> 2:<id:"b">]'


def test_map_render_ignores_construction_order() -> None:
    field = OUTER.get_field("map_type_simple")

    assert format_value({"b": 1, "a": 2}, field) == format_value({"a": 2, "b": 1}, field) == "map[a:2 b:1]"


def test_empty_containers() -> None:
    assert format_value([], OUTER.get_field("repeated_type_simple")) == "[]"
    assert format_value({}, OUTER.get_field("map_type_simple")) == "map[]"


def test_unknown_fields_render_by_field_number() -> None:
    assert format_unknown_fields({2: b"\x10\x01", 1: b"\x08\x01"}) == "map[1:[8 1] 2:[16 1]]"


def test_render_first_divergence_without_mismatch() -> None:
    assert render_first_divergence(None) == "no divergence detected"
