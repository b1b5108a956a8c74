from pathlib import Path

import pytest
from google.protobuf import timestamp_pb2

from protodiff.messages import detect_input_format, read_message, resolve_message_class
from protodiff.schema import MessageLoadError
from protodiff.schema.demo import build_demo_descriptor_set, build_demo_message, demo_message_class


def test_type_reference_accepts_classes_and_factories() -> None:
    assert resolve_message_class(type_ref="google.protobuf.timestamp_pb2:Timestamp") is timestamp_pb2.Timestamp
    assert (
        resolve_message_class(type_ref="protodiff.schema.demo:demo_message_class")
        is demo_message_class()
    )


@pytest.mark.parametrize(
    ("kwargs", "match"),
    [
        ({}, "No message type given"),
        ({"type_ref": "no_colon"}, "must be 'module:attribute'"),
        ({"type_ref": "protodiff_missing_module:Message"}, "Failed to import module"),
        ({"type_ref": "protodiff.schema.demo:Missing"}, "Could not find attribute"),
        ({"type_ref": "a:b", "descriptor_set": "x.desc"}, "not both"),
        ({"descriptor_set": "x.desc"}, "requires a fully qualified message name"),
    ],
)
def test_invalid_type_references(kwargs: dict, match: str) -> None:
    with pytest.raises(MessageLoadError, match=match):
        resolve_message_class(**kwargs)


def test_descriptor_set_resolution(tmp_path: Path) -> None:
    descriptor_set = tmp_path / "sample.desc"
    descriptor_set.write_bytes(build_demo_descriptor_set().SerializeToString())

    message_class = resolve_message_class(descriptor_set=descriptor_set, message_name="sample.Outer")

    assert message_class.DESCRIPTOR.full_name == "sample.Outer"
    with pytest.raises(MessageLoadError, match="not resolvable"):
        resolve_message_class(descriptor_set=descriptor_set, message_name="sample.Missing")


def test_detect_input_format_by_suffix() -> None:
    assert detect_input_format("a.json") == "json"
    assert detect_input_format("a.PB") == "binary"
    assert detect_input_format("a.textproto") == "text"
    assert detect_input_format("a.unknown") == "text"


def test_read_binary_message(tmp_path: Path) -> None:
    path = tmp_path / "message.bin"
    path.write_bytes(build_demo_message().SerializeToString())

    message = read_message(path, demo_message_class())

    assert message == build_demo_message()


def test_read_rejects_malformed_json(tmp_path: Path) -> None:
    path = tmp_path / "message.json"
    path.write_text('{"unknownField": 1}', encoding="utf-8")

    with pytest.raises(MessageLoadError, match="Failed to parse json payload"):
        read_message(path, demo_message_class())
