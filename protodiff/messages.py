"""Resolve protobuf message types and read message payloads from disk."""

from __future__ import annotations

import importlib
import inspect
import logging
from pathlib import Path
from typing import Literal

from google.protobuf import descriptor_pb2, descriptor_pool, json_format, message_factory, text_format
from google.protobuf import message as message_mod

from protodiff.schema.exceptions import MessageLoadError

_log = logging.getLogger(__name__)

InputFormat = Literal["auto", "text", "json", "binary"]
INPUT_FORMATS: tuple[str, ...] = ("auto", "text", "json", "binary")

_FORMAT_BY_SUFFIX = {
    ".json": "json",
    ".txtpb": "text",
    ".textproto": "text",
    ".pbtxt": "text",
    ".txt": "text",
    ".pb": "binary",
    ".binpb": "binary",
    ".bin": "binary",
}


def resolve_message_class(
    *,
    type_ref: str | None = None,
    descriptor_set: str | Path | None = None,
    message_name: str | None = None,
) -> type[message_mod.Message]:
    """Resolve a message class from ``module:Attr`` or a descriptor set.

    ``Attr`` may name a generated message class or a zero-argument callable
    returning one. A descriptor set is a serialized ``FileDescriptorSet``
    (``protoc --include_imports --descriptor_set_out``) and needs the fully
    qualified ``message_name``.
    """
    if type_ref is not None and descriptor_set is not None:
        raise MessageLoadError("Use either a type reference or a descriptor set, not both.")
    if type_ref is not None:
        return _import_message_class(type_ref)
    if descriptor_set is not None:
        if not message_name:
            raise MessageLoadError("A descriptor set requires a fully qualified message name.")
        return _message_class_from_descriptor_set(Path(descriptor_set), message_name)
    raise MessageLoadError("No message type given; pass a type reference or a descriptor set.")


def _import_message_class(type_ref: str) -> type[message_mod.Message]:
    module_name, _, attribute = type_ref.partition(":")
    if not module_name or not attribute:
        raise MessageLoadError(f"Type reference must be 'module:attribute', got {type_ref!r}.")
    try:
        module = importlib.import_module(module_name)
    except Exception as error:
        raise MessageLoadError(f"Failed to import module '{module_name}': {error}") from error

    target = getattr(module, attribute, None)
    if target is None:
        raise MessageLoadError(f"Could not find attribute '{attribute}' in '{module_name}'.")
    if not (inspect.isclass(target) and issubclass(target, message_mod.Message)) and callable(target):
        target = target()
    if not (inspect.isclass(target) and issubclass(target, message_mod.Message)):
        raise MessageLoadError(f"'{type_ref}' does not resolve to a protobuf message class.")
    return target


def _message_class_from_descriptor_set(
    path: Path, message_name: str
) -> type[message_mod.Message]:
    try:
        descriptor_set = descriptor_pb2.FileDescriptorSet.FromString(path.read_bytes())
    except message_mod.DecodeError as error:
        raise MessageLoadError(f"Invalid descriptor set ({path}): {error}") from error

    pool = descriptor_pool.DescriptorPool()
    try:
        for file_proto in descriptor_set.file:
            pool.AddSerializedFile(file_proto.SerializeToString())
        descriptor = pool.FindMessageTypeByName(message_name)
    except (KeyError, TypeError) as error:
        raise MessageLoadError(
            f"Message '{message_name}' not resolvable from descriptor set ({path}): {error}"
        ) from error
    _log.debug("resolved %s from %d file(s) in %s", message_name, len(descriptor_set.file), path)
    return message_factory.GetMessageClass(descriptor)


def detect_input_format(path: str | Path) -> str:
    """Guess the payload encoding from the file suffix (text when unknown)."""
    return _FORMAT_BY_SUFFIX.get(Path(path).suffix.lower(), "text")


def read_message(
    path: str | Path,
    message_class: type[message_mod.Message],
    *,
    input_format: InputFormat = "auto",
) -> message_mod.Message:
    """Parse one message of ``message_class`` from ``path``."""
    if input_format not in INPUT_FORMATS:
        raise MessageLoadError(
            f"Unsupported input format {input_format!r}; expected one of {', '.join(INPUT_FORMATS)}."
        )
    source = Path(path)
    resolved = detect_input_format(source) if input_format == "auto" else input_format

    message = message_class()
    try:
        if resolved == "binary":
            message.ParseFromString(source.read_bytes())
        elif resolved == "json":
            json_format.Parse(source.read_text(encoding="utf-8"), message)
        else:
            text_format.Parse(source.read_text(encoding="utf-8"), message)
    except (
        text_format.ParseError,
        json_format.ParseError,
        message_mod.DecodeError,
        UnicodeDecodeError,
    ) as error:
        raise MessageLoadError(f"Failed to parse {resolved} payload ({source}): {error}") from error
    return message
