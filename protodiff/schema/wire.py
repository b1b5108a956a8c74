"""Protobuf wire-format reader for raw unknown-field payloads."""

from __future__ import annotations

import logging

from protodiff.schema.exceptions import WireFormatError

WIRE_VARINT = 0
WIRE_FIXED64 = 1
WIRE_LENGTH_DELIMITED = 2
WIRE_START_GROUP = 3
WIRE_END_GROUP = 4
WIRE_FIXED32 = 5

_MAX_VARINT_SHIFT = 63

_log = logging.getLogger(__name__)


def decode_unknown_fields(raw: bytes) -> dict[int, bytes]:
    """Group a raw unknown-field payload by field number.

    Each value is the concatenation, in payload order, of every complete
    record (tag included) carrying that field number.
    """
    grouped: dict[int, bytearray] = {}
    offset = 0
    while offset < len(raw):
        number, end = _consume_field(raw, offset)
        grouped.setdefault(number, bytearray()).extend(raw[offset:end])
        offset = end

    _log.debug("decoded %d unknown field number(s) from %d bytes", len(grouped), len(raw))
    return {number: bytes(chunk) for number, chunk in grouped.items()}


def read_varint(raw: bytes, offset: int) -> tuple[int, int]:
    """Return ``(value, next_offset)`` for the varint starting at ``offset``."""
    value = 0
    shift = 0
    while True:
        if offset >= len(raw):
            raise WireFormatError("Truncated varint in unknown fields.")
        byte = raw[offset]
        offset += 1
        value |= (byte & 0x7F) << shift
        if not byte & 0x80:
            return value, offset
        shift += 7
        if shift > _MAX_VARINT_SHIFT:
            raise WireFormatError("Varint in unknown fields exceeds 64 bits.")


def _consume_field(raw: bytes, offset: int) -> tuple[int, int]:
    tag, offset = read_varint(raw, offset)
    number = tag >> 3
    wire_type = tag & 0x7
    if number < 1:
        raise WireFormatError(f"Invalid field number {number} in unknown fields.")
    return number, _skip_value(raw, offset, number=number, wire_type=wire_type)


def _skip_value(raw: bytes, offset: int, *, number: int, wire_type: int) -> int:
    if wire_type == WIRE_VARINT:
        _, offset = read_varint(raw, offset)
        return offset

    if wire_type == WIRE_FIXED64:
        end = offset + 8
    elif wire_type == WIRE_FIXED32:
        end = offset + 4
    elif wire_type == WIRE_LENGTH_DELIMITED:
        length, offset = read_varint(raw, offset)
        end = offset + length
    elif wire_type == WIRE_START_GROUP:
        return _skip_group(raw, offset, number=number)
    else:
        raise WireFormatError(
            f"Unexpected wire type {wire_type} for field {number} in unknown fields."
        )

    if end > len(raw):
        raise WireFormatError(f"Truncated value for field {number} in unknown fields.")
    return end


def _skip_group(raw: bytes, offset: int, *, number: int) -> int:
    while True:
        tag, offset = read_varint(raw, offset)
        inner_number = tag >> 3
        inner_type = tag & 0x7
        if inner_type == WIRE_END_GROUP:
            if inner_number != number:
                raise WireFormatError(
                    f"Group {number} closed by end-group tag for field {inner_number}."
                )
            return offset
        offset = _skip_value(raw, offset, number=inner_number, wire_type=inner_type)
