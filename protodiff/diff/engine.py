"""Recursive record comparator with first-divergence detection."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
import logging
import math

from protodiff.diff.config import DEFAULT_COMPARE_OPTIONS, CompareOptions
from protodiff.diff.formatting import (
    NIL,
    format_bytes,
    format_map_key,
    format_record,
    format_scalar,
    format_unknown_fields,
    format_value,
    quote_string,
)
from protodiff.diff.models import (
    DESCRIPTOR_MISMATCH,
    LENGTH_MISMATCH,
    MISSING_FIELD,
    MISSING_KEY,
    VALUE_MISMATCH,
    MismatchResult,
    PendingMismatch,
)
from protodiff.diff.ordering import sorted_map_keys
from protodiff.plugins import DiffEndEvent, DiffStartEvent, get_active_plugin_manager
from protodiff.schema.exceptions import WireFormatError
from protodiff.schema.protobuf import as_record
from protodiff.schema.view import FieldDescriptor, MapKey, RecordView, Value, iter_set_fields
from protodiff.schema.wire import decode_unknown_fields

_log = logging.getLogger(__name__)


def diff_records(
    expected: object,
    actual: object,
    *,
    options: CompareOptions | None = None,
) -> MismatchResult | None:
    """Compare two records and return their first divergence.

    ``expected`` and ``actual`` may be record views, protobuf messages or
    ``None``. Returns ``None`` when the records are structurally equal.
    """
    options = options or DEFAULT_COMPARE_OPTIONS
    left = as_record(expected)
    right = as_record(actual)

    plugin_manager = get_active_plugin_manager()
    plugin_manager.on_diff_start(
        DiffStartEvent(
            expected_type=_type_name(left),
            actual_type=_type_name(right),
            options=options.to_dict(),
        )
    )

    try:
        pending = _Comparator(options).compare_roots(left, right)
        result = pending.to_result() if pending is not None else None
    except Exception as error:
        plugin_manager.on_diff_end(
            DiffEndEvent(
                expected_type=_type_name(left),
                actual_type=_type_name(right),
                status="error",
                error_type=error.__class__.__name__,
                error_message=str(error),
            )
        )
        raise

    if result is None:
        _log.debug("no divergence between %s records", _type_name(left))
    else:
        _log.debug("divergence at %r: %s", result.field_path, result.message)

    plugin_manager.on_diff_end(
        DiffEndEvent(
            expected_type=_type_name(left),
            actual_type=_type_name(right),
            status="ok",
            identical=result is None,
            field_path=result.field_path if result is not None else None,
            message=result.message if result is not None else None,
        )
    )
    return result


def _type_name(record: RecordView | None) -> str | None:
    return record.name if record is not None else None


class _Comparator:
    __slots__ = ("options",)

    def __init__(self, options: CompareOptions) -> None:
        self.options = options

    def compare_roots(
        self, expected: RecordView | None, actual: RecordView | None
    ) -> PendingMismatch | None:
        if expected is None and actual is None:
            return None
        if actual is None:
            return PendingMismatch(VALUE_MISMATCH, format_record(expected), NIL).at(expected.name)
        if expected is None:
            return PendingMismatch(VALUE_MISMATCH, NIL, format_record(actual)).at(actual.name)
        return self.compare_records(expected, actual)

    def compare_records(
        self, expected: RecordView | None, actual: RecordView | None
    ) -> PendingMismatch | None:
        if expected is None and actual is None:
            return None
        if expected is None or actual is None:
            return PendingMismatch(VALUE_MISMATCH, format_record(expected), format_record(actual))
        if expected.schema != actual.schema:
            return PendingMismatch(DESCRIPTOR_MISMATCH)

        for field in iter_set_fields(expected):
            if not actual.has(field):
                return _missing_field(field, expected, actual)
            mismatch = self.compare_field(field, expected.get(field), actual.get(field))
            if mismatch is not None:
                return mismatch

        for field in iter_set_fields(actual):
            if not expected.has(field):
                return _missing_field(field, actual, expected).swapped()

        if self.options.compare_unknown:
            return self.compare_unknown(expected.unknown_fields(), actual.unknown_fields())
        return None

    def compare_field(
        self, field: FieldDescriptor, expected: Value, actual: Value
    ) -> PendingMismatch | None:
        if field.is_list:
            mismatch = self.compare_list(field, expected, actual)
        elif field.is_map:
            mismatch = self.compare_map(field, expected, actual)
        else:
            mismatch = self.compare_value(field, expected, actual)
        return mismatch.at(field.name) if mismatch is not None else None

    def compare_list(
        self, field: FieldDescriptor, expected: Sequence[Value], actual: Sequence[Value]
    ) -> PendingMismatch | None:
        if len(expected) != len(actual):
            return PendingMismatch(LENGTH_MISMATCH, str(len(expected)), str(len(actual)))

        indexes = range(len(expected))
        if self.options.reverse_list_scan:
            indexes = reversed(indexes)
        for index in indexes:
            mismatch = self.compare_value(field, expected[index], actual[index])
            if mismatch is not None:
                return mismatch.at(f"[{index}]")
        return None

    def compare_map(
        self,
        field: FieldDescriptor,
        expected: Mapping[MapKey, Value],
        actual: Mapping[MapKey, Value],
    ) -> PendingMismatch | None:
        if len(expected) != len(actual):
            return PendingMismatch(LENGTH_MISMATCH, str(len(expected)), str(len(actual)))

        key_field = field.map_key
        value_field = field.map_value
        for key in sorted_map_keys(expected.keys(), key_field.kind):
            segment = f"[{format_map_key(key, key_field)}]"
            if key not in actual:
                return PendingMismatch(
                    MISSING_KEY, format_scalar(expected[key], value_field), NIL
                ).at(segment)
            mismatch = self.compare_value(value_field, expected[key], actual[key])
            if mismatch is not None:
                return mismatch.at(segment)
        return None

    def compare_value(
        self, field: FieldDescriptor, expected: Value, actual: Value
    ) -> PendingMismatch | None:
        if field.is_record:
            return self.compare_records(expected, actual)

        if field.kind == "bytes":
            if bytes(expected) != bytes(actual):
                return PendingMismatch(VALUE_MISMATCH, format_bytes(expected), format_bytes(actual))
            return None

        if field.is_float:
            if self._floats_equal(float(expected), float(actual)):
                return None
            return _value_mismatch(field, expected, actual)

        if field.kind == "string":
            if expected != actual:
                return PendingMismatch(VALUE_MISMATCH, quote_string(expected), quote_string(actual))
            return None

        if expected != actual:
            return _value_mismatch(field, expected, actual)
        return None

    def compare_unknown(self, expected: bytes, actual: bytes) -> PendingMismatch | None:
        if len(expected) != len(actual):
            return PendingMismatch(LENGTH_MISMATCH, str(len(expected)), str(len(actual)))
        if expected == actual:
            return None

        try:
            expected_fields = decode_unknown_fields(expected)
            actual_fields = decode_unknown_fields(actual)
        except WireFormatError as error:
            _log.debug("unknown fields not decodable, comparing raw bytes: %s", error)
            return PendingMismatch(VALUE_MISMATCH, format_bytes(expected), format_bytes(actual))

        if expected_fields != actual_fields:
            return PendingMismatch(
                VALUE_MISMATCH,
                format_unknown_fields(expected_fields),
                format_unknown_fields(actual_fields),
            )
        return None

    def _floats_equal(self, expected: float, actual: float) -> bool:
        expected_nan = math.isnan(expected)
        actual_nan = math.isnan(actual)
        if expected_nan or actual_nan:
            return self.options.nan_equal and expected_nan and actual_nan
        return expected == actual


def _value_mismatch(field: FieldDescriptor, expected: Value, actual: Value) -> PendingMismatch:
    return PendingMismatch(
        VALUE_MISMATCH, format_scalar(expected, field), format_scalar(actual, field)
    )


def _missing_field(
    field: FieldDescriptor, present: RecordView, absent: RecordView
) -> PendingMismatch:
    """Mismatch for a field set on ``present`` but not on ``absent``."""
    expected = format_value(present.get(field), field)
    if field.is_list or field.is_map or field.is_record:
        actual = NIL
    elif field.kind == "string":
        actual = quote_string("")
    else:
        actual = format_scalar(absent.get(field), field)
    return PendingMismatch(MISSING_FIELD, expected, actual).at(field.name)
