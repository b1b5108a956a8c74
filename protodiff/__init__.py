"""Stable public API surface for protodiff.

This module is the supported import path for library users.
"""

from __future__ import annotations

from protodiff.diff import (
    AssertionResult,
    CompareOptions,
    MismatchKind,
    MismatchResult,
    assert_equal,
    assert_records,
    diff_records,
    format_record,
    format_value,
    load_compare_options,
    render_assertion_failure,
    sorted_map_keys,
)
from protodiff.schema import (
    FieldDescriptor,
    MessageSchema,
    Record,
    RecordView,
    SchemaError,
    as_record,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "MismatchKind",
    "MismatchResult",
    "AssertionResult",
    "CompareOptions",
    "FieldDescriptor",
    "RecordView",
    "MessageSchema",
    "Record",
    "SchemaError",
    "as_record",
    "diff_records",
    "assert_records",
    "assert_equal",
    "render_assertion_failure",
    "format_record",
    "format_value",
    "sorted_map_keys",
    "load_compare_options",
]
