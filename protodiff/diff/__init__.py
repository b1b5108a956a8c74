"""Diff subsystem: comparator, formatter and deterministic map ordering."""

from protodiff.diff.assertion import (
    AssertionResult,
    assert_equal,
    assert_records,
    render_assertion_failure,
)
from protodiff.diff.config import (
    COMPARE_CONFIG_ENV_VAR,
    COMPARE_CONFIG_VERSION,
    DEFAULT_COMPARE_OPTIONS,
    CompareOptions,
    compare_options_from_config,
    load_compare_options,
    resolve_compare_options,
)
from protodiff.diff.engine import diff_records
from protodiff.diff.exceptions import CompareConfigError, CompareError
from protodiff.diff.formatting import (
    NIL,
    format_record,
    format_scalar,
    format_unknown_fields,
    format_value,
    render_first_divergence,
)
from protodiff.diff.models import (
    DESCRIPTOR_MISMATCH,
    LENGTH_MISMATCH,
    MISMATCH_KINDS,
    MISSING_FIELD,
    MISSING_KEY,
    VALUE_MISMATCH,
    MismatchKind,
    MismatchResult,
)
from protodiff.diff.ordering import sorted_map_items, sorted_map_keys

__all__ = [
    "MismatchKind",
    "MismatchResult",
    "MISMATCH_KINDS",
    "VALUE_MISMATCH",
    "LENGTH_MISMATCH",
    "MISSING_FIELD",
    "MISSING_KEY",
    "DESCRIPTOR_MISMATCH",
    "diff_records",
    "CompareOptions",
    "DEFAULT_COMPARE_OPTIONS",
    "COMPARE_CONFIG_VERSION",
    "COMPARE_CONFIG_ENV_VAR",
    "compare_options_from_config",
    "load_compare_options",
    "resolve_compare_options",
    "CompareError",
    "CompareConfigError",
    "NIL",
    "format_record",
    "format_value",
    "format_scalar",
    "format_unknown_fields",
    "render_first_divergence",
    "sorted_map_keys",
    "sorted_map_items",
    "AssertionResult",
    "assert_records",
    "assert_equal",
    "render_assertion_failure",
]
