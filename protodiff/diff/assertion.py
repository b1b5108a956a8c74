"""Assertion helpers for test suites and CI checks."""

from __future__ import annotations

from dataclasses import dataclass
import inspect
import os
from pathlib import Path
from typing import Any

from protodiff.diff.config import CompareOptions
from protodiff.diff.engine import diff_records
from protodiff.diff.models import MismatchResult
from protodiff.schema.protobuf import as_record

_FAILURE_INDENT = "    "
PYTEST_CURRENT_TEST_ENV_VAR = "PYTEST_CURRENT_TEST"


@dataclass(frozen=True, slots=True)
class AssertionResult:
    """Outcome of comparing an expected record against an actual one."""

    mismatch: MismatchResult | None
    expected_type: str | None = None
    actual_type: str | None = None

    @property
    def passed(self) -> bool:
        return self.mismatch is None

    @property
    def exit_code(self) -> int:
        return 0 if self.passed else 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": "pass" if self.passed else "fail",
            "exit_code": self.exit_code,
            "expected_type": self.expected_type,
            "actual_type": self.actual_type,
            "mismatch": self.mismatch.to_dict() if self.mismatch is not None else None,
        }


def assert_records(
    expected: object,
    actual: object,
    *,
    options: CompareOptions | None = None,
) -> AssertionResult:
    """Compare ``expected`` against ``actual`` and return the assertion outcome."""
    left = as_record(expected)
    right = as_record(actual)
    return AssertionResult(
        mismatch=diff_records(left, right, options=options),
        expected_type=left.name if left is not None else None,
        actual_type=right.name if right is not None else None,
    )


def assert_equal(
    expected: object,
    actual: object,
    *,
    options: CompareOptions | None = None,
    test_name: str | None = None,
) -> None:
    """Raise ``AssertionError`` when the records differ.

    Meant to be called directly from test functions::

        assert_equal(build_expected(), response.payload)

    The error message is the :func:`render_assertion_failure` block, headed
    by the running test's name (``test_name``, the pytest node name, or the
    calling function) and the caller's ``file:line``.
    """
    result = assert_records(expected, actual, options=options)
    if result.mismatch is None:
        return

    caller = inspect.currentframe().f_back
    location = f"{Path(caller.f_code.co_filename).name}:{caller.f_lineno}"
    name = test_name or _current_test_name() or caller.f_code.co_name
    del caller
    raise AssertionError(
        render_assertion_failure(result.mismatch, test_name=name, location=location)
    )


def _current_test_name() -> str | None:
    # pytest exports "path/to/test_file.py::test_name[param] (call)".
    current = os.environ.get(PYTEST_CURRENT_TEST_ENV_VAR)
    if not current:
        return None
    node = current.rsplit(" ", 1)[0]
    return node.rsplit("::", 1)[-1]


def render_assertion_failure(
    mismatch: MismatchResult,
    *,
    test_name: str,
    location: str,
) -> str:
    """Render a failure block headed by the test name and ``file:line``.

    The mismatch text is indented one level below the header and its
    ``+``/``-`` lines one level further::

        test_payload: test_api.py:42
            str_val: value mismatch
                + "foo"
                - "invalid"
    """
    body = str(mismatch).replace("\n", "\n" + _FAILURE_INDENT * 2)
    return f"{test_name}: {location}\n{_FAILURE_INDENT}{body}"

