import inspect

import pytest

from protodiff.diff import CompareOptions, assert_equal, assert_records, render_assertion_failure
from protodiff.schema.demo import build_demo_message, build_demo_record


def _changed_record():
    changed = build_demo_record()
    changed.values["str_val"] = "invalid"
    return changed


def test_assertion_passes_for_identical_records() -> None:
    result = assert_records(build_demo_record(), build_demo_record())

    assert result.passed is True
    assert result.exit_code == 0
    payload = result.to_dict()
    assert payload["status"] == "pass"
    assert payload["mismatch"] is None
    assert payload["expected_type"] == "Outer"


def test_assertion_fails_for_diverged_records() -> None:
    result = assert_records(build_demo_record(), _changed_record())

    assert result.passed is False
    assert result.exit_code == 1
    payload = result.to_dict()
    assert payload["status"] == "fail"
    assert payload["mismatch"] == {
        "field": "str_val",
        "path": ["str_val"],
        "message": "value mismatch",
        "expected": '"foo"',
        "actual": '"invalid"',
    }


def test_assertion_reports_absent_side_type() -> None:
    result = assert_records(None, build_demo_message())

    assert result.to_dict()["expected_type"] is None
    assert result.to_dict()["actual_type"] == "Outer"
    assert result.mismatch.field_path == "Outer"


def test_assert_equal_reports_calling_test_and_line() -> None:
    assert_equal(build_demo_message(), build_demo_message())

    with pytest.raises(AssertionError) as excinfo:
        line = inspect.currentframe().f_lineno + 1
        assert_equal(build_demo_record(), _changed_record())

    assert str(excinfo.value) == (
        f"test_assert_equal_reports_calling_test_and_line: test_assertion.py:{line}\n"
        "    str_val: value mismatch\n"
        '        + "foo"\n'
        '        - "invalid"'
    )


def test_assert_equal_accepts_an_explicit_test_name() -> None:
    with pytest.raises(AssertionError) as excinfo:
        assert_equal(build_demo_record(), _changed_record(), test_name="TestPayload")

    header = str(excinfo.value).splitlines()[0]
    assert header.startswith("TestPayload: test_assertion.py:")


def test_assert_equal_honours_options() -> None:
    expected = build_demo_record(unknown=b"\x08\x01")

    assert_equal(expected, build_demo_record(), options=CompareOptions(compare_unknown=False))
    with pytest.raises(AssertionError, match="length mismatch"):
        assert_equal(expected, build_demo_record())


def test_render_assertion_failure_indents_mismatch_text() -> None:
    mismatch = assert_records(build_demo_record(), _changed_record()).mismatch

    rendered = render_assertion_failure(mismatch, test_name="TestXYZ", location="assert_test.py:23")

    assert rendered == (
        "TestXYZ: assert_test.py:23\n"
        "    str_val: value mismatch\n"
        '        + "foo"\n'
        '        - "invalid"'
    )
