import json
from pathlib import Path

from typer.testing import CliRunner

from protodiff.cli.app import app
from protodiff.schema.demo import build_demo_message

DEMO_TYPE = "protodiff.schema.demo:demo_message_class"


def _write_pair(tmp_path: Path, *, actual_str_val: str = "foo") -> tuple[Path, Path]:
    expected = tmp_path / "expected.pb"
    actual = tmp_path / "actual.pb"
    message = build_demo_message()
    expected.write_bytes(message.SerializeToString())
    message.str_val = actual_str_val
    actual.write_bytes(message.SerializeToString())
    return expected, actual


def test_cli_assert_passes_for_equal_messages(tmp_path: Path) -> None:
    expected, actual = _write_pair(tmp_path)

    runner = CliRunner()
    result = runner.invoke(app, ["assert", str(expected), str(actual), "--type", DEMO_TYPE])

    assert result.exit_code == 0, result.output
    assert "assert passed" in result.output


def test_cli_assert_fails_with_mismatch_text(tmp_path: Path) -> None:
    expected, actual = _write_pair(tmp_path, actual_str_val="invalid")

    runner = CliRunner()
    result = runner.invoke(app, ["assert", str(expected), str(actual), "--type", DEMO_TYPE])

    assert result.exit_code == 1
    assert "assert failed: divergence detected" in result.output
    assert 'str_val: value mismatch\n+ "foo"\n- "invalid"' in result.output


def test_cli_assert_json_payload(tmp_path: Path) -> None:
    expected, actual = _write_pair(tmp_path, actual_str_val="invalid")

    runner = CliRunner()
    result = runner.invoke(
        app, ["assert", str(expected), str(actual), "--type", DEMO_TYPE, "--json"]
    )

    assert result.exit_code == 1
    payload = json.loads(result.stdout.strip())
    assert payload["status"] == "fail"
    assert payload["exit_code"] == 1
    assert payload["expected_type"] == "Outer"
    assert payload["mismatch"]["path"] == ["str_val"]
    assert payload["actual_path"] == str(actual)


def test_cli_assert_load_failure_is_an_error(tmp_path: Path) -> None:
    expected, _ = _write_pair(tmp_path)
    garbage = tmp_path / "garbage.txtpb"
    garbage.write_text("this is { not text format", encoding="utf-8")

    runner = CliRunner()
    result = runner.invoke(
        app, ["assert", str(expected), str(garbage), "--type", DEMO_TYPE, "--json"]
    )

    assert result.exit_code == 1
    payload = json.loads(result.stdout.strip())
    assert payload["status"] == "error"
    assert "Failed to parse text payload" in payload["message"]
