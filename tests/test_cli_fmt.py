from pathlib import Path

from typer.testing import CliRunner

from protodiff.cli.app import app
from protodiff.schema.demo import build_demo_message


def test_cli_fmt_prints_canonical_rendering(tmp_path: Path) -> None:
    message = build_demo_message()
    message.ClearField("repeated_type")
    message.ClearField("map_type")
    message.ClearField("any_type")
    path = tmp_path / "message.pb"
    path.write_bytes(message.SerializeToString())

    runner = CliRunner()
    result = runner.invoke(
        app, ["fmt", str(path), "--type", "protodiff.schema.demo:demo_message_class"]
    )

    assert result.exit_code == 0, result.output
    assert result.output.strip() == (
        '<str_val:"foo" int_val:1 bool_val:true double_val:1.1 bytes_val:[1 2] '
        'enum_type:NOT_OK oneof_string:"1" timestamp_type:<seconds:1598814300> '
        "duration_type:<seconds:1> repeated_type_simple:[9 10 11] "
        'map_type_simple:map[A:20 B:30 C:40] nested_message:<inner:<id:"123">>>'
    )


def test_cli_fmt_rejects_unknown_input_format(tmp_path: Path) -> None:
    path = tmp_path / "message.pb"
    path.write_bytes(b"")

    runner = CliRunner()
    result = runner.invoke(
        app,
        [
            "fmt",
            str(path),
            "--type",
            "protodiff.schema.demo:demo_message_class",
            "--input-format",
            "yaml",
        ],
    )

    assert result.exit_code == 1
    assert "Unsupported input format 'yaml'" in result.output
