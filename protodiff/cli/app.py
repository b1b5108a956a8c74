import json
from importlib.metadata import PackageNotFoundError, version as package_version
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import typer
from google.protobuf import message as message_mod

from protodiff.diff import (
    CompareConfigError,
    CompareOptions,
    assert_records,
    diff_records,
    format_record,
    render_first_divergence,
    resolve_compare_options,
)
from protodiff.messages import INPUT_FORMATS, read_message, resolve_message_class
from protodiff.schema import SchemaError, as_record

app = typer.Typer(help="protodiff CLI")


@dataclass(slots=True)
class _OutputOptions:
    quiet: bool = False
    no_color: bool = False
    stable_json: bool = True


_OUTPUT_OPTIONS = _OutputOptions()


@dataclass(frozen=True, slots=True)
class _MessageSource:
    type_ref: str | None
    descriptor_set: Path | None
    message_name: str | None
    input_format: str

    def load(self, *paths: Path) -> list[message_mod.Message]:
        # One class for every path; classes from separate pools never compare equal.
        message_class = resolve_message_class(
            type_ref=self.type_ref,
            descriptor_set=self.descriptor_set,
            message_name=self.message_name,
        )
        return [read_message(path, message_class, input_format=self.input_format) for path in paths]


def _resolve_cli_version() -> str:
    try:
        return package_version("protodiff")
    except PackageNotFoundError:
        from protodiff import __version__ as local_version

        return local_version


def _version_callback(value: bool) -> None:
    if not value:
        return
    typer.echo(_resolve_cli_version(), color=False)
    raise typer.Exit()


@app.callback()
def app_options(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show protodiff version and exit.",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        help="Suppress non-error text output.",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable ANSI color in mismatch output.",
    ),
    stable_json: bool = typer.Option(
        True,
        "--stable-json/--pretty-json",
        help="Emit stable compact JSON (or pretty JSON).",
    ),
) -> None:
    """Global output controls for all CLI commands."""
    _OUTPUT_OPTIONS.quiet = quiet
    _OUTPUT_OPTIONS.no_color = no_color
    _OUTPUT_OPTIONS.stable_json = stable_json


def _color() -> bool | None:
    # None leaves ANSI stripping to click (on unless the stream is a terminal).
    return False if _OUTPUT_OPTIONS.no_color else None


def _styled_mismatch(text: str) -> str:
    """Color the expected (``+``) and actual (``-``) lines of a mismatch."""
    lines = text.split("\n")
    for index, line in enumerate(lines[1:], start=1):
        if line.startswith("+ "):
            lines[index] = typer.style(line, fg=typer.colors.GREEN)
        elif line.startswith("- "):
            lines[index] = typer.style(line, fg=typer.colors.RED)
    return "\n".join(lines)


def _echo(message: str, *, err: bool = False, force: bool = False) -> None:
    if _OUTPUT_OPTIONS.quiet and not err and not force:
        return
    typer.echo(message, err=err, color=_color())


def _echo_json(payload: dict[str, Any], *, err: bool = False) -> None:
    if _OUTPUT_OPTIONS.stable_json:
        rendered = json.dumps(
            payload,
            ensure_ascii=True,
            sort_keys=True,
            separators=(",", ":"),
        )
    else:
        rendered = json.dumps(
            payload,
            ensure_ascii=True,
            sort_keys=True,
            indent=2,
        )
    typer.echo(rendered, err=err, color=_color())


def _fail(command: str, error: Exception, *, json_output: bool, **context: Any) -> None:
    message = f"{command} failed: {error}"
    if json_output:
        _echo_json({"status": "error", "exit_code": 1, "message": message, **context})
    else:
        _echo(message, err=True)
    raise typer.Exit(code=1) from error


def _load_pair(
    source: _MessageSource,
    expected: Path,
    actual: Path,
    config: Path | None,
) -> tuple[message_mod.Message, message_mod.Message, CompareOptions]:
    options = resolve_compare_options(config)
    left, right = source.load(expected, actual)
    return left, right, options


_TYPE_OPTION = typer.Option(
    None,
    "--type",
    "-t",
    help="Message class as 'module:Attr' (a class or a zero-argument factory).",
)
_DESCRIPTOR_SET_OPTION = typer.Option(
    None,
    "--descriptor-set",
    help="Serialized FileDescriptorSet (protoc --include_imports --descriptor_set_out).",
)
_MESSAGE_OPTION = typer.Option(
    None,
    "--message",
    "-m",
    help="Fully qualified message name inside --descriptor-set.",
)
_INPUT_FORMAT_OPTION = typer.Option(
    "auto",
    "--input-format",
    help=f"Payload encoding: {', '.join(INPUT_FORMATS)} (auto uses the file suffix).",
)
_CONFIG_OPTION = typer.Option(
    None,
    "--config",
    help="Compare options JSON config (defaults to $PROTODIFF_COMPARE_CONFIG).",
)


@app.command()
def diff(
    expected: Path = typer.Argument(..., help="Path to the expected message."),
    actual: Path = typer.Argument(..., help="Path to the actual message."),
    type_ref: str | None = _TYPE_OPTION,
    descriptor_set: Path | None = _DESCRIPTOR_SET_OPTION,
    message_name: str | None = _MESSAGE_OPTION,
    input_format: str = _INPUT_FORMAT_OPTION,
    config: Path | None = _CONFIG_OPTION,
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Emit machine-readable diff output.",
    ),
) -> None:
    """Compare two messages and print their first divergence."""
    source = _MessageSource(type_ref, descriptor_set, message_name, input_format)
    try:
        left, right, options = _load_pair(source, expected, actual, config)
    except (SchemaError, CompareConfigError, FileNotFoundError) as error:
        _fail(
            "diff",
            error,
            json_output=json_output,
            expected_path=str(expected),
            actual_path=str(actual),
        )

    mismatch = diff_records(left, right, options=options)

    if json_output:
        _echo_json(
            {
                "status": "ok",
                "exit_code": 0,
                "message": "diff completed",
                "identical": mismatch is None,
                "mismatch": mismatch.to_dict() if mismatch is not None else None,
                "expected_path": str(expected),
                "actual_path": str(actual),
            }
        )
        return

    _echo(_styled_mismatch(render_first_divergence(mismatch)))


@app.command(name="assert")
def assert_messages(
    expected: Path = typer.Argument(..., help="Path to the expected message."),
    actual: Path = typer.Argument(..., help="Path to the actual message."),
    type_ref: str | None = _TYPE_OPTION,
    descriptor_set: Path | None = _DESCRIPTOR_SET_OPTION,
    message_name: str | None = _MESSAGE_OPTION,
    input_format: str = _INPUT_FORMAT_OPTION,
    config: Path | None = _CONFIG_OPTION,
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Emit machine-readable assertion output.",
    ),
) -> None:
    """Assert the actual message equals the expected one (exit 1 otherwise)."""
    source = _MessageSource(type_ref, descriptor_set, message_name, input_format)
    try:
        left, right, options = _load_pair(source, expected, actual, config)
    except (SchemaError, CompareConfigError, FileNotFoundError) as error:
        _fail("assert", error, json_output=json_output)

    result = assert_records(left, right, options=options)

    if json_output:
        payload = result.to_dict()
        payload["expected_path"] = str(expected)
        payload["actual_path"] = str(actual)
        _echo_json(payload)
    elif result.passed:
        _echo(f"assert passed: expected={expected} actual={actual}")
    else:
        _echo(
            f"assert failed: divergence detected (expected={expected} actual={actual})",
            force=True,
        )
        _echo(_styled_mismatch(str(result.mismatch)), force=True)

    if not result.passed:
        raise typer.Exit(code=result.exit_code)


@app.command(name="fmt")
def fmt_message(
    path: Path = typer.Argument(..., help="Path to the message to render."),
    type_ref: str | None = _TYPE_OPTION,
    descriptor_set: Path | None = _DESCRIPTOR_SET_OPTION,
    message_name: str | None = _MESSAGE_OPTION,
    input_format: str = _INPUT_FORMAT_OPTION,
) -> None:
    """Print the canonical single-line rendering of a message."""
    source = _MessageSource(type_ref, descriptor_set, message_name, input_format)
    try:
        (message,) = source.load(path)
    except (SchemaError, FileNotFoundError) as error:
        _fail("fmt", error, json_output=False)

    _echo(format_record(as_record(message)), force=True)


def main() -> None:
    app()
