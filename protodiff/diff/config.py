"""Comparison options and their versioned JSON config."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
import json
import os
from pathlib import Path
from typing import Any

from protodiff.diff.exceptions import CompareConfigError

COMPARE_CONFIG_VERSION = 1
COMPARE_CONFIG_ENV_VAR = "PROTODIFF_COMPARE_CONFIG"


@dataclass(frozen=True, slots=True)
class CompareOptions:
    """Switches for the comparator.

    ``nan_equal`` makes a NaN/NaN pair compare equal; by default NaN never
    equals anything, itself included. ``reverse_list_scan`` reports the
    highest differing list index first.
    """

    nan_equal: bool = False
    compare_unknown: bool = True
    reverse_list_scan: bool = True

    def __post_init__(self) -> None:
        for option in fields(self):
            if not isinstance(getattr(self, option.name), bool):
                raise CompareConfigError(f"{option.name} must be a boolean")

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


DEFAULT_COMPARE_OPTIONS = CompareOptions()


def compare_options_from_config(raw: dict[str, Any]) -> CompareOptions:
    version = raw.get("config_version")
    if version != COMPARE_CONFIG_VERSION:
        raise CompareConfigError(
            "Unsupported compare config version "
            f"{version!r}; expected {COMPARE_CONFIG_VERSION}."
        )

    unknown_top = sorted(set(raw.keys()) - {"config_version", "options"})
    if unknown_top:
        raise CompareConfigError(
            f"Compare config contains unsupported keys: {', '.join(unknown_top)}"
        )

    options = raw.get("options", {})
    if not isinstance(options, dict):
        raise CompareConfigError("Compare config key 'options' must be a JSON object.")

    supported = {option.name for option in fields(CompareOptions)}
    unknown = sorted(set(options.keys()) - supported)
    if unknown:
        raise CompareConfigError(
            f"Compare config options contain unsupported keys: {', '.join(unknown)}"
        )
    return CompareOptions(**options)


def load_compare_options(path: str | Path) -> CompareOptions:
    """Load comparison options from a JSON config file."""
    config_path = Path(path)
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise
    except json.JSONDecodeError as error:
        raise CompareConfigError(f"Invalid compare config JSON ({config_path}): {error}") from error

    if not isinstance(raw, dict):
        raise CompareConfigError(f"Compare config must be a JSON object ({config_path}).")

    return compare_options_from_config(raw)


def resolve_compare_options(path: str | Path | None = None) -> CompareOptions:
    """Options from ``path``, else from ``PROTODIFF_COMPARE_CONFIG``, else defaults."""
    if path is not None:
        return load_compare_options(path)
    env_path = os.getenv(COMPARE_CONFIG_ENV_VAR, "").strip()
    if env_path:
        return load_compare_options(env_path)
    return DEFAULT_COMPARE_OPTIONS
