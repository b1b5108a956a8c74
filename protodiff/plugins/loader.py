"""Versioned plugin configuration loader."""

from __future__ import annotations

import importlib
import inspect
import json
import logging
from pathlib import Path
from typing import Any

from protodiff.plugins.base import PLUGIN_API_VERSION, PLUGIN_CONFIG_VERSION
from protodiff.plugins.exceptions import PluginConfigError, PluginLoadError
from protodiff.plugins.manager import PluginManager

_log = logging.getLogger(__name__)

_ENTRY_KEYS = frozenset({"entrypoint", "options", "enabled"})


def load_plugin_manager_from_file(path: str | Path) -> PluginManager:
    """Load a plugin manager from a JSON config file."""
    config_path = Path(path)
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise
    except json.JSONDecodeError as error:
        raise PluginConfigError(f"Invalid plugin config JSON ({config_path}): {error}") from error

    if not isinstance(raw, dict):
        raise PluginConfigError(f"Plugin config must be a JSON object ({config_path}).")

    manager = plugin_manager_from_config(raw)
    _log.debug("loaded %d plugin(s) from %s", len(manager.plugins), config_path)
    return manager


def plugin_manager_from_config(raw: dict[str, Any]) -> PluginManager:
    """Build a plugin manager from an already-parsed config object.

    Expected shape::

        {"config_version": 1,
         "plugins": [{"entrypoint": "pkg.mod:Plugin", "options": {...}}]}

    Entries with ``"enabled": false`` are validated but not instantiated.
    """
    version = raw.get("config_version")
    if version != PLUGIN_CONFIG_VERSION:
        raise PluginConfigError(
            "Unsupported plugin config version "
            f"{version!r}; expected {PLUGIN_CONFIG_VERSION}."
        )

    entries = raw.get("plugins")
    if not isinstance(entries, list):
        raise PluginConfigError("Plugin config key 'plugins' must be a JSON array.")

    plugins = [
        plugin
        for index, entry in enumerate(entries, start=1)
        if (plugin := _load_entry(entry, index=index)) is not None
    ]
    return PluginManager(plugins=tuple(plugins))


def _load_entry(entry: Any, *, index: int) -> object | None:
    if not isinstance(entry, dict):
        raise PluginConfigError(f"Plugin entry #{index} must be a JSON object.")

    unknown = sorted(set(entry.keys()) - _ENTRY_KEYS)
    if unknown:
        raise PluginConfigError(
            f"Plugin entry #{index} contains unsupported keys: {', '.join(unknown)}"
        )

    enabled = entry.get("enabled", True)
    if not isinstance(enabled, bool):
        raise PluginConfigError(f"Plugin entry #{index} key 'enabled' must be boolean.")

    entrypoint = entry.get("entrypoint")
    if not isinstance(entrypoint, str) or ":" not in entrypoint:
        raise PluginConfigError(
            f"Plugin entry #{index} key 'entrypoint' must be 'module:attribute'."
        )

    options = entry.get("options", {})
    if not isinstance(options, dict):
        raise PluginConfigError(f"Plugin entry #{index} key 'options' must be a JSON object.")

    if not enabled:
        _log.debug("plugin entry #%d (%s) disabled", index, entrypoint)
        return None

    target = _resolve_entrypoint(entrypoint, index=index)
    plugin = _instantiate(target, entrypoint=entrypoint, options=options, index=index)
    _check_api_version(plugin, entrypoint=entrypoint, index=index)
    return plugin


def _resolve_entrypoint(entrypoint: str, *, index: int) -> object:
    module_name, _, attribute = entrypoint.partition(":")
    try:
        module = importlib.import_module(module_name)
    except Exception as error:
        raise PluginLoadError(
            f"Plugin entry #{index} failed to import module '{module_name}': {error}"
        ) from error

    target = getattr(module, attribute, None)
    if target is None:
        raise PluginLoadError(
            f"Plugin entry #{index} could not find attribute '{attribute}' in '{module_name}'."
        )
    return target


def _instantiate(
    target: object,
    *,
    entrypoint: str,
    options: dict[str, Any],
    index: int,
) -> object:
    if not (inspect.isclass(target) or callable(target)):
        if options:
            raise PluginLoadError(
                f"Plugin entry #{index} uses non-callable '{entrypoint}' and cannot accept options."
            )
        return target

    try:
        return target(**options)
    except Exception as error:
        raise PluginLoadError(
            f"Plugin entry #{index} failed to instantiate '{entrypoint}' "
            f"with options {sorted(options.keys())}: {error}"
        ) from error


def _check_api_version(plugin: object, *, entrypoint: str, index: int) -> None:
    supported_major = _major(PLUGIN_API_VERSION)
    version = str(getattr(plugin, "api_version", PLUGIN_API_VERSION))
    if _major(version) != supported_major:
        raise PluginLoadError(
            f"Plugin entry #{index} '{entrypoint}' declares unsupported api_version "
            f"{version!r}; supported major version is {supported_major}."
        )


def _major(version: str) -> str:
    return version.split(".", 1)[0]
