"""Which plugin manager the comparator reports to.

A context-local override (:func:`use_plugin_manager`) wins; otherwise the
``PROTODIFF_PLUGIN_CONFIG`` file is loaded once per distinct path and
reused.
"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
import logging
import os
from pathlib import Path
from typing import Iterator

from protodiff.plugins.base import PLUGIN_CONFIG_ENV_VAR
from protodiff.plugins.loader import load_plugin_manager_from_file
from protodiff.plugins.manager import PluginManager

_log = logging.getLogger(__name__)

_ACTIVE: ContextVar[PluginManager | None] = ContextVar(
    "protodiff_active_plugin_manager",
    default=None,
)
_NO_PLUGINS = PluginManager(plugins=())
_env_manager: tuple[str, PluginManager] | None = None


def get_active_plugin_manager() -> PluginManager:
    manager = _ACTIVE.get()
    if manager is not None:
        return manager

    config_path = os.getenv(PLUGIN_CONFIG_ENV_VAR, "").strip()
    if not config_path:
        return _NO_PLUGINS

    global _env_manager
    if _env_manager is None or _env_manager[0] != config_path:
        _log.debug("loading plugins from %s=%s", PLUGIN_CONFIG_ENV_VAR, config_path)
        _env_manager = (config_path, load_plugin_manager_from_file(config_path))
    return _env_manager[1]


@contextmanager
def use_plugin_manager(manager: PluginManager) -> Iterator[PluginManager]:
    """Route comparisons in the current context to ``manager``."""
    token = _ACTIVE.set(manager)
    try:
        yield manager
    finally:
        _ACTIVE.reset(token)


@contextmanager
def use_plugins_from_config(path: str | Path) -> Iterator[PluginManager]:
    with use_plugin_manager(load_plugin_manager_from_file(path)) as manager:
        yield manager


def reset_plugin_runtime_cache() -> None:
    """Forget the manager loaded from the environment (for tests)."""
    global _env_manager
    _env_manager = None
