"""Plugin subsystem for comparison lifecycle extensions."""

from protodiff.plugins.base import (
    PLUGIN_API_VERSION,
    PLUGIN_CONFIG_ENV_VAR,
    PLUGIN_CONFIG_VERSION,
    DiffEndEvent,
    DiffStartEvent,
    LifecyclePlugin,
)
from protodiff.plugins.exceptions import PluginConfigError, PluginError, PluginLoadError
from protodiff.plugins.loader import load_plugin_manager_from_file, plugin_manager_from_config
from protodiff.plugins.manager import PluginDiagnostic, PluginManager
from protodiff.plugins.reference import DiffTracePlugin
from protodiff.plugins.runtime import (
    get_active_plugin_manager,
    reset_plugin_runtime_cache,
    use_plugin_manager,
    use_plugins_from_config,
)

__all__ = [
    "PLUGIN_API_VERSION",
    "PLUGIN_CONFIG_VERSION",
    "PLUGIN_CONFIG_ENV_VAR",
    "PluginError",
    "PluginConfigError",
    "PluginLoadError",
    "DiffStartEvent",
    "DiffEndEvent",
    "LifecyclePlugin",
    "PluginDiagnostic",
    "PluginManager",
    "DiffTracePlugin",
    "load_plugin_manager_from_file",
    "plugin_manager_from_config",
    "get_active_plugin_manager",
    "use_plugin_manager",
    "use_plugins_from_config",
    "reset_plugin_runtime_cache",
]
