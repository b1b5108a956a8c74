"""Fan-out of diff lifecycle events to the configured plugins.

A plugin that raises never changes the outcome of a comparison: the error
is kept as a :class:`PluginDiagnostic` on the manager and surfaced as a
``RuntimeWarning``.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
import logging
import warnings

from protodiff.plugins.base import DiffEndEvent, DiffStartEvent

_log = logging.getLogger(__name__)

DiffEvent = DiffStartEvent | DiffEndEvent


@dataclass(frozen=True, slots=True)
class PluginDiagnostic:
    plugin_name: str
    hook: str
    error_type: str
    message: str
    expected_type: str | None = None
    actual_type: str | None = None

    @classmethod
    def from_error(
        cls, plugin: object, hook: str, event: DiffEvent, error: Exception
    ) -> PluginDiagnostic:
        return cls(
            plugin_name=str(getattr(plugin, "name", type(plugin).__name__)),
            hook=hook,
            error_type=type(error).__name__,
            message=str(error),
            expected_type=event.expected_type,
            actual_type=event.actual_type,
        )

    def __str__(self) -> str:
        return (
            f"protodiff plugin failure: {self.plugin_name}.{self.hook} "
            f"({self.expected_type} vs {self.actual_type}) "
            f"raised {self.error_type}: {self.message}"
        )

    def to_dict(self) -> dict[str, str | None]:
        return asdict(self)


@dataclass(slots=True)
class PluginManager:
    plugins: tuple[object, ...] = ()
    diagnostics: list[PluginDiagnostic] = field(default_factory=list)

    def clear_diagnostics(self) -> None:
        self.diagnostics.clear()

    def on_diff_start(self, event: DiffStartEvent) -> None:
        for plugin in self.plugins:
            self._notify(plugin, "on_diff_start", event)

    def on_diff_end(self, event: DiffEndEvent) -> None:
        for plugin in self.plugins:
            self._notify(plugin, "on_diff_end", event)

    def _notify(self, plugin: object, hook: str, event: DiffEvent) -> None:
        callback = getattr(plugin, hook, None)
        if callback is None:
            return
        try:
            callback(event)
        except Exception as error:
            diagnostic = PluginDiagnostic.from_error(plugin, hook, event, error)
            self.diagnostics.append(diagnostic)
            _log.debug("%s", diagnostic, exc_info=True)
            # Points at the diff_records caller.
            warnings.warn(str(diagnostic), RuntimeWarning, stacklevel=4)
