"""Data models for first-divergence reporting."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

MismatchKind = Literal[
    "value mismatch",
    "length mismatch",
    "missing field",
    "missing key",
    "descriptors don't match",
]

VALUE_MISMATCH: MismatchKind = "value mismatch"
LENGTH_MISMATCH: MismatchKind = "length mismatch"
MISSING_FIELD: MismatchKind = "missing field"
MISSING_KEY: MismatchKind = "missing key"
DESCRIPTOR_MISMATCH: MismatchKind = "descriptors don't match"

MISMATCH_KINDS: tuple[str, ...] = (
    DESCRIPTOR_MISMATCH,
    MISSING_FIELD,
    MISSING_KEY,
    LENGTH_MISMATCH,
    VALUE_MISMATCH,
)


@dataclass(frozen=True, slots=True)
class MismatchResult:
    """The single most specific divergence between two records."""

    path: tuple[str, ...]
    message: MismatchKind
    expected: str
    actual: str

    @property
    def field_path(self) -> str:
        return ".".join(self.path)

    def __str__(self) -> str:
        return f"{self.field_path}: {self.message}\n+ {self.expected}\n- {self.actual}"

    def swapped(self) -> MismatchResult:
        return MismatchResult(
            path=self.path,
            message=self.message,
            expected=self.actual,
            actual=self.expected,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "field": self.field_path,
            "path": list(self.path),
            "message": self.message,
            "expected": self.expected,
            "actual": self.actual,
        }


@dataclass(slots=True)
class PendingMismatch:
    """Mismatch under construction while the comparator unwinds.

    Segments are appended innermost-first as each frame returns and are
    reversed once in :meth:`to_result`.
    """

    message: MismatchKind
    expected: str = ""
    actual: str = ""
    segments: list[str] = field(default_factory=list)

    def at(self, segment: str) -> PendingMismatch:
        self.segments.append(segment)
        return self

    def swapped(self) -> PendingMismatch:
        self.expected, self.actual = self.actual, self.expected
        return self

    def to_result(self) -> MismatchResult:
        return MismatchResult(
            path=tuple(reversed(self.segments)),
            message=self.message,
            expected=self.expected,
            actual=self.actual,
        )
