"""Deterministic map key ordering for display."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping
from typing import Any

from protodiff.core.types import SIGNED_INTEGER_KINDS, UNSIGNED_INTEGER_BITS
from protodiff.schema.view import MapKey, Value


def sorted_map_keys(keys: Iterable[MapKey], key_kind: str) -> list[MapKey]:
    """Return ``keys`` in the total order defined for ``key_kind``.

    Strings sort lexically, booleans ``false`` before ``true`` and integer
    kinds numerically; unsigned kinds are read as unsigned values of their
    bit width, so a provider handing out two's-complement values still
    sorts them after every smaller unsigned key.
    """
    return sorted(keys, key=_sort_key(key_kind))


def sorted_map_items(values: Mapping[MapKey, Value], key_kind: str) -> Iterator[tuple[MapKey, Value]]:
    for key in sorted_map_keys(values.keys(), key_kind):
        yield key, values[key]


def _sort_key(key_kind: str) -> Callable[[Any], Any]:
    if key_kind == "string":
        return str
    if key_kind == "bool":
        return bool
    if key_kind in SIGNED_INTEGER_KINDS:
        return int
    bits = UNSIGNED_INTEGER_BITS.get(key_kind)
    if bits is not None:
        mask = (1 << bits) - 1
        return lambda key: int(key) & mask
    raise ValueError(f"Unsupported map key kind: {key_kind}")
