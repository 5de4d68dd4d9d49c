"""Core type definitions for xcopy."""

from __future__ import annotations

from typing import Any


class Ref[T]:
    """Mutable single-value reference cell.

    A `Ref` plays the role of a pointer: it can be written through in place, so
    `copy_to_existing` can update a scalar or an immutable container held inside
    it. References nest, and an empty reference (`Ref(None)`) is an absent value.

    Usage:
        counter = Ref(0)
        copy_to_existing("42", counter)
        assert counter.value == 42
    """

    __slots__ = ("value",)

    def __init__(self, value: T | None = None) -> None:
        self.value = value

    def __repr__(self) -> str:
        return f"Ref({self.value!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Ref):
            return NotImplemented
        return bool(self.value == other.value)

    __hash__ = None  # type: ignore[assignment]


class _Absent:
    """Marker for "no value given", distinct from an explicit None."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False


ABSENT: Any = _Absent()
"""Sentinel for a missing existing value or a field-less (scalar) write."""
