"""Copy context: the field-path stack of the current recursion point."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from enum import Enum
from typing import Any

type PathSegment = str | int
"""A field name, mapping key or sequence index on the path."""

type FieldPath = tuple[PathSegment, ...]
"""Immutable root-to-leaf path snapshot, as captured into errors."""


def segment_to_string(segment: Any) -> str:
    """Render a path segment for display and field-map lookup."""
    if isinstance(segment, Enum):
        segment = segment.value
    if isinstance(segment, bytes):
        return segment.decode("utf-8", errors="replace")
    return str(segment)


def format_path(path: FieldPath) -> str:
    """Dot-join a path snapshot, root to leaf."""
    return ".".join(segment_to_string(segment) for segment in path)


class Context:
    """Stack of field-path segments for the current recursive position.

    Depth equals recursion depth: every push is matched by a pop, including
    when an error propagates. Prefer the `field()` context manager, which
    guarantees this.

    Usage:
        ctx = Context()
        with ctx.field("Address"):
            with ctx.field("Zip"):
                ctx.path()  # "Address.Zip"
    """

    __slots__ = ("_fields",)

    def __init__(self, fields: FieldPath = ()) -> None:
        self._fields: list[PathSegment] = list(fields)

    def push(self, segment: PathSegment) -> None:
        self._fields.append(segment)

    def pop(self) -> None:
        """Remove the innermost segment. No-op on an empty stack."""
        if self._fields:
            self._fields.pop()

    @contextmanager
    def field(self, segment: PathSegment) -> Iterator[None]:
        """Push a segment for the duration of a block."""
        self.push(segment)
        try:
            yield
        finally:
            self.pop()

    def snapshot(self) -> FieldPath:
        """Immutable copy of the current path, safe to keep after later pops."""
        return tuple(self._fields)

    def path(self, extra: PathSegment | None = None) -> str:
        """Dot-joined root-to-leaf path, optionally extended by one segment.

        Args:
            extra: Segment appended to the path without pushing it.

        Returns:
            Path string such as "Address.Zip" ("" at the root).
        """
        fields = self.snapshot()
        if extra is not None:
            fields = (*fields, extra)
        return format_path(fields)

    def __repr__(self) -> str:
        return f"Context({self.path()!r})"
