"""Protocols for tracing infrastructure.

These protocols define the hook points a copy operation reports to, allowing
different diagnostic sinks (logging, collectors in tests, profilers).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from xcopy.core.context import Context
    from xcopy.core.shape import TypeInfo
    from xcopy.engine.creator import Creator


@runtime_checkable
class CopyCallback(Protocol):
    """Protocol for observing a copy operation step by step.

    Callbacks are purely diagnostic: they receive the live context and must
    not mutate it or the values passed in. A config without a callback
    produces exactly the same results.

    Usage:
        class Collector:
            def __init__(self):
                self.paths = []

            def push_field(self, ctx, field, source, creator):
                self.paths.append(ctx.path())

            ...  # remaining hooks

        config = CopyConfig(callback=Collector())
    """

    def begin_new(self, ctx: Context, source: Any, dest: TypeInfo) -> None:
        """Called before building a brand-new destination value.

        Args:
            ctx: Context at the build point.
            source: Value being copied.
            dest: Description of the destination type.
        """
        ...

    def end_new(self, ctx: Context, source: Any, dest: TypeInfo) -> None:
        """Called after a brand-new destination value was built (or failed)."""
        ...

    def push_field(self, ctx: Context, field: Any, source: Any, creator: Creator) -> None:
        """Called just after a field was pushed onto the context.

        Args:
            ctx: Context, already including `field`.
            field: Field name, mapping key or sequence index.
            source: Value owning the field.
            creator: Creator receiving the field.
        """
        ...

    def pop_field(self, ctx: Context, field: Any, source: Any, creator: Creator) -> None:
        """Called just after a field was popped from the context."""
        ...

    def before_set_value(self, ctx: Context, source: Any, creator: Creator, existing: Any) -> None:
        """Called before a scalar value is committed.

        Args:
            ctx: Context of the scalar.
            source: Scalar source value.
            creator: Scalar creator receiving the value.
            existing: Existing destination value, ABSENT if none.
        """
        ...

    def after_set_value(self, ctx: Context, source: Any, creator: Creator, existing: Any) -> None:
        """Called after a scalar value was committed."""
        ...
