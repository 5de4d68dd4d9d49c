"""Copy errors.

Every error carries an immutable snapshot of the field path where it was
raised. The snapshot is taken at construction, so later pops of the live
context never alter a reported location.

Usage:
    try:
        copy_to_new(source, Person)
    except CopyError as e:
        print(e.path)  # ("Address", "Zip")
        print(e)  # "cannot convert 'abc' to int [Address.Zip]"
"""

from __future__ import annotations

from enum import Enum, auto

from xcopy.core.context import Context, FieldPath, format_path


class CopyError(Exception):
    """Base class for all copy failures.

    Args:
        cause: Underlying message or exception.
        ctx: Context at the failure point, snapshotted immediately.
    """

    def __init__(self, cause: str | BaseException, ctx: Context | None = None) -> None:
        self.cause = cause
        self.path: FieldPath = ctx.snapshot() if ctx is not None else ()
        super().__init__(str(cause))

    @property
    def location(self) -> str:
        """Dot-joined field path, "" at the root."""
        return format_path(self.path)

    def __str__(self) -> str:
        if self.path:
            return f"{self.cause} [{self.location}]"
        return str(self.cause)


class UnsupportedShapeError(CopyError):
    """Source or destination is not a struct, mapping, sequence or scalar."""

    pass


class TypeMismatchError(CopyError):
    """An existing value does not match the requested destination type."""

    pass


class NotSettableReason(Enum):
    """Why a destination could not be written in place."""

    CONTAINER = auto()  # Struct, mapping or sequence is immutable
    PRIMITIVE = auto()  # Scalar is not held in a writable slot
    DESTINATION_NONE = auto()  # Destination is None and nothing can receive a new value
    SOURCE_NONE = auto()  # Absent source cannot be written through a reference


class NotSettableError(CopyError):
    """Destination cannot be mutated in place and duplication is disallowed."""

    def __init__(
        self,
        cause: str | BaseException,
        ctx: Context | None = None,
        reason: NotSettableReason = NotSettableReason.CONTAINER,
    ) -> None:
        super().__init__(cause, ctx)
        self.reason = reason


class FieldMissingError(CopyError):
    """A source field has no destination counterpart in strict mode."""

    pass


class ConversionError(CopyError):
    """The primitive converter could not coerce a value.

    The converter's own exception is chained as `__cause__`.
    """

    pass


class MergeArityError(CopyError):
    """Merge was called without any source."""

    pass


class SequenceIndexError(CopyError):
    """A sequence index is negative or beyond a fixed-length destination."""

    pass


class CyclicStructureError(CopyError):
    """A source value contains itself."""

    pass
