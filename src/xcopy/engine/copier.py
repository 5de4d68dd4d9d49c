"""Copy engine: dispatches a source value onto a destination creator.

The Copier walks the source recursively. For every value it classifies the
source, selects a Creator for the destination type, optionally seeds it with
an existing destination value, and then either assigns the value whole or
iterates its fields (struct attributes, mapping entries or sequence indices)
into the creator. Each field descent is mirrored on the Context so errors and
field-map lookups see the full path.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from xcopy.adapters.protocol import Converter
from xcopy.adapters.pydantic import PydanticConverter
from xcopy.config.models import CopyConfig, CopyFlags
from xcopy.core.context import Context
from xcopy.core.shape import (
    Shape,
    TypeInfo,
    deref,
    describe,
    shape_of,
    struct_fields,
    tagged_name,
    type_of,
)
from xcopy.core.types import ABSENT
from xcopy.engine.creator import Creator, get_creator
from xcopy.engine.errors import CyclicStructureError, UnsupportedShapeError
from xcopy.engine.merge import merge_into


def _annotation_key(info: TypeInfo) -> Any:
    try:
        hash(info.annotation)
    except TypeError:
        return repr(info.annotation)
    return info.annotation


class Copier:
    """Recursive copy engine bound to one configuration.

    A Copier owns the Context of the copy in progress, so a single instance
    must not be used by two copies at once. Build one per call, or one per
    thread.

    Args:
        config: Copy configuration (default: CopyConfig()).
        converter: Primitive converter (default: PydanticConverter built
            from `config.converter`).
        ctx: Context to continue from (default: empty root context).

    Usage:
        copier = Copier(CopyConfig(flags=CopyFlags.ERROR_IF_STRUCT_FIELD_MISSING))
        person = copier.copy_to_new(raw, Person)
    """

    def __init__(
        self,
        config: CopyConfig | None = None,
        converter: Converter | None = None,
        ctx: Context | None = None,
    ) -> None:
        self.config = config if config is not None else CopyConfig()
        self.converter = converter if converter is not None else PydanticConverter(self.config.converter)
        self.ctx = ctx if ctx is not None else Context()
        self._active: set[tuple[int, Any]] = set()

    def overwriting(self) -> Copier:
        """Copier sharing this one's context and converter, with OVERWRITE_EXISTING added."""
        config = self.config.dup().add_flags(CopyFlags.OVERWRITE_EXISTING)
        return Copier(config, self.converter, self.ctx)

    # Entry points

    def copy_to_new(self, source: Any, dest_type: Any) -> Any:
        """Copy `source` into a brand-new value of `dest_type`."""
        return self.copy_new(source, describe(dest_type))

    def copy_using_existing(self, source: Any, existing: Any, dest_type: Any = None) -> Any:
        """Copy `source` onto a value seeded from `existing`.

        `existing` is only mutated when the config has OVERWRITE_EXISTING.

        Args:
            source: Value to copy.
            existing: Seed value of the destination type.
            dest_type: Destination annotation (default: derived from `existing`).

        Returns:
            The resulting destination value.
        """
        info = describe(type_of(existing) if dest_type is None else dest_type)
        return self.copy_value(source, info, existing)

    def copy_to_existing(self, source: Any, existing: Any, dest_type: Any = None) -> None:
        """Copy `source` into `existing` in place.

        Raises:
            NotSettableError: If `existing` cannot receive the copy (e.g. a
                bare scalar or a frozen struct outside a reference cell).
        """
        info = describe(type_of(existing) if dest_type is None else dest_type)
        self.overwriting().copy_value(source, info, existing)

    def merge_to_new(self, dest_type: Any, *sources: Any) -> Any:
        """Merge sources, later ones taking precedence, into a new value.

        Raises:
            MergeArityError: If no source is given.
        """
        return merge_into(self, dest_type, sources)

    # Recursion

    def copy_new(self, source: Any, info: TypeInfo) -> Any:
        """Build a new destination value of a described type."""
        self._notify("begin_new", source, info)
        try:
            return self.copy_value(source, info)
        finally:
            self._notify("end_new", source, info)

    def copy_value(self, source: Any, info: TypeInfo, existing: Any = ABSENT, slot: bool = False) -> Any:
        """Copy one value, optionally onto an existing destination value.

        Args:
            source: Value to copy, possibly behind reference cells.
            info: Description of the destination type.
            existing: Existing destination value, ABSENT for none.
            slot: Whether the caller stores the result back into its own
                storage, which makes `existing` writable.

        Returns:
            The destination value.
        """
        resolved = deref(source)
        shape = None if resolved is None else shape_of(resolved)
        if resolved is not None and shape is None:
            raise UnsupportedShapeError(f"unsupported source type: {type(resolved).__name__}", self.ctx)

        creator = get_creator(self, info)
        if existing is not ABSENT:
            creator.seed_existing(existing, slot=slot)

        if resolved is None:
            creator.clear()
            return creator.finalize()

        assert shape is not None
        with self._guard(resolved, shape, info):
            if shape is Shape.SCALAR:
                self._copy_scalar(creator, source, existing)
            elif not creator.try_set_whole_value(source):
                if info.shape is Shape.SCALAR:
                    raise UnsupportedShapeError(
                        f"cannot copy {shape.name.lower()} {type(resolved).__name__} "
                        f"into {info.describe_name()}",
                        self.ctx,
                    )
                self._copy_fields(creator, resolved, shape)

        return creator.finalize()

    def _copy_scalar(self, creator: Creator, source: Any, existing: Any) -> None:
        if creator.type_info.shape is not Shape.SCALAR:
            raise UnsupportedShapeError(
                f"cannot copy scalar {type(deref(source)).__name__} into {creator.type_info.describe_name()}",
                self.ctx,
            )
        self._notify("before_set_value", source, creator, existing)
        if not creator.try_set_whole_value(source):
            creator.set_field(ABSENT, source)
        self._notify("after_set_value", source, creator, existing)

    def _copy_fields(self, creator: Creator, source: Any, shape: Shape) -> None:
        for field, value in self._elements(source, shape):
            try:
                with self.ctx.field(field):
                    self._notify("push_field", field, source, creator)
                    creator.set_field(field, value)
            finally:
                self._notify("pop_field", field, source, creator)

    def _elements(self, source: Any, shape: Shape) -> Iterator[tuple[Any, Any]]:
        """Yield (target name, value) pairs of a structured source.

        Names are resolved lazily against the live context, so each lookup
        sees the path of its own element.
        """
        match shape:
            case Shape.STRUCT:
                tag_name = self.config.tag_name
                for field in struct_fields(type(source)):
                    if not field.is_public:
                        continue
                    name = tagged_name(field, tag_name)
                    value = getattr(source, field.name, ABSENT)
                    # init=False fields may be left unset by the constructor
                    if not name or value is ABSENT:
                        continue
                    name = self.config.mapped_name(self.ctx.path(name), name)
                    if name:
                        yield name, value
            case Shape.MAPPING:
                for key, value in source.items():
                    yield self.config.mapped_name(self.ctx.path(key), key), value
            case Shape.SEQUENCE:
                for index, value in enumerate(source):
                    yield self.config.mapped_name(self.ctx.path(index), index), value

    @contextmanager
    def _guard(self, resolved: Any, shape: Shape, info: TypeInfo) -> Iterator[None]:
        """Reject a structured source that is already being copied to the same type."""
        if shape is Shape.SCALAR:
            yield
            return

        key = (id(resolved), _annotation_key(info))
        if key in self._active:
            raise CyclicStructureError(
                f"cyclic reference to {type(resolved).__name__} while copying to {info.describe_name()}",
                self.ctx,
            )
        self._active.add(key)
        try:
            yield
        finally:
            self._active.discard(key)

    def _notify(self, hook: str, *args: Any) -> None:
        callback = self.config.callback
        if callback is not None:
            getattr(callback, hook)(self.ctx, *args)
