"""Creators: incremental builders of destination values.

A Creator is bound to one destination type. The copy engine optionally seeds
it with an existing value, writes fields into it one at a time, and finally
asks it for the built value:

    creator = get_creator(copier, describe(Person))
    creator.seed_existing(person)  # optional
    creator.set_field("name", "Ada")
    result = creator.finalize()

Indirection (`T | None`, `Ref[T]`) is handled here, in the base class: the
shape-specific subclasses only ever see the concrete inner value.
"""

from __future__ import annotations

import copy
import dataclasses
import logging as _logging
import types
from abc import ABC, abstractmethod
from collections.abc import MutableMapping, MutableSequence
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ValidationError

from xcopy.config.models import CopyConfig, CopyFlags
from xcopy.core.context import Context
from xcopy.core.shape import (
    FieldInfo,
    Layer,
    Shape,
    TypeInfo,
    conforms,
    deref,
    describe,
    is_frozen,
    is_mutable,
    shape_of,
    struct_fields,
    tagged_name,
    unwrap_layers,
    zero_inner,
    zero_value,
)
from xcopy.core.types import ABSENT, Ref
from xcopy.engine.errors import (
    ConversionError,
    FieldMissingError,
    NotSettableError,
    NotSettableReason,
    SequenceIndexError,
    TypeMismatchError,
    UnsupportedShapeError,
)

if TYPE_CHECKING:
    from xcopy.engine.copier import Copier

_logger = _logging.getLogger(__name__)


def _attach(layers: tuple[Layer, ...], outer: Any, inner: Any) -> Any:
    """Place a built inner value behind a chain of indirection layers.

    Existing reference cells in `outer` are written through; missing ones
    are created.
    """
    if not layers:
        return inner
    if layers[0] is Layer.OPTIONAL:
        return _attach(layers[1:], outer, inner)
    if isinstance(outer, Ref):
        outer.value = _attach(layers[1:], outer.value, inner)
        return outer
    return Ref(_attach(layers[1:], None, inner))


def _failure_reason(exc: Exception) -> str:
    if isinstance(exc, ValidationError):
        errors = exc.errors()
        if errors:
            return str(errors[0]["msg"])
    return str(exc)


class Creator(ABC):
    """Base class for destination builders.

    Subclasses implement the shape-specific hooks:
        _begin(inner): working target from an existing concrete value
        _begin_new(): working target for a fresh value
        _build(target): concrete result from the working target
        _mutable(inner): whether an existing value can be updated in place
            (optional; defaults to is_mutable)

    Args:
        copier: Engine used for recursive element copies.
        info: Description of the destination type.
    """

    def __init__(self, copier: Copier, info: TypeInfo) -> None:
        self._copier = copier
        self._info = info
        self._seed: Any = ABSENT
        self._target: Any = ABSENT
        self._slot = False
        self._detached = False

    @property
    def type_info(self) -> TypeInfo:
        return self._info

    @property
    def _config(self) -> CopyConfig:
        return self._copier.config

    @property
    def _ctx(self) -> Context:
        return self._copier.ctx

    # Seeding

    def seed_existing(self, existing: Any, slot: bool = False) -> None:
        """Seed the creator with an existing destination value.

        Without OVERWRITE_EXISTING the creator works on a deep duplicate, so
        `existing` is never mutated. With it, `existing` is written directly if
        it can be: the caller commits the result into a slot, it holds a
        reference cell, or it is mutable in place. Otherwise it is duplicated
        if ALLOW_DUPLICATING_IF_NOT_SETTABLE permits.

        Args:
            existing: Value of exactly the destination type.
            slot: Whether the caller stores the finalized value back into its
                own storage (struct field, mapping entry, sequence index).

        Raises:
            TypeMismatchError: If `existing` does not match the destination type.
            NotSettableError: If `existing` cannot be written and duplicating
                is not allowed.
        """
        if not conforms(existing, self._info):
            raise TypeMismatchError(
                f"destination is not of the same type "
                f"({type(existing).__name__} -> {self._info.describe_name()})",
                self._ctx,
            )
        self._slot = slot

        if not self._config.has(CopyFlags.OVERWRITE_EXISTING):
            self._adopt(self._copier.copy_new(existing, self._info))
            return

        inner = unwrap_layers(existing, self._info.layers)
        writable = slot or isinstance(existing, Ref) or (inner is not None and self._mutable(inner))
        if inner is None:
            # Absent: materialized on the first write, if anything can receive it
            self._seed = existing
            self._detached = not writable
            return
        if writable:
            self._adopt(existing)
        elif self._may_duplicate():
            _logger.debug("Duplicating non-settable %s at [%s]", self._info.describe_name(), self._ctx.path())
            self._adopt(self._copier.copy_new(existing, self._info))
        else:
            raise self._not_settable()

    def _adopt(self, outer: Any) -> None:
        self._seed = outer
        inner = unwrap_layers(outer, self._info.layers)
        if inner is not None:
            self._target = self._begin(inner)

    def _may_duplicate(self) -> bool:
        return self._config.has(CopyFlags.ALLOW_DUPLICATING_IF_NOT_SETTABLE)

    def _not_settable(self) -> NotSettableError:
        return NotSettableError(
            f"{self._info.describe_name()} is not settable and duplicates are not allowed",
            self._ctx,
            NotSettableReason.CONTAINER,
        )

    def _ensure(self) -> Any:
        """Working target, materialized on first use."""
        if self._target is ABSENT:
            if self._detached:
                raise NotSettableError(
                    f"{self._info.describe_name()} is not settable, and the destination value is None",
                    self._ctx,
                    NotSettableReason.DESTINATION_NONE,
                )
            self._target = self._begin_new()
        return self._target

    # Building

    def try_set_whole_value(self, source: Any) -> bool:
        """Assign the whole source in one step, if this creator supports it.

        Returns:
            True if the value was set and per-field iteration must be skipped.
        """
        return False

    @abstractmethod
    def set_field(self, identifier: Any, value: Any) -> None:
        """Copy one source element into the destination.

        Args:
            identifier: Field name, mapping key or index; ABSENT for scalars.
            value: Source element value.
        """
        ...

    def clear(self) -> None:
        """Called instead of any write when the source is absent."""
        return None

    def finalize(self) -> Any:
        """Return the built value.

        Returns:
            The destination value; the seeded value if nothing was written, or
            the zero value of the destination type if there was no seed.
        """
        if self._target is ABSENT:
            if self._seed is not ABSENT:
                return self._seed
            return self._zero(self._info)
        outer = None if self._seed is ABSENT else self._seed
        return _attach(self._info.layers, outer, self._build(self._target))

    # Shape hooks

    @abstractmethod
    def _begin(self, inner: Any) -> Any: ...

    @abstractmethod
    def _begin_new(self) -> Any: ...

    @abstractmethod
    def _build(self, target: Any) -> Any: ...

    def _mutable(self, inner: Any) -> bool:
        return is_mutable(inner)

    # Helpers

    def _convert(self, value: Any, target: Any) -> Any:
        try:
            return self._copier.converter.convert(value, target)
        except (ValueError, TypeError) as e:
            name = target.__name__ if isinstance(target, type) else repr(target)
            raise ConversionError(
                f"cannot convert {value!r} to {name}: {_failure_reason(e)}", self._ctx
            ) from e

    def _to_string(self, value: Any) -> str:
        try:
            return self._copier.converter.to_string(value)
        except (ValueError, TypeError) as e:
            raise ConversionError(
                f"cannot convert {value!r} to str: {_failure_reason(e)}", self._ctx
            ) from e

    def _zero(self, info: TypeInfo, inner: bool = False) -> Any:
        """Zero value of a described type, failing as a copy error."""
        try:
            return zero_inner(info) if inner else zero_value(info)
        except (ValueError, TypeError) as e:
            raise UnsupportedShapeError(
                f"cannot build a zero value of {info.describe_name()}: {e}", self._ctx
            ) from e


class StructCreator(Creator):
    """Builds dataclass and pydantic model instances.

    Mutable instances are updated with setattr. Frozen instances stage their
    changes and are rebuilt at finalize.
    """

    def __init__(self, copier: Copier, info: TypeInfo) -> None:
        super().__init__(copier, info)
        assert info.container is not None
        self._cls: type = info.container
        self._frozen = is_frozen(self._cls)
        self._staged: dict[str, Any] = {}

    def _begin(self, inner: Any) -> Any:
        return inner

    def _begin_new(self) -> Any:
        return self._zero(self._info, inner=True)

    def _build(self, target: Any) -> Any:
        if not self._frozen or not self._staged:
            return target
        if isinstance(target, BaseModel):
            return target.model_copy(update=self._staged)

        init_names = {f.name for f in dataclasses.fields(target) if f.init}
        try:
            rebuilt = dataclasses.replace(
                target, **{k: v for k, v in self._staged.items() if k in init_names}
            )
        except (ValueError, TypeError) as e:
            raise UnsupportedShapeError(f"cannot rebuild frozen {self._cls.__name__}: {e}", self._ctx) from e
        for name, value in self._staged.items():
            if name not in init_names:
                object.__setattr__(rebuilt, name, value)
        return rebuilt

    def _lookup(self, name: str) -> FieldInfo | None:
        tag_name = self._config.tag_name
        for field in struct_fields(self._cls):
            if field.is_public and tagged_name(field, tag_name) == name:
                return field
        return None

    def set_field(self, identifier: Any, value: Any) -> None:
        name = self._to_string(identifier)
        field = self._lookup(name)
        if field is None:
            if self._config.has(CopyFlags.ERROR_IF_STRUCT_FIELD_MISSING):
                raise FieldMissingError(f"field {name} missing on struct {self._cls.__name__}", self._ctx)
            return

        target = self._ensure()
        if field.name in self._staged:
            current = self._staged[field.name]
        else:
            current = getattr(target, field.name, ABSENT)

        result = self._copier.copy_value(value, describe(field.annotation), current, slot=True)

        if self._frozen:
            self._staged[field.name] = result
        else:
            setattr(target, field.name, result)


class MappingCreator(Creator):
    """Builds dicts (and read-only mapping proxies).

    Keys are converted to the declared key type. A mapping whose value type
    is `Any` receives structured values as nested mappings of its own type,
    unless DISABLE_MAPOFINTERFACE_TARGET_RECURSION is set.
    """

    def __init__(self, copier: Copier, info: TypeInfo) -> None:
        super().__init__(copier, info)
        self._rebuild = False

    def _begin(self, inner: Any) -> Any:
        if isinstance(inner, MutableMapping):
            return inner
        self._rebuild = True
        return dict(inner)

    def _begin_new(self) -> Any:
        if self._info.container is types.MappingProxyType:
            self._rebuild = True
            return {}
        return self._zero(self._info, inner=True)

    def _build(self, target: Any) -> Any:
        if not self._rebuild:
            return target
        if self._info.container is types.MappingProxyType:
            return types.MappingProxyType(target)
        assert self._info.container is not None
        return self._info.container(target)

    def _element_info(self, value: Any) -> TypeInfo:
        element = describe(self._info.value_type)
        if element.is_any and not self._config.has(CopyFlags.DISABLE_MAPOFINTERFACE_TARGET_RECURSION):
            resolved = deref(value)
            shape = shape_of(resolved) if resolved is not None else None
            # Tuples are fixed-size values and stay opaque
            if shape is not None and shape.has_fields and not isinstance(resolved, tuple):
                return describe(self._info.inner)
        return element

    def set_field(self, identifier: Any, value: Any) -> None:
        key = self._convert(identifier, self._info.key_type)
        target = self._ensure()

        element = self._element_info(value)
        current = target.get(key, ABSENT)
        if current is not ABSENT and not conforms(current, element):
            # Entry of another type is replaced, not reused
            current = ABSENT

        target[key] = self._copier.copy_value(value, element, current, slot=True)


class SequenceCreator(Creator):
    """Builds lists and tuples.

    Writing past the end grows a sequence with zero-valued elements, so sparse
    index-keyed sources produce gap-filled results. Tuples are staged as lists
    and rebuilt at finalize; fixed-length tuples never grow.
    """

    def __init__(self, copier: Copier, info: TypeInfo) -> None:
        super().__init__(copier, info)
        self._rebuild = False

    def _begin(self, inner: Any) -> Any:
        if isinstance(inner, MutableSequence):
            return inner
        self._rebuild = True
        return list(inner)

    def _begin_new(self) -> Any:
        zero = self._zero(self._info, inner=True)
        if isinstance(zero, MutableSequence):
            return zero
        self._rebuild = True
        return list(zero)

    def _build(self, target: Any) -> Any:
        if not self._rebuild:
            return target
        assert self._info.container is not None
        return self._info.container(target)

    def set_field(self, identifier: Any, value: Any) -> None:
        index = self._convert(identifier, int)
        fixed_length = self._info.fixed_length
        if index < 0:
            raise SequenceIndexError(f"negative sequence index {index}", self._ctx)
        if fixed_length is not None and index >= fixed_length:
            raise SequenceIndexError(
                f"index {index} out of range for {self._info.describe_name()}", self._ctx
            )

        target = self._ensure()
        while len(target) <= index:
            target.append(self._zero(describe(self._info.item_type(len(target)))))

        element = describe(self._info.item_type(index))
        target[index] = self._copier.copy_value(value, element, target[index], slot=True)


class ScalarCreator(Creator):
    """Builds leaf values through the primitive converter.

    Scalars are immutable, so a scalar destination is only ever written through
    its parent slot or a reference cell.
    """

    def _begin(self, inner: Any) -> Any:
        return inner

    def _begin_new(self) -> Any:
        return self._zero(self._info, inner=True)

    def _mutable(self, inner: Any) -> bool:
        # bytearray is a MutableSequence, but scalars are always replaced
        return False

    def _build(self, target: Any) -> Any:
        return target

    def _may_duplicate(self) -> bool:
        return super()._may_duplicate() and not self._config.has(
            CopyFlags.DENY_DUPLICATING_PRIMITIVE_IF_NOT_SETTABLE
        )

    def _not_settable(self) -> NotSettableError:
        return NotSettableError(
            "The primitive value is not settable", self._ctx, NotSettableReason.PRIMITIVE
        )

    def _store(self, value: Any) -> None:
        self._ensure()
        self._target = value

    def try_set_whole_value(self, source: Any) -> bool:
        """Assign opaque-any destinations and exact-type sources directly."""
        if self._info.is_any:
            self._store(copy.deepcopy(source))
            return True
        resolved = deref(source)
        if self._info.container is not None and type(resolved) is self._info.container:
            # bytearray is the one mutable scalar; it must not be shared
            self._store(bytearray(resolved) if isinstance(resolved, bytearray) else resolved)
            return True
        return False

    def set_field(self, identifier: Any, value: Any) -> None:
        if identifier is not ABSENT:
            raise UnsupportedShapeError(
                f"cannot set field {identifier!r} on scalar {self._info.describe_name()}", self._ctx
            )
        self._store(self._convert(deref(value), self._info.inner))

    def clear(self) -> None:
        if (
            self._config.has(CopyFlags.OVERWRITE_EXISTING)
            and isinstance(self._seed, Ref)
            and not self._slot
        ):
            raise NotSettableError(
                "The primitive value is not settable, and the source value is None",
                self._ctx,
                NotSettableReason.SOURCE_NONE,
            )


_CREATORS: dict[Shape, type[Creator]] = {
    Shape.STRUCT: StructCreator,
    Shape.MAPPING: MappingCreator,
    Shape.SEQUENCE: SequenceCreator,
    Shape.SCALAR: ScalarCreator,
}


def get_creator(copier: Copier, info: TypeInfo) -> Creator:
    """Creator for a destination type.

    Raises:
        UnsupportedShapeError: If the destination is not a struct, mapping,
            sequence or scalar type.
    """
    if info.shape is None:
        raise UnsupportedShapeError(f"unsupported destination type: {info.describe_name()}", copier.ctx)
    return _CREATORS[info.shape](copier, info)
