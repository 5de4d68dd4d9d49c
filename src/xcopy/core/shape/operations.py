"""Pure functions for shape classification and type description.

These functions are the only place that inspects Python types at runtime.
Everything else in xcopy works against `TypeInfo` and `Shape`.
"""

from __future__ import annotations

import dataclasses
import datetime
import functools
import inspect
import types
import uuid
from collections.abc import Mapping, MutableMapping, MutableSequence, Sequence
from decimal import Decimal
from enum import Enum
from fractions import Fraction
from pathlib import PurePath
from typing import (
    Annotated,
    Any,
    Literal,
    NewType,
    TypeVar,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

from pydantic import BaseModel

from xcopy.core.shape.models import FieldInfo, Layer, Shape, TypeInfo
from xcopy.core.types import Ref

SCALAR_TYPES: tuple[type, ...] = (
    bool,
    int,
    float,
    complex,
    str,
    bytes,
    bytearray,
    Decimal,
    Fraction,
    Enum,
    datetime.date,
    datetime.time,
    datetime.timedelta,
    uuid.UUID,
    PurePath,
)
"""Classes whose instances are copied as leaf values."""

_TEXT_TYPES = (str, bytes, bytearray)
_CONSTRUCTIBLE_ZERO = (bool, int, float, complex, str, bytes, bytearray, Decimal, Fraction)
_ABSTRACT_MAPPINGS = (Mapping, MutableMapping)
_ABSTRACT_SEQUENCES = (Sequence, MutableSequence)


# Struct introspection


def is_struct_class(cls: Any) -> bool:
    """Check if a class is a dataclass or a pydantic model."""
    if not isinstance(cls, type):
        return False
    return dataclasses.is_dataclass(cls) or issubclass(cls, BaseModel)


def is_struct(value: Any) -> bool:
    """Check if a value is a dataclass instance or a pydantic model instance."""
    return is_struct_class(type(value))


def is_frozen(cls: type) -> bool:
    """Check if instances of a struct class reject attribute assignment."""
    if dataclasses.is_dataclass(cls):
        return bool(cls.__dataclass_params__.frozen)  # type: ignore[attr-defined]
    if issubclass(cls, BaseModel):
        return bool(cls.model_config.get("frozen", False))
    return False


@functools.cache
def struct_fields(cls: type) -> tuple[FieldInfo, ...]:
    """Enumerate the named members of a struct class in declaration order.

    Args:
        cls: Dataclass or pydantic model class.

    Returns:
        One FieldInfo per field, with resolved annotations where possible.
    """
    if issubclass(cls, BaseModel):
        result = []
        for name, info in cls.model_fields.items():
            extra = info.json_schema_extra if isinstance(info.json_schema_extra, dict) else {}
            result.append(FieldInfo(name=name, annotation=info.annotation, metadata=extra))
        return tuple(result)

    try:
        hints = get_type_hints(cls, include_extras=True)
    except (NameError, TypeError):
        # Unresolvable forward references: fall back to the raw annotations
        hints = {}
    result = []
    for f in dataclasses.fields(cls):
        annotation = hints.get(f.name, f.type)
        if isinstance(annotation, str):
            annotation = Any
        result.append(FieldInfo(name=f.name, annotation=annotation, metadata=f.metadata))
    return tuple(result)


def tagged_name(field: FieldInfo, tag_name: str) -> str:
    """Resolve the name a field is copied under.

    The tag value is comma-separated; its first segment is either `-` (exclude
    the field, returned as an empty name) or a replacement name. An empty first
    segment keeps the field name.

    Args:
        field: Struct member to resolve.
        tag_name: Metadata key holding the tag directive.

    Returns:
        Effective field name, or "" if the field is excluded.
    """
    tag = field.metadata.get(tag_name) if tag_name else None
    if tag:
        first = str(tag).split(",")[0].strip()
        if first == "-":
            return ""
        if first:
            return first
    return field.name


# Destination type description


def describe(annotation: Any) -> TypeInfo:
    """Describe a destination type annotation.

    Args:
        annotation: Any type annotation (class, generic alias, union, `Ref[...]`).

    Returns:
        TypeInfo for the annotation. Its shape is None if unsupported.
    """
    try:
        return _describe_cached(annotation)
    except TypeError:
        # Unhashable annotation (e.g. Annotated with list metadata)
        return _describe(annotation)


@functools.lru_cache(maxsize=1024)
def _describe_cached(annotation: Any) -> TypeInfo:
    return _describe(annotation)


def _describe(annotation: Any) -> TypeInfo:
    layers: list[Layer] = []
    current = annotation
    while True:
        origin = get_origin(current)
        if origin is Annotated:
            current = get_args(current)[0]
        elif current is Ref or origin is Ref:
            layers.append(Layer.REF)
            args = get_args(current)
            current = args[0] if args else Any
        elif origin is Union or origin is types.UnionType:
            args = get_args(current)
            present = tuple(a for a in args if a is not type(None))
            if len(present) == len(args):
                break
            if not layers or layers[-1] is not Layer.OPTIONAL:
                layers.append(Layer.OPTIONAL)
            current = present[0] if len(present) == 1 else Union[present]  # noqa: UP007
        else:
            break

    fields = _describe_inner(current)
    return TypeInfo(annotation=annotation, layers=tuple(layers), inner=current, **fields)


def _describe_inner(inner: Any) -> dict[str, Any]:
    if inner is Any or inner is object or isinstance(inner, TypeVar):
        return {"shape": Shape.SCALAR}
    if isinstance(inner, NewType):
        described = _describe_inner(inner.__supertype__)
        return described

    origin = get_origin(inner)
    args = get_args(inner)

    if origin is Literal:
        return {"shape": Shape.SCALAR}
    if origin is Union or origin is types.UnionType:
        if all(_describe(arg).shape is Shape.SCALAR for arg in args):
            return {"shape": Shape.SCALAR}
        return {"shape": None}

    cls = origin if origin is not None else inner
    if not isinstance(cls, type):
        return {"shape": None}

    if is_struct_class(cls):
        return {"shape": Shape.STRUCT, "origin": cls, "container": cls}

    if issubclass(cls, _TEXT_TYPES):
        return {"shape": Shape.SCALAR, "origin": cls, "container": cls}

    if cls is types.MappingProxyType or issubclass(cls, Mapping):
        container = dict if cls in _ABSTRACT_MAPPINGS else cls
        key_type, value_type = args if len(args) == 2 else (Any, Any)
        return {
            "shape": Shape.MAPPING,
            "origin": cls,
            "container": container,
            "key_type": key_type,
            "value_type": value_type,
        }

    if issubclass(cls, tuple):
        if not args:
            return {"shape": Shape.SEQUENCE, "origin": cls, "container": tuple}
        if len(args) == 2 and args[1] is Ellipsis:
            return {
                "shape": Shape.SEQUENCE,
                "origin": cls,
                "container": tuple,
                "item_types": (args[0],),
            }
        return {
            "shape": Shape.SEQUENCE,
            "origin": cls,
            "container": tuple,
            "item_types": tuple(args),
            "fixed_length": len(args),
        }

    if issubclass(cls, Sequence) and cls is not range:
        container = list if cls in _ABSTRACT_SEQUENCES else cls
        return {
            "shape": Shape.SEQUENCE,
            "origin": cls,
            "container": container,
            "item_types": (args[0] if args else Any,),
        }

    if issubclass(cls, SCALAR_TYPES):
        return {"shape": Shape.SCALAR, "origin": cls, "container": cls}

    return {"shape": None, "origin": cls}


# Value classification


def deref(value: Any) -> Any:
    """Resolve a value through any number of reference cells.

    Returns:
        The innermost value, None if the chain is absent.
    """
    while isinstance(value, Ref):
        value = value.value
    return value


def shape_of(value: Any) -> Shape | None:
    """Classify a resolved (non-None, non-Ref) value.

    Returns:
        The value's Shape, or None if it is not a supported value.
    """
    if is_struct(value):
        return Shape.STRUCT
    if isinstance(value, _TEXT_TYPES):
        return Shape.SCALAR
    if isinstance(value, Mapping):
        return Shape.MAPPING
    if isinstance(value, Sequence):
        return Shape.SEQUENCE
    if isinstance(value, SCALAR_TYPES):
        return Shape.SCALAR
    return None


def type_of(value: Any) -> Any:
    """Derive a destination annotation from an existing value.

    Args:
        value: Existing value, possibly wrapped in reference cells.

    Returns:
        Annotation whose description the value conforms to.
    """
    if value is None:
        return Any
    if isinstance(value, Ref):
        if value.value is None:
            return Ref[Any]
        return Ref[type_of(value.value)]  # type: ignore[misc]
    return type(value)


def is_mutable(value: Any) -> bool:
    """Whether a concrete value can be updated in place."""
    if isinstance(value, Ref):
        return True
    if is_struct(value):
        return not is_frozen(type(value))
    return isinstance(value, (MutableMapping, MutableSequence))


def unwrap_layers(value: Any, layers: tuple[Layer, ...]) -> Any:
    """Walk a value through the reference layers of a description.

    Returns:
        The concrete inner value, None if any layer is absent.
    """
    for layer in layers:
        if value is None:
            return None
        if layer is Layer.REF:
            value = value.value
    return value


def conforms(value: Any, info: TypeInfo) -> bool:
    """Check that an existing value matches a destination type exactly.

    Struct and concrete container classes must match exactly; abstract
    annotations (`Mapping`, `Sequence`) accept any instance. Scalars follow
    the numeric tower, so an int conforms to float and complex.
    """
    return _conforms(value, info.layers, info)


def _conforms(value: Any, layers: tuple[Layer, ...], info: TypeInfo) -> bool:
    if layers:
        if value is None:
            return True
        if layers[0] is Layer.REF:
            if not isinstance(value, Ref):
                return False
            return value.value is None or _conforms(value.value, layers[1:], info)
        return _conforms(value, layers[1:], info)

    if info.is_any:
        return True
    if value is None or isinstance(value, Ref):
        return False

    if info.shape is Shape.SCALAR:
        if info.container is None:
            return shape_of(value) is Shape.SCALAR
        if type(value) is info.container:
            return True
        if info.container is float:
            return type(value) is int
        if info.container is complex:
            return type(value) in (int, float)
        return False

    if info.origin is not None and info.is_abstract:
        matches = isinstance(value, info.origin)
    else:
        matches = type(value) is info.origin
    if matches and info.fixed_length is not None:
        return len(value) == info.fixed_length
    return matches


# Zero values


def zero_value(info: TypeInfo) -> Any:
    """Zero value of a described type.

    Indirection is absent (None); containers are empty; structs are built from
    their declared defaults, with zero values for required fields.
    """
    if info.layers:
        return None
    return zero_inner(info)


def zero_inner(info: TypeInfo) -> Any:
    """Zero value of the inner (indirection-free) type of a description."""
    match info.shape:
        case Shape.STRUCT:
            assert info.container is not None
            return zero_instance(info.container)
        case Shape.MAPPING:
            if info.container is types.MappingProxyType:
                return types.MappingProxyType({})
            assert info.container is not None
            return info.container()
        case Shape.SEQUENCE:
            if info.fixed_length is not None:
                return tuple(zero_value(describe(t)) for t in info.item_types)
            assert info.container is not None
            return info.container()
        case Shape.SCALAR:
            return _zero_scalar(info)
    return None


def _zero_scalar(info: TypeInfo) -> Any:
    if get_origin(info.inner) is Literal:
        return get_args(info.inner)[0]
    cls = info.container
    if cls is None:
        return None
    if issubclass(cls, Enum):
        return next(iter(cls), None)  # type: ignore[call-overload]
    if issubclass(cls, _CONSTRUCTIBLE_ZERO):
        return cls()
    return None


def _init_var_types(cls: type) -> dict[str, Any]:
    """Inner annotations of a dataclass's init-only variables."""
    try:
        hints = get_type_hints(cls)
    except (NameError, TypeError):
        return {}
    return {name: hint.type for name, hint in hints.items() if isinstance(hint, dataclasses.InitVar)}


def zero_instance(cls: type) -> Any:
    """Build a struct instance from defaults, zero-filling required fields.

    Required init-only variables are passed zero values. Fields excluded from
    `__init__` that the constructor leaves unset are zero-filled afterwards.

    Raises:
        TypeError, ValueError: If the constructor rejects the zero values.
    """
    if issubclass(cls, BaseModel):
        required = {
            name: zero_value(describe(info.annotation))
            for name, info in cls.model_fields.items()
            if info.is_required()
        }
        return cls.model_construct(**required)

    annotations = {f.name: f.annotation for f in struct_fields(cls)}
    annotations.update(_init_var_types(cls))
    kwargs: dict[str, Any] = {}
    for name, param in inspect.signature(cls).parameters.items():
        if param.default is not inspect.Parameter.empty:
            continue
        if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
            continue
        annotation = annotations.get(name, Any)
        kwargs[name] = zero_value(describe(Any if isinstance(annotation, str) else annotation))
    instance = cls(**kwargs)

    for f in dataclasses.fields(cls):
        if not f.init and not hasattr(instance, f.name):
            object.__setattr__(instance, f.name, zero_value(describe(annotations[f.name])))
    return instance
