"""Shape models: structural classification of values and destination types.

A destination annotation is described once into a `TypeInfo`, which exposes
everything the copy engine needs: the shape, the indirection layers wrapped
around it, and the member types of containers.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any


class Shape(Enum):
    """Structural classification used to select a copy strategy."""

    STRUCT = auto()  # Dataclass or pydantic model: named fields
    MAPPING = auto()  # Key -> value, keys unique
    SEQUENCE = auto()  # Ordered, index-addressed
    SCALAR = auto()  # Leaf value, converted by the primitive converter

    @property
    def has_fields(self) -> bool:
        """Whether values of this shape are built from sub-fields."""
        return self is not Shape.SCALAR


class Layer(Enum):
    """Kind of indirection wrapped around a destination type."""

    OPTIONAL = auto()
    """`T | None`: the value itself may be None."""

    REF = auto()
    """`Ref[T]`: a mutable reference cell that can be written through."""


@dataclass(slots=True, frozen=True)
class TypeInfo:
    """Capability descriptor for a destination type annotation.

    Attributes:
        annotation: The annotation as given by the caller.
        shape: Shape of the innermost type, None if unsupported.
        layers: Indirection chain, outermost first.
        inner: The annotation with all indirection removed.
        origin: Declared class of the inner type (e.g. `Mapping`, `list`, a dataclass).
        container: Concrete class built for the inner type (e.g. `dict` for `Mapping`).
        key_type: Mapping key annotation.
        value_type: Mapping value annotation.
        item_types: Sequence element annotations, one per position if fixed-length.
        fixed_length: Number of positions of a fixed-length tuple, None if growable.
    """

    annotation: Any
    shape: Shape | None
    layers: tuple[Layer, ...] = ()
    inner: Any = Any
    origin: type | None = None
    container: type | None = None
    key_type: Any = Any
    value_type: Any = Any
    item_types: tuple[Any, ...] = (Any,)
    fixed_length: int | None = None

    @property
    def is_any(self) -> bool:
        """True for the opaque-any destination (`Any` / `object`)."""
        return self.shape is Shape.SCALAR and self.inner in (Any, object)

    @property
    def is_abstract(self) -> bool:
        """Whether existing values are matched by isinstance rather than exact class."""
        return self.origin is not None and self.origin is not self.container

    def item_type(self, index: int) -> Any:
        """Element annotation for a sequence position."""
        if self.fixed_length is None:
            return self.item_types[0]
        return self.item_types[index]

    def describe_name(self) -> str:
        """Human-readable name for error messages."""
        if isinstance(self.annotation, type):
            return self.annotation.__name__
        return repr(self.annotation).replace("typing.", "")


@dataclass(slots=True, frozen=True)
class FieldInfo:
    """A named member of a struct type."""

    name: str
    annotation: Any
    metadata: Mapping[str, Any] = field(default_factory=dict)

    @property
    def is_public(self) -> bool:
        return not self.name.startswith("_")
