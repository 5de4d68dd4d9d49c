"""Core building blocks: shape description, reference cells and the field-path context.

Architecture Note:
    core/ holds stateless classification and path helpers with no knowledge
    of copy policy. The copy engine and its creators live in engine/.
"""

from xcopy.core.context import Context, FieldPath, PathSegment, format_path
from xcopy.core.shape import (
    FieldInfo,
    Layer,
    Shape,
    TypeInfo,
    conforms,
    deref,
    describe,
    shape_of,
    type_of,
    zero_value,
)
from xcopy.core.types import ABSENT, Ref

__all__ = [
    # Types
    "Ref",
    "ABSENT",
    # Shape
    "Shape",
    "Layer",
    "TypeInfo",
    "FieldInfo",
    "describe",
    "deref",
    "shape_of",
    "type_of",
    "conforms",
    "zero_value",
    # Context
    "Context",
    "FieldPath",
    "PathSegment",
    "format_path",
]
