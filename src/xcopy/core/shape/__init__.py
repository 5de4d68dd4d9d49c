"""Shape classification and capability-based type description."""

from xcopy.core.shape.models import FieldInfo, Layer, Shape, TypeInfo
from xcopy.core.shape.operations import (
    SCALAR_TYPES,
    conforms,
    deref,
    describe,
    is_frozen,
    is_mutable,
    is_struct,
    is_struct_class,
    shape_of,
    struct_fields,
    tagged_name,
    type_of,
    unwrap_layers,
    zero_inner,
    zero_instance,
    zero_value,
)

__all__ = [
    # Models
    "Shape",
    "Layer",
    "TypeInfo",
    "FieldInfo",
    # Operations
    "SCALAR_TYPES",
    "describe",
    "deref",
    "shape_of",
    "type_of",
    "conforms",
    "is_struct",
    "is_struct_class",
    "is_frozen",
    "is_mutable",
    "struct_fields",
    "tagged_name",
    "unwrap_layers",
    "zero_value",
    "zero_inner",
    "zero_instance",
]
