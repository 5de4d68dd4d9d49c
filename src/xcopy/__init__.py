"""xcopy: recursive deep copy and type coercion between structs, mappings and sequences.

Usage:
    from dataclasses import dataclass, field
    from xcopy import copy_to_new, copy_to_existing

    @dataclass
    class Address:
        street: str = ""
        zip: int = 0

    @dataclass
    class Person:
        name: str = ""
        age: int = 0
        address: Address | None = None
        nickname: str = field(default="", metadata={"xcopy": "alias"})

    person = copy_to_new(
        {"name": "Ada", "age": "36", "address": {"zip": "12345"}, "alias": "countess"},
        Person,
    )
    copy_to_existing({"age": 37}, person)
"""

__version__ = "0.1.0"

# Configuration
from xcopy.config import (
    DEFAULT_TAG_NAME,
    ConverterConfig,
    CopyConfig,
    CopyFlags,
    CopySettings,
    FieldMap,
    FieldMapEntry,
)

# Core primitives
from xcopy.core import Ref, Shape, TypeInfo, describe, type_of

# Engine
from xcopy.engine import (
    ConversionError,
    Copier,
    CopyError,
    CyclicStructureError,
    FieldMissingError,
    MergeArityError,
    NotSettableError,
    NotSettableReason,
    SequenceIndexError,
    TypeMismatchError,
    UnsupportedShapeError,
    copy,
    copy_to_existing,
    copy_to_new,
    copy_using_existing,
    merge_to_new,
)

# Tracing (optional)
from xcopy.tracing import CopyCallback, LoggingCallback

__all__ = [
    # Version
    "__version__",
    # Operations
    "copy",
    "copy_to_new",
    "copy_using_existing",
    "copy_to_existing",
    "merge_to_new",
    "Copier",
    # Core
    "Ref",
    "Shape",
    "TypeInfo",
    "describe",
    "type_of",
    # Configuration
    "DEFAULT_TAG_NAME",
    "CopyConfig",
    "CopyFlags",
    "ConverterConfig",
    "FieldMap",
    "FieldMapEntry",
    "CopySettings",
    # Tracing
    "CopyCallback",
    "LoggingCallback",
    # Errors
    "CopyError",
    "UnsupportedShapeError",
    "TypeMismatchError",
    "NotSettableError",
    "NotSettableReason",
    "FieldMissingError",
    "ConversionError",
    "MergeArityError",
    "SequenceIndexError",
    "CyclicStructureError",
]
