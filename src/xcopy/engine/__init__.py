"""Copy engine: creators, dispatcher, merge and module-level operations."""

from xcopy.engine.api import copy, copy_to_existing, copy_to_new, copy_using_existing, merge_to_new
from xcopy.engine.copier import Copier
from xcopy.engine.creator import (
    Creator,
    MappingCreator,
    ScalarCreator,
    SequenceCreator,
    StructCreator,
    get_creator,
)
from xcopy.engine.errors import (
    ConversionError,
    CopyError,
    CyclicStructureError,
    FieldMissingError,
    MergeArityError,
    NotSettableError,
    NotSettableReason,
    SequenceIndexError,
    TypeMismatchError,
    UnsupportedShapeError,
)
from xcopy.engine.merge import merge_into

__all__ = [
    # Operations
    "copy",
    "copy_to_new",
    "copy_using_existing",
    "copy_to_existing",
    "merge_to_new",
    "merge_into",
    # Engine
    "Copier",
    "Creator",
    "StructCreator",
    "MappingCreator",
    "SequenceCreator",
    "ScalarCreator",
    "get_creator",
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
