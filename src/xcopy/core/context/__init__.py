"""Field-path context used for error locations and field-map lookups."""

from xcopy.core.context.models import (
    Context,
    FieldPath,
    PathSegment,
    format_path,
    segment_to_string,
)

__all__ = [
    "Context",
    "FieldPath",
    "PathSegment",
    "format_path",
    "segment_to_string",
]
