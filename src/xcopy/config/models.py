"""Copy configuration models.

`CopyConfig` is immutable: builder-style methods return a new config, so a
single instance can be shared between callers and threads.

Usage:
    config = (
        CopyConfig()
        .add_flags(CopyFlags.ERROR_IF_STRUCT_FIELD_MISSING)
        .with_field_map({"XValue2": "Value2"})
    )
    person = copy_to_new(raw, Person, config=config)
"""

from __future__ import annotations

import dataclasses
import warnings
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Flag
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from xcopy.tracing.protocol import CopyCallback


DEFAULT_TAG_NAME = "xcopy"
"""Default metadata key for struct-tag directives."""


class CopyFlags(Flag):
    """Behavior flags, independently combinable."""

    NONE = 0

    OVERWRITE_EXISTING = 1
    """Mutate an existing destination in place instead of working on a duplicate."""

    ALLOW_DUPLICATING_IF_NOT_SETTABLE = 2
    """When overwriting, fall back to a duplicate if the destination cannot be written."""

    DENY_DUPLICATING_PRIMITIVE_IF_NOT_SETTABLE = 4
    """Exclude scalar leaves from the ALLOW_DUPLICATING_IF_NOT_SETTABLE fallback."""

    ERROR_IF_STRUCT_FIELD_MISSING = 8
    """Fail when a source struct field has no destination counterpart."""

    DISABLE_MAPOFINTERFACE_TARGET_RECURSION = 16
    """Do not widen `Any` mapping values to the mapping's own type."""


@dataclass(slots=True, frozen=True)
class FieldMapEntry:
    """Override for the target name of one field path.

    Attributes:
        fieldname: Replacement name; None leaves the name unchanged.
    """

    fieldname: str | None = None

    @classmethod
    def named(cls, fieldname: str) -> FieldMapEntry:
        """Entry renaming its path to `fieldname`."""
        return cls(fieldname=fieldname)


type FieldMap = Mapping[str, FieldMapEntry]
"""Dot-joined source field path -> override entry."""


@dataclass(slots=True, frozen=True)
class ConverterConfig:
    """Settings for the primitive converter.

    Attributes:
        strict: Use strict validation (no "3" -> 3 style coercion).
        encoding: Encoding used to render bytes as strings.
    """

    strict: bool = False
    encoding: str = "utf-8"


_DUPLICATION_FLAGS = CopyFlags.ALLOW_DUPLICATING_IF_NOT_SETTABLE | CopyFlags.DENY_DUPLICATING_PRIMITIVE_IF_NOT_SETTABLE


def _warn_ineffective_flags(previous: CopyFlags, flags: CopyFlags, stacklevel: int) -> None:
    """Warn when a change leaves DENY_DUPLICATING_PRIMITIVE_IF_NOT_SETTABLE without its ALLOW flag."""
    if not (previous ^ flags) & _DUPLICATION_FLAGS:
        return
    if (
        CopyFlags.DENY_DUPLICATING_PRIMITIVE_IF_NOT_SETTABLE in flags
        and CopyFlags.ALLOW_DUPLICATING_IF_NOT_SETTABLE not in flags
    ):
        warnings.warn(
            "DENY_DUPLICATING_PRIMITIVE_IF_NOT_SETTABLE has no effect "
            "without ALLOW_DUPLICATING_IF_NOT_SETTABLE.",
            stacklevel=stacklevel,
        )


def _normalize_field_map(field_map: Mapping[str, FieldMapEntry | str | None]) -> dict[str, FieldMapEntry]:
    normalized: dict[str, FieldMapEntry] = {}
    for path, entry in field_map.items():
        if isinstance(entry, FieldMapEntry):
            normalized[path] = entry
        elif entry is None or isinstance(entry, str):
            normalized[path] = FieldMapEntry(fieldname=entry)
        else:
            raise TypeError(f"Field map entry for {path!r} must be FieldMapEntry or str, got {type(entry)}")
    return normalized


@dataclass(slots=True, frozen=True)
class CopyConfig:
    """Immutable copy configuration.

    Attributes:
        flags: Behavior flags.
        tag_name: Metadata key read for per-field rename/skip directives.
        field_map: Dot-joined source path -> target name override. Plain
            strings are accepted and normalized to FieldMapEntry.
        converter: Primitive converter settings.
        callback: Optional trace callback; never affects results.
    """

    flags: CopyFlags = CopyFlags.NONE
    tag_name: str = DEFAULT_TAG_NAME
    field_map: FieldMap = field(default_factory=dict)
    converter: ConverterConfig = field(default_factory=ConverterConfig)
    callback: CopyCallback | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "field_map", _normalize_field_map(self.field_map))
        _warn_ineffective_flags(CopyFlags.NONE, self.flags, stacklevel=4)

    def _derive(self, **changes: Any) -> CopyConfig:
        # Skips __init__ so an inherited flag warning is not raised again
        derived = object.__new__(CopyConfig)
        for f in dataclasses.fields(self):
            object.__setattr__(derived, f.name, changes.get(f.name, getattr(self, f.name)))
        return derived

    def _with_flag_set(self, flags: CopyFlags) -> CopyConfig:
        _warn_ineffective_flags(self.flags, flags, stacklevel=4)
        return self._derive(flags=flags)

    def has(self, flag: CopyFlags) -> bool:
        """Check whether a flag is set."""
        return flag in self.flags

    def dup(self) -> CopyConfig:
        """Shallow duplicate with its own field map (entries shared by reference)."""
        return self._derive(field_map=dict(self.field_map))

    def with_flags(self, flags: CopyFlags) -> CopyConfig:
        """Config with the flag set replaced."""
        return self._with_flag_set(flags)

    def add_flags(self, flags: CopyFlags) -> CopyConfig:
        return self._with_flag_set(self.flags | flags)

    def remove_flags(self, flags: CopyFlags) -> CopyConfig:
        return self._with_flag_set(self.flags & ~flags)

    def with_tag_name(self, tag_name: str) -> CopyConfig:
        return self._derive(tag_name=tag_name)

    def with_field_map(self, field_map: Mapping[str, FieldMapEntry | str | None]) -> CopyConfig:
        """Config with the field map replaced."""
        return self._derive(field_map=_normalize_field_map(field_map))

    def with_converter(self, converter: ConverterConfig) -> CopyConfig:
        return self._derive(converter=converter)

    def with_callback(self, callback: CopyCallback | None) -> CopyConfig:
        return self._derive(callback=callback)

    def field_mapping(self, path: str) -> FieldMapEntry | None:
        """Field-map entry for a dot-joined path, None if not mapped."""
        return self.field_map.get(path)

    def mapped_name(self, path: str, default: Any) -> Any:
        """Target name for a path after applying the field map.

        Args:
            path: Dot-joined source path of the field.
            default: Name used when the path is unmapped or maps to None.

        Returns:
            The override name, or `default`.
        """
        entry = self.field_mapping(path)
        if entry is not None and entry.fieldname is not None:
            return entry.fieldname
        return default
