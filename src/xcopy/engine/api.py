"""Module-level copy operations.

Each call builds its own Copier, so these functions are safe to call from
several threads sharing one CopyConfig.

Usage:
    from xcopy import copy_to_new, copy_to_existing, merge_to_new

    person = copy_to_new({"name": "Ada", "age": "36"}, Person)
    copy_to_existing({"age": 37}, person)
    settings = merge_to_new(dict[str, str], defaults, overrides)
"""

from __future__ import annotations

from typing import Any

from xcopy.config.models import CopyConfig
from xcopy.engine.copier import Copier


def copy_to_new(source: Any, dest_type: Any, *, config: CopyConfig | None = None) -> Any:
    """Copy `source` into a brand-new value of `dest_type`.

    Args:
        source: Struct, mapping, sequence or scalar, possibly behind `Ref` cells.
        dest_type: Destination annotation, e.g. `Person`, `dict[str, Any]`,
            `list[int] | None` or `Ref[Person]`.
        config: Copy configuration (default: CopyConfig()).

    Returns:
        The new destination value.

    Raises:
        CopyError: Any subclass, carrying the field path of the failure.
    """
    return Copier(config).copy_to_new(source, dest_type)


def copy_using_existing(
    source: Any,
    existing: Any,
    *,
    dest_type: Any = None,
    config: CopyConfig | None = None,
) -> Any:
    """Copy `source` onto a value seeded from `existing`.

    Without OVERWRITE_EXISTING in `config`, `existing` is left untouched and
    the result is built on a deep duplicate of it.

    Args:
        source: Value to copy.
        existing: Seed value; must be exactly of the destination type.
        dest_type: Destination annotation (default: derived from `existing`).
        config: Copy configuration (default: CopyConfig()).

    Returns:
        The resulting destination value.
    """
    return Copier(config).copy_using_existing(source, existing, dest_type)


def copy_to_existing(
    source: Any,
    existing: Any,
    *,
    dest_type: Any = None,
    config: CopyConfig | None = None,
) -> None:
    """Copy `source` into `existing` in place.

    OVERWRITE_EXISTING is forced on a duplicate of `config`; the caller's
    config is never changed. `existing` must be mutable: a non-frozen
    dataclass or model, a dict, a list, or a `Ref` cell.
    """
    Copier(config).copy_to_existing(source, existing, dest_type)


copy = copy_to_existing
"""Alias of copy_to_existing."""


def merge_to_new(dest_type: Any, *sources: Any, config: CopyConfig | None = None) -> Any:
    """Merge sources into a new value of `dest_type`; later sources win.

    Raises:
        MergeArityError: If no source is given.
    """
    return Copier(config).merge_to_new(dest_type, *sources)
