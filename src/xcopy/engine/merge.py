"""Merging several sources into one destination value."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from xcopy.core.shape import describe
from xcopy.core.types import Ref
from xcopy.engine.errors import MergeArityError

if TYPE_CHECKING:
    from xcopy.engine.copier import Copier


def merge_into(copier: Copier, dest_type: Any, sources: Sequence[Any]) -> Any:
    """Fold sources into a new value of `dest_type`, later sources winning.

    The first source is copied to a new value, which is then held in a
    reference cell so every later source can be written over it in place,
    whatever the destination type.

    Args:
        copier: Engine whose config drives the copy.
        dest_type: Destination annotation.
        sources: One or more source values.

    Returns:
        The merged value.

    Raises:
        MergeArityError: If `sources` is empty.
    """
    if not sources:
        raise MergeArityError("at least one source required", copier.ctx)

    holder = Ref(copier.copy_new(sources[0], describe(dest_type)))
    holder_info = describe(Ref[dest_type])  # type: ignore[valid-type]

    overwriting = copier.overwriting()
    for source in sources[1:]:
        overwriting.copy_value(source, holder_info, holder, slot=True)
    return holder.value
