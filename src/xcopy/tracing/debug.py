"""Logging-backed trace callback.

Usage:
    import logging

    logging.basicConfig(level=logging.DEBUG)
    config = CopyConfig(callback=LoggingCallback())
    copy_to_new(source, Person, config=config)
"""

from __future__ import annotations

import logging as _logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from xcopy.core.context import Context
    from xcopy.core.shape import TypeInfo
    from xcopy.engine.creator import Creator

_logger = _logging.getLogger(__name__)


class LoggingCallback:
    """CopyCallback writing one indented record per copy step.

    Nesting is tracked across begin/end and push/pop pairs, so the log reads
    as a tree of the copy.

    Args:
        logger_name: Logger to write to (default: this module's logger).
        level: Logging level of the records.
        indent: String repeated once per nesting level.
    """

    def __init__(
        self,
        logger_name: str | None = None,
        level: int = _logging.DEBUG,
        indent: str = "  ",
    ) -> None:
        self._logger = _logging.getLogger(logger_name) if logger_name else _logger
        self._level = level
        self._indent = indent
        self._depth = 0

    @property
    def depth(self) -> int:
        """Current nesting level (0 when no copy is in progress)."""
        return self._depth

    def _log(self, marker: str, label: str, ctx: Context) -> None:
        if self._logger.isEnabledFor(self._level):
            self._logger.log(
                self._level, "%s%s %s -> [%s]", self._indent * self._depth, marker, label, ctx.path()
            )

    def begin_new(self, ctx: Context, source: Any, dest: TypeInfo) -> None:
        self._log(">>> BEGIN NEW:", dest.describe_name(), ctx)
        self._depth += 1

    def end_new(self, ctx: Context, source: Any, dest: TypeInfo) -> None:
        self._depth = max(self._depth - 1, 0)
        self._log("<<< END NEW:", dest.describe_name(), ctx)

    def push_field(self, ctx: Context, field: Any, source: Any, creator: Creator) -> None:
        self._log("+++ PUSH FIELD:", str(field), ctx)
        self._depth += 1

    def pop_field(self, ctx: Context, field: Any, source: Any, creator: Creator) -> None:
        self._depth = max(self._depth - 1, 0)
        self._log("--- POP FIELD:", str(field), ctx)

    def before_set_value(self, ctx: Context, source: Any, creator: Creator, existing: Any) -> None:
        pass

    def after_set_value(self, ctx: Context, source: Any, creator: Creator, existing: Any) -> None:
        self._log("=== SET VALUE:", creator.type_info.describe_name(), ctx)
