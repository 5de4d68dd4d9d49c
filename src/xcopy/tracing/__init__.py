"""Tracing infrastructure for observing copy operations.

Usage:
    from xcopy.tracing import CopyCallback, LoggingCallback

    config = CopyConfig(callback=LoggingCallback())
"""

from xcopy.tracing.debug import LoggingCallback
from xcopy.tracing.protocol import CopyCallback

__all__ = [
    "CopyCallback",
    "LoggingCallback",
]
