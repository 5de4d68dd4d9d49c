"""Configuration module.

Provides the immutable CopyConfig and its environment-driven loader.

Usage:
    from xcopy.config import CopyConfig, CopyFlags, CopySettings

    config = CopyConfig(flags=CopyFlags.OVERWRITE_EXISTING)
    config = CopySettings().to_config()
"""

from xcopy.config.models import (
    DEFAULT_TAG_NAME,
    ConverterConfig,
    CopyConfig,
    CopyFlags,
    FieldMap,
    FieldMapEntry,
)
from xcopy.config.settings import CopySettings

__all__ = [
    "DEFAULT_TAG_NAME",
    "CopyFlags",
    "CopyConfig",
    "ConverterConfig",
    "FieldMap",
    "FieldMapEntry",
    "CopySettings",
]
