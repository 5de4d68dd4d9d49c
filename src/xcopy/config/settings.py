"""Configuration settings using Pydantic Settings.

Provides environment-driven defaults for copy configuration.

Usage:
    from xcopy.config import CopySettings

    # Load from environment variables (XCOPY_*)
    settings = CopySettings()
    config = settings.to_config()

    # Or override with explicit values
    settings = CopySettings(flags=["OVERWRITE_EXISTING"], strict_conversion=True)
"""

from __future__ import annotations

from collections.abc import Mapping

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from xcopy.config.models import DEFAULT_TAG_NAME, ConverterConfig, CopyConfig, CopyFlags, FieldMapEntry


class CopySettings(BaseSettings):  # type: ignore[misc]
    """Environment configuration for copy operations.

    Attributes:
        flags: Names of CopyFlags members to enable.
        tag_name: Metadata key read for struct-tag directives.
        strict_conversion: Use strict primitive conversion.
        trace: Install a LoggingCallback tracing every copy step.
        trace_logger: Logger name used by the tracing callback.

    Environment Variables:
        XCOPY_FLAGS (JSON list, e.g. '["OVERWRITE_EXISTING"]')
        XCOPY_TAG_NAME
        XCOPY_STRICT_CONVERSION
        XCOPY_TRACE
        XCOPY_TRACE_LOGGER
    """

    model_config = SettingsConfigDict(
        env_prefix="XCOPY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    flags: list[str] = []
    tag_name: str = DEFAULT_TAG_NAME
    strict_conversion: bool = False
    trace: bool = False
    trace_logger: str = "xcopy.trace"

    @field_validator("flags")
    @classmethod
    def _known_flags(cls, value: list[str]) -> list[str]:
        names = [name.strip().upper() for name in value if name.strip()]
        unknown = [name for name in names if name not in CopyFlags.__members__]
        if unknown:
            raise ValueError(f"Unknown copy flags: {', '.join(unknown)}")
        return names

    def copy_flags(self) -> CopyFlags:
        """Combine the configured flag names into a CopyFlags value."""
        result = CopyFlags.NONE
        for name in self.flags:
            result |= CopyFlags[name]
        return result

    def to_config(self, field_map: Mapping[str, FieldMapEntry | str | None] | None = None) -> CopyConfig:
        """Build an immutable CopyConfig from these settings.

        Args:
            field_map: Optional field map to attach.

        Returns:
            CopyConfig reflecting the settings.
        """
        callback = None
        if self.trace:
            from xcopy.tracing.debug import LoggingCallback

            callback = LoggingCallback(logger_name=self.trace_logger)

        return CopyConfig(
            flags=self.copy_flags(),
            tag_name=self.tag_name,
            field_map=field_map or {},
            converter=ConverterConfig(strict=self.strict_conversion),
            callback=callback,
        )
