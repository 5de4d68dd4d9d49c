"""Primitive converter backed by pydantic TypeAdapter.

Usage:
    converter = PydanticConverter()
    converter.convert("3", int)  # 3
    converter.convert(99, str)  # "99"

    strict = PydanticConverter(ConverterConfig(strict=True))
    strict.convert("3", int)  # raises pydantic.ValidationError
"""

from __future__ import annotations

import functools
from enum import Enum
from typing import Any

from pydantic import ConfigDict, TypeAdapter

from xcopy.config.models import ConverterConfig


@functools.lru_cache(maxsize=256)
def _cached_adapter(target: Any, strict: bool) -> TypeAdapter[Any]:
    return TypeAdapter(target, config=ConfigDict(strict=strict))


def _adapter(target: Any, strict: bool) -> TypeAdapter[Any]:
    try:
        return _cached_adapter(target, strict)
    except TypeError:
        # Unhashable target annotation
        return TypeAdapter(target, config=ConfigDict(strict=strict))


class PydanticConverter:
    """Converter implementing the Converter protocol with pydantic validation.

    Values already of the exact target class pass through untouched, string
    targets are rendered with `to_string`, and everything else is validated by
    a cached `TypeAdapter`. In strict mode pydantic's strict validation applies
    and strings are only accepted from strings.

    Args:
        config: Conversion settings (default: lax conversion).
    """

    def __init__(self, config: ConverterConfig | None = None) -> None:
        self._config = config or ConverterConfig()

    @property
    def config(self) -> ConverterConfig:
        return self._config

    def convert(self, value: Any, target: Any) -> Any:
        """Coerce a value to a target annotation.

        Args:
            value: Leaf value to convert.
            target: Destination annotation.

        Returns:
            The converted value.

        Raises:
            pydantic.ValidationError: If validation fails (a ValueError).
            TypeError: If pydantic cannot build a validator for the target.
        """
        if target is Any or target is object:
            return value
        if isinstance(target, type) and type(value) is target:
            return value
        if target is str and not self._config.strict:
            return self.to_string(value)

        if isinstance(value, Enum) and not (isinstance(target, type) and isinstance(value, target)):
            # Enums cross over by value
            value = value.value
        return _adapter(target, self._config.strict).validate_python(value)

    def to_string(self, value: Any) -> str:
        """Render a value as a string.

        Enums render their value, bytes are decoded as UTF-8, anything else
        uses `str()`.
        """
        if isinstance(value, str) and not isinstance(value, Enum):
            return value
        if isinstance(value, Enum):
            return self.to_string(value.value)
        if isinstance(value, (bytes, bytearray)):
            return bytes(value).decode(self._config.encoding)
        return str(value)
