"""Adapter protocols for external integrations.

Defines the interface of the primitive converter, the collaborator that
coerces leaf values between types.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Converter(Protocol):
    """Protocol for scalar type coercion.

    Implementations convert leaf values (strings, numbers, booleans, enums,
    dates) to a target annotation, and render values as strings for field
    names and paths. Failures are reported as `ValueError` or `TypeError`;
    the copy engine wraps them into `ConversionError` with the field path.

    Usage:
        converter: Converter = PydanticConverter()
        converter.convert("777", int)  # 777
        converter.to_string(3)  # "3"
    """

    def convert(self, value: Any, target: Any) -> Any:
        """Coerce a value to a target annotation.

        Args:
            value: Leaf value to convert.
            target: Destination annotation (class, Literal, union of scalars, Any).

        Returns:
            The converted value.

        Raises:
            ValueError: If the value cannot represent the target type.
            TypeError: If the target type is not convertible.
        """
        ...

    def to_string(self, value: Any) -> str:
        """Render a value as a string.

        Args:
            value: Value to render.

        Returns:
            String form used for field names and keys.
        """
        ...
