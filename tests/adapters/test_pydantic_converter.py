"""Tests for the pydantic-backed primitive converter.

Why these tests exist:
- Every scalar leaf of a copy goes through the converter
- Failures must surface as ValueError/TypeError so the engine can wrap them
"""

import datetime
from enum import Enum, IntEnum
from typing import Any, Literal

import pytest
from pydantic import ValidationError

from xcopy.adapters import Converter, PydanticConverter
from xcopy.config import ConverterConfig


class Color(Enum):
    RED = "red"


class Priority(IntEnum):
    LOW = 1
    HIGH = 2


class Rank(IntEnum):
    FIRST = 1
    SECOND = 2


@pytest.fixture
def converter():
    return PydanticConverter()


@pytest.fixture
def strict_converter():
    return PydanticConverter(ConverterConfig(strict=True))


def test_implements_converter_protocol(converter) -> None:
    assert isinstance(converter, Converter)


@pytest.mark.parametrize(
    ("value", "target", "expected"),
    [
        ("3", int, 3),
        ("1.5", float, 1.5),
        (2, float, 2.0),
        ("yes", bool, True),
        (99, str, "99"),
        (11.5, str, "11.5"),
        ("2024-01-02", datetime.date, datetime.date(2024, 1, 2)),
        ("a", Literal["a", "b"], "a"),
        ("7", int | None, 7),
    ],
)
def test_lax_conversion(converter, value, target, expected) -> None:
    assert converter.convert(value, target) == expected


def test_identity_for_exact_type(converter) -> None:
    """Values already of the target class pass through untouched."""
    value = datetime.date(2024, 1, 2)
    assert converter.convert(value, datetime.date) is value


def test_any_target_is_identity(converter) -> None:
    marker = object()
    assert converter.convert(marker, Any) is marker
    assert converter.convert(marker, object) is marker


def test_enum_crosses_by_value(converter) -> None:
    """Distinct enum types with shared values convert member to member."""
    assert converter.convert(Priority.HIGH, Rank) is Rank.SECOND
    assert converter.convert(Priority.LOW, int) == 1


def test_enum_to_string_uses_value(converter) -> None:
    assert converter.convert(Color.RED, str) == "red"
    assert converter.to_string(Priority.HIGH) == "2"


def test_bytes_to_string(converter) -> None:
    assert converter.to_string(b"caf\xc3\xa9") == "café"


def test_invalid_value_raises_value_error(converter) -> None:
    """ValidationError is a ValueError, which the engine wraps."""
    with pytest.raises(ValueError):
        converter.convert("abc", int)


def test_strict_rejects_coercion(strict_converter) -> None:
    with pytest.raises(ValidationError):
        strict_converter.convert("3", int)
    with pytest.raises(ValidationError):
        strict_converter.convert(3, str)


def test_strict_accepts_exact_types(strict_converter) -> None:
    assert strict_converter.convert(3, int) == 3
    assert strict_converter.convert("x", str) == "x"


def test_config_is_exposed() -> None:
    config = ConverterConfig(strict=True)
    assert PydanticConverter(config).config is config
