"""Shared test fixtures."""

import sys

import pytest

# Ensure src is in path
sys.path.insert(0, "src")

from dataclasses import dataclass, field

from xcopy import CopyConfig, CopyFlags


@pytest.fixture
def config():
    """Default copy configuration."""
    return CopyConfig()


@pytest.fixture
def overwrite_config():
    """Configuration mutating existing destinations in place."""
    return CopyConfig(flags=CopyFlags.OVERWRITE_EXISTING)


@dataclass
class FixtureAddress:
    street: str = ""
    zip: int = 0


@dataclass
class FixturePerson:
    name: str = ""
    age: int = 0
    address: FixtureAddress | None = None
    tags: list[str] = field(default_factory=list)


@pytest.fixture
def person_cls():
    return FixturePerson


@pytest.fixture
def address_cls():
    return FixtureAddress
