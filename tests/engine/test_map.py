"""Tests for copying from and into mappings."""

import types
from dataclasses import dataclass
from typing import Any

import pytest
from pydantic import ValidationError

from xcopy import ConversionError, CopyConfig, CopyFlags, copy_to_existing, copy_to_new, copy_using_existing


@dataclass
class MapTarget:
    String1: str = ""
    Int1: int = 0
    Float1: float = 0.0
    Flag: bool = False


@dataclass
class Place:
    street: str = ""
    zip: int = 0


def test_map_to_struct():
    result = copy_to_new({"String1": "s", "Int1": "12", "Float1": 3, "Flag": "true"}, MapTarget)
    assert result == MapTarget(String1="s", Int1=12, Float1=3.0, Flag=True)


def test_map_to_map_converts_values():
    result = copy_to_new({"a": 1, "b": 2.5, "c": True}, dict[str, str])
    assert result == {"a": "1", "b": "2.5", "c": "True"}


def test_map_keys_are_converted():
    assert copy_to_new({1: "x", 2: "y"}, dict[str, str]) == {"1": "x", "2": "y"}
    assert copy_to_new({"1": "x"}, dict[int, str]) == {1: "x"}


def test_key_conversion_failure_has_path():
    """A key that cannot be converted is reported at its own path."""
    with pytest.raises(ConversionError) as excinfo:
        copy_to_new({"x": 1}, dict[int, int])

    assert excinfo.value.path == ("x",)
    assert isinstance(excinfo.value.__cause__, ValidationError)


def test_sparse_int_keys_grow_sequence():
    """Index-keyed mappings fill gaps with zero values."""
    result = copy_to_new({0: "first", 3: "third"}, list[Any])
    assert result == ["first", None, None, "third"]


def test_sparse_string_keys_grow_sequence():
    result = copy_to_new({"0": "first", "3": "third"}, list[str])
    assert result == ["first", "", "", "third"]


def test_nested_maps_in_map_of_any():
    source = {"outer": {"inner": {"leaf": 1}}}
    result = copy_to_new(source, dict[str, Any])

    assert result == source
    assert result["outer"] is not source["outer"]
    assert result["outer"]["inner"] is not source["outer"]["inner"]


def test_lists_in_map_of_any_widen_to_maps():
    """Growable sequences under Any values take the mapping's own type."""
    result = copy_to_new({"tags": ["a", "b"]}, dict[str, Any])
    assert result == {"tags": {"0": "a", "1": "b"}}


def test_tuples_in_map_of_any_stay_opaque():
    result = copy_to_new({"pair": (1, 2)}, dict[str, Any])
    assert result == {"pair": (1, 2)}


def test_mapping_proxy_destination():
    result = copy_to_new({"a": "1"}, types.MappingProxyType[str, int])

    assert isinstance(result, types.MappingProxyType)
    assert dict(result) == {"a": 1}


def test_mapping_proxy_source():
    result = copy_to_new(types.MappingProxyType({"a": 1}), dict[str, int])
    assert result == {"a": 1}


class TestExistingMaps:
    """Tests for mappings with an existing destination."""

    def test_in_place_overwrite(self, overwrite_config) -> None:
        existing = {"keep": "k", "value1": "old"}
        result = copy_using_existing({"value1": "new", "value2": "v2"}, existing, config=overwrite_config)

        assert result is existing
        assert existing == {"keep": "k", "value1": "new", "value2": "v2"}

    def test_copy_to_existing_mutates(self) -> None:
        existing = {"a": 1}
        copy_to_existing({"b": 2}, existing)
        assert existing == {"a": 1, "b": 2}

    def test_default_leaves_existing_untouched(self) -> None:
        existing = {"keep": "k", "value1": "old"}
        result = copy_using_existing({"value1": "new"}, existing)

        assert result == {"keep": "k", "value1": "new"}
        assert existing == {"keep": "k", "value1": "old"}
        assert result is not existing

    def test_existing_entry_reused_in_place(self) -> None:
        """Dict entries are addressable: a conforming entry is updated in place."""
        place = Place(street="Main", zip=1)
        existing = {"home": place}
        copy_to_existing({"home": {"zip": "2"}}, existing, dest_type=dict[str, Place])

        assert existing["home"] is place
        assert place == Place(street="Main", zip=2)

    def test_non_conforming_entry_replaced(self) -> None:
        existing: dict[str, Any] = {"home": "somewhere"}
        copy_to_existing({"home": {"zip": 2}}, existing, dest_type=dict[str, Any])
        assert existing == {"home": {"zip": 2}}

    def test_widening_respects_disable_flag(self) -> None:
        config = CopyConfig(flags=CopyFlags.DISABLE_MAPOFINTERFACE_TARGET_RECURSION)
        result = copy_to_new({"tags": ["a", "b"]}, dict[str, Any], config=config)
        assert result == {"tags": ["a", "b"]}
