"""Tests for copying into and out of structs.

Critical Invariants:
- Fields are matched by tag-resolved name, private fields never participate
- Indirection on either side is transparent
- Frozen structs are rebuilt, never mutated
"""

import dataclasses
from dataclasses import InitVar, dataclass, field
from typing import Any

import pytest
from pydantic import BaseModel, ConfigDict, Field

from xcopy import (
    CopyConfig,
    CopyFlags,
    CyclicStructureError,
    FieldMapEntry,
    FieldMissingError,
    Ref,
    UnsupportedShapeError,
    copy_to_new,
)


@dataclass
class StructSource:
    String1: str = ""
    String2: Ref[str] | None = None
    Int1: int = 0
    Interface1: Any = None
    Float1: float = 0.0
    _private: str = "secret"


@dataclass
class StructDest:
    String1: str | None = None
    String2: str = ""
    Int1: Ref[int] | None = None
    Interface1: str = ""
    Float1: float = 0.0
    _private: str = ""


@dataclass
class TaggedStruct:
    value1: str = field(default="", metadata={"xcopy": "New_value1"})
    value2: str = field(default="", metadata={"xcopy": "-"})
    value3: str = field(default="", metadata={"json": "other"})


@dataclass
class MappedSource:
    XValue1: str = ""
    XValue2: str = ""


@dataclass
class MappedDest:
    Value1: str = ""
    Value2: str = ""
    XValue1: str = ""


@dataclass
class Inner:
    a: int = 0
    b: str = ""


@dataclass
class Outer:
    name: str = ""
    inner: Inner | None = None
    items: list[Inner] = field(default_factory=list)


@dataclass(frozen=True)
class FrozenPair:
    left: int = 0
    right: str = ""


@dataclass
class Node:
    name: str = ""
    next: "Node | None" = None


class Account(BaseModel):
    owner: str
    balance: float = 0.0
    code: str = Field(default="", json_schema_extra={"xcopy": "account_code"})


class FrozenAccount(BaseModel):
    model_config = ConfigDict(frozen=True)

    owner: str = ""
    balance: float = 0.0


@dataclass
class Totals:
    count: int = 0
    total: int = field(init=False)


@dataclass
class Seeded:
    seed: InitVar[int]
    value: int = 0

    def __post_init__(self, seed: int) -> None:
        self.value += seed


@dataclass
class Positive:
    amount: int

    def __post_init__(self) -> None:
        if self.amount <= 0:
            raise ValueError("amount must be positive")


@dataclass
class Order:
    item: Positive | None = None


@dataclass(frozen=True)
class FrozenSeeded:
    seed: InitVar[int]
    label: str = ""


@pytest.fixture
def source():
    return StructSource(
        String1="1__string",
        String2=Ref("2__string"),
        Int1=3,
        Interface1=99,
        Float1=4.5,
    )


class TestStructToStruct:
    """Tests for struct -> struct copies."""

    def test_fields_copied_with_conversion(self, source) -> None:
        dest = copy_to_new(source, StructDest)

        assert dest.String1 == "1__string"
        assert dest.String2 == "2__string"
        assert dest.Int1 == Ref(3)
        assert dest.Interface1 == "99"
        assert dest.Float1 == 4.5

    def test_private_fields_are_skipped(self, source) -> None:
        dest = copy_to_new(source, StructDest)
        assert dest._private == ""

    def test_source_not_mutated(self, source) -> None:
        before = dataclasses.replace(source)
        copy_to_new(source, StructDest)
        assert source == before

    def test_nested_structs_materialize(self) -> None:
        outer = copy_to_new(
            {"name": "o", "inner": {"a": "1", "b": 2}, "items": [{"a": 3}, {"b": "x"}]},
            Outer,
        )

        assert outer.inner == Inner(a=1, b="2")
        assert outer.items == [Inner(a=3), Inner(b="x")]

    def test_same_type_copy_is_deep(self) -> None:
        original = Outer(name="o", inner=Inner(a=1), items=[Inner(a=2)])
        result = copy_to_new(original, Outer)

        assert result == original
        assert result is not original
        assert result.inner is not original.inner
        assert result.items[0] is not original.items[0]


class TestStructToMapping:
    """Tests for struct -> mapping copies."""

    def test_struct_to_map_of_any(self, source) -> None:
        result = copy_to_new(source, dict[str, Any])

        assert result == {
            "String1": "1__string",
            "String2": Ref("2__string"),
            "Int1": 3,
            "Interface1": 99,
            "Float1": 4.5,
        }

    def test_struct_to_map_of_str(self, source) -> None:
        result = copy_to_new(source, dict[str, str])
        assert result["Int1"] == "3"
        assert result["Float1"] == "4.5"
        assert result["String2"] == "2__string"

    def test_nested_struct_widens_to_mapping(self) -> None:
        """Structured values in a map of Any become maps of the same type."""
        result = copy_to_new(Outer(name="o", inner=Inner(a=1, b="x")), dict[str, Any])
        assert result["inner"] == {"a": 1, "b": "x"}

    def test_widening_disabled(self) -> None:
        config = CopyConfig(flags=CopyFlags.DISABLE_MAPOFINTERFACE_TARGET_RECURSION)
        inner = Inner(a=1)
        result = copy_to_new(Outer(inner=inner), dict[str, Any], config=config)

        assert result["inner"] == inner
        assert result["inner"] is not inner


class TestStructToScalar:
    """A struct never silently becomes a scalar."""

    def test_struct_to_int_rejected(self, source) -> None:
        with pytest.raises(UnsupportedShapeError, match="cannot copy struct StructSource into int"):
            copy_to_new(source, int)

    def test_struct_to_any_is_opaque_copy(self, source) -> None:
        result = copy_to_new(source, Any)
        assert result == source
        assert result is not source


class TestTags:
    """Tests for struct tag directives."""

    def test_tag_renames_and_skips_on_read(self) -> None:
        result = copy_to_new(TaggedStruct("a", "b", "c"), dict[str, str])
        assert result == {"New_value1": "a", "value3": "c"}

    def test_tag_renames_on_write(self) -> None:
        result = copy_to_new({"New_value1": "x", "value1": "ignored"}, TaggedStruct)
        assert result.value1 == "x"

    def test_excluded_field_is_not_a_target(self) -> None:
        result = copy_to_new({"value2": "x", "-": "y"}, TaggedStruct)
        assert result.value2 == ""

    def test_custom_tag_name(self) -> None:
        config = CopyConfig(tag_name="json")
        result = copy_to_new(TaggedStruct("a", "b", "c"), dict[str, str], config=config)
        assert result == {"value1": "a", "value2": "b", "other": "c"}

    def test_pydantic_tag(self) -> None:
        result = copy_to_new({"owner": "ann", "account_code": "X1"}, Account)
        assert result.code == "X1"


class TestFieldMap:
    """Tests for field-map overrides."""

    def test_field_map_renames_source_field(self) -> None:
        config = CopyConfig(field_map={"XValue2": FieldMapEntry.named("Value2")})
        result = copy_to_new(MappedSource("one", "two"), MappedDest, config=config)

        assert result.Value2 == "two"
        assert result.XValue1 == "one"
        assert result.Value1 == ""

    def test_field_map_uses_full_path(self) -> None:
        config = CopyConfig(field_map={"mapped.XValue2": "Value2"})
        result = copy_to_new(
            {"mapped": MappedSource("one", "two"), "plain": MappedSource("one", "two")},
            dict[str, MappedDest],
            config=config,
        )

        assert result["mapped"].Value2 == "two"
        assert result["plain"].Value2 == ""


class TestMissingFields:
    """Tests for source fields without a destination counterpart."""

    def test_missing_field_ignored_by_default(self) -> None:
        result = copy_to_new({"a": 1, "unknown": 2}, Inner)
        assert result == Inner(a=1)

    def test_missing_field_error(self) -> None:
        config = CopyConfig(flags=CopyFlags.ERROR_IF_STRUCT_FIELD_MISSING)
        with pytest.raises(FieldMissingError, match="field unknown missing on struct Inner") as excinfo:
            copy_to_new({"a": 1, "unknown": 2}, Inner, config=config)

        assert excinfo.value.path == ("unknown",)

    def test_private_destination_field_is_missing(self) -> None:
        config = CopyConfig(flags=CopyFlags.ERROR_IF_STRUCT_FIELD_MISSING)
        with pytest.raises(FieldMissingError):
            copy_to_new({"_private": "x"}, StructDest, config=config)


class TestPydanticModels:
    """Tests for pydantic models as sources and destinations."""

    def test_mapping_to_model(self) -> None:
        result = copy_to_new({"owner": "ann", "balance": "12.5"}, Account)

        assert isinstance(result, Account)
        assert result.owner == "ann"
        assert result.balance == 12.5

    def test_model_to_dataclass(self) -> None:
        @dataclass
        class Row:
            owner: str = ""
            balance: str = ""

        result = copy_to_new(Account(owner="ann", balance=3.0), Row)
        assert result == Row(owner="ann", balance="3.0")

    def test_frozen_model_is_rebuilt(self) -> None:
        result = copy_to_new({"owner": "bob", "balance": 1}, FrozenAccount)
        assert result == FrozenAccount(owner="bob", balance=1.0)


class TestFrozenStructs:
    """Tests for frozen dataclasses."""

    def test_frozen_dataclass_built_from_mapping(self) -> None:
        result = copy_to_new({"left": "4", "right": 5}, FrozenPair)
        assert result == FrozenPair(left=4, right="5")

    def test_frozen_inside_ref_is_replaced(self) -> None:
        from xcopy import copy_to_existing

        holder = Ref(FrozenPair(1, "a"))
        original = holder.value
        copy_to_existing({"left": 9}, holder)

        assert holder.value == FrozenPair(9, "a")
        assert original == FrozenPair(1, "a")


class TestCycles:
    """Tests for the cycle guard."""

    def test_self_reference_raises(self) -> None:
        node = Node("a")
        node.next = node

        with pytest.raises(CyclicStructureError):
            copy_to_new(node, Node)

    def test_self_containing_dict_raises(self) -> None:
        data: dict[str, Any] = {}
        data["self"] = data

        with pytest.raises(CyclicStructureError):
            copy_to_new(data, dict)

    def test_shared_reference_is_not_a_cycle(self) -> None:
        shared = Inner(a=1)
        result = copy_to_new({"first": shared, "second": shared}, dict[str, Inner])

        assert result["first"] == result["second"] == shared
        assert result["first"] is not result["second"]


class TestInitOnlyMembers:
    """Tests for dataclasses whose constructor does not mirror their fields."""

    def test_non_init_field_is_zero_filled_and_written(self) -> None:
        result = copy_to_new({"count": 1, "total": 5}, Totals)

        assert result.count == 1
        assert result.total == 5

    def test_non_init_field_defaults_to_zero(self) -> None:
        result = copy_to_new({"count": 1}, Totals)
        assert result.total == 0

    def test_unset_non_init_field_is_skipped_as_source(self) -> None:
        assert copy_to_new(Totals(count=2), dict[str, Any]) == {"count": 2}

    def test_required_init_var_receives_zero_value(self) -> None:
        result = copy_to_new({"value": 3}, Seeded)
        assert result.value == 3

    def test_rejected_zero_value_raises_copy_error_with_path(self) -> None:
        with pytest.raises(UnsupportedShapeError, match="amount must be positive") as excinfo:
            copy_to_new({"item": {"amount": 5}}, Order)

        assert excinfo.value.path == ("item", "amount")
        assert isinstance(excinfo.value.__cause__, ValueError)

    def test_frozen_rebuild_without_init_var_raises_copy_error(self) -> None:
        with pytest.raises(UnsupportedShapeError, match="cannot rebuild frozen FrozenSeeded"):
            copy_to_new({"label": "x"}, FrozenSeeded)
