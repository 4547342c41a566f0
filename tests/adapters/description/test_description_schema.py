"""Schema tests for JSON composition descriptions."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from traitmix.adapters.description import (
    CompositionDescription,
    DescriptionError,
    NestedComposition,
    load_description,
    parse_description,
)
from traitmix.adapters.description.schema import ConcatExpr, FieldExpr, NextExpr

if TYPE_CHECKING:
    from pathlib import Path


def test_load_description_parses_traits_and_bodies(data_dir: Path) -> None:
    description = load_description(data_dir / "stackable_coffee.json")

    assert description.name == "stackable-coffee"
    assert [trait.name for trait in description.traits] == ["Coffee", "Sugar", "Milk"]
    coffee = description.traits[0]
    assert coffee.field_shapes == {"basePrice": "float"}
    assert isinstance(coffee.operations["price"], FieldExpr)
    milk_price = description.traits[2].operations["price"]
    assert isinstance(milk_price, ConcatExpr)
    assert isinstance(milk_price.items[0], NextExpr)
    assert description.invoke == ["toString", "price"]


def test_nested_composition_values_are_recognised(data_dir: Path) -> None:
    description = load_description(data_dir / "covariant_field.json")

    value = description.values["x"]

    assert isinstance(value, NestedComposition)
    assert value.compose == ["A", "B"]


def test_plain_mapping_values_stay_literal() -> None:
    description = CompositionDescription.model_validate(
        {
            "traits": [{"name": "T", "fields": {"config": "dict"}}],
            "compose": ["T"],
            "values": {"config": {"retries": 3}},
        }
    )

    assert description.values["config"] == {"retries": 3}


def test_unknown_expression_kind_is_rejected() -> None:
    payload = (
        '{"traits": [{"name": "T", "operations": {"m": {"kind": "eval", "code": "1"}}}],'
        ' "compose": ["T"]}'
    )

    with pytest.raises(DescriptionError, match="Invalid composition description"):
        parse_description(payload)


def test_duplicate_trait_names_are_rejected() -> None:
    payload = '{"traits": [{"name": "T"}, {"name": "T"}], "compose": ["T"]}'

    with pytest.raises(DescriptionError, match="duplicate trait name"):
        parse_description(payload)


def test_empty_compose_is_rejected() -> None:
    with pytest.raises(DescriptionError):
        parse_description('{"traits": [{"name": "T"}], "compose": []}')


def test_missing_file_raises_description_error(tmp_path: Path) -> None:
    with pytest.raises(DescriptionError, match="Cannot read description"):
        load_description(tmp_path / "missing.json")
