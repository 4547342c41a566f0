from __future__ import annotations

from pathlib import Path

import pytest

from traitmix.domain.model import TraitDef

DATA_DIR = Path(__file__).resolve().parent / "data"


@pytest.fixture
def coffee_traits() -> tuple[TraitDef, TraitDef, TraitDef]:
    """``(Base, Sugar, Milk)``: both condiments append to ``describe`` and add to ``price``."""

    base = TraitDef(
        "Base",
        operations={
            "describe": lambda _ctx: "coffee",
            "price": lambda _ctx: 1.0,
        },
    )
    sugar = TraitDef(
        "Sugar",
        operations={
            "describe": lambda ctx: ctx.next() + " with sugar",
            "price": lambda ctx: ctx.next() + 0.2,
        },
    )
    milk = TraitDef(
        "Milk",
        operations={
            "describe": lambda ctx: ctx.next() + " with milk",
            "price": lambda ctx: ctx.next() + 0.5,
        },
    )
    return base, sugar, milk


@pytest.fixture(scope="session")
def data_dir() -> Path:
    return DATA_DIR
