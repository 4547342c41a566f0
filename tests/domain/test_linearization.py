from __future__ import annotations

import pytest

from traitmix.domain.errors import (
    DuplicateTrait,
    InvalidComposition,
    UnknownOperation,
    UnresolvedOperation,
)
from traitmix.domain.linearization import build
from traitmix.domain.model import Composition, TraitDef, compose


def test_chains_follow_composition_order(
    coffee_traits: tuple[TraitDef, TraitDef, TraitDef],
) -> None:
    base, sugar, milk = coffee_traits

    table = build(compose(base, milk, sugar))

    assert table.chain("describe") == (base, milk, sugar)
    assert table.entry_point("describe") is sugar


def test_chain_skips_traits_that_do_not_define_the_operation() -> None:
    base = TraitDef("Base", operations={"price": lambda _ctx: 1.0, "name": lambda _ctx: "x"})
    named = TraitDef("Named", operations={"name": lambda ctx: ctx.next() + "!"})
    priced = TraitDef("Priced", operations={"price": lambda ctx: ctx.next() * 2})

    table = build(compose(base, named, priced))

    assert table.chain("price") == (base, priced)
    assert table.chain("name") == (base, named)
    assert table.operations == ("price", "name")


def test_declared_supertypes_do_not_reorder_chain() -> None:
    base = TraitDef("Base", operations={"m": lambda _ctx: "base"})
    child = TraitDef("Child", operations={"m": lambda ctx: ctx.next()}, extends=(base,))
    # Parent listed after its declared subtype still ends up outermost.
    parent = TraitDef("Parent", operations={"m": lambda ctx: ctx.next()})
    child_of_parent = TraitDef(
        "ChildOfParent", operations={"m": lambda ctx: ctx.next()}, extends=(parent,)
    )

    table = build(compose(base, child, child_of_parent, parent))

    assert table.chain("m") == (base, child, child_of_parent, parent)


def test_build_is_idempotent(coffee_traits: tuple[TraitDef, TraitDef, TraitDef]) -> None:
    base, sugar, milk = coffee_traits
    composition = compose(base, sugar, milk)

    first = build(composition)
    second = build(composition)

    assert first == second
    assert list(first.chains.items()) == list(second.chains.items())


def test_abstract_operation_without_implementation_is_unresolved() -> None:
    base = TraitDef("T", abstract_operations=frozenset({"m"}))
    other = TraitDef("Other", operations={"n": lambda _ctx: 1})

    with pytest.raises(UnresolvedOperation) as excinfo:
        build(compose(base, other))

    assert excinfo.value.op == "m"


def test_abstract_operation_implemented_later_resolves() -> None:
    flyable = TraitDef("Flyable", abstract_operations=frozenset({"fly"}))
    bird = TraitDef("Bird", operations={"fly": lambda _ctx: "flap"})

    table = build(compose(flyable, bird))

    assert table.chain("fly") == (bird,)


def test_empty_composition_is_invalid() -> None:
    with pytest.raises(InvalidComposition):
        build(Composition(traits=()))


def test_trait_mixed_in_twice_is_rejected(
    coffee_traits: tuple[TraitDef, TraitDef, TraitDef],
) -> None:
    base, sugar, _ = coffee_traits

    with pytest.raises(DuplicateTrait, match="Sugar"):
        build(compose(base, sugar, sugar))


def test_unknown_operation_lookup(coffee_traits: tuple[TraitDef, TraitDef, TraitDef]) -> None:
    base, _, _ = coffee_traits
    table = build(compose(base))

    with pytest.raises(UnknownOperation):
        table.chain("missing")


def test_composition_helpers_do_not_mutate(
    coffee_traits: tuple[TraitDef, TraitDef, TraitDef],
) -> None:
    base, sugar, milk = coffee_traits
    composition = compose(base, sugar)

    extended = composition.with_trait(milk).with_values(extra=1)

    assert composition.traits == (base, sugar)
    assert extended.traits == (base, sugar, milk)
    assert extended.values == {"extra": 1}
    assert extended.name == "Base with Sugar with Milk"
