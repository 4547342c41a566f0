from __future__ import annotations

import pytest

from traitmix.domain.dispatch import (
    DEFAULT_MAX_CALL_DEPTH,
    MAX_CALL_DEPTH_LIMIT,
    Instance,
    instantiate,
)
from traitmix.domain.errors import (
    DispatchDepthExceeded,
    NoSuchSuperImplementation,
    UnknownField,
    UnknownOperation,
    UnresolvedOperation,
)
from traitmix.domain.linearization import build
from traitmix.domain.model import TraitDef, compose


def test_describe_reflects_composition_order(
    coffee_traits: tuple[TraitDef, TraitDef, TraitDef],
) -> None:
    base, sugar, milk = coffee_traits

    milk_then_sugar = instantiate(compose(base, milk, sugar))
    sugar_then_milk = instantiate(compose(base, sugar, milk))

    assert milk_then_sugar.invoke("describe") == "coffee with milk with sugar"
    assert sugar_then_milk.invoke("describe") == "coffee with sugar with milk"


def test_price_accumulates_through_chain(
    coffee_traits: tuple[TraitDef, TraitDef, TraitDef],
) -> None:
    base, sugar, milk = coffee_traits

    cup = instantiate(compose(base, sugar, milk))

    assert cup.invoke("price") == pytest.approx(1.7)


def test_last_override_wins_without_chaining() -> None:
    calls: list[str] = []

    def override(name: str):
        def body(_ctx: object) -> str:
            calls.append(name)
            return name

        return body

    t = TraitDef("T", abstract_operations=frozenset({"m"}))
    t1 = TraitDef("T1", operations={"m": override("T1")})
    t2 = TraitDef("T2", operations={"m": override("T2")})
    t3 = TraitDef("T3", operations={"m": override("T3")})

    obj = instantiate(compose(t, t1, t2, t3))

    assert obj.invoke("m") == "T3"
    assert calls == ["T3"]


def test_next_is_relative_to_position_in_composition() -> None:
    seen: list[str] = []

    def layer(name: str):
        def body(ctx) -> list[str]:  # noqa: ANN001
            seen.append(ctx.trait.name)
            return [name, *ctx.next()]

        return body

    base = TraitDef("Base", operations={"trace": lambda _ctx: ["Base"]})
    first = TraitDef("First", operations={"trace": layer("First")})
    second = TraitDef("Second", operations={"trace": layer("Second")})

    # The same trait objects stack differently depending only on mixin order.
    assert instantiate(compose(base, first, second)).invoke("trace") == [
        "Second",
        "First",
        "Base",
    ]
    assert instantiate(compose(base, second, first)).invoke("trace") == [
        "First",
        "Second",
        "Base",
    ]
    assert seen == ["Second", "First", "First", "Second"]


def test_next_from_base_raises() -> None:
    base = TraitDef("Base", operations={"m": lambda ctx: ctx.next()})
    top = TraitDef("Top", operations={"m": lambda ctx: ctx.next()})

    obj = instantiate(compose(base, top))

    with pytest.raises(NoSuchSuperImplementation) as excinfo:
        obj.invoke("m")

    assert excinfo.value.op == "m"
    assert excinfo.value.trait == "Base"


def test_unresolved_composition_creates_no_instance(monkeypatch: pytest.MonkeyPatch) -> None:
    created: list[Instance] = []
    original_init = Instance.__init__

    def tracking_init(self: Instance, *args: object, **kwargs: object) -> None:
        original_init(self, *args, **kwargs)  # type: ignore[arg-type]
        created.append(self)

    monkeypatch.setattr(Instance, "__init__", tracking_init)
    t = TraitDef("T", abstract_operations=frozenset({"m"}))

    with pytest.raises(UnresolvedOperation):
        instantiate(compose(t))

    assert created == []


def test_dispatch_goes_through_entry_point() -> None:
    duck = TraitDef(
        "Duck",
        operations={
            "quack": lambda _ctx: "Quack!",
            "push": lambda ctx: ctx.dispatch("quack"),
        },
    )
    loud = TraitDef("Loud", operations={"quack": lambda ctx: ctx.next().upper()})

    obj = instantiate(compose(duck, loud))

    assert obj.invoke("push") == "QUACK!"


def test_unbounded_dispatch_hits_depth_limit() -> None:
    loop = TraitDef("Loop", operations={"spin": lambda ctx: ctx.dispatch("spin")})

    obj = instantiate(compose(loop), max_call_depth=5)

    with pytest.raises(DispatchDepthExceeded) as excinfo:
        obj.invoke("spin")

    assert excinfo.value.limit == 5


def test_default_depth_limit_fires_before_recursion_error() -> None:
    loop = TraitDef("Loop", operations={"spin": lambda ctx: ctx.dispatch("spin")})
    layer = TraitDef("Layer", operations={"spin": lambda ctx: ctx.next()})

    obj = instantiate(compose(loop, layer))

    with pytest.raises(DispatchDepthExceeded) as excinfo:
        obj.invoke("spin")

    assert excinfo.value.limit == DEFAULT_MAX_CALL_DEPTH


def test_largest_depth_limit_fires_before_recursion_error() -> None:
    loop = TraitDef("Loop", operations={"spin": lambda ctx: ctx.dispatch("spin")})

    obj = instantiate(compose(loop), max_call_depth=MAX_CALL_DEPTH_LIMIT)

    with pytest.raises(DispatchDepthExceeded) as excinfo:
        obj.invoke("spin")

    assert excinfo.value.limit == MAX_CALL_DEPTH_LIMIT


@pytest.mark.parametrize("max_call_depth", [0, MAX_CALL_DEPTH_LIMIT + 1])
def test_max_call_depth_must_be_in_range(max_call_depth: int) -> None:
    base = TraitDef("Base", operations={"m": lambda _ctx: 1})

    with pytest.raises(ValueError, match="max_call_depth"):
        Instance(build(compose(base)), max_call_depth=max_call_depth)


def test_unknown_operation_and_field() -> None:
    base = TraitDef("Base", operations={"m": lambda ctx: ctx.field("missing")})
    obj = instantiate(compose(base))

    with pytest.raises(UnknownOperation):
        obj.invoke("n")
    with pytest.raises(UnknownField) as excinfo:
        obj.invoke("m")

    assert excinfo.value.field == "missing"


def test_instance_exposes_resolution_data(
    coffee_traits: tuple[TraitDef, TraitDef, TraitDef],
) -> None:
    base, sugar, milk = coffee_traits

    cup = instantiate(compose(base, sugar, milk))

    assert cup.chain("price") == (base, sugar, milk)
    assert cup.entry_point("price") is milk
    assert cup.mixes_in(sugar)
    assert repr(cup) == "Instance(Base with Sugar with Milk)"
