"""Built-in demonstrations of mixin composition.

Each demo builds its traits with the domain model and returns the lines it
would print. ``DEMOS`` maps the CLI name of a demo to its function.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Final

from traitmix.domain.dispatch import DEFAULT_MAX_CALL_DEPTH, Instance, instantiate
from traitmix.domain.model import TraitDef, compose

type Demo = Callable[[int], list[str]]


def _format_price(value: float) -> str:
    return f"${value}"


def stackable_coffee(max_call_depth: int = DEFAULT_MAX_CALL_DEPTH) -> list[str]:
    """Stackable modifications: ``new Coffee with Milk with Sugar``."""

    coffee = TraitDef(
        "Coffee",
        operations={
            "price": lambda ctx: ctx.field("basePrice"),
            "toString": lambda _ctx: "coffee",
        },
        fields={"basePrice": float},
    )
    sugar = TraitDef(
        "Sugar",
        operations={"toString": lambda ctx: ctx.next() + " with sugar"},
        extends=(coffee,),
    )
    milk = TraitDef(
        "Milk",
        operations={
            "price": lambda ctx: ctx.next() + 0.5,
            "toString": lambda ctx: ctx.next() + " with milk",
        },
        extends=(coffee,),
    )

    cup = instantiate(compose(coffee, milk, sugar, basePrice=2.0), max_call_depth=max_call_depth)
    return [f"A {cup.invoke('toString')} costs {_format_price(cup.invoke('price'))}."]


def linearization(max_call_depth: int = DEFAULT_MAX_CALL_DEPTH) -> list[str]:
    """Three independent overrides of ``m``: the last one mixed in wins."""

    t = TraitDef("T", abstract_operations=frozenset({"m"}))
    t1 = TraitDef("T1", operations={"m": lambda _ctx: "T1"}, extends=(t,))
    t2 = TraitDef("T2", operations={"m": lambda _ctx: "T2"}, extends=(t,))
    t3 = TraitDef("T3", operations={"m": lambda _ctx: "T3"}, extends=(t,))

    obj = instantiate(compose(t, t1, t2, t3), max_call_depth=max_call_depth)
    return [obj.invoke("m")]


def covariant_field(max_call_depth: int = DEFAULT_MAX_CALL_DEPTH) -> list[str]:
    """One field ``x`` declared as ``A`` by T1 and as ``B`` by T2.

    The value ``new A with B`` satisfies both declarations.
    """

    a = TraitDef("A", operations={"toString": lambda _ctx: "A"})
    b = TraitDef("B", operations={"toString": lambda ctx: ctx.next() + "B"})
    t1 = TraitDef(
        "T1",
        operations={"toString": lambda ctx: ctx.field("x").invoke("toString")},
        fields={"x": a},
    )
    t2 = TraitDef("T2", fields={"x": b})

    x = instantiate(compose(a, b), max_call_depth=max_call_depth)
    d = instantiate(compose(t1, t2, x=x), max_call_depth=max_call_depth)
    return [d.invoke("toString")]


def dependency_injection(max_call_depth: int = DEFAULT_MAX_CALL_DEPTH) -> list[str]:
    """Self-typed product and condiment-provider traits wired into a cappuccino."""

    condiment = TraitDef(
        "Condiment",
        operations={
            "price": lambda _ctx: 0.0,
            "ingredients": lambda _ctx: [],
        },
    )
    sweetener = TraitDef(
        "Sweetener",
        operations={"ingredients": lambda ctx: ["sugar", *ctx.next()]},
        extends=(condiment,),
    )
    milk_froth = TraitDef(
        "MilkFroth",
        operations={"ingredients": lambda ctx: ["milk", *ctx.next()]},
        extends=(condiment,),
    )

    # Declared before the product, which names it as its self-type.
    provider = TraitDef(
        "CondimentProvider",
        operations={
            "price": lambda ctx: ctx.field("basePrice") + ctx.field("condiments").invoke("price"),
            "ingredients": lambda ctx: " and ".join(
                [*ctx.field("baseIngredients"), *ctx.field("condiments").invoke("ingredients")]
            ),
        },
        fields={"condiments": condiment, "basePrice": float, "baseIngredients": list},
    )
    beverage = TraitDef(
        "BeverageProduct",
        fields={"basePrice": float, "baseIngredients": list},
        requires=(provider,),
    )
    espresso = TraitDef(
        "EspressoProduct",
        provides={"basePrice": 3.00, "baseIngredients": ["espresso"]},
        extends=(beverage,),
        requires=(provider,),
    )
    sweet_froth = TraitDef(
        "SweetFrothProvider",
        provides={
            "condiments": instantiate(
                compose(condiment, sweetener, milk_froth), max_call_depth=max_call_depth
            )
        },
        extends=(provider,),
        requires=(beverage,),
    )
    named = TraitDef("cappuccino", operations={"toString": lambda _ctx: "cappuccino"})

    cappuccino = instantiate(
        compose(beverage, espresso, provider, sweet_froth, named),
        max_call_depth=max_call_depth,
    )
    return [
        f"A {cappuccino.invoke('toString')} consists of {cappuccino.invoke('ingredients')}, "
        f"and costs {_format_price(cappuccino.invoke('price'))}"
    ]


def ducks(max_call_depth: int = DEFAULT_MAX_CALL_DEPTH) -> list[str]:
    """``push`` reaches ``quack`` and ``fly`` through the instance, not the chain."""

    duck = TraitDef(
        "Duck",
        operations={
            "quack": lambda ctx: f"{ctx.field('quackSound')}!",
            "push": lambda ctx: [ctx.dispatch("quack")],
        },
        fields={"quackSound": str},
    )
    flyable = TraitDef("Flyable", abstract_operations=frozenset({"fly"}))
    mallard_body = TraitDef(
        "Mallard",
        operations={
            "fly": lambda _ctx: "Heading south!",
            "push": lambda ctx: [ctx.dispatch("quack"), ctx.dispatch("fly")],
        },
        provides={"quackSound": "Quack"},
    )
    rubber_body = TraitDef("RubberDuck", provides={"quackSound": "Squeak"})

    mallard = instantiate(compose(duck, flyable, mallard_body), max_call_depth=max_call_depth)
    rubber = instantiate(compose(duck, rubber_body), max_call_depth=max_call_depth)
    return [*_push(mallard), *_push(rubber)]


def _push(instance: Instance) -> list[str]:
    return list(instance.invoke("push"))


def java_encoding(max_call_depth: int = DEFAULT_MAX_CALL_DEPTH) -> list[str]:
    """``Coffee with Sugar with Milk`` where both condiments add 0.5 to the price."""

    coffee = TraitDef(
        "Coffee",
        operations={"price": lambda ctx: ctx.field("basePrice")},
        fields={"basePrice": float},
    )
    sugar = TraitDef("Sugar", operations={"price": lambda ctx: ctx.next() + 0.5}, extends=(coffee,))
    milk = TraitDef("Milk", operations={"price": lambda ctx: ctx.next() + 0.5}, extends=(coffee,))

    cup = instantiate(compose(coffee, sugar, milk, basePrice=1.0), max_call_depth=max_call_depth)
    return [f"A coffee with sugar and milk costs {_format_price(cup.invoke('price'))}"]


DEMOS: Final[dict[str, Demo]] = {
    "stackable": stackable_coffee,
    "linearization": linearization,
    "covariance": covariant_field,
    "injection": dependency_injection,
    "ducks": ducks,
    "java-encoding": java_encoding,
}
