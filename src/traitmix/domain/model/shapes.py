"""Declared field shapes and the conformance rule used by the field check."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from traitmix.domain.model.traits import TraitDef

if TYPE_CHECKING:
    from collections.abc import Iterable

type Shape = type | TraitDef


@runtime_checkable
class Composed(Protocol):
    """Anything built from a composition of traits (an ``Instance``)."""

    def mixes_in(self, trait: TraitDef) -> bool: ...


def conforms(value: object, shape: Shape) -> bool:
    """Return whether ``value`` satisfies ``shape``.

    Trait shapes are satisfied by composed values that mix the trait in.
    ``float`` also accepts ``int`` (numeric widening). Neither ``int`` nor
    ``float`` accepts ``bool``.
    """

    if isinstance(shape, TraitDef):
        return isinstance(value, Composed) and value.mixes_in(shape)
    if isinstance(value, bool) and shape in {int, float}:
        return False
    if shape is float and isinstance(value, int):
        return True
    return isinstance(value, shape)


def unsatisfied[K](value: object, requirements: Iterable[tuple[K, Shape]]) -> list[tuple[K, Shape]]:
    """Return the requirements ``value`` does not conform to, in input order."""

    return [(owner, shape) for owner, shape in requirements if not conforms(value, shape)]


def shape_name(shape: Shape) -> str:
    if isinstance(shape, TraitDef):
        return shape.name
    return getattr(shape, "__name__", repr(shape))
