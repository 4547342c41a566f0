"""Ordered trait compositions."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from traitmix.domain.model.traits import TraitDef


@dataclass(frozen=True, slots=True)
class Composition:
    """``traits[0]`` is the base; the last trait is the outermost mixin.

    ``values`` supplies concrete field values and overrides anything a trait
    provides itself.
    """

    traits: tuple[TraitDef, ...]
    values: Mapping[str, object] = field(default_factory=dict[str, object])

    def __post_init__(self) -> None:
        object.__setattr__(self, "traits", tuple(self.traits))
        object.__setattr__(self, "values", MappingProxyType(dict(self.values)))

    @property
    def base(self) -> TraitDef:
        return self.traits[0]

    @property
    def name(self) -> str:
        return " with ".join(trait.name for trait in self.traits)

    def with_trait(self, trait: TraitDef) -> Composition:
        """Return a new composition mixing ``trait`` in as the outermost layer."""

        return Composition(traits=(*self.traits, trait), values=self.values)

    def with_values(self, **values: object) -> Composition:
        return Composition(traits=self.traits, values={**self.values, **values})


def compose(*traits: TraitDef, **values: object) -> Composition:
    """Shorthand for ``Composition(traits, values)``: ``compose(coffee, milk, basePrice=2.0)``."""

    return Composition(traits=traits, values=values)
