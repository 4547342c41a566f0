"""Linearize a composition into per-operation resolution chains.

Chains are built purely from the literal mixin order: the base comes first and
the last-listed trait last, so ``chain[-1]`` is the most specific override.
Declared supertypes (``TraitDef.extends``) never reorder a chain.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from logging import getLogger
from types import MappingProxyType
from typing import TYPE_CHECKING

from traitmix.domain.errors import (
    DuplicateTrait,
    IncompatibleFieldType,
    InvalidComposition,
    MissingFieldValue,
    UnknownOperation,
    UnresolvedOperation,
    UnsatisfiedSelfType,
)
from traitmix.domain.model import unsatisfied

if TYPE_CHECKING:
    from collections.abc import Sequence

    from traitmix.domain.model import Composition, Shape, TraitDef

type ResolutionChain = tuple[TraitDef, ...]
type FieldRequirements = tuple[tuple[TraitDef, Shape], ...]

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ResolutionTable:
    """Outcome of a successful build: chains plus the resolved field values."""

    composition: Composition
    chains: Mapping[str, ResolutionChain]
    field_values: Mapping[str, object]
    requirements: Mapping[str, FieldRequirements]

    @property
    def operations(self) -> tuple[str, ...]:
        return tuple(self.chains)

    def chain(self, op: str) -> ResolutionChain:
        try:
            return self.chains[op]
        except KeyError:
            raise UnknownOperation(op) from None

    def entry_point(self, op: str) -> TraitDef:
        """The implementation an external call to ``op`` lands on."""

        return self.chain(op)[-1]


def build(composition: Composition) -> ResolutionTable:
    """Validate ``composition`` and compute its resolution table.

    Raises a ``CompositionError`` subclass when the composition is invalid;
    nothing is instantiated in that case.
    """

    traits = composition.traits
    if not traits:
        raise InvalidComposition("A composition needs at least a base trait")
    _check_duplicates(traits)

    chains = _linearize(traits)
    _check_self_types(traits)

    requirements = _collect_requirements(traits)
    field_values = _resolve_field_values(composition)
    _check_fields(requirements, field_values)

    log.debug(
        "Linearized %s: %s",
        composition.name,
        "; ".join(f"{op}=[{', '.join(t.name for t in chain)}]" for op, chain in chains.items()),
    )
    return ResolutionTable(
        composition=composition,
        chains=MappingProxyType(chains),
        field_values=MappingProxyType(field_values),
        requirements=MappingProxyType(requirements),
    )


def _check_duplicates(traits: Sequence[TraitDef]) -> None:
    seen: set[int] = set()
    for trait in traits:
        if id(trait) in seen:
            raise DuplicateTrait(trait.name)
        seen.add(id(trait))


def _linearize(traits: Sequence[TraitDef]) -> dict[str, ResolutionChain]:
    pending: dict[str, list[TraitDef]] = {}
    for trait in traits:
        for op in trait.operation_names:
            chain = pending.setdefault(op, [])
            if trait.defines(op):
                chain.append(trait)

    chains: dict[str, ResolutionChain] = {}
    for op, chain in pending.items():
        if not chain:
            raise UnresolvedOperation(op)
        chains[op] = tuple(chain)
    return chains


def _check_self_types(traits: Sequence[TraitDef]) -> None:
    for trait in traits:
        missing = [
            required.name
            for required in trait.requires
            if not any(candidate.is_a(required) for candidate in traits)
        ]
        if missing:
            raise UnsatisfiedSelfType(trait.name, missing)


def _collect_requirements(traits: Sequence[TraitDef]) -> dict[str, FieldRequirements]:
    collected: dict[str, list[tuple[TraitDef, Shape]]] = {}
    for trait in traits:
        for name, shape in trait.fields.items():
            collected.setdefault(name, []).append((trait, shape))
    return {name: tuple(entries) for name, entries in collected.items()}


def _resolve_field_values(composition: Composition) -> dict[str, object]:
    # Later traits override earlier ones; explicit values override every trait.
    values: dict[str, object] = {}
    for trait in composition.traits:
        values.update(trait.provides)
    values.update(composition.values)
    return values


def _check_fields(
    requirements: Mapping[str, FieldRequirements],
    values: Mapping[str, object],
) -> None:
    for name, entries in requirements.items():
        if name not in values:
            raise MissingFieldValue(name, [trait.name for trait, _ in entries])
        value = values[name]
        failed = unsatisfied(value, entries)
        if failed:
            raise IncompatibleFieldType(
                name,
                [(trait.name, shape) for trait, shape in failed],
                value,
            )
        if len(entries) > 1:
            log.debug(
                "Field %s shared by %s",
                name,
                ", ".join(trait.name for trait, _ in entries),
            )
