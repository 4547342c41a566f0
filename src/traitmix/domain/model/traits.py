"""Trait records: named operation bodies plus field and self-type requirements."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from traitmix.domain.model.shapes import Shape


class CallContext(Protocol):
    """What an operation body sees while it runs.

    ``next()`` re-enters the same operation one position earlier in the
    composition's chain; ``dispatch()`` calls an operation through the
    instance's entry point.
    """

    @property
    def op(self) -> str: ...

    @property
    def trait(self) -> TraitDef: ...

    def next(self) -> Any: ...

    def field(self, name: str) -> Any: ...

    def dispatch(self, op: str) -> Any: ...


type OperationBody = Callable[[CallContext], Any]


def _freeze[K, V](mapping: Mapping[K, V]) -> Mapping[K, V]:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True, eq=False, slots=True)
class TraitDef:
    """A named unit of behaviour.

    Traits compare by identity: two definitions with the same name are still
    different traits. ``extends`` only matters for shape conformance and
    self-type checks; chain order comes from the composition alone.
    """

    name: str
    operations: Mapping[str, OperationBody] = field(default_factory=dict[str, OperationBody])
    abstract_operations: frozenset[str] = frozenset()
    fields: Mapping[str, Shape] = field(default_factory=dict[str, "Shape"])
    provides: Mapping[str, object] = field(default_factory=dict[str, object])
    extends: tuple[TraitDef, ...] = ()
    requires: tuple[TraitDef, ...] = ()

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("trait name must not be empty")
        object.__setattr__(self, "operations", _freeze(self.operations))
        object.__setattr__(self, "fields", _freeze(self.fields))
        object.__setattr__(self, "provides", _freeze(self.provides))
        object.__setattr__(self, "abstract_operations", frozenset(self.abstract_operations))
        object.__setattr__(self, "extends", tuple(self.extends))
        object.__setattr__(self, "requires", tuple(self.requires))
        overlap = self.abstract_operations & self.operations.keys()
        if overlap:
            raise ValueError(
                f"trait {self.name} declares {', '.join(sorted(overlap))} both abstract and concrete"
            )

    @property
    def operation_names(self) -> tuple[str, ...]:
        """Every name this trait mentions, defined ones first."""

        abstract = sorted(self.abstract_operations)
        return (*self.operations.keys(), *abstract)

    def defines(self, op: str) -> bool:
        return op in self.operations

    def is_a(self, other: TraitDef) -> bool:
        """True if this trait is ``other`` or declares it as a (transitive) supertype."""

        if self is other:
            return True
        return any(parent.is_a(other) for parent in self.extends)

    def __repr__(self) -> str:
        return f"TraitDef({self.name!r})"
