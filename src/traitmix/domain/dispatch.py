"""Instances and call dispatch through resolution chains."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Any, Final

from traitmix.domain.errors import (
    DispatchDepthExceeded,
    NoSuchSuperImplementation,
    UnknownField,
)
from traitmix.domain.linearization import build

if TYPE_CHECKING:
    from collections.abc import Mapping

    from traitmix.domain.linearization import ResolutionChain, ResolutionTable
    from traitmix.domain.model import Composition, TraitDef

DEFAULT_MAX_CALL_DEPTH: Final[int] = 64
# Several interpreter frames per dispatch level; keeps the guard below the recursion limit.
MAX_CALL_DEPTH_LIMIT: Final[int] = 100

log = getLogger(__name__)


class Instance:
    """One object produced by a composition.

    Owns a single physical value per field. Every trait body reads the same
    value; the build-time check already guaranteed it conforms to each trait's
    declared shape.
    """

    __slots__ = ("_max_call_depth", "_table")

    def __init__(
        self,
        table: ResolutionTable,
        *,
        max_call_depth: int = DEFAULT_MAX_CALL_DEPTH,
    ) -> None:
        if not 1 <= max_call_depth <= MAX_CALL_DEPTH_LIMIT:
            raise ValueError(f"max_call_depth must be between 1 and {MAX_CALL_DEPTH_LIMIT}")
        self._table = table
        self._max_call_depth = max_call_depth

    @property
    def table(self) -> ResolutionTable:
        return self._table

    @property
    def composition(self) -> Composition:
        return self._table.composition

    @property
    def fields(self) -> Mapping[str, object]:
        return self._table.field_values

    def invoke(self, op: str) -> Any:
        """Call ``op`` through its entry point (the most specific override)."""

        return self._enter(op, depth=0)

    def field(self, name: str) -> Any:
        try:
            return self._table.field_values[name]
        except KeyError:
            raise UnknownField(name) from None

    def chain(self, op: str) -> ResolutionChain:
        return self._table.chain(op)

    def entry_point(self, op: str) -> TraitDef:
        return self._table.entry_point(op)

    def mixes_in(self, trait: TraitDef) -> bool:
        return any(candidate.is_a(trait) for candidate in self._table.composition.traits)

    def _enter(self, op: str, *, depth: int) -> Any:
        if depth >= self._max_call_depth:
            raise DispatchDepthExceeded(op, self._max_call_depth)
        chain = self._table.chain(op)
        return self._run(op, len(chain) - 1, depth=depth)

    def _run(self, op: str, index: int, *, depth: int) -> Any:
        chain = self._table.chain(op)
        trait = chain[index]
        log.debug("Dispatching %s.%s at chain position %d/%d", trait.name, op, index, len(chain) - 1)
        body = trait.operations[op]
        return body(_CallFrame(instance=self, op=op, index=index, depth=depth))

    def __repr__(self) -> str:
        return f"Instance({self.composition.name})"


@dataclass(frozen=True, slots=True)
class _CallFrame:
    """``CallContext`` bound to one position of one operation's chain."""

    instance: Instance
    op: str
    index: int
    depth: int

    @property
    def trait(self) -> TraitDef:
        return self.instance.chain(self.op)[self.index]

    def next(self) -> Any:
        if self.index == 0:
            raise NoSuchSuperImplementation(self.op, self.trait.name)
        return self.instance._run(self.op, self.index - 1, depth=self.depth)  # noqa: SLF001

    def field(self, name: str) -> Any:
        return self.instance.field(name)

    def dispatch(self, op: str) -> Any:
        return self.instance._enter(op, depth=self.depth + 1)  # noqa: SLF001


def instantiate(
    composition: Composition,
    *,
    max_call_depth: int = DEFAULT_MAX_CALL_DEPTH,
) -> Instance:
    """Build ``composition`` and create an instance from it.

    Build errors propagate before any instance exists.
    """

    return Instance(build(composition), max_call_depth=max_call_depth)
