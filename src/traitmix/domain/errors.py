"""Composition and dispatch error definitions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from traitmix.domain.model.shapes import shape_name

if TYPE_CHECKING:
    from collections.abc import Sequence

    from traitmix.domain.model.shapes import Shape


class CompositionError(ValueError):
    """Raised when a composition cannot be linearized."""


class InvalidComposition(CompositionError):
    """Raised for structurally broken compositions (e.g. no base trait)."""


class DuplicateTrait(CompositionError):
    def __init__(self, trait: str) -> None:
        super().__init__(f"Trait {trait} is mixed in more than once")
        self.trait = trait


class UnresolvedOperation(CompositionError):
    """No trait in the composition implements the operation."""

    def __init__(self, op: str) -> None:
        super().__init__(f"No implementation for operation {op!r}")
        self.op = op


class UnsatisfiedSelfType(CompositionError):
    def __init__(self, trait: str, missing: Sequence[str]) -> None:
        missing_list = ", ".join(missing)
        super().__init__(f"Trait {trait} requires {missing_list} to be mixed in")
        self.trait = trait
        self.missing = tuple(missing)


class MissingFieldValue(CompositionError):
    def __init__(self, field: str, traits: Sequence[str]) -> None:
        super().__init__(
            f"No value supplied for field {field!r} required by {', '.join(traits)}"
        )
        self.field = field
        self.traits = tuple(traits)


class IncompatibleFieldType(CompositionError):
    """The single value of a shared field does not satisfy every requirement.

    ``conflicting`` holds ``(trait name, shape)`` pairs for each requirement the
    value fails.
    """

    def __init__(
        self,
        field: str,
        conflicting: Sequence[tuple[str, Shape]],
        value: object,
    ) -> None:
        details = ", ".join(f"{trait}: {shape_name(shape)}" for trait, shape in conflicting)
        super().__init__(
            f"Value {value!r} for field {field!r} does not satisfy {details}"
        )
        self.field = field
        self.conflicting = tuple(conflicting)
        self.value = value


class DispatchError(RuntimeError):
    """Raised while invoking an operation on an instance."""


class NoSuchSuperImplementation(DispatchError):
    """A body called ``next()`` from the first position of its chain."""

    def __init__(self, op: str, trait: str) -> None:
        super().__init__(f"{trait}.{op} has no next implementation to delegate to")
        self.op = op
        self.trait = trait


class UnknownOperation(DispatchError):
    def __init__(self, op: str) -> None:
        super().__init__(f"Instance has no operation {op!r}")
        self.op = op


class UnknownField(DispatchError):
    def __init__(self, field: str) -> None:
        super().__init__(f"Instance has no field {field!r}")
        self.field = field


class DispatchDepthExceeded(DispatchError):
    def __init__(self, op: str, limit: int) -> None:
        super().__init__(f"Call depth limit {limit} exceeded while dispatching {op!r}")
        self.op = op
        self.limit = limit
