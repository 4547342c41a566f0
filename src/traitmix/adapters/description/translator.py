"""Translate parsed descriptions into domain compositions."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Any, Final

from traitmix.domain.dispatch import DEFAULT_MAX_CALL_DEPTH, instantiate
from traitmix.domain.model import Composition, TraitDef

from .schema import (
    CallExpr,
    ConcatExpr,
    ConstExpr,
    DispatchExpr,
    FieldExpr,
    JoinExpr,
    ListExpr,
    NestedComposition,
    NextExpr,
)

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from traitmix.domain.model import CallContext, Shape

    from .schema import CompositionDescription, Expr, TraitSpec


log = getLogger(__name__)

BUILTIN_SHAPES: Final[dict[str, type]] = {
    "str": str,
    "int": int,
    "float": float,
    "bool": bool,
    "list": list,
    "dict": dict,
    "any": object,
}

type _Compiled = Callable[[CallContext], Any]


class DescriptionError(ValueError):
    """Raised when a description references something it does not define."""


@dataclass(frozen=True, slots=True)
class TranslatedDescription:
    name: str
    composition: Composition
    traits: Mapping[str, TraitDef]
    invoke: tuple[str, ...]


def translate_description(
    description: CompositionDescription,
    *,
    max_call_depth: int = DEFAULT_MAX_CALL_DEPTH,
) -> TranslatedDescription:
    """Build trait definitions in declaration order and compose them.

    ``extends``, ``requires``, trait-named shapes and nested compositions may
    only reference traits declared earlier in the document.
    """

    translator = _Translator(max_call_depth=max_call_depth)
    for spec in description.traits:
        translator.add_trait(spec)

    composition = Composition(
        traits=translator.lookup_all(description.compose, context="compose"),
        values=translator.values(description.values, context="values"),
    )
    name = description.name or composition.name
    log.debug("Translated description %s with %d traits", name, len(description.traits))
    return TranslatedDescription(
        name=name,
        composition=composition,
        traits=dict(translator.traits),
        invoke=tuple(description.invoke),
    )


class _Translator:
    def __init__(self, *, max_call_depth: int) -> None:
        self.traits: dict[str, TraitDef] = {}
        self._max_call_depth = max_call_depth

    def add_trait(self, spec: TraitSpec) -> TraitDef:
        context = f"trait {spec.name}"
        trait = TraitDef(
            name=spec.name,
            operations={op: _compile_expr(expr) for op, expr in spec.operations.items()},
            abstract_operations=frozenset(spec.abstract),
            fields={
                field: self.shape(shape, context=context)
                for field, shape in spec.field_shapes.items()
            },
            provides=self.values(spec.provides, context=context),
            extends=self.lookup_all(spec.extends, context=context),
            requires=self.lookup_all(spec.requires, context=context),
        )
        self.traits[spec.name] = trait
        return trait

    def lookup(self, name: str, *, context: str) -> TraitDef:
        trait = self.traits.get(name)
        if trait is None:
            raise DescriptionError(f"{context}: unknown trait {name!r}")
        return trait

    def lookup_all(self, names: Sequence[str], *, context: str) -> tuple[TraitDef, ...]:
        return tuple(self.lookup(name, context=context) for name in names)

    def shape(self, name: str, *, context: str) -> Shape:
        builtin = BUILTIN_SHAPES.get(name)
        if builtin is not None:
            return builtin
        if name in self.traits:
            return self.traits[name]
        raise DescriptionError(f"{context}: unknown shape {name!r}")

    def values(self, raw: Mapping[str, object], *, context: str) -> dict[str, object]:
        return {name: self.value(value, context=context) for name, value in raw.items()}

    def value(self, raw: object, *, context: str) -> object:
        if isinstance(raw, NestedComposition):
            nested = Composition(
                traits=self.lookup_all(raw.compose, context=context),
                values=self.values(raw.values, context=context),
            )
            return instantiate(nested, max_call_depth=self._max_call_depth)
        return raw


def _compile_expr(expr: Expr) -> _Compiled:  # noqa: PLR0911
    if isinstance(expr, ConstExpr):
        value = expr.value
        return lambda _ctx: value
    if isinstance(expr, FieldExpr):
        name = expr.name
        return lambda ctx: ctx.field(name)
    if isinstance(expr, NextExpr):
        return lambda ctx: ctx.next()
    if isinstance(expr, DispatchExpr):
        op = expr.op
        return lambda ctx: ctx.dispatch(op)
    if isinstance(expr, CallExpr):
        return _compile_call(expr)
    if isinstance(expr, ConcatExpr):
        return _compile_concat(expr)
    if isinstance(expr, ListExpr):
        items = [_compile_expr(item) for item in expr.items]
        return lambda ctx: [item(ctx) for item in items]
    if isinstance(expr, JoinExpr):
        return _compile_join(expr)
    raise DescriptionError(f"Unsupported expression: {expr!r}")


def _compile_call(expr: CallExpr) -> _Compiled:
    target = _compile_expr(expr.target)
    op = expr.op

    def call(ctx: CallContext) -> Any:
        receiver = target(ctx)
        invoke = getattr(receiver, "invoke", None)
        if invoke is None:
            raise TypeError(f"{ctx.trait.name}.{ctx.op}: cannot call {op!r} on {receiver!r}")
        return invoke(op)

    return call


def _compile_concat(expr: ConcatExpr) -> _Compiled:
    first, *rest = [_compile_expr(item) for item in expr.items]

    def concat(ctx: CallContext) -> Any:
        result = first(ctx)
        for item in rest:
            result = result + item(ctx)
        return result

    return concat


def _compile_join(expr: JoinExpr) -> _Compiled:
    items = [_compile_expr(item) for item in expr.items]
    separator = expr.separator

    def join(ctx: CallContext) -> str:
        parts: list[str] = []
        for item in items:
            value = item(ctx)
            if isinstance(value, list | tuple):
                parts.extend(str(part) for part in value)
            else:
                parts.append(str(value))
        return separator.join(parts)

    return join
