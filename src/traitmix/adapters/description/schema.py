"""Pydantic models describing JSON composition descriptions.

A description lists trait definitions, the order to compose them in, field
values and the operations to invoke::

    {
      "traits": [
        {"name": "Coffee", "fields": {"basePrice": "float"},
         "operations": {"price": {"kind": "field", "name": "basePrice"}}},
        {"name": "Milk",
         "operations": {"price": {"kind": "concat",
                                  "items": [{"kind": "next"}, {"kind": "const", "value": 0.5}]}}}
      ],
      "compose": ["Coffee", "Milk"],
      "values": {"basePrice": 2.0},
      "invoke": ["price"]
    }

Operation bodies are small expressions tagged by ``kind``.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator


class DescriptionModel(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)


class ConstExpr(DescriptionModel):
    kind: Literal["const"]
    value: Any


class FieldExpr(DescriptionModel):
    kind: Literal["field"]
    name: str


class NextExpr(DescriptionModel):
    """The next implementation of the same operation (``super.op``)."""

    kind: Literal["next"]


class DispatchExpr(DescriptionModel):
    """Another operation on the same instance, through its entry point."""

    kind: Literal["dispatch"]
    op: str


class CallExpr(DescriptionModel):
    """Invoke ``op`` on the composed value ``target`` evaluates to."""

    kind: Literal["call"]
    target: Expr
    op: str


class ConcatExpr(DescriptionModel):
    """Fold ``items`` left to right with ``+``."""

    kind: Literal["concat"]
    items: list[Expr] = Field(min_length=1)


class ListExpr(DescriptionModel):
    kind: Literal["list"]
    items: list[Expr] = Field(default_factory=list)


class JoinExpr(DescriptionModel):
    """Flatten ``items`` (lists are spliced) and join them as strings."""

    kind: Literal["join"]
    separator: str = ""
    items: list[Expr] = Field(min_length=1)


Expr = Annotated[
    ConstExpr | FieldExpr | NextExpr | DispatchExpr | CallExpr | ConcatExpr | ListExpr | JoinExpr,
    Field(discriminator="kind"),
]


class NestedComposition(DescriptionModel):
    """A field value that is itself a composed instance (``new A with B``)."""

    compose: list[str] = Field(min_length=1)
    values: dict[str, FieldValue] = Field(default_factory=dict)


FieldValue = Annotated[NestedComposition | Any, Field(union_mode="left_to_right")]


class TraitSpec(DescriptionModel):
    name: str = Field(min_length=1)
    operations: dict[str, Expr] = Field(default_factory=dict)
    abstract: list[str] = Field(default_factory=list)
    field_shapes: dict[str, str] = Field(default_factory=dict, alias="fields")
    provides: dict[str, FieldValue] = Field(default_factory=dict)
    extends: list[str] = Field(default_factory=list)
    requires: list[str] = Field(default_factory=list)


class CompositionDescription(DescriptionModel):
    name: str | None = None
    traits: list[TraitSpec] = Field(min_length=1)
    compose: list[str] = Field(min_length=1)
    values: dict[str, FieldValue] = Field(default_factory=dict)
    invoke: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _unique_trait_names(self) -> CompositionDescription:
        seen: set[str] = set()
        for trait in self.traits:
            if trait.name in seen:
                raise ValueError(f"duplicate trait name {trait.name!r}")
            seen.add(trait.name)
        return self


for _model in (CallExpr, ConcatExpr, ListExpr, JoinExpr, NestedComposition, TraitSpec):
    _model.model_rebuild()
CompositionDescription.model_rebuild()
