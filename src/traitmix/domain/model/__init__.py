"""Public domain model surface."""

from __future__ import annotations

from traitmix.domain.model.composition import Composition, compose
from traitmix.domain.model.shapes import Composed, Shape, conforms, shape_name, unsatisfied
from traitmix.domain.model.traits import CallContext, OperationBody, TraitDef

__all__ = [
    "CallContext",
    "Composed",
    "Composition",
    "OperationBody",
    "Shape",
    "TraitDef",
    "compose",
    "conforms",
    "shape_name",
    "unsatisfied",
]
