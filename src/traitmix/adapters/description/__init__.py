"""Public interface for the JSON composition-description adapter."""

from __future__ import annotations

from .loader import load_description, parse_description
from .schema import CompositionDescription, NestedComposition, TraitSpec
from .translator import (
    BUILTIN_SHAPES,
    DescriptionError,
    TranslatedDescription,
    translate_description,
)

__all__ = [
    "BUILTIN_SHAPES",
    "CompositionDescription",
    "DescriptionError",
    "NestedComposition",
    "TraitSpec",
    "TranslatedDescription",
    "load_description",
    "parse_description",
    "translate_description",
]
