"""Read composition descriptions from JSON documents."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import ValidationError

from .schema import CompositionDescription
from .translator import DescriptionError

if TYPE_CHECKING:
    from pathlib import Path


def parse_description(payload: str | bytes) -> CompositionDescription:
    try:
        return CompositionDescription.model_validate_json(payload)
    except ValidationError as exc:
        raise DescriptionError(f"Invalid composition description: {exc}") from exc


def load_description(path: Path) -> CompositionDescription:
    """Load and validate the description stored at ``path``."""

    try:
        payload = path.read_bytes()
    except OSError as exc:
        raise DescriptionError(f"Cannot read description {path}: {exc}") from exc
    return parse_description(payload)
