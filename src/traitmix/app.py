"""Application orchestration entry points."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from traitmix.adapters.description import translate_description
from traitmix.config import RuntimeConfig
from traitmix.demos import DEMOS
from traitmix.domain.dispatch import Instance, instantiate
from traitmix.domain.linearization import build

if TYPE_CHECKING:
    from collections.abc import Sequence

    from traitmix.adapters.description import CompositionDescription


log = getLogger(__name__)


def list_demos() -> list[str]:
    return sorted(DEMOS)


def run_demo(name: str, *, config: RuntimeConfig | None = None) -> list[str]:
    """Run the built-in demo ``name`` and return its output lines."""

    demo = DEMOS.get(name)
    if demo is None:
        raise ValueError(f"Unknown demo {name!r}; choose from {', '.join(list_demos())}")
    effective_config = config or RuntimeConfig()
    log.info("Running demo %s", name)
    return demo(effective_config.max_call_depth)


def run_description(
    description: CompositionDescription,
    *,
    ops: Sequence[str] | None = None,
    config: RuntimeConfig | None = None,
) -> list[str]:
    """Compose ``description`` and invoke the requested operations.

    Operations default to the description's ``invoke`` list, then to every
    operation of the composition in chain-table order.
    """

    effective_config = config or RuntimeConfig()
    translated = translate_description(
        description, max_call_depth=effective_config.max_call_depth
    )
    instance = instantiate(translated.composition, max_call_depth=effective_config.max_call_depth)
    selected = list(ops or translated.invoke or instance.table.operations)
    log.info("Invoking %s on %s", ", ".join(selected), translated.name)
    return [f"{op}: {_render(instance.invoke(op))}" for op in selected]


def describe_chains(
    description: CompositionDescription,
    *,
    config: RuntimeConfig | None = None,
) -> list[str]:
    """Render each resolution chain, least specific first."""

    effective_config = config or RuntimeConfig()
    translated = translate_description(
        description, max_call_depth=effective_config.max_call_depth
    )
    table = build(translated.composition)
    lines = [f"{translated.name}:"]
    for op, chain in table.chains.items():
        lines.append(f"  {op}: {' -> '.join(trait.name for trait in chain)}")
    for field, value in table.field_values.items():
        owners = ", ".join(trait.name for trait, _ in table.requirements.get(field, ()))
        suffix = f" (required by {owners})" if owners else ""
        lines.append(f"  field {field} = {_render(value)}{suffix}")
    return lines


def _render(value: object) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, Instance):
        return repr(value)
    if isinstance(value, list | tuple):
        return ", ".join(_render(item) for item in value)
    return str(value)
