"""Logging setup for the traitmix CLI."""

from __future__ import annotations

import logging
from typing import Final

# Logs one line per chain step, which floods DEBUG output for recursive compositions.
DISPATCH_LOGGER: Final[str] = "traitmix.domain.dispatch"


def configure_logging(
    *,
    level: int = logging.INFO,
    force: bool = False,
    trace_dispatch: bool = False,
) -> None:
    """Configure the root logger for CLI output.

    Linearization and app events follow ``level``. Per-step dispatch records
    are only emitted when ``trace_dispatch`` is set; otherwise the dispatcher
    logger is held at INFO or above even when ``level`` is DEBUG.
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
    dispatch_level = level if trace_dispatch else max(level, logging.INFO)
    logging.getLogger(DISPATCH_LOGGER).setLevel(dispatch_level)
