"""Runtime settings read from the environment."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from traitmix.domain.dispatch import DEFAULT_MAX_CALL_DEPTH, MAX_CALL_DEPTH_LIMIT

from .env import optional_env_var, require_env_vars
from .errors import ConfigurationError

LOG_LEVEL_VAR: Final[str] = "TRAITMIX_LOG_LEVEL"
MAX_CALL_DEPTH_VAR: Final[str] = "TRAITMIX_MAX_CALL_DEPTH"
DESCRIPTION_VAR: Final[str] = "TRAITMIX_DESCRIPTION"
TRACE_DISPATCH_VAR: Final[str] = "TRAITMIX_TRACE_DISPATCH"

_LEVELS: Final[dict[str, int]] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}
_TRUE: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})
_FALSE: Final[frozenset[str]] = frozenset({"0", "false", "no", "off"})


@dataclass(frozen=True, slots=True)
class RuntimeConfig:
    log_level: int = logging.INFO
    max_call_depth: int = DEFAULT_MAX_CALL_DEPTH
    trace_dispatch: bool = False


def get_runtime_config() -> RuntimeConfig:
    return RuntimeConfig(
        log_level=_parse_log_level(optional_env_var(LOG_LEVEL_VAR)),
        max_call_depth=_parse_call_depth(optional_env_var(MAX_CALL_DEPTH_VAR)),
        trace_dispatch=_parse_flag(TRACE_DISPATCH_VAR, optional_env_var(TRACE_DISPATCH_VAR)),
    )


def get_description_path(path: str | None = None) -> Path:
    """Return ``path`` or fall back to ``TRAITMIX_DESCRIPTION``."""

    if path is None:
        path = require_env_vars((DESCRIPTION_VAR,))[DESCRIPTION_VAR]
    return Path(path).expanduser()


def _parse_log_level(raw: str | None) -> int:
    if raw is None:
        return logging.INFO
    level = _LEVELS.get(raw.upper())
    if level is None:
        choices = ", ".join(_LEVELS)
        raise ConfigurationError(
            f"{LOG_LEVEL_VAR} must be one of {choices}, got {raw!r}", variable=LOG_LEVEL_VAR
        )
    return level


def _parse_call_depth(raw: str | None) -> int:
    if raw is None:
        return DEFAULT_MAX_CALL_DEPTH
    try:
        depth = int(raw)
    except ValueError as exc:
        raise ConfigurationError(
            f"{MAX_CALL_DEPTH_VAR} must be an integer, got {raw!r}", variable=MAX_CALL_DEPTH_VAR
        ) from exc
    if not 1 <= depth <= MAX_CALL_DEPTH_LIMIT:
        raise ConfigurationError(
            f"{MAX_CALL_DEPTH_VAR} must be between 1 and {MAX_CALL_DEPTH_LIMIT}, got {depth}",
            variable=MAX_CALL_DEPTH_VAR,
        )
    return depth


def _parse_flag(name: str, raw: str | None) -> bool:
    if raw is None:
        return False
    value = raw.lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ConfigurationError(f"{name} must be a boolean flag, got {raw!r}", variable=name)
