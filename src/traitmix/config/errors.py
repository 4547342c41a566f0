"""Errors raised while reading traitmix settings from the environment."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence


class ConfigurationError(RuntimeError):
    """An environment variable holds a value traitmix cannot use.

    ``variable`` names the offending setting when a single one is at fault.
    """

    def __init__(self, message: str, *, variable: str | None = None) -> None:
        super().__init__(message)
        self.variable = variable


class MissingConfigurationError(ConfigurationError):
    """Required settings are unset or blank; ``missing`` lists them sorted."""

    def __init__(self, missing: Sequence[str]) -> None:
        self.missing = tuple(sorted(missing))
        super().__init__(f"Missing configuration for: {', '.join(self.missing)}")
