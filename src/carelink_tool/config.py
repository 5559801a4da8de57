"""Configuración del puente leída desde variables de entorno."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

SGV_LIMIT_ENV = "CARELINK_SGV_LIMIT"
QUIET_ENV = "CARELINK_QUIET"


@dataclass(frozen=True)
class BridgeConfig:
    """Runtime configuration for one transform run."""

    sgv_limit: int | None = None
    verbose: bool = True

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> BridgeConfig:
        """Read configuration from environment variables.

        Args:
            environ: Mapping to read (default: ``os.environ``).

        Returns:
            Parsed configuration.

        Raises:
            ValueError: If ``CARELINK_SGV_LIMIT`` is not a non-negative integer.
        """
        env = os.environ if environ is None else environ
        return cls(
            sgv_limit=parse_sgv_limit(env.get(SGV_LIMIT_ENV)),
            verbose=not env.get(QUIET_ENV),
        )


def parse_sgv_limit(value: str | None) -> int | None:
    """Parse a limit string; empty/None means unbounded."""
    if value is None or not value.strip():
        return None
    limit = int(value)
    if limit < 0:
        raise ValueError(f"{SGV_LIMIT_ENV} must be non-negative, got {limit}")
    return limit
