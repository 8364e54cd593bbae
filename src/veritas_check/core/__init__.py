"""Shared primitives."""

from veritas_check.core.errors import (
    ArbiterContractError,
    ArbiterError,
    ArbiterTimeout,
    ArbiterUnavailable,
    ConfigError,
    VeritasError,
)

__all__ = [
    "VeritasError",
    "ConfigError",
    "ArbiterError",
    "ArbiterUnavailable",
    "ArbiterTimeout",
    "ArbiterContractError",
]
