"""Custom exceptions for veritas-check."""


class VeritasError(Exception):
    """Base exception for application-level errors."""


class ConfigError(VeritasError):
    """Raised when configuration or reference data cannot be loaded."""


class ArbiterError(VeritasError):
    """Base class for arbitration failures the gateway degrades from."""


class ArbiterUnavailable(ArbiterError):
    """Raised when the arbitration service is unreachable or unconfigured."""


class ArbiterTimeout(ArbiterError):
    """Raised when the arbitration service did not answer in time."""


class ArbiterContractError(ArbiterError):
    """Raised in strict mode when the arbiter returns a verdict outside the enum."""
