"""Exception hierarchy for the relay."""
from typing import Optional


class RelayError(Exception):
    """Base class for all errors raised by assistant_relay."""


class ConfigurationError(RelayError):
    """Raised when required configuration or credentials are missing or invalid."""


class GenerationError(RelayError):
    """Raised (or routed) when the provider reports a failed generation."""

    def __init__(self, message: str, run_id: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.run_id = run_id
