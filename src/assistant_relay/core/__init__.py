"""Core components: base protocols, shared types and the exception hierarchy."""
from .errors import ConfigurationError, GenerationError, RelayError
from .types import Plugin, StructuredError, Subscription

__all__ = [
    "Plugin", "Subscription", "StructuredError",
    "RelayError", "ConfigurationError", "GenerationError",
]
