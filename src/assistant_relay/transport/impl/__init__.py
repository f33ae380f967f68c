"""Concrete ChatTransport implementations."""
from .in_memory import InMemoryChatTransport

__all__ = ["InMemoryChatTransport"]
