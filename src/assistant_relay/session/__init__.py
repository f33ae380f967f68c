"""Conversation-level session management."""
from .controller import SessionController
from .registry import SessionRegistry

__all__ = ["SessionController", "SessionRegistry"]
