"""Chat transport protocol, payload types and the in-memory implementation."""
from .abc import ChatTransport
from .impl.in_memory import InMemoryChatTransport
from .types import (
    AI_INDICATOR_CLEAR,
    AI_INDICATOR_STOP,
    AI_INDICATOR_UPDATE,
    MESSAGE_NEW,
    InboundMessage,
    MessageRecord,
    parse_message_event,
)

__all__ = [
    "ChatTransport",
    "InMemoryChatTransport",
    "InboundMessage",
    "MessageRecord",
    "parse_message_event",
    "MESSAGE_NEW",
    "AI_INDICATOR_UPDATE",
    "AI_INDICATOR_CLEAR",
    "AI_INDICATOR_STOP",
]
