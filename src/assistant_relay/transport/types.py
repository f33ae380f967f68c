# src/assistant_relay/transport/types.py
"""Payload types exchanged with the chat transport."""
from typing import Any, Awaitable, Callable, Dict, Optional, TypedDict

MESSAGE_NEW = "message.new"
AI_INDICATOR_UPDATE = "ai_indicator.update"
AI_INDICATOR_CLEAR = "ai_indicator.clear"
AI_INDICATOR_STOP = "ai_indicator.stop"

TransportEvent = Dict[str, Any]
EventCallback = Callable[[TransportEvent], Awaitable[None]]


class MessageRecord(TypedDict, total=False):
    """A transcript entry as stored by the transport."""
    id: str
    cid: str
    text: str
    user_id: Optional[str]
    ai_generated: bool
    generating: bool
    custom: Dict[str, Any]
    error: Optional[str]


class InboundMessage(TypedDict):
    """A normalized 'message.new' notification."""
    conversation_id: str
    message_id: str
    text: str
    sender_id: Optional[str]
    is_assistant_generated: bool
    custom: Dict[str, Any]


def parse_message_event(event: TransportEvent) -> Optional[InboundMessage]:
    """Normalizes a raw 'message.new' event. Returns None if it carries no message."""
    message = event.get("message")
    if not isinstance(message, dict):
        return None
    user = message.get("user") or {}
    sender_id = user.get("id") if isinstance(user, dict) else None
    return InboundMessage(
        conversation_id=event.get("cid") or message.get("cid") or "",
        message_id=message.get("id") or "",
        text=message.get("text") or "",
        sender_id=sender_id or message.get("user_id"),
        is_assistant_generated=bool(message.get("ai_generated")),
        custom=message.get("custom") or {},
    )
