# src/assistant_relay/transport/impl/in_memory.py
import asyncio
import logging
import uuid
from typing import Any, Dict, List, Optional, Tuple

from assistant_relay.transport.abc import ChatTransport
from assistant_relay.transport.types import EventCallback, MessageRecord, TransportEvent

logger = logging.getLogger(__name__)

class _InMemorySubscription:
    def __init__(self, transport: "InMemoryChatTransport", event_type: str, callback: EventCallback):
        self._transport = transport
        self._event_type = event_type
        self._callback = callback
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def unsubscribe(self) -> None:
        if not self._active:
            return
        self._active = False
        self._transport._remove_listener(self._event_type, self._callback)


class InMemoryChatTransport(ChatTransport):
    """
    Transcript and side channel kept in process memory. Every update and
    event is recorded in order so observers (and tests) can inspect them.
    """
    plugin_id: str = "in_memory_chat_transport_v1"

    def __init__(self, user_id: Optional[str] = "ai-assistant"):
        self._user_id = user_id
        self._messages: Dict[str, MessageRecord] = {}
        self._listeners: Dict[str, List[EventCallback]] = {}
        self._lock = asyncio.Lock()
        self.updates: List[Tuple[str, Dict[str, Any]]] = []
        self.events: List[Tuple[str, TransportEvent]] = []
        self.connected = True

    @property
    def user_id(self) -> Optional[str]:
        return self._user_id

    async def send_message(self, conversation_id: str, message: Dict[str, Any]) -> MessageRecord:
        message_id = message.get("id") or str(uuid.uuid4())
        record = MessageRecord(
            id=message_id,
            cid=conversation_id,
            text=message.get("text", ""),
            user_id=message.get("user_id", self._user_id),
            ai_generated=bool(message.get("ai_generated", False)),
            generating=bool(message.get("generating", False)),
            custom=dict(message.get("custom") or {}),
        )
        async with self._lock:
            self._messages[message_id] = record
        logger.debug(f"{self.plugin_id}: Stored message '{message_id}' in '{conversation_id}'.")
        return MessageRecord(**record)

    async def partial_update_message(self, message_id: str, set_fields: Dict[str, Any]) -> MessageRecord:
        async with self._lock:
            record = self._messages.get(message_id)
            if record is None:
                raise KeyError(f"Message '{message_id}' not found.")
            record.update(set_fields)  # type: ignore[typeddict-item]
            self.updates.append((message_id, dict(set_fields)))
            return MessageRecord(**record)

    async def get_message(self, message_id: str) -> Optional[MessageRecord]:
        async with self._lock:
            record = self._messages.get(message_id)
            return MessageRecord(**record) if record else None

    async def send_event(self, conversation_id: str, event: TransportEvent) -> None:
        self.events.append((conversation_id, dict(event)))

    def subscribe(self, event_type: str, callback: EventCallback) -> _InMemorySubscription:
        self._listeners.setdefault(event_type, []).append(callback)
        return _InMemorySubscription(self, event_type, callback)

    def _remove_listener(self, event_type: str, callback: EventCallback) -> None:
        listeners = self._listeners.get(event_type, [])
        if callback in listeners:
            listeners.remove(callback)

    def listener_count(self, event_type: str) -> int:
        return len(self._listeners.get(event_type, []))

    async def publish(self, event: TransportEvent) -> None:
        """Delivers an inbound event to every listener registered for its type."""
        if not self.connected:
            logger.debug(f"{self.plugin_id}: Dropping event '{event.get('type')}' after disconnect.")
            return
        for callback in list(self._listeners.get(event.get("type", ""), [])):
            await callback(event)

    async def disconnect(self) -> None:
        self.connected = False
        self._listeners.clear()
        logger.info(f"{self.plugin_id}: Disconnected.")
