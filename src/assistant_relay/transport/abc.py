"""Protocol for the chat transport that holds the shared transcript."""
import logging
from typing import Any, Dict, Optional, Protocol, runtime_checkable

from assistant_relay.core.types import Subscription

from .types import EventCallback, MessageRecord, TransportEvent

logger = logging.getLogger(__name__)

@runtime_checkable
class ChatTransport(Protocol):
    """
    The persisted, shared conversation transcript plus its ephemeral side
    channel. Implementations wrap a real chat SDK; the relay only relies on
    the operations below.
    """

    @property
    def user_id(self) -> Optional[str]:
        """Identity the assistant posts as; used to ignore its own messages."""
        ...

    async def send_message(self, conversation_id: str, message: Dict[str, Any]) -> MessageRecord:
        ...

    async def partial_update_message(self, message_id: str, set_fields: Dict[str, Any]) -> MessageRecord:
        ...

    async def get_message(self, message_id: str) -> Optional[MessageRecord]:
        ...

    async def send_event(self, conversation_id: str, event: TransportEvent) -> None:
        ...

    def subscribe(self, event_type: str, callback: EventCallback) -> Subscription:
        """Registers an async callback for an event type and returns its handle."""
        ...

    async def disconnect(self) -> None:
        ...
