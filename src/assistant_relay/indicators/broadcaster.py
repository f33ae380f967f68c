"""IndicatorBroadcaster: fire-and-forget status signals scoped to one message."""
import logging

from assistant_relay.transport.abc import ChatTransport
from assistant_relay.transport.types import AI_INDICATOR_CLEAR, AI_INDICATOR_UPDATE

from .types import AI_STATE_VALUES, IndicatorState

logger = logging.getLogger(__name__)

class IndicatorBroadcaster:
    def __init__(self, transport: ChatTransport):
        self._transport = transport

    async def update(self, conversation_id: str, message_id: str, state: IndicatorState) -> None:
        ai_state = AI_STATE_VALUES.get(state)
        if ai_state is None:
            logger.warning(f"IndicatorBroadcaster: Unknown indicator state '{state}'. Ignoring.")
            return
        event = {"type": AI_INDICATOR_UPDATE, "ai_state": ai_state, "cid": conversation_id, "message_id": message_id}
        try:
            await self._transport.send_event(conversation_id, event)
            logger.debug(f"IndicatorBroadcaster: Sent {ai_state} for message '{message_id}'.")
        except Exception as e:
            logger.error(f"IndicatorBroadcaster: Failed to send {ai_state} for message '{message_id}': {e}", exc_info=True)

    async def clear(self, conversation_id: str, message_id: str) -> None:
        event = {"type": AI_INDICATOR_CLEAR, "cid": conversation_id, "message_id": message_id}
        try:
            await self._transport.send_event(conversation_id, event)
            logger.debug(f"IndicatorBroadcaster: Cleared indicator for message '{message_id}'.")
        except Exception as e:
            logger.error(f"IndicatorBroadcaster: Failed to clear indicator for message '{message_id}': {e}", exc_info=True)
