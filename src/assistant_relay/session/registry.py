"""SessionRegistry: one SessionController per conversation, with idle reaping."""
import asyncio
import logging
import time
from typing import Callable, Dict, List, Optional

from .controller import SessionController

logger = logging.getLogger(__name__)

ControllerFactory = Callable[[str], SessionController]

class SessionRegistry:
    def __init__(self, factory: ControllerFactory):
        self._factory = factory
        self._controllers: Dict[str, SessionController] = {}
        self._lock = asyncio.Lock()
        logger.info("SessionRegistry initialized.")

    def get(self, conversation_id: str) -> Optional[SessionController]:
        return self._controllers.get(conversation_id)

    @property
    def conversation_ids(self) -> List[str]:
        return list(self._controllers)

    async def start(self, conversation_id: str) -> SessionController:
        """Attaches a controller to the conversation, reusing an existing one."""
        async with self._lock:
            existing = self._controllers.get(conversation_id)
            if existing:
                logger.debug(f"SessionRegistry: Conversation '{conversation_id}' already active.")
                return existing
            controller = self._factory(conversation_id)
            # ConfigurationError propagates; the conversation is never registered.
            await controller.attach(conversation_id)
            self._controllers[conversation_id] = controller
            logger.info(f"SessionRegistry: Started session for conversation '{conversation_id}'.")
            return controller

    async def stop(self, conversation_id: str) -> bool:
        async with self._lock:
            controller = self._controllers.pop(conversation_id, None)
        if not controller:
            return False
        await controller.detach()
        logger.info(f"SessionRegistry: Stopped session for conversation '{conversation_id}'.")
        return True

    async def reap_idle(self, max_idle_seconds: float, now: Optional[float] = None) -> List[str]:
        """Stops every session whose last interaction is older than ``max_idle_seconds``."""
        current = time.time() if now is None else now
        idle = [
            cid for cid, controller in list(self._controllers.items())
            if current - controller.get_last_interaction() > max_idle_seconds
        ]
        for cid in idle:
            logger.info(f"SessionRegistry: Reaping idle session for conversation '{cid}'.")
            await self.stop(cid)
        return idle

    async def stop_all(self) -> None:
        for cid in list(self._controllers):
            await self.stop(cid)
