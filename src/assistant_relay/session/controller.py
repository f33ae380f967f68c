"""SessionController: binds one chat conversation to one provider conversation context."""
import asyncio
import logging
import time
from typing import Any, Dict, Mapping, Optional, Set

from assistant_relay.config.models import RelayConfig
from assistant_relay.core.errors import ConfigurationError, RelayError
from assistant_relay.core.types import Subscription
from assistant_relay.indicators.broadcaster import IndicatorBroadcaster
from assistant_relay.llm_providers.abc import GenerationProvider
from assistant_relay.log_adapters.abc import LogAdapter
from assistant_relay.prompts.writing_assistant import build_instructions, extract_writing_context
from assistant_relay.security.key_provider import KeyProvider
from assistant_relay.streaming.response_handler import ResponseHandler
from assistant_relay.tools.executor import ToolExecutor
from assistant_relay.tools.impl.web_search import WebSearchTool
from assistant_relay.transport.abc import ChatTransport
from assistant_relay.transport.types import MESSAGE_NEW, MessageRecord, TransportEvent, parse_message_event

logger = logging.getLogger(__name__)

class SessionController:
    """
    Listens for inbound user messages on a conversation and spawns one
    ResponseHandler per message. Tracks live handlers by message id so they
    can be disposed in bulk on ``detach()``.
    """

    def __init__(
        self,
        config: RelayConfig,
        transport: ChatTransport,
        provider: GenerationProvider,
        key_provider: Optional[KeyProvider] = None,
        tool_executor: Optional[ToolExecutor] = None,
        log_adapter: Optional[LogAdapter] = None,
    ):
        self._config = config
        self._transport = transport
        self._provider = provider
        self._key_provider = key_provider
        if tool_executor is None and key_provider is not None:
            tool_executor = ToolExecutor(key_provider, [WebSearchTool(config.search)])
        self._tool_executor = tool_executor
        self._log_adapter = log_adapter
        self._indicators = IndicatorBroadcaster(transport)

        self._conversation_id: Optional[str] = None
        self._thread_id: Optional[str] = None
        self._message_subscription: Optional[Subscription] = None
        self._active: Dict[str, ResponseHandler] = {}
        self._tasks: Set["asyncio.Task[None]"] = set()
        self._generation_lock = asyncio.Lock()
        self._last_interaction_at = time.time()
        self._attached = False
        self._detached = False

    @property
    def conversation_id(self) -> Optional[str]:
        return self._conversation_id

    @property
    def thread_id(self) -> Optional[str]:
        return self._thread_id

    @property
    def attached(self) -> bool:
        return self._attached and not self._detached

    @property
    def active_generations(self) -> Mapping[str, ResponseHandler]:
        return dict(self._active)

    def get_last_interaction(self) -> float:
        return self._last_interaction_at

    async def attach(self, conversation_id: str) -> None:
        """
        Binds the controller to a conversation and starts listening for user
        messages.

        Credentials are checked here when a KeyProvider was given. Without
        one, the provider's own ``setup`` is responsible for raising
        ConfigurationError (OpenAIAssistantsProvider does unless it was built
        with a ready client). In both cases a failed attach leaves no
        subscription behind.

        The log adapter, if any, is set up with ``default_log_level``; its
        teardown stays with whoever created it, since it may be shared.
        """
        if self._detached:
            raise RelayError("SessionController has been detached and cannot be re-attached.")
        if self._attached:
            logger.debug(f"SessionController: Already attached to '{self._conversation_id}'.")
            return

        if self._log_adapter:
            await self._log_adapter.setup({"log_level": self._config.default_log_level})
        await self._validate_credentials()
        tool_definitions = []
        if self._tool_executor:
            await self._tool_executor.setup()
            tool_definitions = await self._tool_executor.get_tool_definitions()
        await self._provider.setup({
            "key_provider": self._key_provider,
            "relay_config": self._config,
            "tool_definitions": tool_definitions,
        })
        if self._thread_id is None:
            self._thread_id = await self._provider.create_context()

        self._conversation_id = conversation_id
        self._message_subscription = self._transport.subscribe(MESSAGE_NEW, self._handle_message_event)
        self._attached = True
        logger.info(f"SessionController: Attached to conversation '{conversation_id}' (thread '{self._thread_id}').")

    async def _validate_credentials(self) -> None:
        if not self._key_provider:
            logger.debug("SessionController: No KeyProvider given; the provider validates its own credentials during setup.")
            return
        if not await self._key_provider.get_key(self._config.openai_api_key_name):
            raise ConfigurationError(f"OpenAI API key is required ('{self._config.openai_api_key_name}' not found).")
        if not await self._key_provider.get_key(self._config.search.api_key_name):
            logger.warning(f"SessionController: '{self._config.search.api_key_name}' not configured; web search will report itself unavailable.")

    async def _handle_message_event(self, event: TransportEvent) -> None:
        inbound = parse_message_event(event)
        if inbound is None:
            return
        if self._conversation_id and inbound["conversation_id"] and inbound["conversation_id"] != self._conversation_id:
            return
        own_user_id = self._transport.user_id
        if inbound["is_assistant_generated"] or (own_user_id and inbound["sender_id"] == own_user_id):
            logger.debug("SessionController: Skip handling ai generated message.")
            return
        if not inbound["text"]:
            return

        self._last_interaction_at = time.time()
        instructions = build_instructions(extract_writing_context(inbound["custom"]))
        try:
            await self._spawn_handler(inbound["text"], instructions)
        except Exception as e:
            logger.error(f"SessionController: Failed to start generation for message '{inbound['message_id']}': {e}", exc_info=True)

    async def _spawn_handler(self, text: str, instructions: str) -> None:
        if not self._thread_id or not self._conversation_id:
            logger.warning("SessionController: Not attached. Ignoring inbound message.")
            return
        cid = self._conversation_id

        async with self._generation_lock:
            await self._provider.append_user_message(self._thread_id, text)
            placeholder = await self._transport.send_message(
                cid, {"text": "", "ai_generated": True, "generating": True}
            )
            await self._indicators.update(cid, placeholder["id"], "THINKING")
            try:
                stream = self._provider.start_generation(self._thread_id, instructions)
            except Exception as e:
                logger.error(f"SessionController: Provider rejected generation request: {e}", exc_info=True)
                await self._fail_placeholder(placeholder, e)
                return

        if placeholder["id"] in self._active:
            # Transports hand out unique ids; a collision means a stale handler.
            logger.warning(f"SessionController: Replacing active handler for message '{placeholder['id']}'.")
            await self._active[placeholder["id"]].dispose()

        handler = ResponseHandler(
            provider=self._provider,
            context_id=self._thread_id,
            stream=stream,
            transport=self._transport,
            message=placeholder,
            indicators=self._indicators,
            tool_executor=self._tool_executor,
            config=self._config,
            on_dispose=self._remove_handler,
            log_adapter=self._log_adapter,
        )
        self._active[handler.message_id] = handler
        task = asyncio.create_task(handler.run())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _fail_placeholder(self, placeholder: MessageRecord, error: Exception) -> None:
        fields: Dict[str, Any] = {"text": str(error) or "Error generating the message", "generating": False}
        try:
            await self._transport.partial_update_message(placeholder["id"], fields)
        except Exception as e:
            logger.error(f"SessionController: Could not write error into message '{placeholder['id']}': {e}", exc_info=True)
        await self._indicators.update(placeholder.get("cid", ""), placeholder["id"], "ERROR")
        await self._indicators.clear(placeholder.get("cid", ""), placeholder["id"])

    def _remove_handler(self, handler: ResponseHandler) -> None:
        if self._active.get(handler.message_id) is handler:
            del self._active[handler.message_id]

    async def wait_idle(self) -> None:
        """Waits for every in-flight generation task to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def detach(self) -> None:
        if self._detached:
            return
        self._detached = True
        if self._message_subscription:
            self._message_subscription.unsubscribe()
            self._message_subscription = None

        for handler in list(self._active.values()):
            await handler.dispose()
        self._active.clear()

        pending = [t for t in self._tasks if not t.done()]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

        try:
            await self._transport.disconnect()
        except Exception as e:
            logger.error(f"SessionController: Error disconnecting transport: {e}", exc_info=True)
        if self._tool_executor:
            await self._tool_executor.teardown()
        try:
            await self._provider.teardown()
        except Exception as e:
            logger.error(f"SessionController: Error tearing down provider '{self._provider.plugin_id}': {e}", exc_info=True)
        logger.info(f"SessionController: Detached from conversation '{self._conversation_id}'.")
