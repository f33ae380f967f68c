### src/assistant_relay/llm_providers/impl/openai_assistants_provider.py
import logging
from typing import Any, AsyncIterator, Dict, List, Optional

from openai import AsyncOpenAI

from assistant_relay.config.models import RelayConfig
from assistant_relay.core.errors import ConfigurationError, GenerationError
from assistant_relay.llm_providers.abc import GenerationProvider
from assistant_relay.llm_providers.types import (
    GenerationEvent,
    ToolCallRequest,
    ToolOutput,
)
from assistant_relay.prompts.writing_assistant import build_instructions
from assistant_relay.security.key_provider import KeyProvider

logger = logging.getLogger(__name__)


def map_stream_event(event: Any) -> List[GenerationEvent]:
    """
    Converts one OpenAI Assistants stream event into zero or more normalized
    events. Raises GenerationError for the stream-level 'error' event.
    """
    name = getattr(event, "event", None)
    data = getattr(event, "data", None)

    if name == "thread.run.step.created":
        return [{"type": "run_step_created", "run_id": getattr(data, "run_id", None), "step_type": getattr(data, "type", None)}]
    if name == "thread.message.created":
        return [{"type": "message_created"}]
    if name == "thread.message.delta":
        deltas: List[GenerationEvent] = []
        delta = getattr(data, "delta", None)
        for content in getattr(delta, "content", None) or []:
            if getattr(content, "type", None) != "text":
                continue
            value = getattr(getattr(content, "text", None), "value", None)
            if value:
                deltas.append({"type": "text_delta", "value": value})
        return deltas
    if name == "thread.run.requires_action":
        required_action = getattr(data, "required_action", None)
        if getattr(required_action, "type", None) != "submit_tool_outputs":
            logger.warning(f"Unsupported required_action type: {getattr(required_action, 'type', None)}")
            return []
        tool_calls: List[ToolCallRequest] = []
        for tc in required_action.submit_tool_outputs.tool_calls:
            tool_calls.append({"id": tc.id, "name": tc.function.name, "arguments": tc.function.arguments or ""})
        return [{"type": "requires_action", "run_id": data.id, "tool_calls": tool_calls}]
    if name in ("thread.run.completed", "thread.run.incomplete"):
        return [{"type": "completed", "run_id": getattr(data, "id", None)}]
    if name == "thread.run.failed":
        last_error = getattr(data, "last_error", None)
        message = getattr(last_error, "message", None) or "Run failed"
        return [{"type": "run_failed", "run_id": getattr(data, "id", None), "message": message}]
    if name == "thread.run.expired":
        return [{"type": "run_failed", "run_id": getattr(data, "id", None), "message": "Run expired"}]
    if name == "thread.run.cancelled":
        return [{"type": "run_cancelled", "run_id": getattr(data, "id", None)}]
    if name == "error":
        raise GenerationError(getattr(data, "message", None) or "Stream error")
    return []


class OpenAIAssistantsProvider(GenerationProvider):
    plugin_id: str = "openai_assistants_provider_v1"
    description: str = "Generation provider backed by the OpenAI Assistants API (threads and streamed runs)."

    _client: Optional[AsyncOpenAI] = None
    _assistant_id: Optional[str] = None
    _config: RelayConfig

    def __init__(self, client: Optional[AsyncOpenAI] = None):
        self._client = client
        self._config = RelayConfig()

    @property
    def assistant_id(self) -> Optional[str]:
        return self._assistant_id

    async def setup(self, config: Optional[Dict[str, Any]] = None) -> None:
        cfg = config or {}
        self._config = cfg.get("relay_config") or self._config
        if self._client is None:
            key_provider: Optional[KeyProvider] = cfg.get("key_provider")
            if not key_provider or not isinstance(key_provider, KeyProvider):
                raise ConfigurationError(f"{self.plugin_id}: KeyProvider not found in config or is invalid.")
            api_key = await key_provider.get_key(self._config.openai_api_key_name)
            if not api_key:
                raise ConfigurationError(f"{self.plugin_id}: API key '{self._config.openai_api_key_name}' not found via KeyProvider.")
            self._client = AsyncOpenAI(api_key=api_key, base_url=self._config.openai_api_base)

        if self._assistant_id is None:
            assistant = await self._client.beta.assistants.create(
                name=self._config.assistant_name,
                instructions=build_instructions(),
                model=self._config.model_name,
                tools=cfg.get("tool_definitions") or [],
                temperature=self._config.temperature,
            )
            self._assistant_id = assistant.id
            logger.info(f"{self.plugin_id}: Created assistant '{assistant.id}' for model '{self._config.model_name}'.")

    def _require_client(self) -> AsyncOpenAI:
        if not self._client or not self._assistant_id:
            raise RuntimeError(f"{self.plugin_id}: Client not initialized.")
        return self._client

    async def create_context(self) -> str:
        thread = await self._require_client().beta.threads.create()
        logger.debug(f"{self.plugin_id}: Created thread '{thread.id}'.")
        return thread.id

    async def append_user_message(self, context_id: str, text: str) -> None:
        await self._require_client().beta.threads.messages.create(context_id, role="user", content=text)

    async def start_generation(self, context_id: str, instructions: str) -> AsyncIterator[GenerationEvent]:
        client = self._require_client()
        manager = client.beta.threads.runs.stream(
            thread_id=context_id,
            assistant_id=self._assistant_id,
            instructions=instructions,
        )
        async with manager as stream:
            async for event in stream:
                for mapped in map_stream_event(event):
                    yield mapped

    async def submit_tool_outputs(self, context_id: str, run_id: str, outputs: List[ToolOutput]) -> AsyncIterator[GenerationEvent]:
        client = self._require_client()
        manager = client.beta.threads.runs.submit_tool_outputs_stream(
            run_id=run_id,
            thread_id=context_id,
            tool_outputs=[{"tool_call_id": o["tool_call_id"], "output": o["output"]} for o in outputs],
        )
        async with manager as stream:
            async for event in stream:
                for mapped in map_stream_event(event):
                    yield mapped

    async def cancel_generation(self, context_id: str, run_id: str) -> None:
        await self._require_client().beta.threads.runs.cancel(run_id, thread_id=context_id)
        logger.info(f"{self.plugin_id}: Requested cancellation of run '{run_id}'.")

    async def teardown(self) -> None:
        if self._client:
            await self._client.close()
            self._client = None
        self._assistant_id = None
        logger.info(f"{self.plugin_id}: Teardown complete.")
