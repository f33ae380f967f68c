# src/assistant_relay/llm_providers/abc.py
import logging
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

from assistant_relay.core.types import Plugin

from .types import GenerationEventStream, ToolOutput

logger = logging.getLogger(__name__)

@runtime_checkable
class GenerationProvider(Plugin, Protocol):
    """
    Protocol for a provider that keeps a persistent conversation context
    ("thread") and produces streamed generations ("runs") against it.
    """
    plugin_id: str
    description: str

    async def setup(self, config: Optional[Dict[str, Any]] = None) -> None:
        """
        Initializes the provider. ``config`` carries 'key_provider',
        'relay_config' and 'tool_definitions'. Raises ConfigurationError when
        the provider credential cannot be resolved.
        """
        ...

    async def create_context(self) -> str:
        """Creates a new provider conversation context and returns its id."""
        ...

    async def append_user_message(self, context_id: str, text: str) -> None:
        ...

    def start_generation(self, context_id: str, instructions: str) -> GenerationEventStream:
        """
        Returns the event stream of a new generation. The request is issued
        when the stream is first iterated; failures surface as exceptions
        raised from iteration.
        """
        ...

    def submit_tool_outputs(self, context_id: str, run_id: str, outputs: List[ToolOutput]) -> GenerationEventStream:
        """Resumes a generation waiting on tools and returns its continuation stream."""
        ...

    async def cancel_generation(self, context_id: str, run_id: str) -> None:
        ...
