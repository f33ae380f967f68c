"""
Generation providers: the protocol, normalized event types and the OpenAI
Assistants implementation.
"""
from .abc import GenerationProvider
from .impl.openai_assistants_provider import OpenAIAssistantsProvider
from .types import (
    GenerationEvent,
    GenerationEventStream,
    ToolCallRequest,
    ToolOutput,
)

__all__ = [
    "GenerationProvider",
    "OpenAIAssistantsProvider",
    "GenerationEvent",
    "GenerationEventStream",
    "ToolCallRequest",
    "ToolOutput",
]
