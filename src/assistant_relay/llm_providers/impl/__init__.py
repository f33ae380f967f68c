"""Concrete GenerationProvider implementations."""
from .openai_assistants_provider import OpenAIAssistantsProvider, map_stream_event

__all__ = ["OpenAIAssistantsProvider", "map_stream_event"]
