"""Prompt text and instruction composition."""
from .writing_assistant import (
    DEFAULT_WRITING_CONTEXT,
    WRITING_ASSISTANT_PROMPT,
    build_instructions,
    extract_writing_context,
)

__all__ = [
    "DEFAULT_WRITING_CONTEXT",
    "WRITING_ASSISTANT_PROMPT",
    "build_instructions",
    "extract_writing_context",
]
