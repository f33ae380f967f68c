# src/assistant_relay/llm_providers/types.py
"""Normalized generation events, independent of any provider SDK."""
from typing import AsyncIterator, List, Literal, Optional, TypedDict, Union


class ToolCallRequest(TypedDict):
    """A provider-issued request to run a tool before generation can continue."""
    id: str
    name: str
    arguments: str # JSON string, as produced by the provider

class ToolOutput(TypedDict):
    """The result echoed back to the provider for one ToolCallRequest."""
    tool_call_id: str
    output: str


class RunStepCreatedEvent(TypedDict):
    type: Literal["run_step_created"]
    run_id: Optional[str]
    step_type: Optional[str] # e.g. "message_creation", "tool_calls"

class MessageCreatedEvent(TypedDict):
    type: Literal["message_created"]

class TextDeltaEvent(TypedDict):
    type: Literal["text_delta"]
    value: str

class RequiresActionEvent(TypedDict):
    type: Literal["requires_action"]
    run_id: str
    tool_calls: List[ToolCallRequest]

class CompletedEvent(TypedDict):
    type: Literal["completed"]
    run_id: Optional[str]

class RunFailedEvent(TypedDict):
    type: Literal["run_failed"]
    run_id: Optional[str]
    message: Optional[str]

class RunCancelledEvent(TypedDict):
    type: Literal["run_cancelled"]
    run_id: Optional[str]


GenerationEvent = Union[
    RunStepCreatedEvent,
    MessageCreatedEvent,
    TextDeltaEvent,
    RequiresActionEvent,
    CompletedEvent,
    RunFailedEvent,
    RunCancelledEvent,
]

# Errors raised while iterating a stream are the provider's "stream-error" signal.
GenerationEventStream = AsyncIterator[GenerationEvent]
