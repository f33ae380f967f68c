"""Generation streaming: the per-response state machine and its helpers."""
from .response_handler import ResponseHandler
from .throttle import should_persist
from .types import TERMINAL_STATES, GenerationSnapshot, GenerationState

__all__ = ["ResponseHandler", "should_persist", "GenerationSnapshot", "GenerationState", "TERMINAL_STATES"]
