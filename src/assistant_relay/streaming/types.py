"""Types describing one generation's lifecycle."""
from typing import Literal, Optional, TypedDict

GenerationState = Literal["PENDING", "GENERATING", "AWAITING_TOOLS", "COMPLETED", "CANCELLED", "ERROR"]

TERMINAL_STATES = frozenset({"COMPLETED", "CANCELLED", "ERROR"})


class GenerationSnapshot(TypedDict):
    """Point-in-time view of a ResponseHandler's generation."""
    run_id: Optional[str]
    message_id: str
    conversation_id: str
    state: GenerationState
    accumulated_text: str
    chunk_count: int
    done: bool
