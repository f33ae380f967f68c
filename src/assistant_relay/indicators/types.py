"""Indicator states sent on the conversation's side channel."""
from typing import Dict, Literal

IndicatorState = Literal["THINKING", "GENERATING", "EXTERNAL_SOURCES", "ERROR"]

AI_STATE_VALUES: Dict[str, str] = {
    "THINKING": "AI_STATE_THINKING",
    "GENERATING": "AI_STATE_GENERATING",
    "EXTERNAL_SOURCES": "AI_STATE_EXTERNAL_SOURCES",
    "ERROR": "AI_STATE_ERROR",
}
