"""Ephemeral indicator signals."""
from .broadcaster import IndicatorBroadcaster
from .types import AI_STATE_VALUES, IndicatorState

__all__ = ["IndicatorBroadcaster", "IndicatorState", "AI_STATE_VALUES"]
