"""Abstract Base Classes/Protocols for LogAdapter Plugins."""
import logging
from typing import Any, Dict, Optional, Protocol, runtime_checkable

from assistant_relay.core.types import Plugin

logger = logging.getLogger(__name__)

@runtime_checkable
class LogAdapter(Plugin, Protocol):
    """Protocol for a logging/monitoring adapter."""
    plugin_id: str
    description: str

    async def setup(self, config: Optional[Dict[str, Any]] = None) -> None:
        """Configures logging handlers or integrates with external monitoring systems."""
        pass

    async def process_event(self, event_type: str, data: Dict[str, Any]) -> None:
        """
        Processes a structured lifecycle event.
        Args:
            event_type: A string identifying the event (e.g., "generation.finished").
            data: A dictionary containing event-specific data.
        """
        pass
