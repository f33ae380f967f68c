# src/assistant_relay/core/types.py
"""Core shared types and protocols for the relay."""
import logging
from typing import (
    Any,
    Dict,
    Optional,
    Protocol,
    TypedDict,
    runtime_checkable,
)

logger = logging.getLogger(__name__)

@runtime_checkable
class Plugin(Protocol):
    """Base protocol for all pluggable components."""
    @property
    def plugin_id(self) -> str:
        """A unique string identifier for this plugin instance/type."""
        ...

    async def setup(self, config: Optional[Dict[str, Any]] = None) -> None:
        """
        Optional asynchronous setup method.

        Args:
            config: A dictionary containing the specific configuration for this
                component. Components that need credentials expect a
                'key_provider' entry here.
        """
        pass

    async def teardown(self) -> None:
        """Optional asynchronous teardown method. Called before shutdown."""
        pass


@runtime_checkable
class Subscription(Protocol):
    """Handle returned when registering a listener; releasing it is idempotent."""
    @property
    def active(self) -> bool:
        ...

    def unsubscribe(self) -> None:
        ...


class StructuredError(TypedDict, total=False):
    """Standardized structure for reporting errors, especially back to the LLM."""
    error: str
    details: Optional[Any]
