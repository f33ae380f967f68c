"""Protocol for KeyProvider: Securely provides API keys to the provider and tools."""
import logging
from typing import Optional, Protocol, runtime_checkable

logger = logging.getLogger(__name__)

@runtime_checkable
class KeyProvider(Protocol):
    """
    Protocol for a component that securely provides API keys.
    The relay itself never stores key values in its configuration; it only
    knows key *names* and resolves them through this protocol at setup time.
    All methods must be async.
    """
    async def get_key(self, key_name: str) -> Optional[str]:
        """
        Asynchronously retrieves the API key value for the given key name.

        Args:
            key_name: The logical name of the API key required
                      (e.g., "OPENAI_API_KEY", "TAVILY_API_KEY").

        Returns:
            The API key string if found and accessible, otherwise None.
            Implementations should avoid logging the key value itself.
        """
        ...
