"""Abstract Base Class/Protocol for Tool Plugins."""
from typing import Any, Dict, Protocol, runtime_checkable

from assistant_relay.core.types import Plugin
from assistant_relay.security.key_provider import KeyProvider


@runtime_checkable
class Tool(Plugin, Protocol):
    """
    Protocol for a capability the provider may ask the host to perform
    mid-generation. All tools must be async.
    """
    @property
    def identifier(self) -> str:
        """The function name the provider uses to request this tool."""
        ...

    async def get_metadata(self) -> Dict[str, Any]:
        """
        Returns metadata used to advertise the tool to the provider.

        Expected structure:
        {
            "identifier": str, (matches self.identifier)
            "name": str, (human-friendly name)
            "description_llm": str, (concise description sent to the provider)
            "input_schema": Dict[str, Any], (JSON Schema for tool parameters)
            "key_requirements": List[Dict[str, str]],
        }
        """
        ...

    async def execute(
        self,
        params: Dict[str, Any],
        key_provider: KeyProvider,
        context: Dict[str, Any]
    ) -> Any:
        """
        Executes the tool with the given parameters.

        Tools are expected to report failures as a structured payload with an
        'error' field rather than raising. Anything raised anyway is converted
        to a payload by the ToolExecutor.
        """
        ...
