"""ToolExecutor: runs provider-requested tool calls and normalizes their results."""
import json
import logging
from typing import Any, Dict, List, Optional

from assistant_relay.core.types import StructuredError
from assistant_relay.security.key_provider import KeyProvider

from .abc import Tool
from .formatters.openai_function import format_openai_function

logger = logging.getLogger(__name__)


def _to_payload(result: Any) -> str:
    try:
        return json.dumps(result, default=str)
    except (TypeError, ValueError) as e:
        logger.error(f"ToolExecutor: Could not serialize tool result: {e}", exc_info=True)
        return json.dumps(StructuredError(error="failed to serialize tool result", details=str(e)))


class ToolExecutor:
    """
    Stateless adapter between the provider's tool-call requests and the
    registered Tool plugins. ``execute`` always returns a JSON string and
    never raises, so a failing tool never terminates a generation.
    """

    def __init__(self, key_provider: KeyProvider, tools: Optional[List[Tool]] = None):
        self._key_provider = key_provider
        self._tools: Dict[str, Tool] = {}
        for tool in tools or []:
            self.register(tool)
        self._initialized = False
        logger.debug("ToolExecutor initialized.")

    def register(self, tool: Tool) -> None:
        if tool.identifier in self._tools:
            logger.warning(f"ToolExecutor: Duplicate tool identifier '{tool.identifier}'. Overwriting previous tool.")
        self._tools[tool.identifier] = tool

    def is_known(self, name: str) -> bool:
        return name in self._tools

    @property
    def tool_names(self) -> List[str]:
        return list(self._tools)

    async def setup(self, config: Optional[Dict[str, Any]] = None) -> None:
        if self._initialized:
            return
        tool_configurations = (config or {}).get("tool_configurations", {})
        for identifier, tool in self._tools.items():
            await tool.setup(tool_configurations.get(identifier, {}))
        self._initialized = True
        logger.info(f"ToolExecutor: Set up {len(self._tools)} tool(s): {', '.join(self._tools) or 'none'}.")

    async def get_tool_definitions(self) -> List[Dict[str, Any]]:
        definitions = []
        for tool in self._tools.values():
            definitions.append(format_openai_function(await tool.get_metadata()))
        return definitions

    async def execute(self, name: str, arguments: Optional[str], context: Optional[Dict[str, Any]] = None) -> str:
        tool = self._tools.get(name)
        if not tool:
            logger.warning(f"ToolExecutor: Requested unknown tool '{name}'.")
            return _to_payload(StructuredError(error="unknown tool", details=name))

        try:
            params = json.loads(arguments) if arguments else {}
            if not isinstance(params, dict):
                raise ValueError(f"Tool arguments must be a JSON object, got {type(params).__name__}.")
        except ValueError as e:
            logger.error(f"ToolExecutor: Error parsing arguments for tool '{name}': {e}")
            return _to_payload(StructuredError(error="failed to call tool", details=str(e)))

        try:
            result = await tool.execute(params, self._key_provider, context or {})
        except Exception as e:
            logger.error(f"ToolExecutor: Tool '{name}' raised during execution: {e}", exc_info=True)
            return _to_payload(StructuredError(error="failed to call tool", details=str(e)))
        return _to_payload(result)

    async def teardown(self) -> None:
        for identifier, tool in self._tools.items():
            try:
                await tool.teardown()
            except Exception as e:
                logger.error(f"ToolExecutor: Error tearing down tool '{identifier}': {e}", exc_info=True)
        self._initialized = False
        logger.debug("ToolExecutor: Teardown complete.")
