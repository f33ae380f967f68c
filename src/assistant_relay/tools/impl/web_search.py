import logging
from typing import Any, Dict, Optional

import httpx

from assistant_relay.config.settings import SearchSettings
from assistant_relay.security.key_provider import KeyProvider
from assistant_relay.tools.abc import Tool

logger = logging.getLogger(__name__)

class WebSearchTool(Tool):
    identifier: str = "web_search"
    plugin_id: str = "web_search_tool_v1"
    UNAVAILABLE_MESSAGE = "Web search is not available. API key not configured."

    _http_client: Optional[httpx.AsyncClient] = None
    _owns_client: bool = False
    _settings: SearchSettings

    def __init__(self, settings: Optional[SearchSettings] = None):
        self._settings = settings or SearchSettings()

    @property
    def api_key_name(self) -> str:
        return self._settings.api_key_name

    async def setup(self, config: Optional[Dict[str, Any]] = None) -> None:
        cfg = config or {}
        if cfg.get("search_settings"):
            self._settings = cfg["search_settings"]
        injected = cfg.get("http_client")
        if injected is not None:
            self._http_client = injected
            self._owns_client = False
        else:
            self._http_client = httpx.AsyncClient(timeout=self._settings.timeout_seconds)
            self._owns_client = True
        logger.debug(f"{self.plugin_id}: HTTP client initialized (endpoint={self._settings.endpoint}).")

    async def get_metadata(self) -> Dict[str, Any]:
        return {
            "identifier": self.identifier,
            "name": "Web Search",
            "description_human": "Searches the web for current information and returns a synthesized answer with sources.",
            "description_llm": (
                "Search the web for current information on a topic. Use this for recent events, "
                "facts you are unsure about, or anything that benefits from up-to-date sources."
            ),
            "input_schema": {
                "type": "object",
                "properties": {
                    "query": {"type": "string", "description": "The search query."},
                },
                "required": ["query"],
            },
            "key_requirements": [
                {"name": self._settings.api_key_name, "description": "API key for the web search service."}
            ],
            "tags": ["search", "web"],
            "version": "1.0.0",
        }

    async def execute(
        self, params: Dict[str, Any], key_provider: KeyProvider, context: Dict[str, Any]
    ) -> Dict[str, Any]:
        api_key = await key_provider.get_key(self._settings.api_key_name)
        if not api_key:
            return {"error": "unavailable", "details": self.UNAVAILABLE_MESSAGE}

        query = params.get("query")
        if not query or not isinstance(query, str):
            return {"error": "invalid arguments", "details": "query is required"}

        if not self._http_client:
            return {"error": "unavailable", "details": "Tool not initialized: HTTP client missing."}

        logger.info(f'{self.plugin_id}: Performing web search for: "{query}"')
        payload = {
            "query": query,
            "search_depth": self._settings.search_depth,
            "max_results": self._settings.max_results,
            "include_answer": self._settings.include_answer,
            "include_raw_content": self._settings.include_raw_content,
        }
        headers = {"Content-Type": "application/json", "Authorization": f"Bearer {api_key}"}
        try:
            response = await self._http_client.post(self._settings.endpoint, json=payload, headers=headers)
            if not response.is_success:
                error_text = response.text
                logger.error(f'{self.plugin_id}: Search failed for query "{query}": {response.status_code} {error_text[:200]}')
                return {"error": f"Search failed with status: {response.status_code}", "details": error_text}
            data = response.json()
            if not isinstance(data, dict):
                raise ValueError(f"Unexpected search response type: {type(data).__name__}")
            logger.info(f'{self.plugin_id}: Search successful for query "{query}".')
            return data
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f'{self.plugin_id}: An exception occurred during web search for "{query}": {e}', exc_info=True)
            return {"error": "An exception occurred during the search.", "details": str(e)}

    async def teardown(self) -> None:
        if self._http_client and self._owns_client:
            await self._http_client.aclose()
        self._http_client = None
        logger.debug(f"{self.plugin_id}: Teardown complete.")
