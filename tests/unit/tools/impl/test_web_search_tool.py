"""Unit tests for the WebSearchTool."""
from typing import AsyncGenerator
from unittest.mock import AsyncMock

import httpx
import pytest
from fakes import MockKeyProviderImpl

from assistant_relay.config.settings import SearchSettings
from assistant_relay.tools.impl.web_search import WebSearchTool

SEARCH_URL = "https://api.tavily.com/search"


@pytest.fixture
async def web_search_tool() -> AsyncGenerator[WebSearchTool, None]:
    tool = WebSearchTool()
    await tool.setup()
    yield tool
    await tool.teardown()


@pytest.fixture
def mock_httpx_client(mocker) -> AsyncMock:
    mock_client = AsyncMock(spec=httpx.AsyncClient)
    mock_client.post = AsyncMock()
    return mock_client


@pytest.fixture
def search_key_provider() -> MockKeyProviderImpl:
    return MockKeyProviderImpl({"TAVILY_API_KEY": "tvly-test-key"})


@pytest.mark.asyncio
async def test_metadata_advertises_query_parameter(web_search_tool: WebSearchTool):
    metadata = await web_search_tool.get_metadata()
    assert metadata["identifier"] == "web_search"
    assert metadata["input_schema"]["required"] == ["query"]
    assert metadata["input_schema"]["properties"]["query"]["type"] == "string"
    assert {"name": "TAVILY_API_KEY", "description": "API key for the web search service."} in metadata["key_requirements"]


@pytest.mark.asyncio
async def test_setup_teardown_owns_client(mocker):
    mock_constructor = mocker.patch("httpx.AsyncClient", return_value=AsyncMock(spec=httpx.AsyncClient))
    tool = WebSearchTool()
    await tool.setup()
    mock_constructor.assert_called_once_with(timeout=15.0)
    assert tool._http_client is not None
    close_mock = tool._http_client.aclose

    await tool.teardown()

    close_mock.assert_awaited_once()
    assert tool._http_client is None


@pytest.mark.asyncio
async def test_injected_client_is_not_closed(mock_httpx_client: AsyncMock):
    tool = WebSearchTool()
    await tool.setup({"http_client": mock_httpx_client})
    await tool.teardown()
    mock_httpx_client.aclose.assert_not_awaited()


@pytest.mark.asyncio
async def test_execute_success_returns_service_payload(mock_httpx_client: AsyncMock, search_key_provider: MockKeyProviderImpl):
    tool = WebSearchTool()
    await tool.setup({"http_client": mock_httpx_client})
    response_data = {
        "answer": "It is sunny.",
        "results": [{"title": "Forecast", "url": "https://weather.example", "content": "Sunny all day."}],
    }
    mock_httpx_client.post.return_value = httpx.Response(200, json=response_data, request=httpx.Request("POST", SEARCH_URL))

    result = await tool.execute({"query": "today's weather"}, search_key_provider, {})

    assert result == response_data
    mock_httpx_client.post.assert_awaited_once_with(
        SEARCH_URL,
        json={
            "query": "today's weather",
            "search_depth": "advanced",
            "max_results": 5,
            "include_answer": True,
            "include_raw_content": False,
        },
        headers={"Content-Type": "application/json", "Authorization": "Bearer tvly-test-key"},
    )


@pytest.mark.asyncio
async def test_execute_uses_custom_settings(mock_httpx_client: AsyncMock):
    settings = SearchSettings(api_key_name="SEARCH_KEY", endpoint="https://search.internal/query", search_depth="basic", max_results=2)
    tool = WebSearchTool(settings)
    await tool.setup({"http_client": mock_httpx_client})
    mock_httpx_client.post.return_value = httpx.Response(200, json={"results": []}, request=httpx.Request("POST", settings.endpoint))

    await tool.execute({"query": "q"}, MockKeyProviderImpl({"SEARCH_KEY": "k"}), {})

    args, kwargs = mock_httpx_client.post.call_args
    assert args[0] == "https://search.internal/query"
    assert kwargs["json"]["search_depth"] == "basic"
    assert kwargs["json"]["max_results"] == 2
    assert kwargs["headers"]["Authorization"] == "Bearer k"


@pytest.mark.asyncio
async def test_execute_without_api_key_reports_unavailable(mock_httpx_client: AsyncMock):
    tool = WebSearchTool()
    await tool.setup({"http_client": mock_httpx_client})

    result = await tool.execute({"query": "anything"}, MockKeyProviderImpl({}), {})

    assert result == {"error": "unavailable", "details": WebSearchTool.UNAVAILABLE_MESSAGE}
    mock_httpx_client.post.assert_not_awaited()


@pytest.mark.asyncio
async def test_execute_missing_query(mock_httpx_client: AsyncMock, search_key_provider: MockKeyProviderImpl):
    tool = WebSearchTool()
    await tool.setup({"http_client": mock_httpx_client})

    result = await tool.execute({}, search_key_provider, {})

    assert result == {"error": "invalid arguments", "details": "query is required"}
    mock_httpx_client.post.assert_not_awaited()


@pytest.mark.asyncio
async def test_execute_without_setup(search_key_provider: MockKeyProviderImpl):
    tool = WebSearchTool()
    result = await tool.execute({"query": "q"}, search_key_provider, {})
    assert result["error"] == "unavailable"
    assert "HTTP client missing" in result["details"]


@pytest.mark.asyncio
async def test_execute_non_success_status(mock_httpx_client: AsyncMock, search_key_provider: MockKeyProviderImpl):
    tool = WebSearchTool()
    await tool.setup({"http_client": mock_httpx_client})
    mock_httpx_client.post.return_value = httpx.Response(429, text="Too Many Requests", request=httpx.Request("POST", SEARCH_URL))

    result = await tool.execute({"query": "q"}, search_key_provider, {})

    assert result == {"error": "Search failed with status: 429", "details": "Too Many Requests"}


@pytest.mark.asyncio
async def test_execute_network_error(mock_httpx_client: AsyncMock, search_key_provider: MockKeyProviderImpl):
    tool = WebSearchTool()
    await tool.setup({"http_client": mock_httpx_client})
    mock_httpx_client.post.side_effect = httpx.ConnectError("Connection refused")

    result = await tool.execute({"query": "q"}, search_key_provider, {})

    assert result == {"error": "An exception occurred during the search.", "details": "Connection refused"}


@pytest.mark.asyncio
async def test_execute_invalid_json_body(mock_httpx_client: AsyncMock, search_key_provider: MockKeyProviderImpl):
    tool = WebSearchTool()
    await tool.setup({"http_client": mock_httpx_client})
    mock_httpx_client.post.return_value = httpx.Response(200, text="<html>not json</html>", request=httpx.Request("POST", SEARCH_URL))

    result = await tool.execute({"query": "q"}, search_key_provider, {})

    assert result["error"] == "An exception occurred during the search."
