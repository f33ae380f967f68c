"""Unit tests for the ToolExecutor."""
import json
from typing import Any, Dict, List, Optional

import pytest
from fakes import MockKeyProviderImpl

from assistant_relay.security.key_provider import KeyProvider
from assistant_relay.tools.executor import ToolExecutor


class EchoTool:
    identifier = "echo"
    plugin_id = "echo_tool_v1"

    def __init__(self):
        self.setup_config: Optional[Dict[str, Any]] = None
        self.calls: List[Dict[str, Any]] = []
        self.torn_down = False

    async def setup(self, config: Optional[Dict[str, Any]] = None) -> None:
        self.setup_config = config

    async def get_metadata(self) -> Dict[str, Any]:
        return {
            "identifier": self.identifier,
            "description_llm": "Echoes its input.",
            "input_schema": {"type": "object", "properties": {"text": {"type": "string"}}},
        }

    async def execute(self, params: Dict[str, Any], key_provider: KeyProvider, context: Dict[str, Any]) -> Any:
        self.calls.append({"params": params, "context": context})
        return {"echo": params.get("text")}

    async def teardown(self) -> None:
        self.torn_down = True


class ExplodingTool(EchoTool):
    identifier = "explode"
    plugin_id = "exploding_tool_v1"

    async def execute(self, params: Dict[str, Any], key_provider: KeyProvider, context: Dict[str, Any]) -> Any:
        raise RuntimeError("kaboom")

    async def teardown(self) -> None:
        raise RuntimeError("teardown failed")


@pytest.fixture
def executor() -> ToolExecutor:
    return ToolExecutor(MockKeyProviderImpl({}), [EchoTool(), ExplodingTool()])


@pytest.mark.asyncio
async def test_execute_known_tool_returns_json(executor: ToolExecutor):
    output = await executor.execute("echo", '{"text": "hi"}', context={"run_id": "run_1"})
    assert json.loads(output) == {"echo": "hi"}


@pytest.mark.asyncio
async def test_execute_passes_context():
    tool = EchoTool()
    executor = ToolExecutor(MockKeyProviderImpl({}), [tool])
    await executor.execute("echo", None, context={"message_id": "m1"})
    assert tool.calls == [{"params": {}, "context": {"message_id": "m1"}}]


@pytest.mark.asyncio
async def test_execute_unknown_tool(executor: ToolExecutor):
    output = await executor.execute("calculator", "{}")
    assert json.loads(output) == {"error": "unknown tool", "details": "calculator"}


@pytest.mark.asyncio
@pytest.mark.parametrize("arguments", ["{not json", "[1, 2]"])
async def test_execute_bad_arguments(executor: ToolExecutor, arguments: str):
    output = await executor.execute("echo", arguments)
    assert json.loads(output)["error"] == "failed to call tool"


@pytest.mark.asyncio
async def test_execute_tool_exception_is_contained(executor: ToolExecutor):
    output = await executor.execute("explode", "{}")
    assert json.loads(output) == {"error": "failed to call tool", "details": "kaboom"}


def test_is_known_and_tool_names(executor: ToolExecutor):
    assert executor.is_known("echo")
    assert not executor.is_known("web_search")
    assert executor.tool_names == ["echo", "explode"]


@pytest.mark.asyncio
async def test_setup_passes_tool_configuration_once():
    tool = EchoTool()
    executor = ToolExecutor(MockKeyProviderImpl({}), [tool])
    await executor.setup({"tool_configurations": {"echo": {"flag": True}}})
    tool.setup_config = None
    await executor.setup({"tool_configurations": {"echo": {"flag": False}}})
    assert tool.setup_config is None


@pytest.mark.asyncio
async def test_get_tool_definitions(executor: ToolExecutor):
    definitions = await executor.get_tool_definitions()
    assert [d["function"]["name"] for d in definitions] == ["echo", "explode"]
    assert definitions[0]["type"] == "function"


@pytest.mark.asyncio
async def test_teardown_continues_after_failure():
    echo = EchoTool()
    executor = ToolExecutor(MockKeyProviderImpl({}), [ExplodingTool(), echo])
    await executor.teardown()
    assert echo.torn_down is True
