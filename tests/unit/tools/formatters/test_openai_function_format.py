"""Unit tests for format_openai_function."""
import pytest

from assistant_relay.tools.formatters.openai_function import format_openai_function


def test_format_basic_metadata():
    metadata = {
        "identifier": "web_search",
        "description_llm": "Search the web.",
        "input_schema": {
            "type": "object",
            "properties": {"query": {"type": "string", "description": "The search query."}},
            "required": ["query"],
        },
    }
    definition = format_openai_function(metadata)
    assert definition == {
        "type": "function",
        "function": {
            "name": "web_search",
            "description": "Search the web.",
            "parameters": metadata["input_schema"],
        },
    }


def test_format_sanitizes_name_and_fills_descriptions():
    definition = format_openai_function({
        "identifier": "my-tool v2",
        "input_schema": {"properties": {"x": {"type": "integer"}}, "additionalProperties": True},
    })
    function = definition["function"]
    assert function["name"] == "my_tool_v2"
    assert function["description"] == "Executes the 'my_tool_v2' tool."
    assert function["parameters"]["type"] == "object"
    assert function["parameters"]["properties"]["x"]["description"] == "Parameter 'x'."
    assert "additionalProperties" not in function["parameters"]


def test_format_truncates_long_names():
    definition = format_openai_function({"identifier": "a" * 80, "description_human": "Long."})
    assert len(definition["function"]["name"]) == 64
    assert definition["function"]["description"] == "Long."


def test_format_non_dict_schema():
    definition = format_openai_function({"identifier": "t", "input_schema": "nope"})
    assert definition["function"]["parameters"] == {"type": "object", "properties": {}}


def test_format_requires_identifier():
    with pytest.raises(ValueError):
        format_openai_function({"description_llm": "nameless"})
