# src/assistant_relay/tools/formatters/openai_function.py
import logging
from typing import Any, Dict

logger = logging.getLogger(__name__)

MAX_FUNCTION_NAME_LENGTH = 64


def _clean_parameters_schema(schema: Dict[str, Any]) -> Dict[str, Any]:
    """
    Normalizes a JSON schema into the shape OpenAI accepts for function
    parameters: an object root with properties, each carrying a description.
    """
    if not isinstance(schema, dict):
        logger.warning(f"Input schema is not a dict, using empty object schema: {type(schema)}")
        return {"type": "object", "properties": {}}

    cleaned_schema = dict(schema)
    if cleaned_schema.get("type") != "object":
        if "type" in cleaned_schema:
            logger.warning(f"Function parameters schema root type is '{cleaned_schema['type']}', should be 'object'. Adjusting.")
        cleaned_schema["type"] = "object"

    properties = cleaned_schema.get("properties")
    if not isinstance(properties, dict):
        properties = {}
    cleaned_properties = {}
    for prop_name, prop_schema in properties.items():
        if isinstance(prop_schema, dict) and "description" not in prop_schema:
            prop_schema = {**prop_schema, "description": f"Parameter '{prop_name}'."}
        cleaned_properties[prop_name] = prop_schema
    cleaned_schema["properties"] = cleaned_properties

    if cleaned_schema.get("additionalProperties") is True:
        del cleaned_schema["additionalProperties"]
    return cleaned_schema


def format_openai_function(tool_metadata: Dict[str, Any]) -> Dict[str, Any]:
    """Transforms tool metadata into an OpenAI function tool definition."""
    tool_name = tool_metadata.get("identifier") or tool_metadata.get("name")
    if not tool_name:
        raise ValueError("Tool metadata missing 'identifier' or 'name'. Cannot format for OpenAI.")

    # OpenAI function names: alphanumeric and underscores, max 64 chars.
    safe_tool_name = "".join(c if c.isalnum() or c == "_" else "_" for c in tool_name.replace("-", "_").replace(" ", "_"))
    if len(safe_tool_name) > MAX_FUNCTION_NAME_LENGTH:
        safe_tool_name = safe_tool_name[:MAX_FUNCTION_NAME_LENGTH]
        logger.warning(f"Tool name '{tool_name}' truncated to '{safe_tool_name}' for OpenAI compatibility.")

    description = tool_metadata.get("description_llm") or tool_metadata.get("description_human")
    if not description:
        description = f"Executes the '{safe_tool_name}' tool."
        logger.warning(f"Tool '{safe_tool_name}' missing LLM/human description. Using default.")

    input_schema = tool_metadata.get("input_schema", {"type": "object", "properties": {}})
    return {
        "type": "function",
        "function": {
            "name": safe_tool_name,
            "description": description,
            "parameters": _clean_parameters_schema(input_schema),
        },
    }
