"""Tool-related functionality: Tool protocol, concrete tools, ToolExecutor."""
from .abc import Tool
from .executor import ToolExecutor
from .impl import WebSearchTool

__all__ = ["Tool", "ToolExecutor", "WebSearchTool"]
