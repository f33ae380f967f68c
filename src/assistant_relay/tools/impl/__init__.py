"""Concrete implementations of Tool plugins."""
from .web_search import WebSearchTool

__all__ = ["WebSearchTool"]
