"""Formatters turning tool metadata into provider-specific tool definitions."""
from .openai_function import format_openai_function

__all__ = ["format_openai_function"]
