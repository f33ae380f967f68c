"""LogAdapter protocol and default implementation."""
from .abc import LogAdapter
from .impl.default_adapter import DefaultLogAdapter

__all__ = ["LogAdapter", "DefaultLogAdapter"]
