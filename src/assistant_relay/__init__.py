"""
assistant-relay
-----------------------------

Streams assistant generations into a shared chat transcript, with
throttled partial updates, status indicators, tool calls and cancellation.
Async-first.
"""
__version__ = "0.1.0"

from .config.models import RelayConfig
from .config.settings import SearchSettings, ThrottleSettings
from .core.errors import ConfigurationError, GenerationError, RelayError
from .core.types import Plugin, StructuredError, Subscription
from .indicators.broadcaster import IndicatorBroadcaster
from .key_providers.impl.environment import EnvironmentKeyProvider
from .llm_providers.abc import GenerationProvider
from .llm_providers.impl.openai_assistants_provider import OpenAIAssistantsProvider
from .log_adapters.impl.default_adapter import DefaultLogAdapter
from .security.key_provider import KeyProvider
from .session.controller import SessionController
from .session.registry import SessionRegistry
from .streaming.response_handler import ResponseHandler
from .tools.executor import ToolExecutor
from .tools.impl.web_search import WebSearchTool
from .transport.abc import ChatTransport
from .transport.impl.in_memory import InMemoryChatTransport

__all__ = [
    "__version__",
    "RelayConfig", "SearchSettings", "ThrottleSettings",
    "RelayError", "ConfigurationError", "GenerationError",
    "Plugin", "StructuredError", "Subscription",
    "IndicatorBroadcaster",
    "EnvironmentKeyProvider", "KeyProvider",
    "GenerationProvider", "OpenAIAssistantsProvider",
    "DefaultLogAdapter",
    "SessionController", "SessionRegistry",
    "ResponseHandler",
    "ToolExecutor", "WebSearchTool",
    "ChatTransport", "InMemoryChatTransport",
]
