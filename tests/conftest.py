"""Pytest fixtures and global test configuration for assistant_relay."""
from typing import Any, Dict

import pytest
from fakes import MockKeyProviderImpl

from assistant_relay.config.models import RelayConfig
from assistant_relay.transport.impl.in_memory import InMemoryChatTransport


@pytest.fixture()
def mock_key_provider() -> MockKeyProviderImpl:
    return MockKeyProviderImpl(
        {
            "OPENAI_API_KEY": "test_openai_key_from_conftest_fixture",
            "TAVILY_API_KEY": "test_tavily_key_from_conftest_fixture",
        }
    )


@pytest.fixture()
def relay_config() -> RelayConfig:
    return RelayConfig(generation_timeout_seconds=5.0)


@pytest.fixture()
def transport() -> InMemoryChatTransport:
    return InMemoryChatTransport(user_id="ai-assistant")


@pytest.fixture()
async def placeholder(transport: InMemoryChatTransport) -> Dict[str, Any]:
    return await transport.send_message("messaging:conv-1", {"text": "", "ai_generated": True, "generating": True})
