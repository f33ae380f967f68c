"""Unit tests for the EnvironmentKeyProvider."""
import pytest

from assistant_relay.key_providers.impl.environment import EnvironmentKeyProvider


@pytest.mark.asyncio
async def test_reads_key_from_environment(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
    provider = EnvironmentKeyProvider()
    await provider.setup()
    assert await provider.get_key("OPENAI_API_KEY") == "sk-env"


@pytest.mark.asyncio
async def test_missing_and_empty_keys_return_none(monkeypatch):
    monkeypatch.delenv("TAVILY_API_KEY", raising=False)
    monkeypatch.setenv("EMPTY_KEY", "")
    provider = EnvironmentKeyProvider()
    await provider.setup()
    assert await provider.get_key("TAVILY_API_KEY") is None
    assert await provider.get_key("EMPTY_KEY") is None


@pytest.mark.asyncio
async def test_prefix(monkeypatch):
    monkeypatch.setenv("RELAY_OPENAI_API_KEY", "sk-prefixed")
    provider = EnvironmentKeyProvider()
    await provider.setup({"prefix": "RELAY_"})
    assert await provider.get_key("OPENAI_API_KEY") == "sk-prefixed"
