"""Unit tests for RelayConfig and its nested settings."""
import logging

import pytest
from pydantic import ValidationError

from assistant_relay.config.models import RelayConfig
from assistant_relay.config.settings import SearchSettings


def test_defaults():
    config = RelayConfig()
    assert config.assistant_name == "AI Writing Assistant"
    assert config.openai_api_key_name == "OPENAI_API_KEY"
    assert config.generation_timeout_seconds == 300.0
    assert config.unknown_tool_policy == "error"
    assert config.search.api_key_name == "TAVILY_API_KEY"
    assert config.search.search_depth == "advanced"
    assert config.search.max_results == 5
    assert config.search.include_answer is True
    assert config.search.include_raw_content is False
    assert config.throttle.every_n == 15
    assert config.throttle.early_window == 8
    assert config.throttle.early_every == 2


def test_nested_settings_from_dict():
    config = RelayConfig(search={"max_results": 3, "endpoint": "https://search.internal"}, throttle={"every_n": 10})
    assert isinstance(config.search, SearchSettings)
    assert config.search.max_results == 3
    assert config.throttle.every_n == 10


def test_unknown_fields_are_ignored():
    config = RelayConfig(not_a_setting=True)
    assert not hasattr(config, "not_a_setting")


def test_timeout_can_be_disabled():
    assert RelayConfig(generation_timeout_seconds=None).generation_timeout_seconds is None


@pytest.mark.parametrize(
    "kwargs",
    [
        {"generation_timeout_seconds": 0},
        {"unknown_tool_policy": "ignore"},
        {"temperature": 3.0},
        {"search": {"max_results": 0}},
        {"search": {"search_depth": "deep"}},
    ],
)
def test_invalid_values_rejected(kwargs):
    with pytest.raises(ValidationError):
        RelayConfig(**kwargs)


def test_invalid_assignment_rejected():
    config = RelayConfig()
    with pytest.raises(ValidationError):
        config.unknown_tool_policy = "maybe"  # type: ignore[assignment]


def test_log_level_normalized(caplog):
    assert RelayConfig(default_log_level="debug").default_log_level == "DEBUG"
    with caplog.at_level(logging.WARNING):
        assert RelayConfig(default_log_level="LOUD").default_log_level == "INFO"
    assert "Invalid log_level 'LOUD'" in caplog.text
