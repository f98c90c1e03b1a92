"""Tests for the pydantic-ai backed plain-text providers."""

import asyncio

import pytest
from pydantic_ai import Agent
from pydantic_ai.exceptions import ModelHTTPError
from pydantic_ai.models.function import AgentInfo, FunctionModel
from pydantic_ai.models.test import TestModel as CannedModel

from market_events.events import ProviderConfigError, ProviderError
from market_events.llm_providers import LLMProvider, get_model_string
from market_events.services.providers import AgentTextProvider


def _provider(agent: Agent) -> AgentTextProvider:
    return AgentTextProvider(LLMProvider.ANTHROPIC, "claude-sonnet-4-5", agent=agent)


def test_returns_text_without_citations() -> None:
    agent = Agent(CannedModel(custom_output_text='[{"event": "CPI"}]'), output_type=str)

    response = asyncio.run(_provider(agent).invoke("prompt"))

    assert response.content == '[{"event": "CPI"}]'
    assert response.citations == []


def test_blank_output_is_empty_response() -> None:
    agent = Agent(CannedModel(custom_output_text="   "), output_type=str)

    with pytest.raises(ProviderError) as exc_info:
        asyncio.run(_provider(agent).invoke("prompt"))

    assert exc_info.value.reason == "empty_response"


def test_http_error_carries_status_code() -> None:
    def fail(messages, info: AgentInfo):
        raise ModelHTTPError(status_code=529, model_name="claude-sonnet-4-5", body="overloaded")

    agent = Agent(FunctionModel(fail), output_type=str)

    with pytest.raises(ProviderError) as exc_info:
        asyncio.run(_provider(agent).invoke("prompt"))

    assert exc_info.value.status_code == 529
    assert exc_info.value.reason == "http_error"


def test_model_strings() -> None:
    assert get_model_string(LLMProvider.ANTHROPIC, "claude-sonnet-4-5") == "anthropic:claude-sonnet-4-5"
    assert get_model_string(LLMProvider.GEMINI, "gemini-2.5-pro") == "google-gla:gemini-2.5-pro"


def test_search_provider_cannot_back_an_agent() -> None:
    provider = AgentTextProvider(LLMProvider.XAI, "grok-4-fast", api_key="key")

    with pytest.raises(ProviderConfigError):
        asyncio.run(provider.invoke("prompt"))
