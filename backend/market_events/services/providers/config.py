"""Configuration for AI provider clients."""

from pydantic import BaseModel, Field

from market_events.events.prompts import SYSTEM_PROMPT
from market_events.llm_providers import LLMProvider

XAI_BASE_URL = "https://api.x.ai/v1"
OPENAI_BASE_URL = "https://api.openai.com/v1"


class ResponsesConfig(BaseModel):
    """Configuration for a Responses API (search-augmented) provider."""

    base_url: str = XAI_BASE_URL
    tools: list[str] = Field(default_factory=lambda: ["web_search", "x_search"])
    timeout_seconds: float = 120.0
    system_prompt: str = SYSTEM_PROMPT

    @classmethod
    def for_provider(
        cls,
        provider: LLMProvider,
        base_url: str = "",
        timeout_seconds: float = 120.0,
    ) -> "ResponsesConfig":
        """Defaults for xAI (web + X search) or OpenAI (web search only)."""
        if provider == LLMProvider.OPENAI:
            return cls(
                base_url=base_url or OPENAI_BASE_URL,
                tools=["web_search"],
                timeout_seconds=timeout_seconds,
            )
        if provider == LLMProvider.XAI:
            return cls(base_url=base_url or XAI_BASE_URL, timeout_seconds=timeout_seconds)
        raise ValueError(f"Provider {provider} does not use the Responses API")


class AgentConfig(BaseModel):
    """Configuration for a pydantic-ai backed plain-text provider."""

    timeout_seconds: float = 120.0
    temperature: float = 0.2
    max_tokens: int = 8000
    system_prompt: str = SYSTEM_PROMPT
