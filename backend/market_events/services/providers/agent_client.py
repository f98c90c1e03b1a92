"""Plain-text providers (Anthropic, Fireworks, Gemini) served through pydantic-ai.

These models answer from their own knowledge without source attribution,
so citations are always empty.
"""

from __future__ import annotations

import logging
import os

import httpx
from pydantic_ai import Agent
from pydantic_ai.exceptions import AgentRunError, ModelHTTPError, UserError

from market_events.events.exceptions import ProviderConfigError, ProviderError
from market_events.llm_providers import LLMProvider, get_model_string

from .base import EventProvider
from .config import AgentConfig
from .models import ProviderResponse

logger = logging.getLogger(__name__)

# Environment variables pydantic-ai reads each provider's key from
API_KEY_ENV_VARS: dict[LLMProvider, str] = {
    LLMProvider.ANTHROPIC: "ANTHROPIC_API_KEY",
    LLMProvider.FIREWORKS: "FIREWORKS_API_KEY",
    LLMProvider.GEMINI: "GEMINI_API_KEY",
}


class AgentTextProvider(EventProvider):
    """Provider backed by a pydantic-ai ``Agent`` with plain string output."""

    def __init__(
        self,
        provider: LLMProvider,
        model: str,
        api_key: str = "",
        config: AgentConfig | None = None,
        agent: Agent[None, str] | None = None,
    ):
        self.provider = provider
        self.name = provider.value
        self.model = model
        self.api_key = api_key
        self.config = config or AgentConfig()
        self._agent = agent
        logger.info(f"Initialized AgentTextProvider ({self.label})")

    def _create_agent(self) -> Agent[None, str]:
        """Create the agent (called lazily so API keys are not needed at import time)."""
        env_var = API_KEY_ENV_VARS.get(self.provider)
        if env_var and self.api_key:
            os.environ[env_var] = self.api_key

        try:
            return Agent(
                model=get_model_string(self.provider, self.model),
                output_type=str,
                system_prompt=self.config.system_prompt,
                retries=0,
                model_settings={
                    "temperature": self.config.temperature,
                    "max_tokens": self.config.max_tokens,
                    "timeout": self.config.timeout_seconds,
                },
            )
        except (UserError, ValueError) as e:
            raise ProviderConfigError(f"Cannot create {self.label} agent: {e}") from e

    @property
    def agent(self) -> Agent[None, str]:
        if self._agent is None:
            self._agent = self._create_agent()
        return self._agent

    async def invoke(self, prompt: str) -> ProviderResponse:
        try:
            result = await self.agent.run(prompt)
        except ModelHTTPError as e:
            raise ProviderError(
                f"{self.name} API error: {e.status_code} {e.message}",
                status_code=e.status_code,
                reason="http_error",
            ) from e
        except httpx.TimeoutException as e:
            raise ProviderError(f"{self.name} request timed out: {e}", reason="timeout") from e
        except (AgentRunError, httpx.HTTPError) as e:
            raise ProviderError(f"{self.name} request failed: {e}", reason="transport") from e

        content = (result.output or "").strip()
        if not content:
            raise ProviderError(f"Empty response from {self.name}", reason="empty_response")

        logger.info(f"{self.label} answered with {len(content)} chars (no citations)")
        return ProviderResponse(content=content, citations=[])
