"""Build the configured provider once at start-up."""

import logging

from market_events.config import ProviderSettings
from market_events.events.exceptions import ProviderConfigError
from market_events.llm_providers import supports_citations

from .agent_client import AgentTextProvider
from .base import EventProvider
from .config import AgentConfig, ResponsesConfig
from .responses_client import ResponsesSearchProvider

logger = logging.getLogger(__name__)


def create_provider(settings: ProviderSettings) -> EventProvider:
    """Factory function selecting the provider variant from configuration."""
    if not settings.api_key:
        raise ProviderConfigError(f"Missing API key for AI provider: {settings.name}")

    model = settings.resolved_model
    if supports_citations(settings.name):
        config = ResponsesConfig.for_provider(
            settings.name,
            base_url=settings.base_url,
            timeout_seconds=settings.timeout_seconds,
        )
        return ResponsesSearchProvider(
            name=settings.name.value,
            model=model,
            api_key=settings.api_key,
            config=config,
        )

    return AgentTextProvider(
        provider=settings.name,
        model=model,
        api_key=settings.api_key,
        config=AgentConfig(timeout_seconds=settings.timeout_seconds),
    )
