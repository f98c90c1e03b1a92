"""AI provider adapters: one uniform invoke(prompt) over heterogeneous backends."""

from market_events.events.exceptions import ProviderConfigError, ProviderError

from .agent_client import AgentTextProvider
from .base import EventProvider
from .config import AgentConfig, ResponsesConfig
from .factory import create_provider
from .models import ProviderResponse
from .responses_client import ResponsesSearchProvider, extract_message

__all__ = [
    "EventProvider",
    "ProviderResponse",
    "ResponsesSearchProvider",
    "AgentTextProvider",
    "ResponsesConfig",
    "AgentConfig",
    "create_provider",
    "extract_message",
    "ProviderError",
    "ProviderConfigError",
]
