"""LLM Provider and Model Enums for provider selection and hotswapping.

This module lists every supported LLM provider with its known models, the
default model used when none is configured, and whether the provider can
attribute its answer to web sources (citations).
"""

from enum import StrEnum


class LLMProvider(StrEnum):
    """Supported LLM providers."""

    XAI = "xai"
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    FIREWORKS = "fireworks"
    GEMINI = "gemini"


class XAIModel(StrEnum):
    """xAI Grok models available via the Responses API."""

    GROK_4_FAST = "grok-4-fast"
    GROK_4 = "grok-4"


class OpenAIModel(StrEnum):
    """OpenAI models available via the Responses API."""

    GPT_5 = "gpt-5"
    GPT_5_MINI = "gpt-5-mini"
    GPT_4_1 = "gpt-4.1"


class AnthropicModel(StrEnum):
    """Anthropic Claude models available via API."""

    CLAUDE_SONNET_4_5 = "claude-sonnet-4-5"
    CLAUDE_HAIKU_4_5 = "claude-haiku-4-5"


class FireworksModel(StrEnum):
    """Fireworks AI models available via API."""

    LLAMA_3_3_70B_INSTRUCT = "accounts/fireworks/models/llama-v3p3-70b-instruct"
    DEEPSEEK_V3_2 = "accounts/fireworks/models/deepseek-v3p2"


class GeminiModel(StrEnum):
    """Google Gemini models available via the Generative Language API."""

    GEMINI_2_5_PRO = "gemini-2.5-pro"
    GEMINI_2_5_FLASH = "gemini-2.5-flash"


DEFAULT_MODELS: dict[LLMProvider, str] = {
    LLMProvider.XAI: XAIModel.GROK_4_FAST.value,
    LLMProvider.OPENAI: OpenAIModel.GPT_5_MINI.value,
    LLMProvider.ANTHROPIC: AnthropicModel.CLAUDE_SONNET_4_5.value,
    LLMProvider.FIREWORKS: FireworksModel.DEEPSEEK_V3_2.value,
    LLMProvider.GEMINI: GeminiModel.GEMINI_2_5_PRO.value,
}

# Providers served through the Responses API with built-in search tools
SEARCH_PROVIDERS = frozenset({LLMProvider.XAI, LLMProvider.OPENAI})

_AGENT_PREFIXES: dict[LLMProvider, str] = {
    LLMProvider.ANTHROPIC: "anthropic",
    LLMProvider.FIREWORKS: "fireworks",
    LLMProvider.GEMINI: "google-gla",
}


# =============================================================================
# Helper Functions
# =============================================================================


def default_model_for(provider: LLMProvider) -> str:
    """Return the model used when the configuration leaves it blank."""
    return DEFAULT_MODELS[provider]


def supports_citations(provider: LLMProvider) -> bool:
    """Whether the provider returns url citations alongside its answer."""
    return provider in SEARCH_PROVIDERS


def get_model_string(provider: LLMProvider, model: str) -> str:
    """Get the pydantic-ai model string for a plain-text provider.

    pydantic-ai resolves models from a ``"<prefix>:<model>"`` string, e.g.
    ``anthropic:claude-sonnet-4-5`` or ``google-gla:gemini-2.5-pro``.
    """
    try:
        prefix = _AGENT_PREFIXES[provider]
    except KeyError:
        raise ValueError(f"Provider {provider} is not served through pydantic-ai") from None
    return f"{prefix}:{model}"
