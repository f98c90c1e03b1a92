"""Tests for settings loading and provider selection."""

from pathlib import Path

import pytest

from market_events.config import ProviderSettings, Settings
from market_events.events import ProviderConfigError
from market_events.llm_providers import LLMProvider
from market_events.services.providers import (
    AgentTextProvider,
    ResponsesSearchProvider,
    create_provider,
)


def test_defaults(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for var in ("AI_PROVIDER", "AI_MODEL", "AI_API_KEY"):
        monkeypatch.delenv(var, raising=False)

    settings = Settings(config_dir=tmp_path, _env_file=None)
    settings.load_yaml_config()
    settings.apply_flat_aliases()

    assert settings.provider.name is LLMProvider.XAI
    assert settings.provider.resolved_model == "grok-4-fast"
    assert settings.scheduler.weekly_cron == "0 18 * * 5"
    assert settings.api.port == 3001


def test_yaml_overlay_and_flat_aliases(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    (tmp_path / "config.yaml").write_text(
        "provider:\n"
        "  name: anthropic\n"
        "  timeout_seconds: 30\n"
        "scheduler:\n"
        "  timezone: America/New_York\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("AI_API_KEY", "secret-key")
    monkeypatch.setenv("AI_MODEL", "claude-haiku-4-5")
    monkeypatch.delenv("AI_PROVIDER", raising=False)

    settings = Settings(config_dir=tmp_path, _env_file=None)
    settings.load_yaml_config()
    settings.apply_flat_aliases()

    assert settings.provider.name is LLMProvider.ANTHROPIC
    assert settings.provider.timeout_seconds == 30
    assert settings.provider.resolved_model == "claude-haiku-4-5"
    assert settings.provider.api_key == "secret-key"
    assert settings.scheduler.timezone == "America/New_York"
    assert settings.scheduler.run_on_startup is True


def test_missing_api_key_is_a_config_error() -> None:
    with pytest.raises(ProviderConfigError):
        create_provider(ProviderSettings(name=LLMProvider.XAI, api_key=""))


@pytest.mark.parametrize(
    ("provider", "expected_type", "cites"),
    [
        (LLMProvider.XAI, ResponsesSearchProvider, True),
        (LLMProvider.OPENAI, ResponsesSearchProvider, True),
        (LLMProvider.ANTHROPIC, AgentTextProvider, False),
        (LLMProvider.FIREWORKS, AgentTextProvider, False),
        (LLMProvider.GEMINI, AgentTextProvider, False),
    ],
)
def test_provider_selection(provider: LLMProvider, expected_type: type, cites: bool) -> None:
    selected = create_provider(ProviderSettings(name=provider, api_key="key"))

    assert isinstance(selected, expected_type)
    assert selected.supports_citations is cites
    assert selected.label.startswith(f"{provider.value}/")


def test_environment_beats_yaml(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    (tmp_path / "config.yaml").write_text(
        "provider:\n"
        "  name: xai\n"
        "  timeout_seconds: 45\n"
        "database:\n"
        "  url: sqlite+aiosqlite:///./market_events.db\n"
        "  echo: true\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("DATABASE__URL", "postgresql+asyncpg://u:p@db:5432/market_events")
    monkeypatch.setenv("PROVIDER__NAME", "openai")
    monkeypatch.delenv("AI_PROVIDER", raising=False)

    settings = Settings(config_dir=tmp_path, _env_file=None)
    settings.load_yaml_config()
    settings.apply_flat_aliases()

    assert settings.database.url.startswith("postgresql+asyncpg://")
    assert settings.database.echo is True
    assert settings.provider.name is LLMProvider.OPENAI
    assert settings.provider.timeout_seconds == 45


def test_shipped_yaml_leaves_provider_and_database_to_environment(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    shipped_dir = Path(__file__).resolve().parents[3] / "data"
    monkeypatch.setenv("DATABASE__URL", "postgresql+asyncpg://u:p@db:5432/market_events")
    monkeypatch.setenv("AI_PROVIDER", "gemini")

    settings = Settings(config_dir=shipped_dir, _env_file=None)
    settings.load_yaml_config()
    settings.apply_flat_aliases()

    assert settings.database.url == "postgresql+asyncpg://u:p@db:5432/market_events"
    assert settings.provider.name is LLMProvider.GEMINI
    assert settings.scheduler.weekly_cron == "0 18 * * 5"
