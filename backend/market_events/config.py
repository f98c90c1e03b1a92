"""Configuration management using Pydantic Settings."""

import logging
from functools import lru_cache
from pathlib import Path

import yaml
from pydantic import AliasChoices, BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from market_events.llm_providers import LLMProvider, default_model_for

logger = logging.getLogger(__name__)


class ProviderSettings(BaseModel):
    """AI provider selection and credentials."""

    name: LLMProvider = LLMProvider.XAI
    model: str = ""  # Empty -> provider default
    api_key: str = ""
    base_url: str = ""  # Empty -> provider default
    timeout_seconds: float = 120.0

    @property
    def resolved_model(self) -> str:
        """Configured model, or the provider's default when blank."""
        return self.model or default_model_for(self.name)


class SchedulerSettings(BaseModel):
    """Event generation schedule."""

    enabled: bool = True
    run_on_startup: bool = True
    weekly_cron: str = "0 18 * * 5"  # Friday 18:00 -> next Sunday-started week
    timezone: str = "UTC"


class DatabaseSettings(BaseModel):
    """Event store connection parameters."""

    url: str = "sqlite+aiosqlite:///./market_events.db"
    echo: bool = False
    pool_size: int = 5
    max_overflow: int = 10
    pool_recycle_seconds: int = 3600


class ApiSettings(BaseModel):
    """HTTP server parameters."""

    host: str = "0.0.0.0"
    port: int = 3001
    allowed_origins: list[str] = Field(default_factory=lambda: ["http://localhost:3000"])


class Settings(BaseSettings):
    """Main configuration class."""

    # Paths
    config_dir: Path = Path("data")

    # Flat aliases kept for deployments that set AI_PROVIDER / AI_MODEL / AI_API_KEY
    ai_provider: LLMProvider | None = Field(
        default=None, validation_alias=AliasChoices("ai_provider", "AI_PROVIDER")
    )
    ai_model: str = Field(default="", validation_alias=AliasChoices("ai_model", "AI_MODEL"))
    ai_api_key: str = Field(
        default="", validation_alias=AliasChoices("ai_api_key", "AI_API_KEY")
    )

    logfire_token: str = ""
    log_level: str = "INFO"
    debug: bool = False

    # Nested configuration sections
    provider: ProviderSettings = Field(default_factory=ProviderSettings)
    scheduler: SchedulerSettings = Field(default_factory=SchedulerSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    api: ApiSettings = Field(default_factory=ApiSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("config_dir", mode="after")
    @classmethod
    def resolve_config_dir(cls, v: Path) -> Path:
        """Resolve configuration directory to absolute path."""
        return v.resolve()

    def apply_flat_aliases(self) -> None:
        """Fold AI_PROVIDER / AI_MODEL / AI_API_KEY into the provider section."""
        updates: dict[str, object] = {}
        if self.ai_provider is not None:
            updates["name"] = self.ai_provider
        if self.ai_model:
            updates["model"] = self.ai_model
        if self.ai_api_key:
            updates["api_key"] = self.ai_api_key
        if updates:
            self.provider = self.provider.model_copy(update=updates)

    def load_yaml_config(self) -> None:
        """Load and merge YAML configuration.

        YAML only fills fields the environment (or ``.env``) left unset.
        """
        config_path = self.config_dir / "config.yaml"

        if not config_path.exists():
            logger.debug(f"Config file not found: {config_path}. Using defaults.")
            return

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                yaml_config = yaml.safe_load(f)

            if not yaml_config:
                logger.warning(f"Empty config file: {config_path}")
                return

            for section_name in ["provider", "scheduler", "database", "api"]:
                if section_name in yaml_config:
                    section = getattr(self, section_name)
                    yaml_section = yaml_config[section_name]

                    # Environment / .env / explicit values win over the YAML file
                    section_dict = section.model_dump()
                    section_dict.update(
                        {
                            key: value
                            for key, value in yaml_section.items()
                            if key not in section.model_fields_set
                        }
                    )

                    new_section = section.__class__(**section_dict)
                    setattr(self, section_name, new_section)

            logger.info(f"Loaded configuration from {config_path}")

        except yaml.YAMLError as e:
            logger.error(f"Failed to parse YAML config: {e}")
            raise


@lru_cache()
def get_settings() -> Settings:
    """Get singleton Settings instance."""
    settings = Settings()
    settings.load_yaml_config()
    settings.apply_flat_aliases()
    return settings
