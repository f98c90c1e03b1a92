"""Logfire cloud observability initialization and instrumentation."""

import logging

import logfire

from market_events import __version__
from market_events.config import Settings

logger = logging.getLogger(__name__)


def initialize_logfire(settings: Settings) -> None:
    """
    Initialize Logfire and instrument the libraries the service talks through.

    Call once at startup, before any provider or database code runs:
    - PydanticAI agents (Anthropic, Fireworks, Gemini providers)
    - HTTPX clients (xAI / OpenAI Responses API)
    - SQLAlchemy (event store queries)
    - Python logging (bridged to Logfire)

    Without a token this only logs a warning; observability is optional.
    """
    if not settings.logfire_token:
        logger.warning("Logfire token not set - observability disabled")
        return

    try:
        logfire.configure(
            token=settings.logfire_token,
            service_name="market-events",
            service_version=__version__,
            environment="debug" if settings.debug else "production",
        )

        logfire.instrument_pydantic_ai()
        logfire.instrument_httpx()
        logfire.instrument_sqlalchemy()

        logging.getLogger().addHandler(logfire.LogfireLoggingHandler())

        logger.info("✓ Logfire cloud tracking initialized")

    except Exception as e:
        logger.warning(f"Failed to initialize Logfire: {e}")


def instrument_app(app) -> None:
    """Attach FastAPI request tracing when Logfire is configured."""
    try:
        logfire.instrument_fastapi(app)
    except Exception as e:
        logger.debug(f"FastAPI instrumentation skipped: {e}")
