"""Market events CLI entry point."""

import argparse
import asyncio
import logging
import sys
from datetime import date
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError

env_file = Path(__file__).parent.parent / ".env"
load_dotenv(env_file)

from market_events import __version__
from market_events.config import Settings, get_settings
from market_events.events.prompts import build_prompt
from market_events.events.weeks import current_week_start, upcoming_week_start, week_start
from market_events.pipeline import EventGenerationService
from market_events.services.providers import ProviderConfigError, create_provider
from market_events.storage import MarketEventStore, create_engine, sanitize_database_url

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


def _init_logfire() -> None:
    """Initialize Logfire if available, without failing commands."""
    try:
        from market_events.observability import initialize_logfire

        initialize_logfire(get_settings())
    except Exception as e:
        logger.warning(f"Failed to initialize Logfire: {e}")


def _mask(secret: str) -> str:
    if not secret:
        return "✗ Not set"
    return f"✓ Set ({secret[:4]}…)" if len(secret) > 8 else "✓ Set"


def _parse_date(raw: str) -> date:
    try:
        return date.fromisoformat(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid date (expected YYYY-MM-DD): {raw}")


def _target_week(args: argparse.Namespace, settings: Settings) -> date:
    if getattr(args, "week_start", None):
        return week_start(args.week_start)
    if getattr(args, "upcoming", False):
        return upcoming_week_start(tz_name=settings.scheduler.timezone)
    return current_week_start(tz_name=settings.scheduler.timezone)


def cmd_config(args: argparse.Namespace) -> int:
    """Display merged configuration."""
    try:
        settings = get_settings()

        print("\n=== Market Events Configuration ===\n")
        print(f"Config Directory: {settings.config_dir}\n")

        print("Provider:")
        print(f"  Name: {settings.provider.name}")
        print(f"  Model: {settings.provider.resolved_model}")
        print(f"  Base URL: {settings.provider.base_url or '(provider default)'}")
        print(f"  Timeout: {settings.provider.timeout_seconds}s")
        print(f"  API Key: {_mask(settings.provider.api_key)}\n")

        print("Scheduler:")
        print(f"  Enabled: {settings.scheduler.enabled}")
        print(f"  Run On Startup: {settings.scheduler.run_on_startup}")
        print(f"  Weekly Cron: {settings.scheduler.weekly_cron}")
        print(f"  Timezone: {settings.scheduler.timezone}\n")

        print("Database:")
        print(f"  URL: {sanitize_database_url(settings.database.url)}\n")

        print("API:")
        print(f"  Listen: {settings.api.host}:{settings.api.port}")
        print(f"  Allowed Origins: {', '.join(settings.api.allowed_origins)}\n")

        print(f"Logfire: {_mask(settings.logfire_token)}\n")
        return 0

    except ValidationError as e:
        print("\n❌ Configuration Error:\n")
        for error in e.errors():
            print(f"  • {'.'.join(str(x) for x in error['loc'])}: {error['msg']}")
        print()
        return 1


def cmd_prompt(args: argparse.Namespace) -> int:
    """Print the research prompt for a week."""
    settings = get_settings()
    print(build_prompt(_target_week(args, settings)))
    return 0


async def _generate(settings: Settings, target: date) -> int:
    store = MarketEventStore(create_engine(settings.database))
    try:
        await store.create_schema()
        async with create_provider(settings.provider) as provider:
            service = EventGenerationService(provider, store, tz_name=settings.scheduler.timezone)
            result = await service.generate_for_week(target)
    finally:
        await store.close()

    print(f"\n{result}\n")
    for event in result.events:
        print(f"  • {event.date}: {event.event} [{event.type}, {event.significance}]")
    return 0 if result.success else 1


def cmd_generate(args: argparse.Namespace) -> int:
    """Run the pipeline once for the current, upcoming or a given week."""
    try:
        _init_logfire()
        settings = get_settings()
        target = _target_week(args, settings)
        print(f"\nGenerating market events for week of {target} via {settings.provider.name}...\n")
        return asyncio.run(_generate(settings, target))

    except ProviderConfigError as e:
        print(f"\n❌ {e}\n")
        return 1
    except KeyboardInterrupt:
        print("\n\nReceived interrupt signal. Shutting down...\n")
        return 130


def cmd_serve(args: argparse.Namespace) -> int:
    """Start the API server with the scheduler."""
    import uvicorn

    from market_events.api import create_app

    _init_logfire()
    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    settings = get_settings()
    print("\n=== Market Events API ===\n")
    print(f"Version: {__version__}")
    print(f"Provider: {settings.provider.name}/{settings.provider.resolved_model}")
    print(f"Listening on http://{settings.api.host}:{settings.api.port}\n")

    uvicorn.run(
        create_app(settings, enable_scheduler=not args.no_scheduler),
        host=settings.api.host,
        port=settings.api.port,
        log_level=settings.log_level.lower(),
    )
    return 0


def main() -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Market events: weekly market-moving events researched by AI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    parser_config = subparsers.add_parser(
        "config",
        help="Display merged configuration",
    )
    parser_config.set_defaults(func=cmd_config)

    parser_prompt = subparsers.add_parser(
        "prompt",
        help="Print the research prompt for a week",
    )
    parser_prompt.add_argument(
        "--week-start",
        type=_parse_date,
        help="Any day of the target week (YYYY-MM-DD); defaults to the current week",
    )
    parser_prompt.set_defaults(func=cmd_prompt)

    parser_generate = subparsers.add_parser(
        "generate",
        help="Generate and store events for one week",
    )
    target = parser_generate.add_mutually_exclusive_group()
    target.add_argument(
        "--upcoming",
        action="store_true",
        help="Target next week instead of the current one",
    )
    target.add_argument(
        "--week-start",
        type=_parse_date,
        help="Any day of the target week (YYYY-MM-DD)",
    )
    parser_generate.set_defaults(func=cmd_generate)

    parser_serve = subparsers.add_parser(
        "serve",
        help="Start the API server and scheduler",
    )
    parser_serve.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    parser_serve.add_argument(
        "--no-scheduler",
        action="store_true",
        help="Serve the API without the startup and weekly jobs",
    )
    parser_serve.set_defaults(func=cmd_serve)

    args = parser.parse_args()

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
