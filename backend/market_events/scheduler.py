"""Job scheduler using APScheduler."""

import logging
from datetime import datetime
from zoneinfo import ZoneInfo

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from market_events.config import SchedulerSettings
from market_events.pipeline import EventGenerationService

logger = logging.getLogger(__name__)

STARTUP_JOB_ID = "startup-current-week"
WEEKLY_JOB_ID = "weekly-upcoming-week"


async def startup_job(service: EventGenerationService) -> None:
    """Make sure the current week has events once the service is up."""
    try:
        result = await service.ensure_current_week_events()
        if result is not None:
            logger.info(f"Startup generation: {result}")
    except Exception as e:
        logger.error(f"Startup generation job failed: {e}", exc_info=True)


async def weekly_job(service: EventGenerationService) -> None:
    """Generate the upcoming week's events."""
    try:
        result = await service.generate_upcoming_week_events()
        logger.info(f"Weekly generation: {result}")
    except Exception as e:
        logger.error(f"Weekly generation job failed: {e}", exc_info=True)


def create_scheduler(
    service: EventGenerationService, settings: SchedulerSettings
) -> AsyncIOScheduler:
    """Build the scheduler with the startup and weekly jobs registered (not started)."""
    tz = ZoneInfo(settings.timezone)
    scheduler = AsyncIOScheduler(
        timezone=tz,
        job_defaults={"coalesce": True, "max_instances": 1},
    )

    scheduler.add_job(
        weekly_job,
        CronTrigger.from_crontab(settings.weekly_cron, timezone=tz),
        args=[service],
        id=WEEKLY_JOB_ID,
        name="Generate: Upcoming Week",
    )
    logger.info(f"Registered job: Upcoming Week Generation (cron '{settings.weekly_cron}' {settings.timezone})")

    if settings.run_on_startup:
        scheduler.add_job(
            startup_job,
            args=[service],
            id=STARTUP_JOB_ID,
            name="Generate: Current Week (startup)",
            next_run_time=datetime.now(tz),
        )
        logger.info("Registered job: Current Week Generation (on startup)")

    return scheduler


def start_scheduler(
    service: EventGenerationService, settings: SchedulerSettings
) -> AsyncIOScheduler | None:
    """Create and start the scheduler on the running event loop."""
    if not settings.enabled:
        logger.info("Scheduler disabled - events are generated on demand only")
        return None

    scheduler = create_scheduler(service, settings)
    scheduler.start()
    logger.info(f"✓ Scheduler started with {len(scheduler.get_jobs())} jobs")
    return scheduler


def shutdown_scheduler(scheduler: AsyncIOScheduler | None) -> None:
    if scheduler is None:
        return
    scheduler.shutdown(wait=False)
    logger.info("✓ Scheduler stopped cleanly")
