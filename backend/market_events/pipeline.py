"""Event generation pipeline: Prompt -> Provider -> Normalizer -> Ingestor."""

import asyncio
import logging
from datetime import date

from market_events.events.exceptions import EventPipelineError
from market_events.events.ingestor import EventIngestor
from market_events.events.models import CandidateEvent, GenerationResult
from market_events.events.normalizer import normalize
from market_events.events.prompts import build_prompt
from market_events.events.weeks import current_week_start, upcoming_week_start
from market_events.services.providers import EventProvider
from market_events.storage import MarketEventStore, StoreError

logger = logging.getLogger("market_events.pipeline")


class EventGenerationService:
    """Runs the pipeline for a target week and reports a structured result.

    Runs are serialized with one lock shared by every trigger (startup,
    weekly, manual, clear-and-regenerate), so two runs never interleave
    their existence checks, inserts and deletes.
    """

    def __init__(
        self,
        provider: EventProvider,
        store: MarketEventStore,
        tz_name: str = "UTC",
    ):
        self.provider = provider
        self.store = store
        self.tz_name = tz_name
        self.ingestor = EventIngestor(store)
        self._run_lock = asyncio.Lock()

    async def generate_candidates(self, week_start: date) -> list[CandidateEvent]:
        """Research and normalize events for a week without persisting them."""
        prompt = build_prompt(week_start)
        response = await self.provider.invoke(prompt)
        candidates = normalize(response.content, response.citations)
        logger.info(
            f"Generated {len(candidates)} candidate events for week of {week_start} "
            f"with {len(response.citations)} citations"
        )
        return candidates

    async def _run(self, week_start: date) -> GenerationResult:
        """Pipeline body; callers hold ``_run_lock``."""
        logger.info(f"Pipeline starting: week of {week_start} via {self.provider.label}")
        try:
            candidates = await self.generate_candidates(week_start)
            ingested = await self.ingestor.ingest(candidates)
        except EventPipelineError as e:
            logger.error(
                f"Pipeline failed for week of {week_start} via {self.provider.label}: "
                f"{e.kind}: {e}",
                exc_info=True,
            )
            return GenerationResult(
                success=False,
                week_start=week_start,
                provider=self.provider.label,
                error_kind=e.kind,
                error=str(e),
            )

        result = GenerationResult(
            success=True,
            week_start=week_start,
            provider=self.provider.label,
            generated=len(candidates),
            created=len(ingested.created),
            skipped=ingested.skipped,
            events=ingested.created,
        )
        logger.info(f"Pipeline complete: {result}")
        return result

    async def generate_for_week(self, week_start: date) -> GenerationResult:
        """One full pipeline run; failures come back as ``success=False``."""
        async with self._run_lock:
            return await self._run(week_start)

    async def generate_current_week_events(self, today: date | None = None) -> GenerationResult:
        return await self.generate_for_week(current_week_start(today, self.tz_name))

    async def generate_upcoming_week_events(self, today: date | None = None) -> GenerationResult:
        return await self.generate_for_week(upcoming_week_start(today, self.tz_name))

    async def ensure_current_week_events(self, today: date | None = None) -> GenerationResult | None:
        """Generate this week's events unless the store already has some.

        Returns None when generation was already satisfied.
        """
        week_start = current_week_start(today, self.tz_name)
        try:
            if await self.store.has_events_for_week(week_start):
                logger.info(f"Events for week of {week_start} already exist, skipping generation")
                return None
        except StoreError as e:
            logger.warning(f"Could not check existing events for week of {week_start}: {e}")

        return await self.generate_for_week(week_start)

    async def clear_and_regenerate(self, today: date | None = None) -> tuple[int, GenerationResult]:
        """Delete every stored event, then generate the current week afresh.

        The delete and the regeneration happen under the run lock as one unit.
        """
        week_start = current_week_start(today, self.tz_name)
        async with self._run_lock:
            deleted = await self.store.delete_all()
            logger.info(f"Cleared {deleted} old events")
            return deleted, await self._run(week_start)
