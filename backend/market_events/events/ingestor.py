"""Deduplicating ingestion of candidate events into the store."""

import logging
from typing import Protocol, Sequence

from market_events.events.exceptions import IngestError
from market_events.events.models import CandidateEvent, IngestResult, MarketEvent
from market_events.storage.exceptions import StoreError

logger = logging.getLogger(__name__)


class EventStore(Protocol):
    """Store operations the ingestor relies on."""

    async def find_by_identity(self, event: str, date: str) -> MarketEvent | None: ...

    async def insert_many(self, candidates: Sequence[CandidateEvent]) -> list[MarketEvent]: ...


class EventIngestor:
    """Insert only candidates whose (event, date) identity is not stored yet.

    Candidates are checked one at a time against the live store, then the
    new ones go in as a single batch. A failed lookup counts as "not found";
    the store's uniqueness constraint catches anything that slips through.
    """

    def __init__(self, store: EventStore):
        self.store = store

    async def _exists(self, candidate: CandidateEvent) -> bool:
        try:
            existing = await self.store.find_by_identity(candidate.event, candidate.date)
        except StoreError as e:
            logger.warning(
                f"Existence check failed for {candidate.event!r} ({candidate.date}), "
                f"assuming new: {e}"
            )
            return False
        return existing is not None

    async def ingest(self, candidates: Sequence[CandidateEvent]) -> IngestResult:
        staged: list[CandidateEvent] = []
        staged_keys: set[tuple[str, str]] = set()
        skipped = 0

        for candidate in candidates:
            if candidate.identity in staged_keys:
                logger.info(f"Skipping in-batch duplicate: {candidate.event} ({candidate.date})")
                skipped += 1
                continue

            if await self._exists(candidate):
                logger.info(f"Skipping duplicate event: {candidate.event} ({candidate.date})")
                skipped += 1
                continue

            staged.append(candidate)
            staged_keys.add(candidate.identity)

        if not staged:
            return IngestResult(created=[], skipped=skipped)

        try:
            created = await self.store.insert_many(staged)
        except StoreError as e:
            raise IngestError(f"Failed to create market events: {e}") from e

        logger.info(f"Created {len(created)} new market events, skipped {skipped} duplicates")
        return IngestResult(created=created, skipped=skipped)
