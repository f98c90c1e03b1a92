"""
MarketEventStore

Async SQLAlchemy operations for the 'market_events' table.

Methods:
- find_by_identity(event, date): Existing record with the same semantic identity
- insert_many(candidates): Atomic batch insert (all or nothing)
- events_for_week(week_start) / has_events_for_week(week_start)
- list_events / get_event / create_event / update_event / delete_event
- delete_all / delete_older_than(days)
"""

import logging
from datetime import date, datetime, timedelta, timezone
from typing import Sequence
from uuid import UUID

from sqlalchemy import delete, func, or_, select, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from market_events.events.models import CandidateEvent, MarketEvent, MarketEventUpdate
from market_events.events.weeks import falls_in_week, week_month_names
from market_events.storage.database import Base, create_session_factory
from market_events.storage.exceptions import DuplicateEventError, StoreError
from market_events.storage.models import MarketEventRecord

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10


def _to_record(candidate: CandidateEvent) -> MarketEventRecord:
    return MarketEventRecord(
        date=candidate.date,
        event=candidate.event,
        type=candidate.type.value,
        description=candidate.description,
        significance=candidate.significance.value,
        market_sentiment=candidate.market_sentiment.value,
        citations=list(candidate.citations or []),
    )


def _to_event(record: MarketEventRecord) -> MarketEvent:
    return MarketEvent.model_validate(record)


class MarketEventStore:
    """Persistence for market events, keyed by (event, date) identity."""

    def __init__(
        self,
        engine: AsyncEngine,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
    ):
        self.engine = engine
        self._session_factory = session_factory or create_session_factory(engine)

    async def create_schema(self) -> None:
        """Create tables and constraints if they do not exist."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def close(self) -> None:
        await self.engine.dispose()

    async def ping(self) -> bool:
        """Check if the database answers."""
        try:
            async with self._session_factory() as session:
                await session.execute(text("SELECT 1"))
            return True
        except (SQLAlchemyError, OSError) as e:
            logger.warning(f"Database ping failed: {e}")
            return False

    # ------------------------------------------------------------------
    # Pipeline operations
    # ------------------------------------------------------------------

    async def find_by_identity(self, event: str, date: str) -> MarketEvent | None:
        """Return the stored event with this (event, date), if any."""
        query = (
            select(MarketEventRecord)
            .where(MarketEventRecord.event == event, MarketEventRecord.date == date)
            .limit(1)
        )
        try:
            async with self._session_factory() as session:
                record = (await session.execute(query)).scalars().first()
        except (SQLAlchemyError, OSError) as e:
            raise StoreError(f"Failed to look up event {event!r} ({date}): {e}") from e

        return _to_event(record) if record is not None else None

    async def insert_many(self, candidates: Sequence[CandidateEvent]) -> list[MarketEvent]:
        """Insert all candidates in one transaction; nothing is kept on failure."""
        if not candidates:
            return []

        records = [_to_record(candidate) for candidate in candidates]
        async with self._session_factory() as session:
            try:
                session.add_all(records)
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                raise DuplicateEventError(f"Batch insert violated a constraint: {e.orig}") from e
            except (SQLAlchemyError, OSError) as e:
                await session.rollback()
                raise StoreError(f"Batch insert failed: {e}") from e

        return [_to_event(record) for record in records]

    async def events_for_week(self, week_start: date) -> list[MarketEvent]:
        """Stored events whose date text overlaps the week starting at ``week_start``."""
        month_filters = [
            MarketEventRecord.date.ilike(f"%{month}%") for month in week_month_names(week_start)
        ]
        query = (
            select(MarketEventRecord)
            .where(or_(*month_filters))
            .order_by(MarketEventRecord.created_at.desc())
        )
        try:
            async with self._session_factory() as session:
                records = (await session.execute(query)).scalars().all()
        except (SQLAlchemyError, OSError) as e:
            raise StoreError(f"Failed to fetch events for week of {week_start}: {e}") from e

        return [_to_event(r) for r in records if falls_in_week(r.date, week_start)]

    async def has_events_for_week(self, week_start: date) -> bool:
        return bool(await self.events_for_week(week_start))

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    async def list_events(
        self,
        event_type: str | None = None,
        significance: str | None = None,
        date_contains: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> tuple[list[MarketEvent], int]:
        """List events newest first with optional filters; returns (page, total)."""
        conditions = []
        if event_type and event_type != "All":
            conditions.append(MarketEventRecord.type == event_type)
        if significance and significance != "All":
            conditions.append(MarketEventRecord.significance == significance)
        if date_contains:
            conditions.append(MarketEventRecord.date.ilike(f"%{date_contains}%"))

        query = (
            select(MarketEventRecord)
            .where(*conditions)
            .order_by(MarketEventRecord.created_at.desc())
        )
        if offset:
            # an offset always pages, defaulting to DEFAULT_PAGE_SIZE rows
            query = query.offset(offset).limit(limit or DEFAULT_PAGE_SIZE)
        elif limit:
            query = query.limit(limit)
        count_query = select(func.count()).select_from(MarketEventRecord).where(*conditions)

        try:
            async with self._session_factory() as session:
                records = (await session.execute(query)).scalars().all()
                total = (await session.execute(count_query)).scalar_one()
        except (SQLAlchemyError, OSError) as e:
            raise StoreError(f"Failed to fetch market events: {e}") from e

        return [_to_event(r) for r in records], total

    async def get_event(self, event_id: UUID) -> MarketEvent | None:
        try:
            async with self._session_factory() as session:
                record = await session.get(MarketEventRecord, event_id)
        except (SQLAlchemyError, OSError) as e:
            raise StoreError(f"Failed to fetch market event {event_id}: {e}") from e
        return _to_event(record) if record is not None else None

    async def create_event(self, candidate: CandidateEvent) -> MarketEvent:
        created = await self.insert_many([candidate])
        logger.info(f"Created market event: {candidate.event}")
        return created[0]

    async def update_event(self, event_id: UUID, updates: MarketEventUpdate) -> MarketEvent | None:
        """Apply a partial update; returns None when the event does not exist."""
        values = updates.model_dump(exclude_unset=True)
        async with self._session_factory() as session:
            try:
                record = await session.get(MarketEventRecord, event_id)
                if record is None:
                    return None
                for field, value in values.items():
                    if field == "citations":
                        value = list(value or [])
                    setattr(record, field, value)
                await session.commit()
                await session.refresh(record)
            except IntegrityError as e:
                await session.rollback()
                raise DuplicateEventError(f"Update violated a constraint: {e.orig}") from e
            except (SQLAlchemyError, OSError) as e:
                await session.rollback()
                raise StoreError(f"Failed to update market event {event_id}: {e}") from e

        logger.info(f"Updated market event: {record.event}")
        return _to_event(record)

    async def delete_event(self, event_id: UUID) -> bool:
        """Delete one event; returns False when it did not exist."""
        return await self._delete(
            delete(MarketEventRecord).where(MarketEventRecord.id == event_id),
            f"market event {event_id}",
        ) > 0

    async def delete_all(self) -> int:
        return await self._delete(delete(MarketEventRecord), "all market events")

    async def delete_older_than(self, days: int) -> int:
        """Delete events created more than ``days`` days ago."""
        cutoff = datetime.now(timezone.utc) - timedelta(days=days)
        return await self._delete(
            delete(MarketEventRecord).where(MarketEventRecord.created_at < cutoff),
            f"market events older than {days} days",
        )

    async def _delete(self, statement, label: str) -> int:
        async with self._session_factory() as session:
            try:
                result = await session.execute(statement)
                await session.commit()
            except (SQLAlchemyError, OSError) as e:
                await session.rollback()
                raise StoreError(f"Failed to delete {label}: {e}") from e

        deleted = result.rowcount or 0
        logger.info(f"Deleted {deleted} ({label})")
        return deleted
