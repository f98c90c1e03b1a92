"""Market event database model."""

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import JSON, Column, DateTime, Index, String, Text, UniqueConstraint, Uuid
from sqlalchemy.sql import func

from market_events.storage.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TimestampMixin:
    """Mixin that adds created_at and updated_at fields to models."""

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=func.now(),
        comment="When the record was created",
    )

    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=func.now(),
        onupdate=_utcnow,
        comment="When the record was last updated",
    )


class UUIDMixin:
    """Mixin that adds UUID primary key."""

    id = Column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid4,
        nullable=False,
        comment="Unique identifier",
    )


class MarketEventRecord(Base, UUIDMixin, TimestampMixin):
    """Market-moving event researched for a given week."""

    __tablename__ = "market_events"
    __table_args__ = (
        UniqueConstraint("event", "date", name="uq_market_events_event_date"),
        Index("idx_market_events_created_at", "created_at"),
    )

    # Free-form date text, e.g. "November 24 2025" or "November 24-29 2025"
    date = Column(Text, nullable=False, index=True)
    event = Column(Text, nullable=False)
    type = Column(String(50), nullable=False, index=True)
    description = Column(Text, nullable=False)
    significance = Column(String(10), nullable=False, index=True)
    market_sentiment = Column(String(10), nullable=False)
    citations = Column(JSON, nullable=False, default=list)
