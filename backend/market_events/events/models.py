"""Pydantic models for market events and pipeline results."""

from datetime import date, datetime
from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class EventType(StrEnum):
    """Canonical event categories."""

    ECONOMIC = "Economic"
    FED = "Fed"
    CRYPTO = "Crypto"
    RETAIL_GEOPOLITICAL = "Retail/Geopolitical"
    HOLIDAY = "Holiday"
    GEOPOLITICAL = "Geopolitical"
    CORPORATE = "Corporate"


class Significance(StrEnum):
    """Expected market impact."""

    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class MarketSentiment(StrEnum):
    """Expected direction of the market reaction."""

    BULLISH = "Bullish"
    BEARISH = "Bearish"
    NEUTRAL = "Neutral"
    MIXED = "Mixed"


class CandidateEvent(BaseModel):
    """Provider-derived event that passed validation but is not yet persisted.

    ``date`` is kept verbatim from the provider ("December 1 2025",
    "December 1-3 2025"); together with ``event`` it forms the identity
    used for deduplication.
    """

    date: str
    event: str
    type: EventType
    description: str
    significance: Significance
    market_sentiment: MarketSentiment
    citations: list[str] | None = None

    @property
    def identity(self) -> tuple[str, str]:
        """Semantic identity: (event, date)."""
        return (self.event, self.date)


class MarketEvent(CandidateEvent):
    """Persisted market event."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    created_at: datetime | None = None
    updated_at: datetime | None = None


class MarketEventUpdate(BaseModel):
    """Partial update for a stored event; unset fields are left untouched."""

    date: str | None = None
    event: str | None = None
    type: EventType | None = None
    description: str | None = None
    significance: Significance | None = None
    market_sentiment: MarketSentiment | None = None
    citations: list[str] | None = None


class IngestResult(BaseModel):
    """Outcome of a deduplicating ingest."""

    created: list[MarketEvent] = Field(default_factory=list)
    skipped: int = 0


class GenerationResult(BaseModel):
    """Result of one pipeline run for a target week.

    Failed runs carry ``success=False`` with the error kind and message and
    zero counts; they are never reported as success.
    """

    success: bool
    week_start: date
    provider: str
    generated: int = 0
    created: int = 0
    skipped: int = 0
    events: list[MarketEvent] = Field(default_factory=list)
    error_kind: str | None = None
    error: str | None = None

    def __str__(self) -> str:
        """Human-readable status."""
        if self.success:
            return (
                f"Week of {self.week_start.isoformat()} via {self.provider}: "
                f"generated={self.generated} created={self.created} skipped={self.skipped}"
            )
        return (
            f"Week of {self.week_start.isoformat()} via {self.provider} failed: "
            f"{self.error_kind}: {self.error}"
        )
