"""Shared fakes and sample provider output for the market events tests."""

import json
from typing import Sequence
from uuid import uuid4

import pytest

from market_events.events.models import CandidateEvent, MarketEvent
from market_events.services.providers import EventProvider, ProviderError, ProviderResponse
from market_events.storage import DuplicateEventError, StoreError

SAMPLE_EVENTS = [
    {
        "date": "December 1 2025",
        "event": "US ISM Manufacturing PMI",
        "type": "Economic",
        "description": "Manufacturing activity gauge.",
        "significance": "High",
        "marketSentiment": "Mixed",
    },
    {
        "date": "December 3 2025",
        "event": "FOMC Minutes",
        "type": "FOMC",
        "description": "Minutes from the last Fed meeting.",
        "significance": "Medium",
        "marketSentiment": "Neutral",
    },
    {
        "date": "December 5 2025",
        "event": "Bitcoin ETF Decision",
        "type": "Cryptocurrency",
        "description": "SEC deadline on a spot ETF filing.",
        "significance": "Low",
        "marketSentiment": "Bullish",
    },
]

SAMPLE_CITATIONS = ["https://a.example/news", "https://b.example/calendar"]


def sample_content(events: list[dict] | None = None) -> str:
    body = json.dumps(SAMPLE_EVENTS if events is None else events, indent=2)
    return f"Here are the events I found:\n{body}\nLet me know if you need more."


class FakeProvider(EventProvider):
    """Provider returning canned output, or raising a canned error."""

    def __init__(
        self,
        content: str | None = None,
        citations: Sequence[str] = (),
        error: Exception | None = None,
    ):
        self.name = "fake"
        self.model = "test-model"
        self.content = sample_content() if content is None else content
        self.citations = list(citations)
        self.error = error
        self.prompts: list[str] = []

    async def invoke(self, prompt: str) -> ProviderResponse:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        if not self.content:
            raise ProviderError("Empty response from fake", reason="empty_response")
        return ProviderResponse(content=self.content, citations=self.citations)


class FakeStore:
    """In-memory store honoring the (event, date) uniqueness rule."""

    def __init__(
        self,
        fail_lookups: bool = False,
        fail_inserts: bool = False,
        week_events: bool | None = None,
    ):
        self.events: list[MarketEvent] = []
        self.fail_lookups = fail_lookups
        self.fail_inserts = fail_inserts
        self.week_events = week_events
        self.lookups = 0

    async def find_by_identity(self, event: str, date: str) -> MarketEvent | None:
        self.lookups += 1
        if self.fail_lookups:
            raise StoreError("lookup unavailable")
        return next((e for e in self.events if e.identity == (event, date)), None)

    async def insert_many(self, candidates: Sequence[CandidateEvent]) -> list[MarketEvent]:
        if self.fail_inserts:
            raise StoreError("insert unavailable")
        existing = {e.identity for e in self.events}
        if any(c.identity in existing for c in candidates):
            raise DuplicateEventError("duplicate identity")
        created = [MarketEvent(id=uuid4(), **c.model_dump()) for c in candidates]
        self.events.extend(created)
        return created

    async def has_events_for_week(self, week_start) -> bool:
        if self.week_events is not None:
            return self.week_events
        return bool(self.events)

    async def delete_all(self) -> int:
        deleted = len(self.events)
        self.events.clear()
        return deleted


@pytest.fixture
def fake_store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def fake_provider() -> FakeProvider:
    return FakeProvider(citations=SAMPLE_CITATIONS)
