"""Tests for pipeline runs and the trigger surface."""

import asyncio
from datetime import date

from conftest import FakeProvider, FakeStore, SAMPLE_CITATIONS
from market_events.events import ProviderError
from market_events.pipeline import EventGenerationService

TODAY = date(2025, 12, 3)


def test_generate_current_week_reports_counts() -> None:
    provider = FakeProvider(citations=SAMPLE_CITATIONS)
    service = EventGenerationService(provider, FakeStore())

    result = asyncio.run(service.generate_current_week_events(TODAY))

    assert result.success
    assert result.week_start == date(2025, 11, 30)
    assert result.provider == "fake/test-model"
    assert (result.generated, result.created, result.skipped) == (3, 3, 0)
    assert all(e.citations == SAMPLE_CITATIONS for e in result.events)
    assert "November 30 2025 to December 6 2025" in provider.prompts[0]


def test_second_run_is_idempotent() -> None:
    service = EventGenerationService(FakeProvider(), FakeStore())

    async def run():
        await service.generate_current_week_events(TODAY)
        return await service.generate_current_week_events(TODAY)

    second = asyncio.run(run())

    assert second.success
    assert second.created == 0
    assert second.skipped == second.generated == 3


def test_upcoming_week_targets_next_sunday() -> None:
    provider = FakeProvider()
    service = EventGenerationService(provider, FakeStore())

    result = asyncio.run(service.generate_upcoming_week_events(TODAY))

    assert result.week_start == date(2025, 12, 7)
    assert "December 7 2025 to December 13 2025" in provider.prompts[0]


def test_provider_failure_is_reported_not_raised() -> None:
    store = FakeStore()
    error = ProviderError("xai API error: 503", status_code=503, reason="http_error")
    service = EventGenerationService(FakeProvider(error=error), store)

    result = asyncio.run(service.generate_current_week_events(TODAY))

    assert not result.success
    assert result.error_kind == "ProviderError"
    assert (result.generated, result.created, result.skipped) == (0, 0, 0)
    assert store.events == []


def test_parse_failure_is_reported() -> None:
    service = EventGenerationService(FakeProvider(content="No events found."), FakeStore())

    result = asyncio.run(service.generate_current_week_events(TODAY))

    assert not result.success
    assert result.error_kind == "ParseError"


def test_ingest_failure_is_reported() -> None:
    service = EventGenerationService(FakeProvider(), FakeStore(fail_inserts=True))

    result = asyncio.run(service.generate_current_week_events(TODAY))

    assert not result.success
    assert result.error_kind == "IngestError"


def test_startup_skips_when_week_already_has_events() -> None:
    provider = FakeProvider()
    service = EventGenerationService(provider, FakeStore(week_events=True))

    result = asyncio.run(service.ensure_current_week_events(TODAY))

    assert result is None
    assert provider.prompts == []


def test_startup_generates_for_empty_week() -> None:
    service = EventGenerationService(FakeProvider(), FakeStore(week_events=False))

    result = asyncio.run(service.ensure_current_week_events(TODAY))

    assert result is not None
    assert result.created == 3


def test_clear_and_regenerate() -> None:
    store = FakeStore()
    service = EventGenerationService(FakeProvider(), store)

    async def run():
        await service.generate_current_week_events(TODAY)
        return await service.clear_and_regenerate(TODAY)

    deleted, result = asyncio.run(run())

    assert deleted == 3
    assert result.created == 3
    assert len(store.events) == 3


def test_concurrent_runs_do_not_double_insert() -> None:
    store = FakeStore()
    service = EventGenerationService(FakeProvider(), store)

    async def run():
        return await asyncio.gather(
            service.generate_current_week_events(TODAY),
            service.generate_current_week_events(TODAY),
        )

    first, second = asyncio.run(run())

    assert first.success and second.success
    assert first.created + second.created == 3
    assert len(store.events) == 3


class LockCheckingStore(FakeStore):
    """Records whether the service's run lock is held while deleting."""

    service: EventGenerationService | None = None
    lock_held_on_delete: bool | None = None

    async def delete_all(self) -> int:
        self.lock_held_on_delete = self.service._run_lock.locked()
        return await super().delete_all()


def test_clear_and_regenerate_holds_run_lock_for_delete() -> None:
    store = LockCheckingStore()
    service = EventGenerationService(FakeProvider(), store)
    store.service = service

    async def run():
        await service.generate_current_week_events(TODAY)
        return await service.clear_and_regenerate(TODAY)

    deleted, result = asyncio.run(run())

    assert store.lock_held_on_delete is True
    assert deleted == 3
    assert result.created == 3
