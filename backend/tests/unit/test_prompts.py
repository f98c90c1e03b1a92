"""Tests for the weekly research prompt."""

from datetime import date

from market_events.events import build_prompt
from market_events.events.models import EventType


def test_prompt_states_week_range() -> None:
    prompt = build_prompt(date(2025, 11, 30))

    assert "November 30 2025 to December 6 2025" in prompt


def test_prompt_lists_every_event_type_and_output_field() -> None:
    prompt = build_prompt(date(2025, 11, 30))

    for event_type in EventType:
        assert f'"{event_type.value}"' in prompt
    for field in ("date", "event", "type", "description", "significance", "marketSentiment"):
        assert f'"{field}"' in prompt
    assert "10-15 events" in prompt
    assert prompt.rstrip().endswith("Return only the JSON array.")


def test_prompt_is_deterministic() -> None:
    assert build_prompt(date(2026, 1, 4)) == build_prompt(date(2026, 1, 4))
