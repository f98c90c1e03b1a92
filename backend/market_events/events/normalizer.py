"""Turn raw model output into validated candidate events.

Model output is noisy: commentary around the JSON, individual records with
missing fields, and category names that drift from the canonical set. A bad
record is dropped on its own; the batch only fails when nothing survives.
"""

import json
import logging
from typing import Any, Sequence

from pydantic import HttpUrl, TypeAdapter, ValidationError

from market_events.events.exceptions import ParseError
from market_events.events.models import (
    CandidateEvent,
    EventType,
    MarketSentiment,
    Significance,
)

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = (
    "date",
    "event",
    "type",
    "description",
    "significance",
    "marketSentiment",
)

FALLBACK_EVENT_TYPE = EventType.ECONOMIC

# Exact-match synonyms the models commonly use instead of the canonical type
EVENT_TYPE_SYNONYMS: dict[str, EventType] = {
    "US Economic Data": EventType.ECONOMIC,
    "Economic Data": EventType.ECONOMIC,
    "Federal Reserve": EventType.FED,
    "Fed Meeting": EventType.FED,
    "FOMC": EventType.FED,
    "Cryptocurrency": EventType.CRYPTO,
    "Crypto Event": EventType.CRYPTO,
    "Retail Sales": EventType.RETAIL_GEOPOLITICAL,
    "Geopolitical Event": EventType.GEOPOLITICAL,
    "Holiday": EventType.HOLIDAY,
    "Corporate Earnings": EventType.CORPORATE,
    "Corporate Event": EventType.CORPORATE,
}

_CANONICAL_TYPES = {event_type.value: event_type for event_type in EventType}
_SIGNIFICANCE_VALUES = {value.value for value in Significance}
_SENTIMENT_VALUES = {value.value for value in MarketSentiment}

_url_adapter = TypeAdapter(HttpUrl)


def extract_json_array(content: str) -> list[Any]:
    """Parse the outermost ``[...]`` span of ``content``."""
    start = content.find("[")
    end = content.rfind("]")
    if start == -1 or end <= start:
        raise ParseError("No JSON array found in AI response", reason="no_array_found")

    try:
        parsed = json.loads(content[start : end + 1])
    except json.JSONDecodeError as e:
        raise ParseError(f"AI response contains invalid JSON: {e}", reason="invalid_json") from e

    if not isinstance(parsed, list):
        raise ParseError("AI response is not a JSON array", reason="not_an_array")

    return parsed


def normalize_event_type(raw_type: str) -> EventType:
    """Map a model-provided type onto the canonical set.

    Synonyms win, canonical values pass through, and anything else falls
    back to ``Economic`` rather than rejecting the event.
    """
    if raw_type in EVENT_TYPE_SYNONYMS:
        return EVENT_TYPE_SYNONYMS[raw_type]
    if raw_type in _CANONICAL_TYPES:
        return _CANONICAL_TYPES[raw_type]
    logger.info(f'Unrecognized event type "{raw_type}", using "{FALLBACK_EVENT_TYPE}"')
    return FALLBACK_EVENT_TYPE


def valid_citations(citations: Sequence[str]) -> list[str]:
    """Keep syntactically valid http(s) URLs, preserving provider order."""
    kept: list[str] = []
    for url in citations:
        try:
            _url_adapter.validate_python(url)
        except ValidationError:
            logger.debug(f"Dropping invalid citation URL: {url!r}")
            continue
        kept.append(url)
    return kept


def _missing_fields(item: dict[str, Any]) -> list[str]:
    missing = []
    for field in REQUIRED_FIELDS:
        value = item.get(field)
        if not isinstance(value, str) or not value.strip():
            missing.append(field)
    return missing


def _to_candidate(item: Any, citations: list[str] | None) -> CandidateEvent | None:
    if not isinstance(item, dict):
        logger.info(f"Skipping non-object array element: {item!r}")
        return None

    missing = _missing_fields(item)
    if missing:
        logger.info(f"Skipping event with missing fields {missing}: {item.get('event')!r}")
        return None

    if item["significance"] not in _SIGNIFICANCE_VALUES:
        logger.info(
            f"Skipping event with invalid significance {item['significance']!r}: {item['event']!r}"
        )
        return None

    if item["marketSentiment"] not in _SENTIMENT_VALUES:
        logger.info(
            f"Skipping event with invalid sentiment {item['marketSentiment']!r}: {item['event']!r}"
        )
        return None

    return CandidateEvent(
        date=item["date"],
        event=item["event"],
        type=normalize_event_type(item["type"]),
        description=item["description"],
        significance=Significance(item["significance"]),
        market_sentiment=MarketSentiment(item["marketSentiment"]),
        citations=list(citations) if citations else None,
    )


def normalize(content: str, citations: Sequence[str] = ()) -> list[CandidateEvent]:
    """Extract, validate and normalize candidate events from model output.

    Raises:
        ParseError: no array, invalid JSON, not an array, or no element
            survived validation.
    """
    items = extract_json_array(content)
    shared_citations = valid_citations(citations)

    events: list[CandidateEvent] = []
    for item in items:
        candidate = _to_candidate(item, shared_citations)
        if candidate is not None:
            events.append(candidate)

    if not events:
        raise ParseError(
            f"No valid events found in AI response ({len(items)} candidates rejected)",
            reason="no_valid_events",
        )

    logger.info(f"Normalized {len(events)}/{len(items)} events from AI response")
    return events
