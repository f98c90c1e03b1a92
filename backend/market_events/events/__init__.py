"""Market event domain: models, prompt, normalization and ingestion."""

from .exceptions import (
    EventPipelineError,
    IngestError,
    ParseError,
    ProviderConfigError,
    ProviderError,
)
from .ingestor import EventIngestor, EventStore
from .models import (
    CandidateEvent,
    EventType,
    GenerationResult,
    IngestResult,
    MarketEvent,
    MarketEventUpdate,
    MarketSentiment,
    Significance,
)
from .normalizer import normalize
from .prompts import SYSTEM_PROMPT, build_prompt

__all__ = [
    "EventPipelineError",
    "IngestError",
    "ParseError",
    "ProviderConfigError",
    "ProviderError",
    "EventIngestor",
    "EventStore",
    "CandidateEvent",
    "EventType",
    "GenerationResult",
    "IngestResult",
    "MarketEvent",
    "MarketEventUpdate",
    "MarketSentiment",
    "Significance",
    "normalize",
    "SYSTEM_PROMPT",
    "build_prompt",
]
