"""Storage layer for market events - SQLAlchemy async persistence.

This package provides:
- Engine and session factory construction from DatabaseSettings
- The market_events table model with its (event, date) uniqueness constraint
- MarketEventStore, the repository used by the pipeline and the REST API
"""

from .database import Base, create_engine, create_session_factory, sanitize_database_url
from .exceptions import DuplicateEventError, StoreError
from .models import MarketEventRecord
from .repository import DEFAULT_PAGE_SIZE, MarketEventStore

__all__ = [
    "Base",
    "create_engine",
    "create_session_factory",
    "sanitize_database_url",
    "DuplicateEventError",
    "StoreError",
    "MarketEventRecord",
    "MarketEventStore",
    "DEFAULT_PAGE_SIZE",
]
