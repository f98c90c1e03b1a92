"""
SQLAlchemy async engine and session factory.

Postgres deployments use ``postgresql+asyncpg://``; local runs and tests use
``sqlite+aiosqlite://``.
"""

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base

from market_events.config import DatabaseSettings

Base = declarative_base()


def create_engine(settings: DatabaseSettings) -> AsyncEngine:
    """Create the async engine; pool tuning only applies to server databases."""
    url = make_url(settings.url)
    if url.get_backend_name() == "sqlite":
        return create_async_engine(settings.url, echo=settings.echo)

    return create_async_engine(
        settings.url,
        echo=settings.echo,
        pool_size=settings.pool_size,
        max_overflow=settings.max_overflow,
        pool_pre_ping=True,
        pool_recycle=settings.pool_recycle_seconds,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory; objects stay readable after commit."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )


def sanitize_database_url(url: str) -> str:
    """Hide the password in a database URL for safe logging."""
    return make_url(url).render_as_string(hide_password=True)
