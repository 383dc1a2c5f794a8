"""Engine, session and schema helpers for the credential store."""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

# Import models to register with Base.metadata
import examiner_identity.infrastructure.persistence.sqlalchemy.models  # noqa: F401
from examiner_config.settings import Settings, get_settings
from examiner_identity.infrastructure.persistence.sqlalchemy.base import Base

logger = logging.getLogger(__name__)


def display_database_url(database_url: str) -> str:
    """Strip credentials from a database URL for display."""
    return database_url.split("@")[-1] if "@" in database_url else database_url


def create_engine_from_settings(settings: Optional[Settings] = None) -> AsyncEngine:
    """Create the async engine (asyncpg for PostgreSQL, aiosqlite for SQLite)."""
    settings = settings or get_settings()
    return create_async_engine(
        settings.database_url,
        echo=False,
        pool_pre_ping=True,
    )


def create_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def create_tables(engine: AsyncEngine) -> None:
    """
    Create all credential store tables (idempotent).

    Uses SQLAlchemy's create_all() which only creates missing tables.
    Existing tables and their data are never modified or deleted.
    """
    logger.info("Ensuring credential store tables exist...")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Credential store schema is up to date")
