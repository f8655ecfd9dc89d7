"""Database connection and utilities."""

from pathlib import Path
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from src.database.models import Base, CacheEntry
from src.utils.config import settings


def make_engine(database_path) -> AsyncEngine:
    """Create an async SQLite engine for the given file path."""
    return create_async_engine(
        f"sqlite+aiosqlite:///{database_path}",
        echo=False,
        future=True,
    )


def make_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind, class_=AsyncSession, expire_on_commit=False)


# Create async engine
engine = make_engine(settings.database_path_resolved)

# Create async session factory
AsyncSessionLocal = make_session_factory(engine)


async def init_db(bind: Optional[AsyncEngine] = None) -> None:
    """Initialize database tables."""
    bind = bind or engine
    database = bind.url.database
    if database and database != ":memory:":
        Path(database).parent.mkdir(parents=True, exist_ok=True)
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_cache_entry(session: AsyncSession, cache_key: str) -> Optional[CacheEntry]:
    """Get a cache entry by key."""
    result = await session.execute(select(CacheEntry).where(CacheEntry.cache_key == cache_key))
    return result.scalar_one_or_none()


async def upsert_cache_entry(
    session: AsyncSession,
    cache_key: str,
    payload: str,
    captured_at: float,
) -> CacheEntry:
    """Create or replace a cache entry."""
    entry = await get_cache_entry(session, cache_key)
    if entry:
        entry.payload = payload
        entry.captured_at = captured_at
    else:
        entry = CacheEntry(cache_key=cache_key, payload=payload, captured_at=captured_at)
        session.add(entry)

    await session.commit()
    await session.refresh(entry)
    return entry


async def delete_cache_entry(session: AsyncSession, cache_key: str) -> None:
    """Delete a cache entry if present."""
    await session.execute(delete(CacheEntry).where(CacheEntry.cache_key == cache_key))
    await session.commit()

