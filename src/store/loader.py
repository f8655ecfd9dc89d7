"""Load the song catalog, preferring a fresh cached snapshot."""

import asyncio
import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from src.cache.summary import SUMMARY_CACHE_TTL, SummaryCache
from src.catalog.models import Song
from src.database.db import engine, init_db, make_session_factory
from src.store.client import SongStore

logger = logging.getLogger(__name__)


async def load_catalog(
    store: SongStore,
    cache: Optional[SummaryCache] = None,
    refresh: bool = False,
) -> list[Song]:
    """
    Load every song once for the session.

    Args:
        store: Data service client
        cache: Optional summary cache consulted before the data service
        refresh: Skip the cached snapshot and refetch

    Returns:
        The full song list in data service order

    Raises:
        SongStoreError: If fetching from the data service fails
    """
    if cache is not None and not refresh:
        cached = await cache.get()
        if cached is not None:
            logger.info(f"Loaded {len(cached)} songs from summary cache")
            return cached

    loop = asyncio.get_running_loop()
    songs = await loop.run_in_executor(None, store.fetch_all_songs)

    if cache is not None:
        await cache.put(songs)

    return songs


async def load_session_catalog(
    store: SongStore,
    refresh: bool = False,
    ttl: float = SUMMARY_CACHE_TTL,
    bind: Optional[AsyncEngine] = None,
) -> list[Song]:
    """
    Open the cache database, load the catalog and release the connections.

    When the cache database cannot be created the catalog is loaded straight
    from the data service.
    """
    bind = bind or engine
    cache = None
    try:
        await init_db(bind)
        cache = SummaryCache(make_session_factory(bind), ttl=ttl)
    except (OSError, SQLAlchemyError) as e:
        logger.warning(f"Summary cache unavailable, loading without it: {e}")

    try:
        return await load_catalog(store, cache, refresh=refresh)
    finally:
        # Connections are bound to the running event loop
        await bind.dispose()
