"""Persisted snapshot of the song list with a 24-hour freshness window."""

import json
import logging
import time
from typing import Callable, Optional

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from src.cache.expiring import is_fresh
from src.catalog.models import Song
from src.database.db import (
    AsyncSessionLocal,
    delete_cache_entry,
    get_cache_entry,
    upsert_cache_entry,
)

logger = logging.getLogger(__name__)

SUMMARY_CACHE_KEY = "arcaea_songs_summary"
SUMMARY_CACHE_TTL = 24 * 60 * 60


class SummaryCache:
    """
    Song summaries stored under one fixed key in the cache database.

    The payload is ``{"data": [...rows], "timestamp": <ms>}``. A read is a hit
    only while ``now - captured_at < ttl``; stale and corrupt entries are
    deleted and reported as a miss.
    """

    def __init__(
        self,
        session_factory=AsyncSessionLocal,
        key: str = SUMMARY_CACHE_KEY,
        ttl: float = SUMMARY_CACHE_TTL,
        clock: Callable[[], float] = time.time,
    ):
        self.session_factory = session_factory
        self.key = key
        self.ttl = ttl
        self.clock = clock

    async def get(self) -> Optional[list[Song]]:
        """Return cached songs, or None on a miss."""
        try:
            async with self.session_factory() as session:
                entry = await get_cache_entry(session, self.key)
                if entry is None:
                    return None

                if not is_fresh(entry.captured_at, self.clock(), self.ttl):
                    logger.info("Summary cache expired, evicting")
                    await delete_cache_entry(session, self.key)
                    return None

                songs = _decode_payload(entry.payload)
                if songs is None:
                    logger.warning("Discarding unreadable summary cache entry")
                    await delete_cache_entry(session, self.key)
                return songs
        except SQLAlchemyError as e:
            logger.warning(f"Summary cache read failed: {e}")
            return None

    async def put(self, songs: list[Song]) -> None:
        """Store a snapshot; failures are logged, not raised."""
        captured_at = self.clock()
        payload = json.dumps(
            {
                "data": [song.to_row() for song in songs],
                "timestamp": int(captured_at * 1000),
            }
        )
        try:
            async with self.session_factory() as session:
                await upsert_cache_entry(session, self.key, payload, captured_at)
        except SQLAlchemyError as e:
            logger.error(f"Failed to save summary cache: {e}")

    async def evict(self) -> None:
        try:
            async with self.session_factory() as session:
                await delete_cache_entry(session, self.key)
        except SQLAlchemyError as e:
            logger.warning(f"Summary cache eviction failed: {e}")


def _decode_payload(payload: str) -> Optional[list[Song]]:
    try:
        data = json.loads(payload)
        rows = data["data"]
        if not isinstance(rows, list):
            return None
        return [Song.model_validate(row) for row in rows]
    except (ValueError, TypeError, KeyError, ValidationError):
        return None
