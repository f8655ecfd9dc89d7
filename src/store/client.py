"""Song Store Accessor: read-only client for the hosted songs table.

The data service is a PostgREST endpoint (Supabase). Rows are fetched in
fixed-size pages ordered by constant descending, with the id as tie-break so
that concatenating pages gives the same order as one unpaginated query.
"""

import logging
from typing import Optional

import requests
from pydantic import ValidationError

from src.catalog.models import Song
from src.errors import SongStoreConfigError, SongStoreError
from src.utils.config import settings

logger = logging.getLogger(__name__)

SONGS_TABLE = "songs"
DEFAULT_ORDER = "constant.desc,id.asc"
PLACEHOLDER_URLS = {"", "https://your-project.supabase.co"}
PLACEHOLDER_KEYS = {"", "your-anon-key"}


def parse_content_range(header: Optional[str]) -> int:
    """
    Read the total row count from a ``Content-Range: 0-999/2500`` header.

    Returns 0 when the header is missing or the total is unknown (``*``).
    """
    if not header or "/" not in header:
        return 0
    total = header.rsplit("/", 1)[1].strip()
    if not total.isdigit():
        return 0
    return int(total)


class SongStore:
    """Client for the ``songs`` table of the data service."""

    def __init__(
        self,
        base_url: Optional[str],
        api_key: Optional[str],
        session: Optional[requests.Session] = None,
        timeout: float = 10.0,
        order: str = DEFAULT_ORDER,
    ):
        """
        Initialize the store client.

        Args:
            base_url: Data service URL (e.g. https://xyz.supabase.co)
            api_key: Anonymous API key of the data service
            session: Optional requests session (a new one is created otherwise)
            timeout: Per-request timeout in seconds
            order: PostgREST order clause

        Raises:
            SongStoreConfigError: If the URL or key is missing
        """
        if (base_url or "").strip() in PLACEHOLDER_URLS:
            raise SongStoreConfigError("SUPABASE_URL is not configured")
        if (api_key or "").strip() in PLACEHOLDER_KEYS:
            raise SongStoreConfigError("SUPABASE_ANON_KEY is not configured")

        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.session = session or requests.Session()
        self.timeout = timeout
        self.order = order

    @classmethod
    def from_settings(cls) -> "SongStore":
        return cls(
            settings.supabase_url,
            settings.supabase_anon_key,
            timeout=settings.http_timeout,
        )

    @property
    def table_url(self) -> str:
        return f"{self.base_url}/rest/v1/{SONGS_TABLE}"

    def _headers(self) -> dict[str, str]:
        return {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
            "Accept": "application/json",
            "Prefer": "count=exact",
        }

    def fetch_range(self, offset: int, limit: int) -> tuple[list[Song], int]:
        """
        Fetch ``limit`` rows starting at ``offset``.

        Returns:
            Tuple of (songs, total row count reported by the service)

        Raises:
            SongStoreError: On transport failure, error status or bad payload
        """
        params = {
            "select": "*",
            "order": self.order,
            "offset": offset,
            "limit": limit,
        }
        logger.debug(f"Fetching songs {offset}-{offset + limit - 1}")
        try:
            response = self.session.get(
                self.table_url,
                params=params,
                headers=self._headers(),
                timeout=self.timeout,
            )
            response.raise_for_status()
            rows = response.json()
        except requests.RequestException as e:
            raise SongStoreError(f"Failed to fetch songs {offset}-{offset + limit - 1}: {e}") from e
        except ValueError as e:
            raise SongStoreError(f"Data service returned invalid JSON: {e}") from e

        if not isinstance(rows, list):
            raise SongStoreError(f"Expected a list of rows, got {type(rows).__name__}")

        try:
            songs = [Song.model_validate(row) for row in rows]
        except ValidationError as e:
            raise SongStoreError(f"Malformed song row: {e}") from e

        return songs, parse_content_range(response.headers.get("Content-Range"))

    def fetch_songs_page(self, page_number: int, page_size: int) -> tuple[list[Song], int]:
        """
        Fetch one 1-based page of songs.

        Returns:
            Tuple of (songs on the page, total song count)
        """
        if page_number < 1 or page_size < 1:
            raise ValueError(f"Invalid page request: page={page_number}, size={page_size}")
        return self.fetch_range((page_number - 1) * page_size, page_size)

    def fetch_all_songs(self, page_size: Optional[int] = None) -> list[Song]:
        """
        Fetch the complete song list, one page at a time.

        Stops at the first page shorter than ``page_size``. Any failing page
        aborts the whole fetch; a partial list is never returned.

        Raises:
            SongStoreError: If any page request fails
        """
        page_size = page_size or settings.song_fetch_page_size
        songs: list[Song] = []
        page_number = 1

        while True:
            page, _ = self.fetch_songs_page(page_number, page_size)
            songs.extend(page)
            if len(page) < page_size:
                break
            page_number += 1

        logger.info(f"Fetched {len(songs)} songs in {page_number} page request(s)")
        return songs
