"""Chart-view video lookup with a per-title session cache."""

import logging
from typing import Optional, Protocol

import requests
from pydantic import TypeAdapter, ValidationError

from src.cache.expiring import ExpiringCache
from src.errors import VideoSearchError
from src.video.models import VideoResult
from src.video.youtube import MAX_RESULTS, placeholder_videos

logger = logging.getLogger(__name__)

_video_list = TypeAdapter(list[VideoResult])


class VideoSearchBackend(Protocol):
    def search(self, title: str, category: Optional[str] = None) -> list[VideoResult]: ...


class ProxyVideoSearch:
    """Calls the ``/api/video-search`` endpoint of this project's API."""

    def __init__(
        self,
        api_base_url: str,
        session: Optional[requests.Session] = None,
        timeout: float = 10.0,
    ):
        self.endpoint = f"{api_base_url.rstrip('/')}/api/video-search"
        self.session = session or requests.Session()
        self.timeout = timeout

    def search(self, title: str, category: Optional[str] = None) -> list[VideoResult]:
        params = {"songTitle": title}
        if category:
            params["songDifficulty"] = category
        try:
            response = self.session.get(self.endpoint, params=params, timeout=self.timeout)
            response.raise_for_status()
            return _video_list.validate_python(response.json())
        except requests.RequestException as e:
            raise VideoSearchError(f"Video search request failed: {e}") from e
        except (ValueError, ValidationError) as e:
            raise VideoSearchError(f"Video search returned an invalid payload: {e}") from e


class ChartVideoLookup:
    """
    Finds chart-view videos for a song title.

    The first result set for a title (real or placeholder) is kept for the
    rest of the session. Lookup failures never reach the caller.
    """

    def __init__(self, backend: VideoSearchBackend, cache: Optional[ExpiringCache] = None):
        self.backend = backend
        self.cache = cache if cache is not None else ExpiringCache(ttl=None)

    def find_chart_videos(self, title: str, category: Optional[str] = None) -> list[VideoResult]:
        """
        Return up to three videos for a song, most relevant first.

        Args:
            title: Song title (also the cache key)
            category: Optional difficulty category label to narrow the search
        """
        cached = self.cache.get(title)
        if cached is not None:
            return cached

        try:
            videos = self.backend.search(title, category)[:MAX_RESULTS]
        except (VideoSearchError, requests.RequestException) as e:
            logger.error(f"Error searching chart videos for '{title}': {e}")
            videos = placeholder_videos(title)

        self.cache.put(title, videos)
        return videos

    def first_video_id(self, title: str, category: Optional[str] = None) -> Optional[str]:
        """Id of the video used for playback, or None when nothing was found."""
        videos = self.find_chart_videos(title, category)
        return videos[0].id if videos else None
