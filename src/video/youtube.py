"""YouTube Data API search for chart-view videos."""

import logging
from typing import Optional

import requests
from pydantic import ValidationError

from src.errors import VideoSearchError
from src.video.models import VideoResult

logger = logging.getLogger(__name__)

YOUTUBE_SEARCH_URL = "https://www.googleapis.com/youtube/v3/search"
WATCH_URL = "https://www.youtube.com/watch?v={video_id}"
PLACEHOLDER_API_KEY = "your_youtube_api_key_here"
PLACEHOLDER_VIDEO_ID = "dQw4w9WgXcQ"
MAX_RESULTS = 3

_PLACEHOLDERS = [
    ("mock1", "Chart View", "Chart Player"),
    ("mock2", "Full Combo", "Pro Player"),
    ("mock3", "Perfect Play", "Master Player"),
]


def build_search_query(title: str, category: Optional[str] = None) -> str:
    """Build the search string, e.g. "Lilly Future chart view"."""
    parts = [title.strip(), (category or "").strip(), "chart view"]
    return " ".join(part for part in parts if part)


def placeholder_videos(title: str) -> list[VideoResult]:
    """Fixed, clearly labeled results used when the real search is unavailable."""
    return [
        VideoResult(
            id=video_id,
            title=f"{title} - {label}",
            channel_title=channel,
            thumbnail_url=f"https://img.youtube.com/vi/{PLACEHOLDER_VIDEO_ID}/mqdefault.jpg",
            video_url=WATCH_URL.format(video_id=PLACEHOLDER_VIDEO_ID),
        )
        for video_id, label, channel in _PLACEHOLDERS
    ]


def parse_search_items(payload: dict) -> list[VideoResult]:
    """
    Map a YouTube search response to video results.

    Raises:
        VideoSearchError: If the payload does not have the expected shape
    """
    try:
        items = payload["items"]
        return [
            VideoResult(
                id=item["id"]["videoId"],
                title=item["snippet"]["title"],
                channel_title=item["snippet"]["channelTitle"],
                thumbnail_url=item["snippet"]["thumbnails"]["medium"]["url"],
                video_url=WATCH_URL.format(video_id=item["id"]["videoId"]),
            )
            for item in items
        ]
    except (KeyError, TypeError, ValidationError) as e:
        raise VideoSearchError(f"Unexpected YouTube search payload: {e}") from e


class YouTubeSearchClient:
    """Searches YouTube directly; serves placeholders when no API key is set."""

    def __init__(
        self,
        api_key: Optional[str],
        session: Optional[requests.Session] = None,
        timeout: float = 10.0,
        max_results: int = MAX_RESULTS,
    ):
        self.api_key = api_key
        self.session = session or requests.Session()
        self.timeout = timeout
        self.max_results = max_results

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key) and self.api_key != PLACEHOLDER_API_KEY

    def search(self, title: str, category: Optional[str] = None) -> list[VideoResult]:
        """
        Search chart-view videos for a song.

        Args:
            title: Song title
            category: Optional difficulty category label

        Returns:
            Up to ``max_results`` videos, most relevant first

        Raises:
            VideoSearchError: If the YouTube request fails
        """
        if not self.is_configured:
            logger.warning("YouTube API key not configured, returning placeholder videos")
            return placeholder_videos(title)

        query = build_search_query(title, category)
        try:
            response = self.session.get(
                YOUTUBE_SEARCH_URL,
                params={
                    "part": "snippet",
                    "q": query,
                    "type": "video",
                    "maxResults": str(self.max_results),
                    "key": self.api_key,
                    "order": "relevance",
                },
                timeout=self.timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as e:
            raise VideoSearchError(f"YouTube API request failed: {e}") from e
        except ValueError as e:
            raise VideoSearchError(f"YouTube API returned invalid JSON: {e}") from e

        videos = parse_search_items(payload)[: self.max_results]
        logger.info(f'Found {len(videos)} YouTube videos for "{query}"')
        return videos
