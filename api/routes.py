"""API routes."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from api.models import ErrorResponse, VideoResult
from src.errors import VideoSearchError
from src.utils.config import settings
from src.video.youtube import YouTubeSearchClient

logger = logging.getLogger(__name__)

router = APIRouter()

# Global search client instance (created at startup)
search_client: Optional[YouTubeSearchClient] = None


def get_search_client() -> YouTubeSearchClient:
    """Dependency returning the shared YouTube search client."""
    global search_client
    if search_client is None:
        search_client = YouTubeSearchClient(settings.youtube_api_key, timeout=settings.http_timeout)
    return search_client


@router.get(
    "/video-search",
    response_model=list[VideoResult],
    responses={
        400: {"model": ErrorResponse},
        405: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
def video_search(
    song_title: Optional[str] = Query(default=None, alias="songTitle"),
    song_difficulty: Optional[str] = Query(default=None, alias="songDifficulty"),
    client: YouTubeSearchClient = Depends(get_search_client),
) -> list[VideoResult]:
    """
    Search chart-view videos for a song.

    Without a configured YouTube API key, three placeholder videos are
    returned instead of an error.

    Args:
        song_title: Song title (required)
        song_difficulty: Optional difficulty category label
        client: YouTube search client

    Returns:
        Up to three videos, most relevant first
    """
    if not song_title or not song_title.strip():
        raise HTTPException(status_code=400, detail="songTitle parameter is required")

    try:
        return client.search(song_title, song_difficulty)
    except VideoSearchError as e:
        logger.error(f"Error searching YouTube videos: {e}")
        raise HTTPException(status_code=500, detail="Failed to search YouTube videos") from e


@router.options("/video-search", include_in_schema=False)
def video_search_options() -> Response:
    """Answer bare OPTIONS requests (CORS preflights are handled by the middleware)."""
    return Response(status_code=200)


def set_search_client(new_client: Optional[YouTubeSearchClient]) -> None:
    """Set the global search client instance."""
    global search_client
    search_client = new_client
