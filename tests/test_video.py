"""Tests for the YouTube search client and chart-video lookup."""

import pytest
import requests

from conftest import FakeResponse, FakeSession
from src.errors import VideoSearchError
from src.video.lookup import ChartVideoLookup, ProxyVideoSearch
from src.video.models import VideoResult
from src.video.youtube import (
    YouTubeSearchClient,
    build_search_query,
    parse_search_items,
    placeholder_videos,
)


def youtube_item(video_id: str, title: str) -> dict:
    return {
        "id": {"videoId": video_id},
        "snippet": {
            "title": title,
            "channelTitle": "Arcaea Charts",
            "thumbnails": {"medium": {"url": f"https://i.ytimg.com/vi/{video_id}/mqdefault.jpg"}},
        },
    }


def unexpected_call(**kwargs):
    raise AssertionError(f"unexpected network call: {kwargs}")


def test_build_search_query():
    """Test build search query."""
    assert build_search_query("Lilly", "Future") == "Lilly Future chart view"
    assert build_search_query("Lilly") == "Lilly chart view"
    assert build_search_query("Lilly", "") == "Lilly chart view"


def test_placeholder_videos_are_labeled_with_title():
    """Test placeholder videos are labeled with title."""
    videos = placeholder_videos("Song X")
    assert len(videos) == 3
    assert [v.id for v in videos] == ["mock1", "mock2", "mock3"]
    assert all("Song X" in v.title for v in videos)
    assert videos[0].title == "Song X - Chart View"


def test_video_result_serializes_camel_case():
    """Test video result serializes camel case."""
    video = placeholder_videos("A")[0]
    data = video.model_dump(by_alias=True)
    assert set(data) == {"id", "title", "channelTitle", "thumbnailUrl", "videoUrl"}


def test_parse_search_items():
    """Test parse search items."""
    videos = parse_search_items({"items": [youtube_item("abc123", "Lilly [Future 10] chart view")]})
    assert videos[0].id == "abc123"
    assert videos[0].video_url == "https://www.youtube.com/watch?v=abc123"
    assert videos[0].thumbnail_url.endswith("/abc123/mqdefault.jpg")


def test_parse_search_items_rejects_bad_payload():
    """Test parse search items rejects bad payload."""
    with pytest.raises(VideoSearchError):
        parse_search_items({"kind": "youtube#searchListResponse"})


def test_parse_search_items_rejects_null_fields():
    """Test an item with a null title is reported as a search error."""
    item = youtube_item("v1", "a")
    item["snippet"]["title"] = None
    with pytest.raises(VideoSearchError):
        parse_search_items({"items": [item]})


@pytest.mark.parametrize("api_key", [None, "", "your_youtube_api_key_here"])
def test_unconfigured_client_serves_placeholders(api_key):
    """Test unconfigured client serves placeholders."""
    client = YouTubeSearchClient(api_key, session=FakeSession(unexpected_call))
    assert not client.is_configured
    assert client.search("Song X") == placeholder_videos("Song X")


def test_configured_client_queries_youtube():
    """Test configured client queries youtube."""
    session = FakeSession(lambda **_: FakeResponse({"items": [youtube_item("v1", "a"), youtube_item("v2", "b")]}))
    client = YouTubeSearchClient("real-key", session=session)

    videos = client.search("Lilly", "Future")

    assert [v.id for v in videos] == ["v1", "v2"]
    params = session.calls[0]["params"]
    assert params["q"] == "Lilly Future chart view"
    assert params["maxResults"] == "3"
    assert params["type"] == "video"
    assert params["order"] == "relevance"
    assert params["key"] == "real-key"


def test_configured_client_raises_on_upstream_failure():
    """Test configured client raises on upstream failure."""
    client = YouTubeSearchClient("real-key", session=FakeSession(lambda **_: FakeResponse({}, status_code=403)))
    with pytest.raises(VideoSearchError):
        client.search("Lilly")


def test_lookup_without_credential_returns_cached_placeholders():
    """Test lookup without credential returns cached placeholders."""
    session = FakeSession(unexpected_call)
    lookup = ChartVideoLookup(YouTubeSearchClient(None, session=session))

    first = lookup.find_chart_videos("Song X")
    second = lookup.find_chart_videos("Song X")

    assert len(first) == 3
    assert all("Song X" in video.title for video in first)
    assert first == second
    assert session.calls == []


class CountingBackend:
    def __init__(self, result):
        self.result = result
        self.calls = []

    def search(self, title, category=None):
        self.calls.append((title, category))
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


def test_lookup_caches_per_title():
    """Test lookup caches per title."""
    videos = [VideoResult(id="v1", title="t", channel_title="c", thumbnail_url="u", video_url="w")]
    backend = CountingBackend(videos)
    lookup = ChartVideoLookup(backend)

    assert lookup.find_chart_videos("Lilly", "Future") == videos
    assert lookup.find_chart_videos("Lilly", "Beyond") == videos
    lookup.find_chart_videos("Arcahv")

    assert backend.calls == [("Lilly", "Future"), ("Arcahv", None)]


@pytest.mark.parametrize(
    "error",
    [VideoSearchError("upstream 500"), requests.ConnectionError("offline")],
)
def test_lookup_failure_falls_back_to_placeholders(error):
    """Test lookup failure falls back to placeholders."""
    backend = CountingBackend(error)
    lookup = ChartVideoLookup(backend)

    assert lookup.find_chart_videos("Lilly") == placeholder_videos("Lilly")
    assert lookup.find_chart_videos("Lilly") == placeholder_videos("Lilly")
    assert len(backend.calls) == 1


def test_lookup_falls_back_when_upstream_item_is_malformed():
    """Test a malformed upstream item yields placeholders instead of an error."""
    item = youtube_item("v1", "a")
    item["snippet"]["title"] = None
    session = FakeSession(lambda **_: FakeResponse({"items": [item]}))
    lookup = ChartVideoLookup(YouTubeSearchClient("real-key", session=session))

    assert lookup.find_chart_videos("Lilly") == placeholder_videos("Lilly")


def test_lookup_keeps_at_most_three_results():
    """Test lookup keeps at most three results."""
    videos = [
        VideoResult(id=f"v{i}", title="t", channel_title="c", thumbnail_url="u", video_url="w")
        for i in range(5)
    ]
    lookup = ChartVideoLookup(CountingBackend(videos))
    assert [v.id for v in lookup.find_chart_videos("Lilly")] == ["v0", "v1", "v2"]


def test_first_video_id():
    """Test first video id."""
    lookup = ChartVideoLookup(CountingBackend([]))
    assert lookup.first_video_id("Nothing") is None

    lookup = ChartVideoLookup(YouTubeSearchClient(None, session=FakeSession(unexpected_call)))
    assert lookup.first_video_id("Lilly") == "mock1"


def test_proxy_search_calls_api_endpoint():
    """Test proxy search calls api endpoint."""
    payload = [video.model_dump(by_alias=True) for video in placeholder_videos("Lilly")]
    session = FakeSession(lambda **_: FakeResponse(payload))
    proxy = ProxyVideoSearch("http://localhost:9876/", session=session)

    videos = proxy.search("Lilly", "Future")

    assert videos == placeholder_videos("Lilly")
    call = session.calls[0]
    assert call["url"] == "http://localhost:9876/api/video-search"
    assert call["params"] == {"songTitle": "Lilly", "songDifficulty": "Future"}


def test_proxy_search_omits_missing_category():
    """Test proxy search omits missing category."""
    session = FakeSession(lambda **_: FakeResponse([]))
    ProxyVideoSearch("http://api", session=session).search("Lilly")
    assert session.calls[0]["params"] == {"songTitle": "Lilly"}


@pytest.mark.parametrize(
    "response",
    [
        FakeResponse({"error": "Failed"}, status_code=500),
        FakeResponse([{"id": "x"}]),
        FakeResponse(ValueError("not json")),
    ],
)
def test_proxy_search_errors(response):
    """Test proxy search errors."""
    proxy = ProxyVideoSearch("http://api", session=FakeSession(lambda **_: response))
    with pytest.raises(VideoSearchError):
        proxy.search("Lilly")
