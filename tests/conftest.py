"""Pytest configuration and fixtures."""

import tempfile
from pathlib import Path
from typing import Callable, Generator, Optional

import pytest
import requests

from src.catalog.models import Song
from src.utils.config import Settings


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, payload=None, status_code: int = 200, headers: Optional[dict] = None):
        self._payload = payload
        self.status_code = status_code
        self.headers = headers or {}

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)


class FakeSession:
    """Records GET calls and answers them with a handler."""

    def __init__(self, handler: Callable[..., FakeResponse]):
        self.handler = handler
        self.calls: list[dict] = []

    def get(self, url, params=None, headers=None, timeout=None):
        call = {"url": url, "params": dict(params or {}), "headers": dict(headers or {})}
        self.calls.append(call)
        result = self.handler(**call)
        if isinstance(result, Exception):
            raise result
        return result


class ManualClock:
    """Clock whose time only moves when told to."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_song(
    song_id: int,
    title: str,
    constant: float,
    difficulty: str = "Future",
    artist: str = "Test Artist",
    level: Optional[str] = None,
    version: str = "Arcaea",
) -> Song:
    return Song(
        id=song_id,
        image_url=f"covers/{song_id}.jpg",
        title=title,
        artist=artist,
        difficulty=difficulty,
        constant=constant,
        level=level or str(int(constant)),
        version=version,
    )


def song_row(song_id: int, constant: float = 9.0, title: Optional[str] = None) -> dict:
    """A row as returned by the data service."""
    return {
        "id": song_id,
        "imageUrl": f"https://example.com/{song_id}.jpg",
        "title": title or f"Song {song_id}",
        "artist": "Artist",
        "difficulty": "Future",
        "constant": constant,
        "level": str(int(constant)),
        "version": "Arcaea",
    }


@pytest.fixture
def temp_data_dir() -> Generator[Path, None, None]:
    """Create a temporary data directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        data_dir = Path(tmpdir) / "data"
        data_dir.mkdir()
        yield data_dir


@pytest.fixture
def sample_songs() -> list[Song]:
    """A small catalog covering every category and a constant tie."""
    return [
        make_song(1, "Grievous Lady", 11.3, "Future", artist="Team Grimoire vs Laur"),
        make_song(2, "Lilly", 10.8, "Beyond", artist="Juggernaut."),
        make_song(3, "Sayonara Hatsukoi", 4.5, "Past", artist="REDSHIFT"),
        make_song(4, "Fracture Ray", 11.2, "Future", artist="Sakuzyo"),
        make_song(5, "Tempestissimo", 11.5, "Beyond", artist="t+pazolite"),
        make_song(6, "Arcahv", 10.0, "Eternal", artist="Feryquitous"),
        make_song(7, "Lucifer", 7.5, "Present", artist="Kurokotei"),
        make_song(8, "Dandelion", 7.5, "Present", artist="Shinobu"),
        make_song(9, "axium crisis", 9.6, "Future", artist="ak+q"),
        make_song(10, "Vicious Heroism", 1.0, "Past", artist="Aoi"),
        make_song(11, "PRAGMATISM", 12.0, "Beyond", artist="Laur"),
    ]


@pytest.fixture
def manual_clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def test_settings(temp_data_dir: Path) -> Settings:
    """Create test settings with temporary data directory."""
    return Settings(
        database_path=str(temp_data_dir / "test.db"),
    )
