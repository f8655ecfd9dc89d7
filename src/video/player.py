"""Embedded video overlay: playback controls over a player adapter.

The overlay keeps the control state (open, playing, locked, rate and an
estimated position) and forwards commands to a ``PlayerAdapter``. The adapter
is the only place that knows how the embedded player is driven.
"""

import json
import logging
import time
from typing import Callable, Optional, Protocol
from urllib.parse import urlencode

from src.errors import PlayerStateError

logger = logging.getLogger(__name__)

EMBED_BASE_URL = "https://www.youtube.com/embed/"
MIN_RATE = 0.25
MAX_RATE = 2.0
RATE_STEP = 0.25
DEFAULT_SEEK_SECONDS = 10.0


class PlayerAdapter(Protocol):
    """Capabilities the overlay needs from an embedded player."""

    def play(self) -> None: ...

    def pause(self) -> None: ...

    def seek_to(self, seconds: float) -> None: ...

    def set_rate(self, rate: float) -> None: ...


def embed_url(video_id: str, autoplay: bool = True, start: Optional[int] = None) -> str:
    """Build the YouTube embed URL with the JS API enabled."""
    params = {
        "autoplay": 1 if autoplay else 0,
        "rel": 0,
        "modestbranding": 1,
        "enablejsapi": 1,
    }
    if start:
        params["start"] = int(start)
    return f"{EMBED_BASE_URL}{video_id}?{urlencode(params)}"


class IFrameCommandAdapter:
    """
    Queues YouTube IFrame API commands as postMessage JSON strings.

    The UI drains the queue and posts each message to the player iframe.
    """

    def __init__(self):
        self._outbox: list[str] = []

    def _send(self, func: str, *args) -> None:
        self._outbox.append(json.dumps({"event": "command", "func": func, "args": list(args)}))

    def play(self) -> None:
        self._send("playVideo")

    def pause(self) -> None:
        self._send("pauseVideo")

    def seek_to(self, seconds: float) -> None:
        self._send("seekTo", seconds, True)

    def set_rate(self, rate: float) -> None:
        self._send("setPlaybackRate", rate)

    def drain(self) -> list[str]:
        messages, self._outbox = self._outbox, []
        return messages

    @property
    def pending(self) -> list[str]:
        return list(self._outbox)


class VideoOverlay:
    """
    Full-screen preview state: play/pause, seek, speed and a lock affordance.

    Playback position is estimated from an anchor ``(position, started_at)``
    that moves on every play, pause, seek and rate change. While playing,
    ``position`` advances with the clock at the current rate.
    """

    def __init__(self, adapter: PlayerAdapter, clock: Callable[[], float] = time.monotonic):
        self.adapter = adapter
        self.clock = clock
        self.video_id: Optional[str] = None
        self.playing = False
        self.locked = True
        self.rate = 1.0
        self._anchor_position = 0.0
        self._anchor_time: Optional[float] = None

    @property
    def is_open(self) -> bool:
        return self.video_id is not None

    @property
    def position(self) -> float:
        """Estimated playback time in seconds."""
        if self.playing and self._anchor_time is not None:
            return self._anchor_position + (self.clock() - self._anchor_time) * self.rate
        return self._anchor_position

    def _reanchor(self, position: float) -> None:
        self._anchor_position = max(0.0, position)
        self._anchor_time = self.clock() if self.playing else None

    def open(self, video_id: str) -> None:
        # Every open starts locked, from the beginning, at normal speed
        self.video_id = video_id
        self.playing = True
        self.locked = True
        self.rate = 1.0
        self._reanchor(0.0)
        logger.debug(f"Opened video overlay for {video_id}")

    def close(self) -> None:
        if self.playing and self.is_open:
            self.adapter.pause()
        position = self.position
        self.video_id = None
        self.playing = False
        self._reanchor(position)

    def _require_open(self) -> None:
        if not self.is_open:
            raise PlayerStateError("Video overlay is not open")

    def play(self) -> None:
        self._require_open()
        position = self.position
        self.adapter.play()
        self.playing = True
        self._reanchor(position)

    def pause(self) -> None:
        self._require_open()
        position = self.position
        self.adapter.pause()
        self.playing = False
        self._reanchor(position)

    def toggle_play(self) -> None:
        if self.playing:
            self.pause()
        else:
            self.play()

    def seek_to(self, seconds: float) -> None:
        self._require_open()
        self._reanchor(float(seconds))
        self.adapter.seek_to(self._anchor_position)

    def seek_by(self, offset: float = DEFAULT_SEEK_SECONDS) -> None:
        self._require_open()
        self.seek_to(self.position + offset)

    def set_rate(self, rate: float) -> None:
        self._require_open()
        position = self.position
        self.rate = min(MAX_RATE, max(MIN_RATE, float(rate)))
        self._reanchor(position)
        self.adapter.set_rate(self.rate)

    def step_rate(self, steps: int = 1) -> None:
        self.set_rate(self.rate + steps * RATE_STEP)

    def lock(self) -> None:
        self._require_open()
        self.locked = True

    def unlock(self) -> None:
        self._require_open()
        self.locked = False

    def toggle_lock(self) -> None:
        if self.locked:
            self.unlock()
        else:
            self.lock()


class LatestRequest:
    """Tracks the most recently requested title so late lookups can be dropped."""

    def __init__(self):
        self.title: Optional[str] = None

    def begin(self, title: str) -> None:
        self.title = title

    def accept(self, title: str) -> bool:
        return title == self.title
