"""Recompute policies and the per-user catalog session."""

import logging
import threading
from typing import Callable, Iterable, Optional

from src.catalog.models import Song
from src.catalog.pipeline import CatalogPage, FilterCriteria, index_songs, run_pipeline

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 0.15


class ImmediateScheduler:
    """Runs every scheduled call right away."""

    def schedule(self, fn: Callable[[], None]) -> None:
        fn()

    def flush(self) -> None:
        pass

    def cancel(self) -> None:
        pass


class DebouncedScheduler:
    """
    Runs only the most recently scheduled call, once no new call has
    arrived for ``delay`` seconds.
    """

    def __init__(self, delay: float = DEFAULT_DEBOUNCE_SECONDS):
        self.delay = delay
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._pending: Optional[Callable[[], None]] = None

    def schedule(self, fn: Callable[[], None]) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._pending = fn
            self._timer = threading.Timer(self.delay, self._fire)
            self._timer.daemon = True
            self._timer.start()

    def _fire(self) -> None:
        with self._lock:
            fn = self._pending
            self._pending = None
            self._timer = None
        if fn is not None:
            fn()

    def flush(self) -> None:
        """Run the pending call now instead of waiting for the timer."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
        self._fire()

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = None
            self._pending = None

    @property
    def has_pending(self) -> bool:
        return self._pending is not None


class CatalogSession:
    """
    Holds the loaded song list and the current criteria for one viewer.

    Criteria changes go through the scheduler; the pipeline result lands in
    ``page`` and is passed to ``on_update``.
    """

    def __init__(
        self,
        songs: Iterable[Song],
        criteria: Optional[FilterCriteria] = None,
        scheduler=None,
        on_update: Optional[Callable[[CatalogPage], None]] = None,
    ):
        self._items = index_songs(songs)
        self.criteria = criteria or FilterCriteria()
        self.scheduler = scheduler or ImmediateScheduler()
        self.on_update = on_update
        self.page: CatalogPage = run_pipeline(self._items, self.criteria)

    @property
    def song_count(self) -> int:
        return len(self._items)

    def recompute(self) -> CatalogPage:
        self.page = run_pipeline(self._items, self.criteria)
        logger.debug(
            f"Recomputed catalog page {self.page.page}/{self.page.total_pages} "
            f"({self.page.total_count} matches)"
        )
        if self.on_update is not None:
            self.on_update(self.page)
        return self.page

    def _apply(self, criteria: FilterCriteria) -> None:
        self.criteria = criteria
        self.scheduler.schedule(self.recompute)

    def update(self, **changes) -> None:
        self._apply(self.criteria.update(**changes))

    def toggle_category(self, label: str) -> None:
        self._apply(self.criteria.toggle_category(label))

    def go_to_page(self, page: int) -> None:
        self._apply(self.criteria.go_to_page(page))

    def next_page(self) -> None:
        if self.criteria.page < self.page.total_pages:
            self.go_to_page(self.criteria.page + 1)

    def previous_page(self) -> None:
        if self.criteria.page > 1:
            self.go_to_page(self.criteria.page - 1)
