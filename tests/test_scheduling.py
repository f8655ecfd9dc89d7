"""Tests for recompute scheduling and the catalog session."""

import threading

from src.catalog.pipeline import FilterCriteria
from src.catalog.scheduling import CatalogSession, DebouncedScheduler, ImmediateScheduler


def test_immediate_scheduler_runs_synchronously():
    """Test immediate scheduler runs synchronously."""
    calls = []
    ImmediateScheduler().schedule(lambda: calls.append(1))
    assert calls == [1]


def test_debounced_scheduler_runs_only_last_call():
    """Test debounced scheduler runs only last call."""
    calls = []
    done = threading.Event()
    scheduler = DebouncedScheduler(delay=0.05)

    def record(value):
        def _run():
            calls.append(value)
            done.set()
        return _run

    for value in range(5):
        scheduler.schedule(record(value))

    assert done.wait(timeout=2.0)
    assert calls == [4]
    assert not scheduler.has_pending


def test_debounced_scheduler_flush_and_cancel():
    """Test debounced scheduler flush and cancel."""
    calls = []
    scheduler = DebouncedScheduler(delay=60)

    scheduler.schedule(lambda: calls.append("flushed"))
    scheduler.flush()
    assert calls == ["flushed"]

    scheduler.schedule(lambda: calls.append("cancelled"))
    scheduler.cancel()
    scheduler.flush()
    assert calls == ["flushed"]


def test_session_recomputes_on_every_change(sample_songs):
    """Test session recomputes on every change."""
    pages = []
    session = CatalogSession(sample_songs, criteria=FilterCriteria(page_size=2), on_update=pages.append)
    assert session.page.total_count == 11

    session.update(categories={"Beyond"})
    assert session.page.total_count == 3
    assert pages[-1] is session.page

    session.toggle_category("Past")
    assert session.page.total_count == 5


def test_session_page_navigation_and_reset(sample_songs):
    """Test session page navigation and reset."""
    session = CatalogSession(sample_songs, criteria=FilterCriteria(page_size=2))
    session.next_page()
    session.next_page()
    assert session.criteria.page == 3

    session.update(query="a")
    assert session.criteria.page == 1
    assert session.page.page == 1

    session.previous_page()
    assert session.criteria.page == 1


def test_session_does_not_move_past_last_page(sample_songs):
    """Test session does not move past last page."""
    session = CatalogSession(sample_songs, criteria=FilterCriteria(page_size=10))
    session.next_page()
    session.next_page()
    assert session.criteria.page == 2


def test_session_with_debounced_scheduler(sample_songs):
    """Test session with debounced scheduler."""
    scheduler = DebouncedScheduler(delay=60)
    session = CatalogSession(sample_songs, scheduler=scheduler)

    session.update(query="lilly")
    assert session.page.total_count == 11  # not recomputed yet

    scheduler.flush()
    assert session.page.total_count == 1
