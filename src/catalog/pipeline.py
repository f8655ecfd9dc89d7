"""Catalog filter / sort / paginate pipeline.

Every function here is pure: it takes the indexed song list and the current
criteria and returns new values. The UI recomputes the visible page by calling
``run_pipeline`` after each change.
"""

import math
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterable, Sequence

from src.catalog.models import Song

DEFAULT_CONSTANT_MIN = 1.0
DEFAULT_CONSTANT_MAX = 12.0
PAGE_SIZE_OPTIONS = (1, 10, 25, 50)


class SortKey(str, Enum):
    """Column the result list is ordered by."""

    TITLE = "title"
    ARTIST = "artist"
    CONSTANT = "constant"


@dataclass(frozen=True)
class FilterCriteria:
    """User-entered filter, sort and paging state."""

    query: str = ""
    constant_min: float = DEFAULT_CONSTANT_MIN
    constant_max: float = DEFAULT_CONSTANT_MAX
    categories: frozenset[str] = field(default_factory=frozenset)
    sort_key: SortKey = SortKey.CONSTANT
    descending: bool = True
    page: int = 1
    page_size: int = 25

    def update(self, **changes) -> "FilterCriteria":
        """
        Return criteria with ``changes`` applied.

        Any change other than the page number sends the user back to page 1.
        """
        if "categories" in changes:
            changes["categories"] = frozenset(changes["categories"])
        updated = replace(self, **changes)
        if updated == replace(self, page=updated.page):
            return updated
        return replace(updated, page=1)

    def go_to_page(self, page: int) -> "FilterCriteria":
        return replace(self, page=page)

    def toggle_category(self, label: str) -> "FilterCriteria":
        if label in self.categories:
            return self.update(categories=self.categories - {label})
        return self.update(categories=self.categories | {label})


@dataclass(frozen=True)
class IndexedSong:
    """A song with its lowercase search text computed once per load."""

    song: Song
    search_text: str


@dataclass(frozen=True)
class CatalogPage:
    """The slice of songs to render plus the counts around it."""

    songs: list[Song]
    total_count: int
    total_pages: int
    page: int
    page_size: int

    @property
    def first_index(self) -> int:
        """1-based position of the first row shown (0 when nothing matches)."""
        return min((self.page - 1) * self.page_size + 1, self.total_count)

    @property
    def last_index(self) -> int:
        return min(self.page * self.page_size, self.total_count)


def format_constant(constant: float) -> str:
    """Render a chart constant without a trailing ".0" on whole numbers."""
    return str(int(constant)) if constant.is_integer() else str(constant)


def build_search_text(song: Song) -> str:
    return f"{song.title} {song.artist} {format_constant(song.constant)} {song.level}".lower()


def index_songs(songs: Iterable[Song]) -> list[IndexedSong]:
    """Precompute the search text of every song."""
    return [IndexedSong(song=song, search_text=build_search_text(song)) for song in songs]


def matches(item: IndexedSong, criteria: FilterCriteria) -> bool:
    """Check a single song against the query, constant range and categories."""
    query = criteria.query.lower()
    if query and query not in item.search_text:
        return False
    if not criteria.constant_min <= item.song.constant <= criteria.constant_max:
        return False
    # No selected category means no restriction
    if criteria.categories and item.song.difficulty not in criteria.categories:
        return False
    return True


def filter_songs(items: Iterable[IndexedSong], criteria: FilterCriteria) -> list[IndexedSong]:
    return [item for item in items if matches(item, criteria)]


def _sort_value(item: IndexedSong, sort_key: SortKey):
    if sort_key is SortKey.CONSTANT:
        return item.song.constant
    return getattr(item.song, sort_key.value).casefold()


def sort_songs(
    items: Iterable[IndexedSong],
    sort_key: SortKey = SortKey.CONSTANT,
    descending: bool = True,
) -> list[IndexedSong]:
    """
    Order songs by a column.

    ``sorted`` is stable in both directions, so equal keys keep their input order.
    """
    return sorted(items, key=lambda item: _sort_value(item, sort_key), reverse=descending)


def count_pages(total_count: int, page_size: int) -> int:
    if page_size < 1:
        raise ValueError(f"page_size must be positive, got {page_size}")
    return math.ceil(total_count / page_size)


def paginate(items: Sequence, page: int, page_size: int) -> tuple[list, int]:
    """
    Slice one page out of a list.

    Args:
        items: Full ordered list
        page: 1-based page number
        page_size: Rows per page

    Returns:
        Tuple of (rows on the page, total page count)

    Raises:
        ValueError: If page or page_size is below 1
    """
    if page < 1:
        raise ValueError(f"page must be >= 1, got {page}")
    total_pages = count_pages(len(items), page_size)
    start = (page - 1) * page_size
    return list(items[start:start + page_size]), total_pages


def run_pipeline(items: Sequence[IndexedSong], criteria: FilterCriteria) -> CatalogPage:
    """Filter, sort and paginate the indexed song list."""
    filtered = filter_songs(items, criteria)
    ordered = sort_songs(filtered, criteria.sort_key, criteria.descending)
    rows, total_pages = paginate(ordered, criteria.page, criteria.page_size)
    return CatalogPage(
        songs=[item.song for item in rows],
        total_count=len(ordered),
        total_pages=total_pages,
        page=criteria.page,
        page_size=criteria.page_size,
    )
