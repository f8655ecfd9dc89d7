"""Application exception hierarchy.

Data loading, video lookup and playback control each raise their own
subclass so callers can tell a fatal load failure from a lookup that
should fall back to placeholder data.
"""


class CatalogError(Exception):
    """Base exception for the chart catalog."""


class SongStoreError(CatalogError):
    """Fetching songs from the data service failed."""


class SongStoreConfigError(SongStoreError):
    """Data service URL or key is missing."""


class VideoSearchError(CatalogError):
    """Chart-view video search failed or returned an unusable payload."""


class PlayerStateError(CatalogError):
    """A playback control was used while the video overlay is closed."""
