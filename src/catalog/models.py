"""Song and difficulty category models."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

STORAGE_BUCKET = "song-images"
NEUTRAL_COLOR = "#64748b"


class Category(str, Enum):
    """Difficulty category (tier) of a chart."""

    PAST = "Past"
    PRESENT = "Present"
    FUTURE = "Future"
    ETERNAL = "Eternal"
    BEYOND = "Beyond"

    @property
    def color(self) -> str:
        return _CATEGORY_COLORS[self]

    @property
    def abbreviation(self) -> str:
        return _CATEGORY_ABBREVIATIONS[self]


_CATEGORY_COLORS = {
    Category.PAST: "#4caed1",
    Category.PRESENT: "#8fad4c",
    Category.FUTURE: "#822c68",
    Category.ETERNAL: "#8571a3",
    Category.BEYOND: "#b5112e",
}

_CATEGORY_ABBREVIATIONS = {
    Category.PAST: "PST",
    Category.PRESENT: "PRS",
    Category.FUTURE: "FTR",
    Category.ETERNAL: "ETR",
    Category.BEYOND: "BYD",
}

CATEGORY_LABELS = [category.value for category in Category]


def category_color(label: str) -> str:
    """Display colour for a category label; neutral grey for unknown labels."""
    try:
        return Category(label).color
    except ValueError:
        return NEUTRAL_COLOR


def category_abbreviation(label: str) -> str:
    """Short badge text for a category label."""
    try:
        return Category(label).abbreviation
    except ValueError:
        return label[:3].upper()


class Song(BaseModel):
    """One chart row from the songs table."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: int
    image_url: str = Field(default="", alias="imageUrl")
    title: str
    artist: str
    difficulty: str
    constant: float
    level: str
    version: str = ""

    def render_key(self, index: int) -> str:
        """Key for list rendering; title/difficulty/version alone may collide."""
        return f"{self.title}-{self.difficulty}-{self.version}-{index}"

    def to_row(self) -> dict:
        """Serialize back to the data service's column names."""
        return self.model_dump(by_alias=True)


def resolve_image_url(image_ref: str, data_service_url: Optional[str]) -> str:
    """
    Turn a stored image reference into a URL the browser can load.

    Args:
        image_ref: Absolute URL or a path inside the song image bucket
        data_service_url: Base URL of the data service hosting the bucket

    Returns:
        Public image URL (the input unchanged if it is already absolute)
    """
    if not image_ref or image_ref.startswith(("http://", "https://")):
        return image_ref
    if not data_service_url:
        return image_ref
    path = image_ref.lstrip("/")
    return f"{data_service_url.rstrip('/')}/storage/v1/object/public/{STORAGE_BUCKET}/{path}"
