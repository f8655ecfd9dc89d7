"""Chart-view video result model."""

from pydantic import BaseModel, ConfigDict, Field


class VideoResult(BaseModel):
    """A candidate chart-view video. Serialized with camelCase keys on the wire."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    title: str
    channel_title: str = Field(alias="channelTitle")
    thumbnail_url: str = Field(alias="thumbnailUrl")
    video_url: str = Field(alias="videoUrl")
