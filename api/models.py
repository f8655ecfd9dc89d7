"""Pydantic models for API requests and responses."""

from pydantic import BaseModel

from src.video.models import VideoResult

__all__ = ["ErrorResponse", "HealthResponse", "RootResponse", "VideoResult"]


class ErrorResponse(BaseModel):
    """Error body returned with every 4xx/5xx response."""

    error: str


class RootResponse(BaseModel):
    """Root endpoint response model."""

    message: str
    version: str
    host: str
    port: int


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    youtube_configured: bool
