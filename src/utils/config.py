"""Configuration management using pydantic-settings."""

from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Song data service (Supabase / PostgREST)
    supabase_url: Optional[str] = Field(default=None, alias="SUPABASE_URL")
    supabase_anon_key: Optional[str] = Field(default=None, alias="SUPABASE_ANON_KEY")

    # Page size used when pulling the full song list
    song_fetch_page_size: int = Field(default=1000, alias="SONG_FETCH_PAGE_SIZE")

    # YouTube Data API key; unset means placeholder videos are served
    youtube_api_key: Optional[str] = Field(default=None, alias="YOUTUBE_API_KEY")

    # Local cache database (song summaries)
    database_path: str = Field(default="data/catalog_cache.db", alias="DATABASE_PATH")
    summary_cache_ttl_hours: float = Field(default=24.0, alias="SUMMARY_CACHE_TTL_HOURS")

    # API Configuration
    api_host: str = Field(default="0.0.0.0", alias="API_HOST")
    api_port: int = Field(default=9876, alias="API_PORT")
    # Base URL the UI uses to reach the API (in Docker: http://api:9876)
    api_url: str = Field(default="http://localhost:9876", alias="API_URL")

    # Streamlit Configuration
    streamlit_host: str = Field(default="0.0.0.0", alias="STREAMLIT_HOST")
    streamlit_port: int = Field(default=9877, alias="STREAMLIT_PORT")

    # Outbound HTTP timeout in seconds
    http_timeout: float = Field(default=10.0, alias="HTTP_TIMEOUT")

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @property
    def database_path_resolved(self) -> Path:
        """Get resolved database path."""
        return Path(self.database_path).resolve()

    @property
    def logs_dir(self) -> Path:
        """Get logs directory path."""
        return Path("logs").resolve()

    @property
    def summary_cache_ttl_seconds(self) -> float:
        """Summary cache freshness window in seconds."""
        return self.summary_cache_ttl_hours * 60 * 60


# Global settings instance
settings = Settings()
