"""FastAPI application main file."""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.models import HealthResponse, RootResponse
from api.routes import get_search_client, router, set_search_client
from src.utils.config import settings
from src.utils.logging import setup_logging
from src.video.youtube import YouTubeSearchClient

API_VERSION = "0.1.0"

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown."""
    # Startup
    setup_logging(settings.log_level)

    client = YouTubeSearchClient(settings.youtube_api_key, timeout=settings.http_timeout)
    if not client.is_configured:
        logger.warning("YOUTUBE_API_KEY is not set; video search will return placeholder data")
    set_search_client(client)

    yield

    # Shutdown
    client.session.close()
    set_search_client(None)


app = FastAPI(
    title="Arcaea Charts API",
    description=f"Chart-view video search proxy (running on {settings.api_host}:{settings.api_port})",
    version=API_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["Content-Type"],
)

app.include_router(router, prefix="/api", tags=["videos"])


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render HTTP errors as {"error": message}."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.get("/", response_model=RootResponse)
async def root() -> RootResponse:
    """Root endpoint."""
    return RootResponse(
        message="Arcaea Charts API",
        version=API_VERSION,
        host=settings.api_host,
        port=settings.api_port,
    )


@app.get("/health", response_model=HealthResponse)
async def health(client: YouTubeSearchClient = Depends(get_search_client)) -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(status="healthy", youtube_configured=client.is_configured)
