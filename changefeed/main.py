import logging
import sys
from collections.abc import Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from changefeed.api.router import api_router
from changefeed.config import Settings, settings
from changefeed.schemas.changelog import ChangelogFeed
from changefeed.services.changelog.cache import ResponseCache
from changefeed.services.github.http_client import close_github_client


def setup_logging(debug: bool = False) -> None:
    """Configure application logging."""
    # Format: timestamp - level - logger name - message
    log_format = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"
    date_format = "%H:%M:%S"

    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format=log_format,
        datefmt=date_format,
        stream=sys.stdout,
        force=True,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("hpack").setLevel(logging.WARNING)

    # Quieten uvicorn access logs (we'll log requests ourselves)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown events."""
    app_settings: Settings = app.state.settings

    # Startup
    setup_logging(app_settings.debug)
    logger.info("Changelog API starting up")
    missing = app_settings.missing_required_origins
    if missing:
        logger.warning(f"ALLOWED_ORIGINS is missing required origins: {', '.join(missing)}")
    if not app_settings.github_configured:
        logger.warning("GITHUB_TOKEN is not set; /changelog will answer 500")
    yield
    # Shutdown
    await close_github_client()
    logger.info("Changelog API shutting down")


def create_app(
    app_settings: Settings | None = None,
    cache: ResponseCache[ChangelogFeed] | None = None,
    clock: Callable[[], float] | None = None,
) -> FastAPI:
    """
    Build the FastAPI app.

    The response cache is created once here and shared by every request
    through app.state; tests pass their own settings, cache or clock.
    """
    app_settings = app_settings or settings
    if cache is None:
        cache_kwargs = {"clock": clock} if clock else {}
        cache = ResponseCache(ttl_seconds=app_settings.cache_ttl_seconds, **cache_kwargs)

    app = FastAPI(
        title="Changelog API",
        description="Merged pull requests as a paginated changelog feed",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = app_settings
    app.state.changelog_cache = cache

    # CORS: only allow-listed origins get Access-Control-Allow-Origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.allowed_origin_list,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log failed HTTP requests, skipping OPTIONS preflight and health checks."""
        if request.method == "OPTIONS" or request.url.path == "/health":
            return await call_next(request)

        response = await call_next(request)
        if response.status_code >= 400:
            logger.info(f"{request.method} {request.url.path} → {response.status_code}")
        return response

    app.include_router(api_router)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"ok": True}

    return app


app = create_app()
