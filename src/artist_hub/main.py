"""FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from artist_hub import __version__
from artist_hub.api import api_router
from artist_hub.config import get_settings
from artist_hub.services.base import APIError, RateLimitError
from artist_hub.services.errors import AuthenticationRequiredError, ReleaseServiceError

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan - runs on startup and shutdown."""
    # Startup
    logger.info("Starting %s v%s", settings.app_name, __version__)
    logger.info("Debug mode: %s", settings.debug)
    logger.info("Database: %s", settings.database_url.split("///")[-1])  # Hide path details
    logger.info("Artwork storage: %s", settings.artwork_storage_backend)
    if settings.artwork_storage_backend == "local":
        Path(settings.artwork_storage_dir).mkdir(parents=True, exist_ok=True)
    logger.info(
        "Distribution API: %s", "configured" if settings.distribution_api_url else "SIMULATED"
    )

    # Validate and log warnings
    warnings = settings.validate_runtime_config()
    if warnings:
        logger.warning("Configuration warnings:")
        for warning in warnings:
            logger.warning("  - %s", warning)
    else:
        logger.info("Configuration validation passed - no warnings")

    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Application shutting down")


app = FastAPI(
    title=settings.app_name,
    version=__version__,
    debug=settings.debug,
    lifespan=lifespan,
)


@app.exception_handler(AuthenticationRequiredError)
async def authentication_required_handler(
    _request: Request, exc: AuthenticationRequiredError
) -> JSONResponse:
    """Handle writes attempted without an identity."""
    return JSONResponse(
        status_code=401,
        content={"detail": str(exc)},
        headers={"WWW-Authenticate": "Bearer"},
    )


@app.exception_handler(ReleaseServiceError)
async def release_service_error_handler(
    _request: Request, exc: ReleaseServiceError
) -> JSONResponse:
    """Handle release lifecycle errors globally."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": str(exc) or "Could not complete operation."},
    )


@app.exception_handler(RateLimitError)
async def rate_limit_error_handler(_request: Request, exc: RateLimitError) -> JSONResponse:
    """Handle RateLimitError exceptions globally."""
    headers = {}
    if exc.retry_after:
        headers["Retry-After"] = str(exc.retry_after)
    return JSONResponse(
        status_code=429,
        content={"detail": str(exc) or "Rate limit exceeded"},
        headers=headers,
    )


@app.exception_handler(APIError)
async def api_error_handler(_request: Request, exc: APIError) -> JSONResponse:
    """Handle outbound API errors that escaped the services."""
    logger.error("Upstream API error: %s", exc)
    return JSONResponse(
        status_code=502,
        content={"detail": "Upstream service error"},
    )


# Include API router
app.include_router(api_router)

# Local artwork is served by the app unless a public URL elsewhere is configured
if settings.artwork_storage_backend == "local" and settings.artwork_base_url.startswith("/"):
    app.mount(
        settings.artwork_base_url,
        StaticFiles(directory=settings.artwork_storage_dir, check_dir=False),
        name="artwork",
    )


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the API is running."""
    return {"status": "healthy", "version": __version__}
