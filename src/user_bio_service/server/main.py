"""FastAPI application factory and server entry point."""

import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from slowapi.middleware import SlowAPIMiddleware

from user_bio_service import __version__
from user_bio_service.api import api_router
from user_bio_service.config import settings
from user_bio_service.database import close_db, init_db, is_connected
from user_bio_service.middleware import (
    RequestLoggingMiddleware,
    limiter,
    register_exception_handlers,
)
from user_bio_service.services import BioOrchestrator
from user_bio_service.telemetry import get_logger, setup_logging
from user_bio_service.telemetry.metrics import router as metrics_router

logger = get_logger(__name__)

STARTED_AT = time.monotonic()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifecycle."""
    setup_logging()
    logger.info(f"Starting {settings.app_name} v{__version__}", environment=settings.environment)

    app.state.bio_orchestrator = BioOrchestrator.from_settings(settings)

    # The API stays up without a database; data endpoints answer 503.
    try:
        await init_db(settings)
    except Exception as e:
        logger.warning(f"Database initialization skipped: {e}")

    yield

    logger.info(f"Shutting down {settings.app_name}")
    await close_db()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        description="User and role management with generated professional bios",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc" if not settings.is_production else None,
        lifespan=lifespan,
    )

    app.state.limiter = limiter

    # Add middleware (order matters - reverse order of execution)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(SlowAPIMiddleware)

    register_exception_handlers(app)

    app.include_router(api_router, prefix=settings.api_prefix)
    app.include_router(metrics_router)

    @app.get("/health")
    @limiter.exempt
    async def health(request: Request):
        """Health check endpoint."""
        return {
            "status": "OK",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "uptime": round(time.monotonic() - STARTED_AT, 3),
            "environment": settings.environment,
            "version": __version__,
            "mongodb": "connected" if is_connected() else "disconnected",
        }

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "message": "User Bio Service API",
            "version": __version__,
            "status": "running",
            "documentation": settings.api_prefix,
        }

    return app


app = create_app()


def start_server():
    """Start the server programmatically."""
    uvicorn.run(
        "user_bio_service.server.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        reload=settings.reload if settings.is_development else False,
        workers=settings.workers if not settings.reload else 1,
        access_log=settings.is_development,
    )


if __name__ == "__main__":
    start_server()
