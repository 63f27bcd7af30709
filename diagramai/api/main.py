"""
FastAPI application with assembled routers.

Initializes FastAPI app with all API routers and configures uvicorn server.

Dependencies: fastapi, diagramai.api.routers, diagramai.observability, uvicorn
System role: API entry point with router assembly and server launch
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from diagramai.api.deps.dependencies import get_service_cache
from diagramai.configs import get_settings
from diagramai.observability.logger import configure_logging
from diagramai.observability.middleware import RequestIdMiddleware, RequestLoggingMiddleware

from .routers import diagrams_router, health_router, render_ws_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Configures logging and creates the shared correlator and render
    channel before the first connection arrives.
    """
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info("Application startup: logging configured", extra={"environment": settings.environment})

    cache = get_service_cache()
    _ = cache.correlator
    _ = cache.render_channel
    logger.info(
        "Render validation ready",
        extra={
            "enabled": settings.render_validation.enabled,
            "timeout_seconds": settings.render_validation.timeout_seconds,
            "max_repair_attempts": settings.render_validation.max_repair_attempts,
        },
    )

    yield

    cache.clear()
    logger.info("Service cache cleared")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application with routers.

    Returns:
        FastAPI: Configured application instance with all routers registered
    """
    settings = get_settings()

    app = FastAPI(
        title="DiagramAI API",
        description="Natural-language Mermaid diagram generation with browser render validation",
        version="0.1.0",
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIdMiddleware)

    # Register all routers with /api/v1 prefix for versioning
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(diagrams_router, prefix="/api/v1")
    app.include_router(render_ws_router, prefix="/api/v1")

    return app


app = create_app()


def run() -> None:
    """Run the API with uvicorn using server settings."""
    settings = get_settings()
    uvicorn.run(
        "diagramai.api.main:app",
        host=settings.server.host,
        port=settings.server.port,
    )


if __name__ == "__main__":
    run()
