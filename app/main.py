"""Median Scoring Service - FastAPI application."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import health_router, median_router
from app.api.routes import set_engine
from median.config import get_settings
from median.engine import CalculationEngine, EngineEvent
from median.logging_config import configure_logging

logger = logging.getLogger(__name__)


def _log_event(event: EngineEvent) -> None:
    logger.debug("Engine event %s: %s", event.name.value, event.payload)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler.

    Builds the calculation engine on startup and releases it on shutdown.
    """
    settings = get_settings()
    configure_logging(settings.log_level)

    engine = CalculationEngine(settings)
    engine.events.subscribe(_log_event)
    set_engine(engine)
    logger.info(
        "%s %s started (team_count=%d, history_capacity=%d)",
        settings.service_name,
        settings.service_version,
        settings.team_count,
        settings.history_capacity,
    )

    yield

    set_engine(None)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    settings = get_settings()

    app = FastAPI(
        title="Median Scoring Service",
        description=(
            "Median-based scoring for fixed-size competitor groups. Each period's "
            "scores are ranked, the two scores straddling the midpoint are averaged "
            "into the median, and every entry is classified WIN / LOSS / TIE against "
            "it. Results pass through strategy fallback, validation and anomaly "
            "detection. **Anomaly findings are advisory: they flag results for "
            "review but never block them.**"
        ),
        version=settings.service_version,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    app.include_router(health_router)
    app.include_router(median_router, prefix=settings.api_prefix)

    return app


# Application instance
app = create_app()


@app.get("/")
async def root() -> dict:
    """Root endpoint with service information."""
    settings = get_settings()
    return {
        "service": settings.service_name,
        "version": settings.service_version,
        "algorithm_version": settings.algorithm_version,
        "description": "Median scoring with strategy fallback and anomaly detection",
        "status": "operational",
    }


def run() -> None:
    """Serve the application with uvicorn."""
    settings = get_settings()
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
