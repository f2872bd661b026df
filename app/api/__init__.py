"""API module."""

from app.api.health import router as health_router
from app.api.routes import router as median_router

__all__ = ["health_router", "median_router"]
