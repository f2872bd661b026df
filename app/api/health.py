"""Health check endpoints."""

from datetime import datetime, timezone

from fastapi import APIRouter

from median.config import get_settings

router = APIRouter(tags=["Health"])


def _status(status: str) -> dict:
    return {
        "status": status,
        "service": get_settings().service_name,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/health")
async def health_check() -> dict:
    """Health check endpoint.

    Returns:
        Service health status
    """
    return _status("healthy")


@router.get("/ready")
async def readiness_check() -> dict:
    """Readiness probe endpoint.

    Used by orchestration systems to determine if the service
    is ready to receive traffic.
    """
    return _status("ready")


@router.get("/live")
async def liveness_check() -> dict:
    """Liveness probe endpoint."""
    return _status("alive")
