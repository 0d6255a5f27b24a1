"""
Health endpoint for observability.

Returns structured health info: uptime, version and the number of live
share snapshots. Lightweight and requires no authentication.
"""

import logging
import time
from typing import Any, Dict

from fastapi import APIRouter, Depends

from ..services.snapshot_store import SnapshotStore
from .deps import get_snapshot_store

logger = logging.getLogger(__name__)

# Start time for uptime calculation
_start_time: float = time.monotonic()


def set_start_time() -> None:
    """Reset the start time (called during app startup)."""
    global _start_time
    _start_time = time.monotonic()


def get_uptime_seconds() -> float:
    """Return seconds since the process started."""
    return time.monotonic() - _start_time


def _get_version() -> str:
    """Get the application version string."""
    try:
        from ..version import __version__

        return __version__
    except Exception:
        return "unknown"


def create_health_router() -> APIRouter:
    """Create and return the health check router.

    This is a factory so the router can be included in the main app
    or used standalone in tests.
    """
    router = APIRouter()

    @router.get("/health")
    async def health_endpoint(
        store: SnapshotStore = Depends(get_snapshot_store),
    ) -> Dict[str, Any]:
        """Lightweight health check endpoint (no auth required)."""
        return {
            "status": "healthy",
            "service": "lifeweeks",
            "version": _get_version(),
            "uptime_seconds": round(get_uptime_seconds(), 2),
            "snapshots": len(store),
            "snapshot_ttl_seconds": store.ttl_seconds,
        }

    return router
