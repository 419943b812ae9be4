"""Health Check — liveness endpoint for container orchestration.

Invariants:
    - GET /api/health always returns 200 if the process is up
    - Never calls the registry API (upstream quota is metered)
"""

from fastapi import APIRouter, status

from vehicle_relay import __version__

router = APIRouter(prefix="/api/health", tags=["health"])


@router.get("", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness check. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "vehicle-relay",
        "version": __version__,
    }
