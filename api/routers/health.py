"""Health check endpoint."""

from fastapi import APIRouter, Depends

from api.dependencies import get_settings
from config import Settings

router = APIRouter()


@router.get("/health")
async def health(settings: Settings = Depends(get_settings)):
    """Liveness probe: returns 200 if the process is alive."""
    return {
        "status": "ok",
        "threshold": settings.anomaly_z_threshold,
        "window_size": settings.anomaly_window_size,
    }
