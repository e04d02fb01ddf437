# blobcheck/routers/health.py
from fastapi import APIRouter

from blobcheck.core.timeutil import iso_timestamp
from blobcheck.schemas.uploads import HealthOut

router = APIRouter(tags=["health"])

HEALTH_MESSAGE = "Server is healthy and ready to receive blob uploads"


@router.get("/health", response_model=HealthOut, include_in_schema=True)
def health() -> dict:
    return {
        "status": "ok",
        "timestamp": iso_timestamp(),
        "message": HEALTH_MESSAGE,
    }
