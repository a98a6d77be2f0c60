"""
Health Check Endpoints

Basic health and status endpoints for monitoring and load balancer checks.
"""

import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from config import Settings
from core.database.engine import health_check as db_health_check
from dependencies import get_config

router = APIRouter()

_START_TIME = time.time()


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str
    timestamp: datetime
    version: str
    environment: str
    uptime_seconds: float


class DetailedHealthResponse(HealthResponse):
    """Detailed health check with additional information."""
    database_status: str
    sandbox_image: str


def _environment(settings: Settings) -> str:
    if settings.TESTING:
        return "testing"
    return "development" if settings.DEBUG else "production"


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: Settings = Depends(get_config)):
    """
    Basic health check endpoint.
    Returns simple status information for load balancers.
    """
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        version=settings.APP_VERSION,
        environment=_environment(settings),
        uptime_seconds=time.time() - _START_TIME,
    )


@router.get("/health/detailed", response_model=DetailedHealthResponse)
async def detailed_health_check(request: Request, settings: Settings = Depends(get_config)):
    """
    Detailed health check endpoint.
    Includes database connectivity.
    """
    engine = getattr(request.app.state, "db_engine", None)
    database_status = "healthy" if await db_health_check(engine) else "unhealthy"

    return DetailedHealthResponse(
        status="healthy" if database_status == "healthy" else "degraded",
        timestamp=datetime.now(timezone.utc),
        version=settings.APP_VERSION,
        environment=_environment(settings),
        uptime_seconds=time.time() - _START_TIME,
        database_status=database_status,
        sandbox_image=settings.SANDBOX_DOCKER_IMAGE,
    )


@router.get("/ping")
async def ping():
    """Simple ping endpoint."""
    return {"message": "pong"}
