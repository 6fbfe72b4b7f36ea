"""
Health check endpoint

GET /api/health runs the SDP liveness check: one authenticated list call
with limit 1. Always answers 200 with the check result in the body.
"""
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from sdp_bridge import __version__
from sdp_bridge.routes.dependencies import get_bridge
from sdp_bridge.tools.bridge import ToolBridge
from sdp_bridge.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/health", tags=["health"])

APP_START_TIME = time.time()


class HealthResponse(BaseModel):
    """Health check response"""
    status: str = Field(..., description="healthy or unhealthy")
    sdp_connected: bool = Field(..., description="Result of the SDP liveness check")
    latency_ms: float = Field(..., description="Check round trip in milliseconds")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    version: str = Field(..., description="Application version")
    uptime_seconds: float = Field(..., description="Application uptime in seconds")


@router.get(
    "",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="SDP connectivity check",
)
async def health_check(bridge: ToolBridge = Depends(get_bridge)) -> HealthResponse:
    start = time.time()
    connected = await bridge.client.test_connection()
    latency = (time.time() - start) * 1000

    if not connected:
        logger.warning("Health check: SDP unreachable")

    return HealthResponse(
        status="healthy" if connected else "unhealthy",
        sdp_connected=connected,
        latency_ms=round(latency, 2),
        version=__version__,
        uptime_seconds=round(time.time() - APP_START_TIME, 2),
    )
