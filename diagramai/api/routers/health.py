"""
Health check API endpoints.

Routes: GET /health, GET /health/render-channel

Dependencies: diagramai.boundary.render_channel, diagramai.core.validation_correlator
System role: Health check HTTP API
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from diagramai.api.deps import get_correlator, get_render_channel
from diagramai.boundary.render_channel import RenderChannel
from diagramai.core.validation_correlator import ValidationCorrelator


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    message: str


class RenderChannelHealthResponse(BaseModel):
    """Render channel health response model."""

    status: str
    connections: int
    pending_validations: int


router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check."""
    return HealthResponse(status="healthy", message="Server Healthy")


@router.get("/render-channel", response_model=RenderChannelHealthResponse)
async def health_check_render_channel(
    render_channel: RenderChannel = Depends(get_render_channel),
    correlator: ValidationCorrelator = Depends(get_correlator),
) -> RenderChannelHealthResponse:
    """Connected render clients and in-flight validations."""
    return RenderChannelHealthResponse(
        status="healthy",
        connections=render_channel.connection_count,
        pending_validations=correlator.pending_count,
    )
