"""Health check, no auth required."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from config.settings import Settings
from src.api.dependencies import get_settings

router = APIRouter(prefix="/api/v1", tags=["health"])


class HealthResponse(BaseModel):
    status: str
    version: str
    helius_configured: bool


@router.get("/health", response_model=HealthResponse)
async def health_check(
    request: Request, cfg: Settings = Depends(get_settings)
) -> HealthResponse:
    """Report whether the Helius upstream is configured."""
    helius_ready = cfg.helius_configured and request.app.state.helius is not None
    return HealthResponse(
        status="ok" if helius_ready else "degraded",
        version=request.app.version,
        helius_configured=cfg.helius_configured,
    )
