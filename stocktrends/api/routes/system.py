"""System endpoints — health and provider configuration."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from stocktrends import __version__
from stocktrends.api.deps import get_app_settings
from stocktrends.config import Settings

router = APIRouter(tags=["system"])


@router.get("/health")
async def health(settings: Settings = Depends(get_app_settings)):
    from stocktrends.api.app import get_uptime

    providers = settings.configured_providers
    return {
        "status": "ok" if any(providers.values()) else "degraded",
        "version": __version__,
        "uptime_seconds": round(get_uptime(), 1),
        "providers": providers,
    }
