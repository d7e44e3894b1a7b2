"""Health check endpoint. Public, no auth required."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter

from cyclus.dependencies import AppSettings, CurrentEngineConfig

router = APIRouter(tags=["system"])
logger = logging.getLogger("cyclus.health")


@router.get("/health")
async def health_check(settings: AppSettings, engine_config: CurrentEngineConfig) -> dict:
    """Liveness probe.  Returns 200 if the API process is up and the engine config loaded."""
    return {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.environment,
        "engine_config_version": engine_config.version,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
