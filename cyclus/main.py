"""Cyclus API: FastAPI application entry point.

Run locally:
    uvicorn cyclus.main:app --reload --port 8000
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cyclus.config import get_settings
from cyclus.engine.config_loader import get_engine_config, reload_engine_config
from cyclus.engine.season_classifier import clear_classifier_cache
from cyclus.routers import cycle, health

# ---------- Logging ----------

logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s %(levelname)-8s %(name)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stdout,
)
logger = logging.getLogger("cyclus")


# ---------- Lifespan ----------

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup / shutdown hooks."""
    settings = get_settings()
    logger.info(
        "Starting Cyclus API v%s [%s]",
        settings.app_version,
        settings.environment,
    )
    if settings.engine_config_path is not None:
        reload_engine_config(settings.engine_config_path)
    else:
        get_engine_config()
    yield
    clear_classifier_cache()
    logger.info("Cyclus API shut down")


# ---------- App factory ----------

def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title="Cyclus API",
        description=(
            "Cycle season engine: current phase and season, next period, "
            "ovulation and fertile window predictions, and season forecasts."
        ),
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ---------- Health check (outside v1 prefix, always at /health) ----------
    app.include_router(health.router)

    # ---------- API v1 routes ----------
    app.include_router(cycle.router, prefix="/api/v1")

    return app


app = create_app()
