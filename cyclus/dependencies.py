"""Shared FastAPI dependencies injected into route handlers."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends

from cyclus.config import Settings, get_settings
from cyclus.engine.config_loader import EngineConfig, get_engine_config
from cyclus.engine.prediction_engine import PredictionEngine


def get_prediction_engine(
    config: Annotated[EngineConfig, Depends(get_engine_config)],
) -> PredictionEngine:
    """A fresh engine bound to the current (possibly reloaded) config."""
    return PredictionEngine(config)


# Annotated shortcuts for route signatures
AppSettings = Annotated[Settings, Depends(get_settings)]
CurrentEngineConfig = Annotated[EngineConfig, Depends(get_engine_config)]
Engine = Annotated[PredictionEngine, Depends(get_prediction_engine)]
