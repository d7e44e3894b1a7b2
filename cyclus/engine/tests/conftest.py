"""Shared fixtures for the cycle engine tests."""

from __future__ import annotations

from datetime import date

import pytest

from cyclus.engine.config_loader import EngineConfig, load_engine_config
from cyclus.engine.prediction_engine import PredictionEngine
from cyclus.engine.season_classifier import clear_classifier_cache

# Day 15 of a cycle starting 2024-01-01
CYCLE_START = date(2024, 1, 1)
TEST_TODAY = date(2024, 1, 15)


@pytest.fixture
def engine_config() -> EngineConfig:
    """Load the real engine config for tests."""
    return load_engine_config()


@pytest.fixture
def engine(engine_config: EngineConfig) -> PredictionEngine:
    return PredictionEngine(engine_config)


@pytest.fixture(autouse=True)
def _fresh_classifier_cache():
    clear_classifier_cache()
    yield
    clear_classifier_cache()
