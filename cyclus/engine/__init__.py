"""Cycle season engine for Cyclus.

Pure, synchronous functions over a small input bundle: safe to call from
any number of threads or requests without locking.

Modules:
    season_classifier  - Date-only season classification (forecast/calendar views)
    cycle_stats        - Median length, variability and trend of recent cycles
    prediction_engine  - Today's phase/season plus next period, ovulation, fertile windows
    forecast           - Multi-day season strip with transitions and risk levels
    history            - Data-entry decision tables for the history provider
    config_loader      - Load/validate/hot-reload engine_config.yaml
"""

from cyclus.engine.config_loader import EngineConfig, get_engine_config
from cyclus.engine.cycle_stats import CycleStats, compute_length_stats, compute_stats
from cyclus.engine.forecast import DayForecast, build_forecast, forecast_for_prediction
from cyclus.engine.prediction_engine import PredictionEngine, predict
from cyclus.engine.season_classifier import classify, classify_cached
from cyclus.engine.types import (
    BleedingIntensity,
    BleedingLogEntry,
    CycleHistory,
    CycleRecord,
    DateWindow,
    Phase,
    Prediction,
    PredictionStatus,
    Preferences,
    Season,
    Trend,
)

__all__ = [
    "BleedingIntensity",
    "BleedingLogEntry",
    "CycleHistory",
    "CycleRecord",
    "CycleStats",
    "DateWindow",
    "DayForecast",
    "EngineConfig",
    "Phase",
    "Prediction",
    "PredictionEngine",
    "PredictionStatus",
    "Preferences",
    "Season",
    "Trend",
    "build_forecast",
    "classify",
    "classify_cached",
    "compute_length_stats",
    "compute_stats",
    "forecast_for_prediction",
    "get_engine_config",
    "predict",
]
