"""Load, validate, and hot-reload the cycle engine configuration.

The config lives in ``engine_config.yaml`` alongside this module.  It is
loaded once on first use and cached.  Call ``reload_engine_config()`` to
re-read it from disk; the running config is kept if the new file is invalid.

Usage::

    from cyclus.engine.config_loader import get_engine_config

    config = get_engine_config()
    config.defaults.luteal_phase_length   # 13
    config.confidence.next_period_floor   # 20
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger("cyclus.engine.config")

_CONFIG_PATH = Path(__file__).parent / "engine_config.yaml"


# ---------------------------------------------------------------------------
# Typed config sections
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class StatsConfig:
    """Cycle length statistics settings."""

    min_valid_length_days: int = 7
    max_valid_length_days: int = 60
    rolling_window_cycles: int = 6
    min_usable_cycles: int = 2
    trend_min_cycles: int = 3
    trend_threshold_days: int = 3


@dataclass(frozen=True)
class DefaultsConfig:
    """Fallbacks used when history or preferences are missing."""

    avg_cycle_length: int = 28
    min_avg_cycle_length: int = 21
    period_length: int = 5
    luteal_phase_length: int = 13
    variability: int = 3
    max_plausible_cycle_day: int = 100


@dataclass(frozen=True)
class WindowsConfig:
    """Half-widths and offsets of the classification and prediction windows.

    The classifier's ovulatory window and the predicted ovulation window use
    different half-widths on purpose; keep them separate.
    """

    classifier_ovulatory_half_width: int = 1
    prediction_ovulation_half_width: int = 2
    fertile_days_before_ovulation: int = 5
    fertile_days_after_ovulation: int = 1


@dataclass(frozen=True)
class ConfidenceConfig:
    """Confidence scoring (0-100 scale)."""

    base: int = 70
    perimenopause_base: int = 50
    variability_penalty: int = 5
    next_period_floor: int = 20
    ovulation_offset: int = 10
    ovulation_floor: int = 15


@dataclass(frozen=True)
class WatchoutConfig:
    """Thresholds for watchouts and the rationale text."""

    long_cycle_days: int = 45
    high_variability_days: int = 7
    variable_rationale_days: int = 5


@dataclass(frozen=True)
class HistoryConfig:
    """Data-entry heuristics used by the history provider."""

    discard_gap_days: int = 7
    quick_log_gap_days: int = 3


@dataclass(frozen=True)
class EngineConfig:
    """Complete, validated engine configuration.

    Attributes:
        version:     Config schema version string.
        stats:       Cycle statistics settings.
        defaults:    Default lengths and the anchor sanity gate.
        windows:     Window half-widths and fertile offsets.
        confidence:  Confidence scoring constants.
        watchouts:   Watchout thresholds.
        history:     History-provider heuristics.
    """

    version: str = "1.0"
    stats: StatsConfig = field(default_factory=StatsConfig)
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)
    windows: WindowsConfig = field(default_factory=WindowsConfig)
    confidence: ConfidenceConfig = field(default_factory=ConfidenceConfig)
    watchouts: WatchoutConfig = field(default_factory=WatchoutConfig)
    history: HistoryConfig = field(default_factory=HistoryConfig)


# ---------------------------------------------------------------------------
# Loader / validation
# ---------------------------------------------------------------------------


class ConfigValidationError(ValueError):
    """Raised when engine_config.yaml fails validation."""


def _load_yaml(path: Path) -> dict:
    """Read and parse a YAML file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigValidationError: If the YAML is malformed.
    """
    if not path.exists():
        raise FileNotFoundError(f"Engine config not found: {path}")

    with path.open("r", encoding="utf-8") as fh:
        try:
            return yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise ConfigValidationError(f"YAML parse error in {path}: {exc}") from exc


def _build_section(
    cls: type,
    raw: Any,
    section: str,
    errors: list[str],
    minimums: dict[str, int] | None = None,
) -> Any:
    """Build one dataclass section from a mapping of integer fields.

    Unknown keys are reported, missing keys take the dataclass default.
    """
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        errors.append(f"'{section}' must be a mapping")
        return cls()

    defaults = cls()
    values: dict[str, int] = {}
    for key, val in raw.items():
        if not hasattr(defaults, key):
            errors.append(f"Unknown key '{key}' in section '{section}'")
            continue
        if isinstance(val, bool) or not isinstance(val, int):
            errors.append(f"{section}.{key} must be an integer, got {val!r}")
            continue
        floor = (minimums or {}).get(key, 0)
        if val < floor:
            errors.append(f"{section}.{key} = {val} is below the minimum {floor}")
            continue
        values[key] = val
    return cls(**values)


def _validate_and_build(raw: dict) -> EngineConfig:
    """Validate the raw YAML dict and construct an EngineConfig.

    Raises:
        ConfigValidationError: If any section is malformed or inconsistent.
    """
    errors: list[str] = []

    version = str(raw.get("version", "1.0"))

    stats = _build_section(
        StatsConfig,
        raw.get("cycle_stats"),
        "cycle_stats",
        errors,
        minimums={
            "min_valid_length_days": 1,
            "max_valid_length_days": 1,
            "rolling_window_cycles": 1,
            "min_usable_cycles": 1,
            "trend_min_cycles": 2,
        },
    )
    defaults = _build_section(
        DefaultsConfig,
        raw.get("defaults"),
        "defaults",
        errors,
        minimums={
            "avg_cycle_length": 1,
            "min_avg_cycle_length": 1,
            "luteal_phase_length": 1,
            "max_plausible_cycle_day": 1,
        },
    )
    windows = _build_section(WindowsConfig, raw.get("windows"), "windows", errors)
    confidence = _build_section(
        ConfidenceConfig, raw.get("confidence"), "confidence", errors
    )
    watchouts = _build_section(WatchoutConfig, raw.get("watchouts"), "watchouts", errors)
    history = _build_section(HistoryConfig, raw.get("history"), "history", errors)

    # ── Cross-field checks ──
    if stats.min_valid_length_days > stats.max_valid_length_days:
        errors.append(
            "cycle_stats.min_valid_length_days must not exceed max_valid_length_days"
        )
    for key in ("base", "perimenopause_base", "next_period_floor", "ovulation_floor"):
        value = getattr(confidence, key)
        if value > 100:
            errors.append(f"confidence.{key} = {value} is out of range [0, 100]")

    if confidence.perimenopause_base > confidence.base:
        logger.warning(
            "confidence.perimenopause_base (%d) is above confidence.base (%d)",
            confidence.perimenopause_base,
            confidence.base,
        )

    if errors:
        raise ConfigValidationError(
            f"engine_config.yaml has {len(errors)} validation error(s):\n"
            + "\n".join(f"  • {e}" for e in errors)
        )

    return EngineConfig(
        version=version,
        stats=stats,
        defaults=defaults,
        windows=windows,
        confidence=confidence,
        watchouts=watchouts,
        history=history,
    )


def load_engine_config(path: Path | None = None) -> EngineConfig:
    """Load and validate the engine config from disk.

    Args:
        path: Override path to YAML.  Uses the bundled engine_config.yaml by default.
    """
    target = path or _CONFIG_PATH
    raw = _load_yaml(target)
    if not isinstance(raw, dict):
        raise ConfigValidationError(f"{target} must contain a mapping at the top level")
    config = _validate_and_build(raw)
    logger.info("Loaded engine config v%s from %s", config.version, target)
    return config


# ---------------------------------------------------------------------------
# Global singleton with hot-reload support
# ---------------------------------------------------------------------------

_config: EngineConfig | None = None
_config_lock = threading.Lock()


def get_engine_config() -> EngineConfig:
    """Return the global EngineConfig, loading it on first call.  Thread-safe."""
    global _config
    if _config is None:
        with _config_lock:
            if _config is None:  # double-checked locking
                _config = load_engine_config()
    return _config


def reload_engine_config(path: Path | None = None) -> EngineConfig:
    """Reload the engine config from disk and replace the global singleton.

    If validation fails, the old config is retained and the error re-raised.

    Raises:
        ConfigValidationError: If the new config is invalid.
        FileNotFoundError:     If the config file is missing.
    """
    global _config
    new_config = load_engine_config(path)  # validate before acquiring lock
    with _config_lock:
        old_version = _config.version if _config else "none"
        _config = new_config
    logger.info("Reloaded engine config: %s → %s", old_version, new_config.version)
    return new_config
