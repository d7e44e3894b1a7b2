"""Robust cycle length statistics.

Reduces the most recent closed cycles to a median length, a variability
(population standard deviation) and a trend.  Early users have zero or one
closed cycle, so sparse input degrades to ``None``/``unknown`` instead of
raising.

Lengths outside the configured plausible band (7-60 days by default) are
treated as logging mistakes and dropped, not clamped.
"""

from __future__ import annotations

import logging
import statistics
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from cyclus.engine.config_loader import StatsConfig, get_engine_config
from cyclus.engine.dates import round_half_up
from cyclus.engine.types import CycleRecord, Trend

logger = logging.getLogger("cyclus.engine.cycle_stats")


@dataclass(frozen=True)
class CycleStats:
    """Summary statistics over recent cycle lengths.

    Attributes:
        median_length: Median length in days, half-up rounded.
        variability:   Population stdev in days, half-up rounded.
        trend:         Recent lengths compared with older ones.
        sample_size:   Number of lengths that passed filtering.
    """

    median_length: int | None = None
    variability: int | None = None
    trend: Trend = Trend.unknown
    sample_size: int = 0


def usable_lengths(lengths: Iterable[int | None], config: StatsConfig) -> list[int]:
    """Filter to plausible lengths and cap to the rolling window.

    Input order is preserved (newest first), so the cap keeps the most recent.
    """
    valid = [
        length
        for length in lengths
        if length is not None
        and config.min_valid_length_days <= length <= config.max_valid_length_days
    ]
    return valid[: config.rolling_window_cycles]


def _median(lengths: Sequence[int]) -> int:
    ordered = sorted(lengths)
    mid = len(ordered) // 2
    if len(ordered) % 2:
        return ordered[mid]
    return round_half_up((ordered[mid - 1] + ordered[mid]) / 2)


def _trend(lengths: Sequence[int], config: StatsConfig) -> Trend:
    if len(lengths) < config.trend_min_cycles:
        return Trend.unknown
    recent = statistics.mean(lengths[:2])
    older = statistics.mean(lengths[-2:])
    if recent < older - config.trend_threshold_days:
        return Trend.shorter
    if recent > older + config.trend_threshold_days:
        return Trend.longer
    return Trend.stable


def compute_length_stats(
    lengths: Iterable[int | None],
    config: StatsConfig | None = None,
) -> CycleStats:
    """Statistics over raw cycle lengths, newest first.

    Examples::

        compute_length_stats([28, 30, 26, 29, 27, 31]).median_length   # 29
        compute_length_stats([28, 29, 90, 5, 27]).sample_size          # 3
    """
    cfg = config or get_engine_config().stats
    window = usable_lengths(lengths, cfg)

    if len(window) < cfg.min_usable_cycles:
        logger.debug("Only %d usable cycle length(s); stats unavailable", len(window))
        return CycleStats(sample_size=len(window))

    return CycleStats(
        median_length=_median(window),
        variability=round_half_up(statistics.pstdev(window)),
        trend=_trend(window, cfg),
        sample_size=len(window),
    )


def compute_stats(
    cycles: Iterable[CycleRecord],
    config: StatsConfig | None = None,
) -> CycleStats:
    """Statistics over cycle records, which must be ordered newest first."""
    return compute_length_stats((c.computed_length for c in cycles), config)
