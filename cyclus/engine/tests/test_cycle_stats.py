"""Tests for cycle length statistics."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from cyclus.engine.config_loader import EngineConfig, StatsConfig
from cyclus.engine.cycle_stats import (
    CycleStats,
    compute_length_stats,
    compute_stats,
    usable_lengths,
)
from cyclus.engine.dates import round_half_up
from cyclus.engine.types import CycleRecord, Trend


def closed_cycles(lengths: list[int], newest_start: date = date(2024, 1, 1)) -> list[CycleRecord]:
    """Closed cycles ending just before ``newest_start``, newest first."""
    cycles = []
    start = newest_start
    for length in lengths:
        start = start - timedelta(days=length)
        cycles.append(
            CycleRecord(
                start_date=start,
                end_date=start + timedelta(days=length - 1),
                computed_length=length,
            )
        )
    return cycles


class TestMedianAndVariability:
    def test_even_count_median_rounds_half_up(self) -> None:
        stats = compute_length_stats([28, 30, 26, 29, 27, 31])
        # sorted middle values 28 and 29 -> 28.5 -> 29
        assert stats.median_length == 29
        assert stats.sample_size == 6

    def test_odd_count_median_is_middle_value(self) -> None:
        assert compute_length_stats([26, 32, 29]).median_length == 29

    def test_two_values_median(self) -> None:
        assert compute_length_stats([28, 29]).median_length == 29

    def test_population_standard_deviation(self) -> None:
        # pstdev([28, 30, 26, 29, 27, 31]) = 1.71; sample stdev would be 1.87
        assert compute_length_stats([28, 30, 26, 29, 27, 31]).variability == 2

    def test_identical_lengths_have_zero_variability(self) -> None:
        stats = compute_length_stats([28, 28, 28])
        assert stats.median_length == 28
        assert stats.variability == 0

    def test_wide_spread(self) -> None:
        stats = compute_length_stats([20, 40, 20, 40, 20, 40])
        assert stats.median_length == 30
        assert stats.variability == 10


class TestFiltering:
    def test_outliers_excluded(self) -> None:
        stats = compute_length_stats([28, 29, 90, 5, 27])
        assert stats.sample_size == 3
        assert stats.median_length == 28
        assert stats.variability == 1

    def test_band_edges_are_kept(self) -> None:
        stats = compute_length_stats([7, 60])
        assert stats.sample_size == 2
        assert stats.median_length == 34  # 33.5 rounds up

    def test_just_outside_band_is_dropped(self) -> None:
        assert compute_length_stats([6, 61, 28]).sample_size == 1

    def test_missing_lengths_are_skipped(self) -> None:
        assert compute_length_stats([None, 28, None, 30]).median_length == 29

    def test_window_capped_to_six_most_recent(self) -> None:
        stats = compute_length_stats([30] * 6 + [20, 20, 20])
        assert stats.sample_size == 6
        assert stats.median_length == 30
        assert stats.variability == 0

    def test_usable_lengths_preserves_order(self, engine_config: EngineConfig) -> None:
        assert usable_lengths([31, 2, 27, 29], engine_config.stats) == [31, 27, 29]


class TestSparseData:
    @pytest.mark.parametrize("lengths", [[], [28], [90, 5], [None, None]])
    def test_fewer_than_two_usable_lengths(self, lengths: list) -> None:
        stats = compute_length_stats(lengths)
        assert stats.median_length is None
        assert stats.variability is None
        assert stats.trend == Trend.unknown

    def test_two_lengths_have_no_trend(self) -> None:
        stats = compute_length_stats([28, 30])
        assert stats.median_length == 29
        assert stats.variability == 1
        assert stats.trend == Trend.unknown


class TestTrend:
    def test_shorter(self) -> None:
        # recent (24+25)/2 = 24.5, older (30+31)/2 = 30.5
        assert compute_length_stats([24, 25, 30, 31]).trend == Trend.shorter

    def test_longer(self) -> None:
        assert compute_length_stats([35, 34, 28, 27]).trend == Trend.longer

    def test_stable_at_threshold(self) -> None:
        # recent 31 is exactly older 28 + 3: not longer
        assert compute_length_stats([31, 31, 28, 28]).trend == Trend.stable

    def test_three_lengths_overlap(self) -> None:
        # recent = (28+29)/2, older = (29+27)/2
        assert compute_length_stats([28, 29, 27]).trend == Trend.stable

    def test_trend_uses_capped_window(self) -> None:
        # the 7th-oldest 40 falls outside the window
        lengths = [28, 28, 28, 28, 28, 28, 40]
        assert compute_length_stats(lengths).trend == Trend.stable


class TestComputeStats:
    def test_reads_computed_lengths(self) -> None:
        stats = compute_stats(closed_cycles([28, 30, 26, 29, 27, 31]))
        assert stats == CycleStats(
            median_length=29, variability=2, trend=Trend.stable, sample_size=6
        )

    def test_open_cycle_is_ignored(self) -> None:
        cycles = [CycleRecord(start_date=date(2024, 1, 1))] + closed_cycles([28, 30])
        assert compute_stats(cycles).sample_size == 2

    def test_custom_config(self) -> None:
        config = StatsConfig(rolling_window_cycles=2)
        stats = compute_stats(closed_cycles([28, 30, 40]), config)
        assert stats.sample_size == 2
        assert stats.median_length == 29

    def test_empty_input(self) -> None:
        assert compute_stats([]) == CycleStats()


class TestRoundHalfUp:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [(28.5, 29), (28.49, 28), (0.5, 1), (1.7078, 2), (29.0, 29)],
    )
    def test_rounding(self, value: float, expected: int) -> None:
        assert round_half_up(value) == expected
