"""Tests for the multi-day season forecast."""

from __future__ import annotations

from datetime import date

import pytest

from cyclus.engine.forecast import (
    RiskLevel,
    build_forecast,
    forecast_for_prediction,
    next_transition,
    risk_levels,
)
from cyclus.engine.prediction_engine import PredictionEngine
from cyclus.engine.types import CycleRecord, Prediction, Season
from cyclus.engine.tests.conftest import CYCLE_START, TEST_TODAY


class TestBuildForecast:
    def test_spring_into_summer(self) -> None:
        forecast = build_forecast(date(2024, 1, 12), CYCLE_START, 28, 5, 13)
        assert [d.season for d in forecast] == [
            Season.spring,
            Season.spring,
            Season.summer,
            Season.summer,
            Season.summer,
        ]
        assert [d.is_transition_day for d in forecast] == [False, False, True, False, False]
        assert [d.day_in_cycle for d in forecast] == [12, 13, 14, 15, 16]

    def test_transition_day_raises_risk(self) -> None:
        forecast = build_forecast(date(2024, 1, 12), CYCLE_START, 28, 5, 13)
        transition = forecast[2]
        assert (transition.sleep, transition.cravings, transition.unrest) == (
            RiskLevel.medium,
            RiskLevel.medium,
            RiskLevel.high,
        )
        plain = forecast[3]
        assert (plain.sleep, plain.cravings, plain.unrest) == (
            RiskLevel.low,
            RiskLevel.low,
            RiskLevel.medium,
        )

    def test_first_day_is_never_a_transition(self) -> None:
        # 2024-01-16 is summer, but the strip starts the day after
        forecast = build_forecast(date(2024, 1, 17), CYCLE_START, 28, 5, 13, days=2)
        assert forecast[0].season == Season.autumn
        assert not forecast[0].is_transition_day
        assert (forecast[0].sleep, forecast[0].cravings, forecast[0].unrest) == (
            RiskLevel.high,
            RiskLevel.high,
            RiskLevel.high,
        )

    def test_wraps_into_next_cycle(self) -> None:
        forecast = build_forecast(date(2024, 1, 27), CYCLE_START, 28, 5, 13, days=4)
        assert [d.season for d in forecast] == [
            Season.autumn,
            Season.autumn,
            Season.winter,
            Season.winter,
        ]
        assert forecast[2].day_in_cycle == 29

    def test_days_before_anchor_are_unknown(self) -> None:
        forecast = build_forecast(date(2023, 12, 30), CYCLE_START, 28, 5, 13, days=3)
        assert [d.season for d in forecast] == [Season.unknown, Season.unknown, Season.winter]
        assert forecast[0].sleep == RiskLevel.medium

    @pytest.mark.parametrize("days", [0, -3])
    def test_no_days(self, days: int) -> None:
        assert build_forecast(TEST_TODAY, CYCLE_START, 28, 5, 13, days=days) == []


class TestRiskLevels:
    def test_autumn_is_high(self) -> None:
        assert risk_levels(Season.autumn, False) == (
            RiskLevel.high,
            RiskLevel.high,
            RiskLevel.high,
        )

    def test_bump_caps_at_high(self) -> None:
        assert risk_levels(Season.autumn, True) == risk_levels(Season.autumn, False)

    def test_spring_transition(self) -> None:
        assert risk_levels(Season.spring, True) == (
            RiskLevel.medium,
            RiskLevel.medium,
            RiskLevel.medium,
        )


class TestForecastForPrediction:
    @pytest.fixture
    def prediction(self, engine: PredictionEngine) -> Prediction:
        return engine.predict([CycleRecord(start_date=CYCLE_START)], today=TEST_TODAY)

    def test_day_zero_matches_today(self, prediction: Prediction) -> None:
        forecast = forecast_for_prediction(prediction, today=TEST_TODAY)
        assert len(forecast) == 5
        assert forecast[0].season == prediction.current_season
        assert not forecast[0].is_transition_day

    def test_flags_fertile_and_predicted_period(self, prediction: Prediction) -> None:
        forecast = forecast_for_prediction(prediction, days=20, today=TEST_TODAY)
        by_date = {d.date: d for d in forecast}

        # fertile window ends 2024-01-16
        assert [d.date for d in forecast if d.is_fertile] == [
            date(2024, 1, 15),
            date(2024, 1, 16),
        ]
        # next period window opens 2024-01-25, four days before the classifier's day 29
        period_start = by_date[date(2024, 1, 25)]
        assert period_start.is_predicted_period
        assert period_start.season == Season.winter
        assert period_start.is_transition_day
        assert not by_date[date(2024, 1, 24)].is_predicted_period
        assert by_date[date(2024, 2, 3)].season == Season.winter

    def test_next_transition(self, prediction: Prediction) -> None:
        forecast = forecast_for_prediction(prediction, days=20, today=TEST_TODAY)
        transition = next_transition(forecast, prediction.current_season)
        assert transition.date == date(2024, 1, 17)
        assert transition.season == Season.autumn

    def test_no_transition_in_range(self, prediction: Prediction) -> None:
        forecast = forecast_for_prediction(prediction, days=2, today=TEST_TODAY)
        assert next_transition(forecast, prediction.current_season) is None

    def test_default_prediction_has_no_forecast(self, engine: PredictionEngine) -> None:
        prediction = engine.predict([], today=TEST_TODAY)
        assert forecast_for_prediction(prediction, today=TEST_TODAY) == []
        assert next_transition([]) is None
