"""Cycle phase and prediction engine.

Classifies today into a phase/season and projects the next period,
ovulation and fertile windows with confidence scores.

The engine is pure: no I/O, no shared mutable state.  It never raises for
input that passed schema validation.  Empty history and an implausible anchor
date both resolve to a well-defined default ``Prediction`` whose ``status``
and ``rationale`` explain why.

Today's phase is keyed off live bleeding (a flow log today means menstrual),
unlike the date-only ``season_classifier`` used for forecasts.  The ovulatory
window used to classify today (+/-1 day) and the predicted ovulation window
(+/-2 days) are configured separately in ``WindowsConfig``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date

from cyclus.engine.config_loader import EngineConfig, get_engine_config
from cyclus.engine.cycle_stats import CycleStats, compute_stats
from cyclus.engine.dates import add_days, as_date, day_in_cycle, days_between
from cyclus.engine.season_classifier import phase_for_day
from cyclus.engine.types import (
    PHASE_TO_SEASON,
    BleedingLogEntry,
    CycleHistory,
    CycleRecord,
    DateWindow,
    Phase,
    Prediction,
    PredictionStatus,
    Preferences,
)

logger = logging.getLogger("cyclus.engine.prediction")

RATIONALE_NOT_ENOUGH_DATA = "Not enough data yet to make predictions."
RATIONALE_IMPLAUSIBLE_ANCHOR = (
    "The start date of your most recent cycle looks implausible. "
    "Please check the date you entered."
)
RATIONALE_VARIABLE = "Your cycle varies, so predictions are a broad estimate."
RATIONALE_STABLE = "Based on your most recent cycles."

WATCHOUT_LONG_CYCLES = (
    "Your cycles are longer than average. This can happen during perimenopause."
)
WATCHOUT_HIGH_VARIABILITY = (
    "Your cycle length varies a lot. Predictions are less reliable."
)


class PredictionEngine:
    """Predict today's phase and the upcoming cycle windows.

    Usage::

        engine = PredictionEngine()
        prediction = engine.predict(
            cycles=history.cycles,
            bleeding_logs=history.bleeding_logs,
            preferences=history.preferences,
        )
        print(prediction.current_season, prediction.next_period_window)
    """

    def __init__(self, config: EngineConfig | None = None) -> None:
        self._config = config or get_engine_config()

    @property
    def config(self) -> EngineConfig:
        return self._config

    def predict(
        self,
        cycles: Iterable[CycleRecord],
        bleeding_logs: Iterable[BleedingLogEntry] = (),
        preferences: Preferences | None = None,
        today: date | None = None,
    ) -> Prediction:
        """Generate a prediction for ``today``.

        Args:
            cycles:        Cycle records.  Sorted newest first internally.
            bleeding_logs: Bleeding observations for a trailing window.
            preferences:   User preferences; ``None`` means defaults.
            today:         Reference date (defaults to ``date.today()``).

        Returns:
            A structurally valid Prediction, never an exception.
        """
        cfg = self._config
        prefs = preferences or Preferences()
        today = as_date(today or date.today())
        luteal_length = prefs.luteal_phase_length or cfg.defaults.luteal_phase_length

        ordered = sorted(cycles, key=lambda c: c.start_date, reverse=True)
        if not ordered:
            logger.debug("No cycles logged; returning default prediction")
            return Prediction(
                status=PredictionStatus.insufficient_data,
                rationale=RATIONALE_NOT_ENOUGH_DATA,
            )

        cycle_start = ordered[0].start_date
        current_day = day_in_cycle(cycle_start, today)

        # Sanity gate: a corrupted anchor must not reach any derivation below
        if current_day <= 0 or current_day > cfg.defaults.max_plausible_cycle_day:
            logger.info(
                "Implausible cycle anchor %s (day %d as of %s)",
                cycle_start,
                current_day,
                today,
            )
            return self._implausible(cycle_start)

        flow_logs = [log for log in bleeding_logs if log.is_flow]
        is_bleeding_today = any(log.date == today for log in flow_logs)
        period_length = self._period_length(cycle_start, flow_logs)

        stats = compute_stats(ordered, cfg.stats)
        avg_cycle_length, variability = self._baseline(stats, prefs)

        phase = Phase.menstrual if is_bleeding_today else phase_for_day(
            current_day,
            avg_cycle_length,
            period_length,
            luteal_length,
            ovulatory_half_width=cfg.windows.classifier_ovulatory_half_width,
        )

        try:
            next_period, ovulation, fertile = self._windows(
                cycle_start, avg_cycle_length, variability, luteal_length, prefs
            )
        except OverflowError:
            logger.info("Windows for cycle anchor %s fall outside the calendar", cycle_start)
            return self._implausible(cycle_start)

        return Prediction(
            status=PredictionStatus.ok,
            current_phase=phase,
            current_season=PHASE_TO_SEASON[phase],
            next_period_window=next_period,
            ovulation_window=ovulation,
            fertile_window=fertile,
            avg_cycle_length=avg_cycle_length,
            cycle_variability=variability,
            trend=stats.trend,
            cycle_start_date=cycle_start,
            day_in_cycle=current_day,
            period_length=period_length,
            luteal_length=luteal_length,
            rationale=self._rationale(variability),
            watchouts=self._watchouts(avg_cycle_length, variability),
        )

    def predict_history(
        self, history: CycleHistory, today: date | None = None
    ) -> Prediction:
        return self.predict(
            history.cycles, history.bleeding_logs, history.preferences, today=today
        )

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    @staticmethod
    def _implausible(cycle_start: date) -> Prediction:
        return Prediction(
            status=PredictionStatus.implausible_anchor,
            cycle_start_date=cycle_start,
            rationale=RATIONALE_IMPLAUSIBLE_ANCHOR,
        )

    def _period_length(
        self, cycle_start: date, flow_logs: list[BleedingLogEntry]
    ) -> int:
        """Days from the cycle start to the latest flow day at or after it."""
        in_cycle = [log.date for log in flow_logs if log.date >= cycle_start]
        if not in_cycle:
            return self._config.defaults.period_length
        return days_between(cycle_start, max(in_cycle)) + 1

    def _baseline(self, stats: CycleStats, prefs: Preferences) -> tuple[int, int]:
        defaults = self._config.defaults
        length = stats.median_length or prefs.avg_cycle_length or defaults.avg_cycle_length
        avg_cycle_length = max(defaults.min_avg_cycle_length, length)
        variability = (
            stats.variability if stats.variability is not None else defaults.variability
        )
        return avg_cycle_length, variability

    def _windows(
        self,
        cycle_start: date,
        avg_cycle_length: int,
        variability: int,
        luteal_length: int,
        prefs: Preferences,
    ) -> tuple[DateWindow, DateWindow, DateWindow]:
        windows = self._config.windows
        conf = self._config.confidence

        # Day ``avg_cycle_length`` of the current cycle
        next_period_date = add_days(cycle_start, avg_cycle_length - 1)
        base = conf.perimenopause_base if prefs.perimenopause else conf.base
        next_period_confidence = max(
            conf.next_period_floor, base - variability * conf.variability_penalty
        )
        next_period = DateWindow(
            start=add_days(next_period_date, -variability),
            end=add_days(next_period_date, variability),
            confidence=next_period_confidence,
        )

        ovulation_date = add_days(next_period_date, -luteal_length)
        ovulation_confidence = max(
            conf.ovulation_floor, next_period_confidence - conf.ovulation_offset
        )
        half = windows.prediction_ovulation_half_width
        ovulation = DateWindow(
            start=add_days(ovulation_date, -half),
            end=add_days(ovulation_date, half),
            confidence=ovulation_confidence,
        )
        fertile = DateWindow(
            start=add_days(ovulation_date, -windows.fertile_days_before_ovulation),
            end=add_days(ovulation_date, windows.fertile_days_after_ovulation),
            confidence=ovulation_confidence,
        )
        return next_period, ovulation, fertile

    def _watchouts(self, avg_cycle_length: int, variability: int) -> list[str]:
        thresholds = self._config.watchouts
        watchouts: list[str] = []
        if avg_cycle_length > thresholds.long_cycle_days:
            watchouts.append(WATCHOUT_LONG_CYCLES)
        if variability > thresholds.high_variability_days:
            watchouts.append(WATCHOUT_HIGH_VARIABILITY)
        return watchouts

    def _rationale(self, variability: int) -> str:
        if variability > self._config.watchouts.variable_rationale_days:
            return RATIONALE_VARIABLE
        return RATIONALE_STABLE


def predict(
    cycles: Iterable[CycleRecord],
    bleeding_logs: Iterable[BleedingLogEntry] = (),
    preferences: Preferences | None = None,
    today: date | None = None,
) -> Prediction:
    """Module-level shortcut using the global engine config."""
    return PredictionEngine().predict(cycles, bleeding_logs, preferences, today=today)


def predict_history(history: CycleHistory, today: date | None = None) -> Prediction:
    return PredictionEngine().predict_history(history, today=today)
