"""Multi-day season forecast ("look ahead").

Builds a short day-by-day strip of seasons with the date-only classifier,
flags season transitions and attaches simple risk levels for sleep,
cravings and unrest.  Callers must pass the same cycle lengths the
prediction engine used so that day 0 of the forecast agrees with today's
season; ``forecast_for_prediction`` does that for you.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum

from cyclus.engine.dates import add_days, as_date, day_in_cycle
from cyclus.engine.season_classifier import classify
from cyclus.engine.types import Prediction, Season

DEFAULT_FORECAST_DAYS = 5


class RiskLevel(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"


# (sleep, cravings, unrest)
SEASON_RISKS: dict[Season, tuple[RiskLevel, RiskLevel, RiskLevel]] = {
    Season.winter: (RiskLevel.medium, RiskLevel.low, RiskLevel.low),
    Season.spring: (RiskLevel.low, RiskLevel.low, RiskLevel.low),
    Season.summer: (RiskLevel.low, RiskLevel.low, RiskLevel.medium),
    Season.autumn: (RiskLevel.high, RiskLevel.high, RiskLevel.high),
    Season.unknown: (RiskLevel.medium, RiskLevel.medium, RiskLevel.medium),
}


@dataclass(frozen=True)
class DayForecast:
    """One day of the forecast strip.

    Attributes:
        date:                Calendar date.
        day_in_cycle:        1-indexed day relative to the cycle anchor.
        season:              Predicted season (winter inside a predicted period).
        is_transition_day:   Season differs from the previous forecast day
                             (never the first day).
        sleep:               Sleep disruption risk.
        cravings:            Cravings risk.
        unrest:              Restlessness risk.
        is_fertile:          Inside the predicted fertile window.
        is_predicted_period: Inside the predicted next period span.
    """

    date: date
    day_in_cycle: int
    season: Season
    is_transition_day: bool
    sleep: RiskLevel
    cravings: RiskLevel
    unrest: RiskLevel
    is_fertile: bool = False
    is_predicted_period: bool = False


def _bump(level: RiskLevel) -> RiskLevel:
    return RiskLevel.medium if level == RiskLevel.low else RiskLevel.high


def risk_levels(
    season: Season, is_transition_day: bool
) -> tuple[RiskLevel, RiskLevel, RiskLevel]:
    """Risk levels for a season; transition days raise each level one step."""
    risks = SEASON_RISKS[season]
    if is_transition_day:
        return tuple(_bump(level) for level in risks)  # type: ignore[return-value]
    return risks


def _predicted_period_span(
    prediction: Prediction | None, period_length: int
) -> tuple[date, date] | None:
    if prediction is None or prediction.next_period_window is None:
        return None
    window = prediction.next_period_window
    return window.start, add_days(window.end, max(0, period_length - 1))


def build_forecast(
    start: date,
    cycle_start_date: date,
    avg_cycle_length: int,
    period_length: int,
    luteal_length: int,
    days: int = DEFAULT_FORECAST_DAYS,
    prediction: Prediction | None = None,
) -> list[DayForecast]:
    """Forecast ``days`` consecutive days beginning at ``start``.

    Args:
        start:            First forecast day (usually today).
        cycle_start_date: Anchor of the current cycle.
        avg_cycle_length: Baseline cycle length.
        period_length:    Menstrual days per cycle.
        luteal_length:    Luteal phase length.
        days:             Number of days to forecast.
        prediction:       Optional prediction; enables fertile and
                          predicted-period flags.
    """
    start = as_date(start)
    period_span = _predicted_period_span(prediction, period_length)
    fertile = prediction.fertile_window if prediction is not None else None

    forecast: list[DayForecast] = []
    previous: Season | None = None
    for offset in range(max(0, days)):
        day = add_days(start, offset)
        in_period = period_span is not None and period_span[0] <= day <= period_span[1]
        season = classify(
            day, cycle_start_date, avg_cycle_length, period_length, luteal_length
        )
        if in_period:
            season = Season.winter

        is_transition = previous is not None and season != previous
        sleep, cravings, unrest = risk_levels(season, is_transition)
        forecast.append(
            DayForecast(
                date=day,
                day_in_cycle=day_in_cycle(cycle_start_date, day),
                season=season,
                is_transition_day=is_transition,
                sleep=sleep,
                cravings=cravings,
                unrest=unrest,
                is_fertile=fertile is not None and fertile.contains(day),
                is_predicted_period=in_period,
            )
        )
        previous = season
    return forecast


def next_transition(
    forecast: list[DayForecast], current_season: Season | None = None
) -> DayForecast | None:
    """First day whose season differs from ``current_season`` (or day 0's)."""
    if not forecast:
        return None
    reference = current_season or forecast[0].season
    return next((d for d in forecast if d.season != reference), None)


def forecast_for_prediction(
    prediction: Prediction,
    days: int = DEFAULT_FORECAST_DAYS,
    today: date | None = None,
) -> list[DayForecast]:
    """Forecast with exactly the parameters ``prediction`` used.

    Returns an empty list when the prediction has no anchor or baseline
    (empty history, implausible anchor).
    """
    if (
        prediction.cycle_start_date is None
        or prediction.avg_cycle_length is None
        or prediction.period_length is None
        or prediction.luteal_length is None
    ):
        return []
    return build_forecast(
        start=today or date.today(),
        cycle_start_date=prediction.cycle_start_date,
        avg_cycle_length=prediction.avg_cycle_length,
        period_length=prediction.period_length,
        luteal_length=prediction.luteal_length,
        days=days,
        prediction=prediction,
    )
