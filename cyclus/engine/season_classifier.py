"""Date-only season classifier.

Maps any calendar date to a season given the anchor of the current cycle and
three lengths.  Used by the forecast and calendar views; the prediction
engine classifies "today" itself from live bleeding data (see
``prediction_engine``).

Dates far beyond one cycle wrap into a canonical cycle, so the result is
periodic in ``avg_cycle_length``::

    classify(d) == classify(d + k * avg_cycle_length days)   for k >= 0

The ovulatory window is three days wide, centred on the computed ovulation
day: ``[ovulation_day - 1, ovulation_day + 1]``.
"""

from __future__ import annotations

import functools
from datetime import date, datetime
from functools import lru_cache

from cyclus.engine.dates import as_date, day_in_cycle
from cyclus.engine.types import PHASE_TO_SEASON, Phase, Season

OVULATORY_HALF_WIDTH = 1
CLASSIFIER_CACHE_SIZE = 4096


def phase_for_day(
    cycle_day: int,
    cycle_length: int,
    period_length: int,
    luteal_length: int,
    *,
    ovulatory_half_width: int = OVULATORY_HALF_WIDTH,
) -> Phase:
    """Phase of a 1-indexed day within a single canonical cycle.

    Branches are checked in order; the first match wins.
    """
    ovulation_day = cycle_length - luteal_length
    if cycle_day <= period_length:
        return Phase.menstrual
    if cycle_day < ovulation_day - ovulatory_half_width:
        return Phase.follicular
    if cycle_day <= ovulation_day + ovulatory_half_width:
        return Phase.ovulatory
    return Phase.luteal


def classify(
    day: date | datetime,
    cycle_start_date: date | datetime,
    avg_cycle_length: int,
    period_length: int,
    luteal_length: int,
    *,
    ovulatory_half_width: int = OVULATORY_HALF_WIDTH,
) -> Season:
    """Classify ``day`` into a season.

    Args:
        day:              Date to classify.  Time of day is ignored.
        cycle_start_date: First day of the anchoring cycle.
        avg_cycle_length: Cycle length used for wraparound (positive).
        period_length:    Number of menstrual days (>= 0).
        luteal_length:    Luteal phase length (positive).

    Returns:
        ``Season.unknown`` for dates before the anchor, otherwise one of
        winter / spring / summer / autumn.
    """
    current = day_in_cycle(cycle_start_date, day)
    if current < 1 or avg_cycle_length < 1:
        return Season.unknown

    normalized_day = ((current - 1) % avg_cycle_length) + 1
    phase = phase_for_day(
        normalized_day,
        avg_cycle_length,
        period_length,
        luteal_length,
        ovulatory_half_width=ovulatory_half_width,
    )
    return PHASE_TO_SEASON[phase]


@lru_cache(maxsize=CLASSIFIER_CACHE_SIZE)
def _classify_memo(
    day: date,
    cycle_start_date: date,
    avg_cycle_length: int,
    period_length: int,
    luteal_length: int,
) -> Season:
    return classify(day, cycle_start_date, avg_cycle_length, period_length, luteal_length)


def classify_cached(
    day: date | datetime,
    cycle_start_date: date | datetime,
    avg_cycle_length: int,
    period_length: int,
    luteal_length: int,
) -> Season:
    """Memoised ``classify`` keyed on the full argument tuple.

    Datetimes are reduced to dates before the lookup so 08:00 and 20:00 on
    the same day share one entry.
    """
    return _classify_memo(
        as_date(day),
        as_date(cycle_start_date),
        avg_cycle_length,
        period_length,
        luteal_length,
    )


def clear_classifier_cache() -> None:
    _classify_memo.cache_clear()


def classifier_cache_info() -> functools._CacheInfo:
    """Hits, misses and size of the ``classify_cached`` memo."""
    return _classify_memo.cache_info()
