"""Canonical data types for the cycle season engine.

These dataclasses are the only shapes the engine consumes and produces.
The HTTP layer (``cyclus.models.cycle``) maps its pydantic schemas onto
them; nothing in the engine knows about requests or storage.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class Phase(str, Enum):
    menstrual = "menstrual"
    follicular = "follicular"
    ovulatory = "ovulatory"
    luteal = "luteal"
    unknown = "unknown"


class Season(str, Enum):
    winter = "winter"
    spring = "spring"
    summer = "summer"
    autumn = "autumn"
    unknown = "unknown"


class Trend(str, Enum):
    shorter = "shorter"
    longer = "longer"
    stable = "stable"
    unknown = "unknown"


class BleedingIntensity(str, Enum):
    spotting = "spotting"  # logged, but not true flow
    light = "light"
    medium = "medium"
    heavy = "heavy"


class PredictionStatus(str, Enum):
    ok = "ok"
    insufficient_data = "insufficient_data"
    implausible_anchor = "implausible_anchor"


PHASE_TO_SEASON: dict[Phase, Season] = {
    Phase.menstrual: Season.winter,
    Phase.follicular: Season.spring,
    Phase.ovulatory: Season.summer,
    Phase.luteal: Season.autumn,
    Phase.unknown: Season.unknown,
}

ANOVULATORY_THRESHOLD_DAYS = 45


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CycleRecord:
    """A single menstrual cycle.

    Attributes:
        start_date:      Self-reported first day of the period.  Anchor for
                         all day-in-cycle counting.
        end_date:        Last day of the cycle, set when the next cycle starts.
                         ``None`` for the open (current) cycle.
        computed_length: Days from this start to the next start.  Only known
                         once the cycle has been closed.
    """

    start_date: date
    end_date: date | None = None
    computed_length: int | None = None

    @property
    def is_open(self) -> bool:
        return self.end_date is None

    @property
    def is_anovulatory(self) -> bool:
        return (
            self.computed_length is not None
            and self.computed_length > ANOVULATORY_THRESHOLD_DAYS
        )


@dataclass(frozen=True)
class BleedingLogEntry:
    """One day's bleeding observation."""

    date: date
    intensity: BleedingIntensity
    is_intermenstrual: bool = False

    @property
    def is_flow(self) -> bool:
        """True for any intensity above spotting.

        ``is_intermenstrual`` is recorded for the user's log only; a
        mid-cycle bleed at flow intensity still counts as flow.
        """
        return self.intensity != BleedingIntensity.spotting


@dataclass(frozen=True)
class Preferences:
    """Per-user tunables.  ``None`` preferences mean all defaults."""

    avg_cycle_length: int | None = 28
    avg_period_length: int | None = 5
    luteal_phase_length: int | None = 13
    perimenopause: bool = False


@dataclass(frozen=True)
class CycleHistory:
    """The bounded input bundle fetched by the history provider.

    Attributes:
        cycles:        Most recent cycle records, newest first.
        bleeding_logs: Bleeding observations for a trailing window
                       (90 days is enough for period-length detection).
        preferences:   User preferences, or ``None`` for defaults.
    """

    cycles: tuple[CycleRecord, ...] = ()
    bleeding_logs: tuple[BleedingLogEntry, ...] = ()
    preferences: Preferences | None = None


# ---------------------------------------------------------------------------
# Outputs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DateWindow:
    """Closed date interval with an integer confidence (0-100)."""

    start: date
    end: date
    confidence: int

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    @property
    def length_days(self) -> int:
        return (self.end - self.start).days + 1


@dataclass
class Prediction:
    """Ephemeral prediction for "today".  Recomputed on every read.

    Attributes:
        status:             Which branch produced this result.
        current_phase:      Phase of today.
        current_season:     Season of today (bijection of ``current_phase``).
        next_period_window: Earliest/latest expected next period start.
        ovulation_window:   Expected ovulation range.
        fertile_window:     Ovulation - 5 days through ovulation + 1 day.
        avg_cycle_length:   Baseline cycle length used (median, floored).
        cycle_variability:  Population stdev of recent lengths (or default).
        trend:              Cycle length trend from the statistics.
        cycle_start_date:   Anchor of the current cycle.
        day_in_cycle:       1-indexed day of today in the current cycle.
        period_length:      Period length detected for the open cycle.
        luteal_length:      Luteal phase length used.
        rationale:          Human-readable explanation.
        watchouts:          Advisory strings about reduced reliability.
    """

    status: PredictionStatus = PredictionStatus.insufficient_data
    current_phase: Phase = Phase.unknown
    current_season: Season = Season.unknown
    next_period_window: DateWindow | None = None
    ovulation_window: DateWindow | None = None
    fertile_window: DateWindow | None = None
    avg_cycle_length: int | None = None
    cycle_variability: int | None = None
    trend: Trend = Trend.unknown
    cycle_start_date: date | None = None
    day_in_cycle: int | None = None
    period_length: int | None = None
    luteal_length: int | None = None
    rationale: str = ""
    watchouts: list[str] = field(default_factory=list)
