"""Pydantic schemas for the cycle engine endpoints.

These are the upstream schema: anything that validates here is guaranteed a
structurally valid engine result.  Engine dataclasses are built with the
``to_engine()`` helpers and read back with ``model_validate`` (attribute mode).
"""

from __future__ import annotations

import datetime as dt
from typing import Annotated

from pydantic import Field

from cyclus.engine.forecast import RiskLevel
from cyclus.engine.history import CycleStartAction
from cyclus.engine.types import (
    BleedingIntensity,
    BleedingLogEntry,
    CycleHistory,
    CycleRecord,
    Phase,
    PredictionStatus,
    Preferences,
    Season,
    Trend,
)
from cyclus.models.base import CyclusBase

MAX_CYCLE_RECORDS = 24
MAX_BLEEDING_LOGS = 400

# Keeps every derived window and forecast day inside the representable calendar
MIN_INPUT_DATE = dt.date(1900, 1, 1)
MAX_INPUT_DATE = dt.date(9000, 12, 31)

InputDate = Annotated[dt.date, Field(ge=MIN_INPUT_DATE, le=MAX_INPUT_DATE)]


# ---------- Inputs ----------

class CycleRecordIn(CyclusBase):
    start_date: InputDate
    end_date: InputDate | None = None
    computed_length: int | None = Field(default=None, ge=1, le=365)

    def to_engine(self) -> CycleRecord:
        return CycleRecord(
            start_date=self.start_date,
            end_date=self.end_date,
            computed_length=self.computed_length,
        )


class BleedingLogIn(CyclusBase):
    date: InputDate
    intensity: BleedingIntensity
    is_intermenstrual: bool = False

    def to_engine(self) -> BleedingLogEntry:
        return BleedingLogEntry(
            date=self.date,
            intensity=self.intensity,
            is_intermenstrual=self.is_intermenstrual,
        )


class PreferencesIn(CyclusBase):
    avg_cycle_length: int | None = Field(default=28, ge=1, le=365)
    avg_period_length: int | None = Field(default=5, ge=0, le=30)
    luteal_phase_length: int | None = Field(default=13, ge=1, le=30)
    perimenopause: bool = False

    def to_engine(self) -> Preferences:
        return Preferences(
            avg_cycle_length=self.avg_cycle_length,
            avg_period_length=self.avg_period_length,
            luteal_phase_length=self.luteal_phase_length,
            perimenopause=self.perimenopause,
        )


class CycleHistoryIn(CyclusBase):
    """History bundle as fetched by the history provider."""

    cycles: list[CycleRecordIn] = Field(default_factory=list, max_length=MAX_CYCLE_RECORDS)
    bleeding_logs: list[BleedingLogIn] = Field(
        default_factory=list, max_length=MAX_BLEEDING_LOGS
    )
    preferences: PreferencesIn | None = None
    today: InputDate | None = None

    def to_engine(self) -> CycleHistory:
        return CycleHistory(
            cycles=tuple(c.to_engine() for c in self.cycles),
            bleeding_logs=tuple(b.to_engine() for b in self.bleeding_logs),
            preferences=self.preferences.to_engine() if self.preferences else None,
        )


class SeasonQuery(CyclusBase):
    date: InputDate
    cycle_start_date: InputDate
    avg_cycle_length: int = Field(ge=1, le=365)
    period_length: int = Field(ge=0, le=365)
    luteal_length: int = Field(ge=1, le=365)


class CycleStatsRequest(CyclusBase):
    cycles: list[CycleRecordIn] = Field(default_factory=list, max_length=MAX_CYCLE_RECORDS)


class ForecastRequest(CycleHistoryIn):
    days: int = Field(default=5, ge=1, le=28)


class CycleStartRequest(CyclusBase):
    cycles: list[CycleRecordIn] = Field(default_factory=list, max_length=MAX_CYCLE_RECORDS)
    start_date: InputDate


# ---------- Outputs ----------

class DateWindowRead(CyclusBase):
    start: dt.date
    end: dt.date
    confidence: int


class PredictionRead(CyclusBase):
    status: PredictionStatus
    current_phase: Phase
    current_season: Season
    next_period_window: DateWindowRead | None = None
    ovulation_window: DateWindowRead | None = None
    fertile_window: DateWindowRead | None = None
    avg_cycle_length: int | None = None
    cycle_variability: int | None = None
    trend: Trend = Trend.unknown
    cycle_start_date: dt.date | None = None
    day_in_cycle: int | None = None
    period_length: int | None = None
    luteal_length: int | None = None
    rationale: str
    watchouts: list[str] = Field(default_factory=list)


class SeasonRead(CyclusBase):
    date: dt.date
    day_in_cycle: int
    season: Season


class CycleStatsRead(CyclusBase):
    median_length: int | None = None
    variability: int | None = None
    trend: Trend
    sample_size: int


class DayForecastRead(CyclusBase):
    date: dt.date
    day_in_cycle: int
    season: Season
    is_transition_day: bool
    sleep: RiskLevel
    cravings: RiskLevel
    unrest: RiskLevel
    is_fertile: bool
    is_predicted_period: bool


class ForecastRead(CyclusBase):
    prediction: PredictionRead
    days: list[DayForecastRead]
    next_transition: DayForecastRead | None = None


class CycleRecordRead(CyclusBase):
    start_date: dt.date
    end_date: dt.date | None = None
    computed_length: int | None = None
    is_open: bool
    is_anovulatory: bool


class CycleStartRead(CyclusBase):
    action: CycleStartAction
    gap_days: int | None = None
    cycles: list[CycleRecordRead]
