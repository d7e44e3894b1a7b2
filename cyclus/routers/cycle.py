"""Stateless cycle engine endpoints.

Every request carries its own history bundle; nothing is stored.  The
prediction endpoints never fail for a body that passes schema validation.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException

from cyclus.dependencies import CurrentEngineConfig, Engine
from cyclus.engine.cycle_stats import compute_stats
from cyclus.engine.dates import day_in_cycle
from cyclus.engine.forecast import forecast_for_prediction, next_transition
from cyclus.engine.history import CycleStartRejected, apply_cycle_start, plan_cycle_start
from cyclus.engine.season_classifier import classify_cached
from cyclus.models.base import ErrorDetail
from cyclus.models.cycle import (
    CycleHistoryIn,
    CycleRecordRead,
    CycleStartRead,
    CycleStartRequest,
    CycleStatsRead,
    CycleStatsRequest,
    DayForecastRead,
    ForecastRead,
    ForecastRequest,
    PredictionRead,
    SeasonQuery,
    SeasonRead,
)

router = APIRouter(prefix="/cycle", tags=["cycle"])
logger = logging.getLogger("cyclus.routers.cycle")


@router.post("/prediction", response_model=PredictionRead)
async def create_prediction(body: CycleHistoryIn, engine: Engine) -> Any:
    prediction = engine.predict_history(body.to_engine(), today=body.today)
    return PredictionRead.model_validate(prediction)


@router.post("/season", response_model=SeasonRead)
async def classify_season(body: SeasonQuery) -> Any:
    season = classify_cached(
        body.date,
        body.cycle_start_date,
        body.avg_cycle_length,
        body.period_length,
        body.luteal_length,
    )
    return SeasonRead(
        date=body.date,
        day_in_cycle=day_in_cycle(body.cycle_start_date, body.date),
        season=season,
    )


@router.post("/stats", response_model=CycleStatsRead)
async def cycle_stats(body: CycleStatsRequest, config: CurrentEngineConfig) -> Any:
    cycles = sorted(
        (c.to_engine() for c in body.cycles), key=lambda c: c.start_date, reverse=True
    )
    return CycleStatsRead.model_validate(compute_stats(cycles, config.stats))


@router.post("/forecast", response_model=ForecastRead)
async def create_forecast(body: ForecastRequest, engine: Engine) -> Any:
    prediction = engine.predict_history(body.to_engine(), today=body.today)
    days = forecast_for_prediction(prediction, days=body.days, today=body.today)
    upcoming = next_transition(days, prediction.current_season)
    return ForecastRead(
        prediction=PredictionRead.model_validate(prediction),
        days=[DayForecastRead.model_validate(d) for d in days],
        next_transition=DayForecastRead.model_validate(upcoming) if upcoming else None,
    )


@router.post(
    "/start",
    response_model=CycleStartRead,
    responses={409: {"model": ErrorDetail}},
)
async def start_cycle(body: CycleStartRequest, config: CurrentEngineConfig) -> Any:
    records = [c.to_engine() for c in body.cycles]
    plan = plan_cycle_start(records, body.start_date, config.history)
    try:
        updated = apply_cycle_start(records, body.start_date, config.history)
    except CycleStartRejected as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc

    logger.info("Cycle start %s: %s", body.start_date, plan.action.value)
    return CycleStartRead(
        action=plan.action,
        gap_days=plan.gap_days,
        cycles=[CycleRecordRead.model_validate(c) for c in updated],
    )
