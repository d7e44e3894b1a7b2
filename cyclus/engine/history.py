"""Decision tables for the history provider's data-entry path.

These rules run when a user declares a new period start or logs bleeding.
They decide how stored cycle records change; the prediction engine only ever
reads the result.

Starting a new cycle while one is open:

    ============================  ==================
    gap = new start - open start  action
    ============================  ==================
    no open cycle                 open_first
    gap <= 0                      reject
    0 < gap < 7                   discard_previous
    gap >= 7                      close_previous
    ============================  ==================

A gap under seven days is treated as a mistyped start date: the open record
is dropped instead of being closed with an impossible length.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from enum import Enum

from cyclus.engine.config_loader import HistoryConfig, get_engine_config
from cyclus.engine.dates import add_days, as_date, days_between
from cyclus.engine.types import BleedingIntensity, BleedingLogEntry, CycleRecord

logger = logging.getLogger("cyclus.engine.history")


class CycleStartAction(str, Enum):
    open_first = "open_first"
    close_previous = "close_previous"
    discard_previous = "discard_previous"
    reject = "reject"


class CycleStartRejected(ValueError):
    """Raised when a new start date does not come after the open cycle."""


@dataclass(frozen=True)
class CycleStartPlan:
    """What to do with stored records when a new start is declared.

    Attributes:
        action:   Row of the decision table that matched.
        new_start: The declared start date.
        previous: The open cycle before the change, if any.
        closed:   The closed version of ``previous`` for ``close_previous``.
        gap_days: Days between the open cycle's start and ``new_start``.
    """

    action: CycleStartAction
    new_start: date
    previous: CycleRecord | None = None
    closed: CycleRecord | None = None
    gap_days: int | None = None


def open_cycle(cycles: Iterable[CycleRecord]) -> CycleRecord | None:
    """Return the open cycle, preferring the latest if several are open."""
    open_records = sorted(
        (c for c in cycles if c.is_open), key=lambda c: c.start_date, reverse=True
    )
    if len(open_records) > 1:
        logger.warning(
            "%d open cycles found; using the one starting %s",
            len(open_records),
            open_records[0].start_date,
        )
    return open_records[0] if open_records else None


def plan_cycle_start(
    cycles: Iterable[CycleRecord],
    new_start: date,
    config: HistoryConfig | None = None,
) -> CycleStartPlan:
    """Match a declared period start against the decision table."""
    cfg = config or get_engine_config().history
    new_start = as_date(new_start)
    current = open_cycle(cycles)

    if current is None:
        return CycleStartPlan(action=CycleStartAction.open_first, new_start=new_start)

    gap = days_between(current.start_date, new_start)
    if gap <= 0:
        action = CycleStartAction.reject
        closed = None
    elif gap < cfg.discard_gap_days:
        action = CycleStartAction.discard_previous
        closed = None
    else:
        action = CycleStartAction.close_previous
        closed = CycleRecord(
            start_date=current.start_date,
            end_date=add_days(new_start, -1),
            computed_length=gap,
        )

    return CycleStartPlan(
        action=action,
        new_start=new_start,
        previous=current,
        closed=closed,
        gap_days=gap,
    )


def apply_cycle_start(
    cycles: Iterable[CycleRecord],
    new_start: date,
    config: HistoryConfig | None = None,
) -> list[CycleRecord]:
    """Return the records after declaring ``new_start``, newest first.

    Raises:
        CycleStartRejected: If the new start is on or before the open cycle's start.
    """
    records = list(cycles)
    plan = plan_cycle_start(records, new_start, config)

    if plan.action == CycleStartAction.reject:
        raise CycleStartRejected(
            f"New cycle start {plan.new_start} must be after the open cycle "
            f"starting {plan.previous.start_date}"
        )

    kept = [c for c in records if c is not plan.previous]
    if plan.action == CycleStartAction.close_previous:
        kept.append(plan.closed)
    elif plan.action == CycleStartAction.discard_previous:
        logger.info(
            "Discarding cycle starting %s: next start only %d day(s) later",
            plan.previous.start_date,
            plan.gap_days,
        )

    kept.append(CycleRecord(start_date=plan.new_start))
    return sorted(kept, key=lambda c: c.start_date, reverse=True)


def should_start_new_cycle(
    log_date: date,
    intensity: BleedingIntensity,
    bleeding_logs: Iterable[BleedingLogEntry],
    config: HistoryConfig | None = None,
) -> bool:
    """Whether a quick bleeding log should also declare a new period start.

    True for a flow log on a day with no earlier entry when there is no
    previous flow, or the last flow was more than ``quick_log_gap_days`` ago.
    """
    cfg = config or get_engine_config().history
    log_date = as_date(log_date)
    if intensity == BleedingIntensity.spotting:
        return False

    logs = list(bleeding_logs)
    if any(log.date == log_date for log in logs):
        return False

    earlier_flow = [log.date for log in logs if log.is_flow and log.date < log_date]
    if not earlier_flow:
        return True
    return days_between(max(earlier_flow), log_date) > cfg.quick_log_gap_days
