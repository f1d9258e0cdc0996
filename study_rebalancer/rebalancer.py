"""Day-capacity rebalancing of pending work items."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Optional
from zoneinfo import ZoneInfo

from study_rebalancer.buckets import day_counts, day_key, partition
from study_rebalancer.config import RebalanceConfig
from study_rebalancer.reasons import ReasonGenerator, TemplateReasonGenerator
from study_rebalancer.schema import ScheduleChange, WorkItem

logger = logging.getLogger(__name__)

_PRIORITY_RANK = {"high": 0, "medium": 1, "low": 2}


def select_excess(bucket: list[WorkItem], capacity_per_day: int, policy: str = "insertion") -> list[WorkItem]:
    """Return the items of one day that do not fit, in their input order."""

    if len(bucket) <= capacity_per_day:
        return []
    if policy == "priority":
        ranked = sorted(range(len(bucket)), key=lambda i: (_PRIORITY_RANK.get(bucket[i].priority, 1), i))
        kept = set(ranked[:capacity_per_day])
        return [item for i, item in enumerate(bucket) if i not in kept]
    return list(bucket[capacity_per_day:])


def find_slot(counts: Counter, today: date, capacity_per_day: int, horizon_days: int) -> Optional[tuple[date, int]]:
    """First day after ``today`` within the horizon whose load is below capacity."""

    for offset in range(1, horizon_days + 1):
        candidate = today + timedelta(days=offset)
        load = counts.get(candidate, 0)
        if load < capacity_per_day:
            return candidate, load
    return None


def _zone(now: datetime, config: RebalanceConfig):
    if config.timezone is not None and now.tzinfo is not None:
        return ZoneInfo(config.timezone)
    return now.tzinfo


def _place(
    item: WorkItem,
    origin: Optional[date],
    counts: Counter,
    now: datetime,
    today: date,
    capacity_per_day: int,
    horizon_days: int,
    config: RebalanceConfig,
    reasons: ReasonGenerator,
) -> ScheduleChange:
    if origin is not None and counts.get(origin, 0) > 0:
        counts[origin] -= 1

    slot = find_slot(counts, today, capacity_per_day, horizon_days)
    overflow = slot is None
    if overflow:
        target = today + timedelta(days=1)
        load = counts.get(target, 0)
        logger.info("No capacity within %d days for %s, overflowing to %s", horizon_days, item.id, target)
    else:
        target, load = slot
    counts[target] += 1

    change = ScheduleChange(
        item_id=item.id,
        title=item.title,
        subject=item.subject,
        original_date=item.due_or_start,
        new_date=datetime.combine(target, config.reschedule_time, tzinfo=_zone(now, config)),
        reason="",
        prior_load=load,
        overflow=overflow,
    )
    change.reason = reasons(change)
    return change


def rebalance(
    items: list[WorkItem],
    capacity_per_day: int,
    horizon_days: int,
    now: datetime,
    *,
    config: Optional[RebalanceConfig] = None,
    reason_generator: Optional[ReasonGenerator] = None,
) -> list[ScheduleChange]:
    """Propose new dates for items on overloaded days.

    Every excess item gets exactly one proposal: the first day after ``now``
    with spare capacity, or tomorrow as an overflow when the whole horizon is
    full. The input is never modified.
    """

    config = replace(
        config or RebalanceConfig(), capacity_per_day=capacity_per_day, horizon_days=horizon_days
    ).validate()
    reasons = reason_generator or TemplateReasonGenerator()
    today = day_key(now, config.timezone)

    buckets = partition(items, config.timezone)
    counts = day_counts(items, config.timezone)

    dated = sorted(key for key in buckets if key is not None)
    order = dated + ([None] if None in buckets else [])

    changes: list[ScheduleChange] = []
    for key in order:
        bucket = buckets[key]
        if config.reschedule_overdue and key is not None and key < today:
            excess = list(bucket)
        else:
            excess = select_excess(bucket, capacity_per_day, config.keep_policy)
        if not excess:
            continue
        logger.debug("Day %s holds %d items, moving %d", key or "undated", len(bucket), len(excess))
        for item in excess:
            changes.append(
                _place(item, key, counts, now, today, capacity_per_day, horizon_days, config, reasons)
            )

    logger.info(
        "Rebalanced %d items: %d proposals, %d overflow",
        len(items),
        len(changes),
        sum(1 for change in changes if change.overflow),
    )
    return changes


def replan_missed(
    item: WorkItem,
    scheduled: list[WorkItem],
    now: datetime,
    *,
    config: Optional[RebalanceConfig] = None,
    reason_generator: Optional[ReasonGenerator] = None,
) -> ScheduleChange:
    """Propose a new slot for one missed session.

    ``scheduled`` is the user's other upcoming work; the missed item itself is
    never counted against any day.
    """

    config = (config or RebalanceConfig()).validate()
    reasons = reason_generator or TemplateReasonGenerator()
    counts = day_counts([other for other in scheduled if other.id != item.id], config.timezone)
    change = _place(
        item,
        None,
        counts,
        now,
        day_key(now, config.timezone),
        config.replan_capacity,
        config.horizon_days,
        config,
        reasons,
    )
    logger.info("Replanned missed %s to %s", item.id, change.new_date.isoformat())
    return change
