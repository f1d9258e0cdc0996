"""Day bucket derivation for work items."""

from __future__ import annotations

from collections import Counter, defaultdict
from datetime import date, datetime
from typing import Optional
from zoneinfo import ZoneInfo

from study_rebalancer.schema import WorkItem


def day_key(value: Optional[datetime], tz: Optional[str] = None) -> Optional[date]:
    """Return the calendar day of a timestamp, or None when undated."""

    if not isinstance(value, datetime):
        return None
    if tz is not None and value.tzinfo is not None:
        value = value.astimezone(ZoneInfo(tz))
    return value.date()


def partition(items: list[WorkItem], tz: Optional[str] = None) -> dict[Optional[date], list[WorkItem]]:
    """Group items by day, preserving input order; undated items share the None key."""

    buckets: dict[Optional[date], list[WorkItem]] = defaultdict(list)
    for item in items:
        buckets[day_key(item.due_or_start, tz)].append(item)
    return dict(buckets)


def day_counts(items: list[WorkItem], tz: Optional[str] = None) -> Counter:
    """Count dated items per calendar day."""

    counts: Counter = Counter()
    for item in items:
        key = day_key(item.due_or_start, tz)
        if key is not None:
            counts[key] += 1
    return counts
