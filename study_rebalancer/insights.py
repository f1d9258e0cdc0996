"""Plan summaries and workload insights."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from study_rebalancer.apply import apply_changes
from study_rebalancer.buckets import day_counts, day_key, partition
from study_rebalancer.schema import DaySummary, Insight, ScheduleChange, WorkItem


def daily_summary(items: list[WorkItem], changes: list[ScheduleChange], tz: Optional[str] = None) -> list[DaySummary]:
    """Per-day counts and titles once the proposals are applied."""

    buckets = partition(apply_changes(items, changes), tz)
    dated = sorted(day for day in buckets if day is not None)
    return [
        DaySummary(date=day, task_count=len(buckets[day]), tasks=[item.title for item in buckets[day]])
        for day in dated
    ]


def build_insights(
    items: list[WorkItem],
    changes: list[ScheduleChange],
    capacity_per_day: int,
    now: datetime,
    tz: Optional[str] = None,
) -> list[Insight]:
    """Describe overloads, overflow, undated and overdue work."""

    insights: list[Insight] = []
    before = day_counts(items, tz)
    after = day_counts(apply_changes(items, changes), tz)
    today = day_key(now, tz)
    moved_ids = {change.item_id for change in changes}

    for day, count in sorted(before.items()):
        if count > capacity_per_day:
            insights.append(
                Insight(
                    type="warning",
                    title=f"Overloaded day: {day.isoformat()}",
                    description=f"{count} items were scheduled against a limit of {capacity_per_day}.",
                    reasoning="Days above the limit are hard to finish and push work into the evening.",
                )
            )

    overflow = [change for change in changes if change.overflow]
    if overflow:
        insights.append(
            Insight(
                type="warning",
                title="No free day in the planning window",
                description=f"{len(overflow)} items were added to tomorrow beyond the daily limit.",
                reasoning="Consider dropping or shortening lower priority work.",
            )
        )

    undated = [item for item in items if day_key(item.due_or_start, tz) is None and item.id not in moved_ids]
    if undated:
        insights.append(
            Insight(
                type="suggestion",
                title="Give undated tasks a date",
                description=f"{len(undated)} tasks have no date and are not counted towards any day.",
                reasoning="Undated work tends to be postponed until it becomes urgent.",
            )
        )

    overdue = []
    for item in items:
        key = day_key(item.due_or_start, tz)
        if key is not None and key < today and item.id not in moved_ids:
            overdue.append(item)
    if overdue:
        insights.append(
            Insight(
                type="suggestion",
                title="Review overdue tasks",
                description=f"{len(overdue)} tasks are past their date.",
                reasoning="Reschedule or close them so the plan reflects what is actually pending.",
            )
        )

    peak_before = max(before.values(), default=0)
    peak_after = max(after.values(), default=0)
    if changes and peak_after < peak_before:
        insights.append(
            Insight(
                type="improvement",
                title="Lighter busiest day",
                description=f"The busiest day drops from {peak_before} to {peak_after} items.",
                reasoning="Spreading work keeps daily study time predictable.",
            )
        )

    return insights


def overall_summary(changes: list[ScheduleChange]) -> str:
    if not changes:
        return "Your schedule looks balanced! No changes needed."
    return f"Redistributed {len(changes)} tasks from overloaded days."
