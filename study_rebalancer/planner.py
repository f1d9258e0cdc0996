"""End-to-end rebalancing plan: proposals, summaries, insights and metrics."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from study_rebalancer.apply import apply_changes
from study_rebalancer.config import RebalanceConfig
from study_rebalancer.evaluator import compare
from study_rebalancer.insights import build_insights, daily_summary, overall_summary
from study_rebalancer.metrics import compute_load_metrics
from study_rebalancer.reasons import ReasonGenerator
from study_rebalancer.rebalancer import rebalance
from study_rebalancer.schema import DaySummary, Insight, ScheduleChange, WorkItem


@dataclass
class RebalancePlan:
    """Everything a caller needs to review proposals before applying them."""

    changes: list[ScheduleChange]
    daily_summary: list[DaySummary]
    insights: list[Insight]
    overall_summary: str
    metrics_before: dict
    metrics_after: dict
    comparison: dict
    generated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        return {
            "optimization": {
                "schedule_changes": [change.to_dict() for change in self.changes],
                "daily_summary": [day.to_dict() for day in self.daily_summary],
                "insights": [insight.to_dict() for insight in self.insights],
                "overall_summary": self.overall_summary,
            },
            "metrics": {
                "before": self.metrics_before,
                "after": self.metrics_after,
                "comparison": self.comparison,
            },
            "generated_at": self.generated_at.isoformat(),
        }


def build_plan(
    items: list[WorkItem],
    now: datetime,
    config: Optional[RebalanceConfig] = None,
    reason_generator: Optional[ReasonGenerator] = None,
) -> RebalancePlan:
    """Run the rebalancer and derive the review payload around its proposals."""

    config = (config or RebalanceConfig()).validate()
    changes = rebalance(
        items,
        config.capacity_per_day,
        config.horizon_days,
        now,
        config=config,
        reason_generator=reason_generator,
    )

    moved = apply_changes(items, changes)
    before = compute_load_metrics(items, now, config.horizon_days, config.capacity_per_day, config.timezone)
    after = compute_load_metrics(moved, now, config.horizon_days, config.capacity_per_day, config.timezone)

    return RebalancePlan(
        changes=changes,
        daily_summary=daily_summary(items, changes, config.timezone),
        insights=build_insights(items, changes, config.capacity_per_day, now, config.timezone),
        overall_summary=overall_summary(changes),
        metrics_before=before,
        metrics_after=after,
        comparison=compare(before, after),
    )
