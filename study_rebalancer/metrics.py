"""Daily load metrics over the planning window."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

import numpy as np

from study_rebalancer.buckets import day_counts, day_key
from study_rebalancer.schema import WorkItem


def load_vector(items: list[WorkItem], now: datetime, horizon_days: int, tz: Optional[str] = None) -> np.ndarray:
    """Item counts for each day from tomorrow through the horizon."""

    counts = day_counts(items, tz)
    today = day_key(now, tz)
    return np.asarray(
        [counts.get(today + timedelta(days=offset), 0) for offset in range(1, horizon_days + 1)],
        dtype=float,
    )


def compute_load_metrics(
    items: list[WorkItem],
    now: datetime,
    horizon_days: int,
    capacity_per_day: int,
    tz: Optional[str] = None,
) -> dict:
    """Compute peak, mean, spread and overload counts of daily load."""

    loads = load_vector(items, now, horizon_days, tz)
    undated = sum(1 for item in items if day_key(item.due_or_start, tz) is None)

    if loads.size == 0:
        return {
            "peak_load": 0.0,
            "mean_load": 0.0,
            "load_std": 0.0,
            "overloaded_days": 0,
            "undated_items": undated,
        }

    return {
        "peak_load": float(loads.max()),
        "mean_load": float(loads.mean()),
        "load_std": float(loads.std()),
        "overloaded_days": int(np.count_nonzero(loads > capacity_per_day)),
        "undated_items": undated,
    }
