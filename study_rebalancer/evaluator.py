"""Before vs after load comparison."""

from __future__ import annotations


def compare(before: dict, after: dict) -> dict:
    """Compare load metrics before and after rebalancing with percentage reductions."""

    def pct_reduction(old: float, new: float) -> float:
        if old == 0:
            return 0.0
        return -((new - old) / old) * 100.0

    return {
        "peak_reduction_pct": pct_reduction(before.get("peak_load", 0.0), after.get("peak_load", 0.0)),
        "spread_reduction_pct": pct_reduction(before.get("load_std", 0.0), after.get("load_std", 0.0)),
        "overload_reduction_pct": pct_reduction(
            before.get("overloaded_days", 0), after.get("overloaded_days", 0)
        ),
        "undated_reduction_pct": pct_reduction(before.get("undated_items", 0), after.get("undated_items", 0)),
    }
