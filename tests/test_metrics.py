from datetime import datetime

from study_rebalancer.evaluator import compare
from study_rebalancer.metrics import compute_load_metrics, load_vector
from study_rebalancer.schema import WorkItem

NOW = datetime(2025, 1, 6, 9, 0)


def test_load_vector_covers_horizon_after_today():
    items = [
        WorkItem("a", "A", due_or_start=datetime(2025, 1, 6, 18, 0)),
        WorkItem("b", "B", due_or_start=datetime(2025, 1, 7, 18, 0)),
        WorkItem("c", "C", due_or_start=datetime(2025, 1, 9, 18, 0)),
        WorkItem("d", "D", due_or_start=datetime(2025, 1, 9, 19, 0)),
    ]
    assert load_vector(items, NOW, 4).tolist() == [1.0, 0.0, 2.0, 0.0]


def test_compute_load_metrics():
    items = [WorkItem(f"t{n}", "T", due_or_start=datetime(2025, 1, 7, 18, 0)) for n in range(4)]
    items.append(WorkItem("u", "Undated"))

    metrics = compute_load_metrics(items, NOW, 2, 3)

    assert metrics == {
        "peak_load": 4.0,
        "mean_load": 2.0,
        "load_std": 2.0,
        "overloaded_days": 1,
        "undated_items": 1,
    }


def test_compare_reductions():
    before = {"peak_load": 5.0, "load_std": 2.0, "overloaded_days": 2, "undated_items": 4}
    after = {"peak_load": 4.0, "load_std": 1.0, "overloaded_days": 0, "undated_items": 4}
    result = compare(before, after)
    assert round(result["peak_reduction_pct"], 2) == 20.0
    assert round(result["spread_reduction_pct"], 2) == 50.0
    assert round(result["overload_reduction_pct"], 2) == 100.0
    assert result["undated_reduction_pct"] == 0.0


def test_compare_with_empty_baseline():
    assert compare({}, {})["peak_reduction_pct"] == 0.0
