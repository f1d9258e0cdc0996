from collections import Counter
from datetime import date, datetime, timezone

from study_rebalancer.buckets import day_counts, day_key, partition
from study_rebalancer.schema import WorkItem


def test_day_key():
    assert day_key(datetime(2025, 1, 7, 23, 59)) == date(2025, 1, 7)
    assert day_key(None) is None
    assert day_key("2025-01-07") is None


def test_partition_keeps_input_order_and_undated_bucket():
    items = [
        WorkItem("b", "B", due_or_start=datetime(2025, 1, 8, 9, 0)),
        WorkItem("u", "U"),
        WorkItem("a", "A", due_or_start=datetime(2025, 1, 8, 20, 0)),
    ]
    buckets = partition(items)
    assert [i.id for i in buckets[date(2025, 1, 8)]] == ["b", "a"]
    assert [i.id for i in buckets[None]] == ["u"]
    assert day_counts(items) == Counter({date(2025, 1, 8): 2})


def test_day_key_converts_aware_timestamps_to_configured_zone():
    late_utc = datetime(2025, 1, 7, 20, 0, tzinfo=timezone.utc)
    assert day_key(late_utc) == date(2025, 1, 7)
    assert day_key(late_utc, "Asia/Kolkata") == date(2025, 1, 8)
    assert day_key(datetime(2025, 1, 7, 20, 0), "Asia/Kolkata") == date(2025, 1, 7)
