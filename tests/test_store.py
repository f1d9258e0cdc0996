from datetime import datetime

from study_rebalancer.rebalancer import rebalance
from study_rebalancer.schema import ScheduleChange, WorkItem
from study_rebalancer.store import WorkItemStore


def sample_items():
    return [
        WorkItem("t2", "Read chapter", "Biology", datetime(2025, 1, 7, 18, 0)),
        WorkItem("t1", "Problem set", "Mathematics", None, 60, "high"),
    ]


def test_upsert_and_load_preserves_order(tmp_path):
    store = WorkItemStore(str(tmp_path / "planner.db"))
    assert store.upsert_many("alice", sample_items()) == 2

    items = store.load("alice")
    assert [i.id for i in items] == ["t2", "t1"]
    assert items[0].due_or_start == datetime(2025, 1, 7, 18, 0)
    assert items[1].priority == "high"


def test_load_is_scoped_to_owner(tmp_path):
    store = WorkItemStore(str(tmp_path / "planner.db"))
    store.upsert_many("alice", sample_items())
    assert store.load("bob") == []


def test_apply_changes_updates_known_items(tmp_path):
    store = WorkItemStore(str(tmp_path / "planner.db"))
    store.upsert_many("alice", sample_items())
    changes = [
        ScheduleChange("t1", "Problem set", "Mathematics", None, datetime(2025, 1, 9, 10, 0), "Moved."),
        ScheduleChange("missing", "Ghost", "General", None, datetime(2025, 1, 9, 10, 0), "Moved."),
    ]

    assert store.apply_changes("alice", changes) == 1
    assert store.apply_changes("bob", changes) == 0

    items = {i.id: i for i in store.load("alice")}
    assert items["t1"].due_or_start == datetime(2025, 1, 9, 10, 0)
    assert items["t2"].due_or_start == datetime(2025, 1, 7, 18, 0)


def test_later_batches_load_after_earlier_ones(tmp_path):
    store = WorkItemStore(str(tmp_path / "planner.db"))
    due = datetime(2025, 1, 7, 18, 0)
    store.upsert_many("alice", [WorkItem("x", "X", due_or_start=due), WorkItem("y", "Y", due_or_start=due)])
    store.upsert_many("alice", [WorkItem("z", "Z", due_or_start=due)])

    items = store.load("alice")
    assert [i.id for i in items] == ["x", "y", "z"]

    changes = rebalance(items, 2, 14, datetime(2025, 1, 6, 9, 0))
    assert [c.item_id for c in changes] == ["z"]


def test_replacing_an_item_keeps_its_position(tmp_path):
    store = WorkItemStore(str(tmp_path / "planner.db"))
    store.upsert_many("alice", [WorkItem("x", "X"), WorkItem("y", "Y")])
    store.upsert_many("alice", [WorkItem("x", "X renamed"), WorkItem("z", "Z")])

    items = store.load("alice")
    assert [i.id for i in items] == ["x", "y", "z"]
    assert items[0].title == "X renamed"
