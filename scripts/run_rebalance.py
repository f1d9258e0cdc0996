"""Rebalance a CSV/JSON work item file and report proposed schedule changes."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from datetime import datetime
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from study_rebalancer.adapters import csv_adapter, json_adapter
from study_rebalancer.apply import apply_changes
from study_rebalancer.config import RebalanceConfig
from study_rebalancer.planner import build_plan
from study_rebalancer.reasons import build_reason_generator
from study_rebalancer.rebalancer import replan_missed
from study_rebalancer.store import WorkItemStore


def _adapter_for(path: Path):
    suffix = path.suffix.lower()
    if suffix == ".csv":
        return csv_adapter
    if suffix == ".json":
        return json_adapter
    raise ValueError("Unsupported input format, expected .csv or .json")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Propose new dates for work on overloaded days")
    parser.add_argument("--data", help="Path to CSV/JSON work item file")
    parser.add_argument("--now", type=datetime.fromisoformat, help="Reference time (ISO 8601), defaults to the current time")
    parser.add_argument("--capacity", type=int, help="Maximum items per day")
    parser.add_argument("--horizon", type=int, help="Days to search forward for spare capacity")
    parser.add_argument("--keep-policy", choices=["insertion", "priority"], help="Which items stay on a full day")
    parser.add_argument("--missed", metavar="ID", help="Replan a single missed session instead of rebalancing")
    parser.add_argument("--apply", metavar="OUT", help="Write items with the proposed dates applied to OUT")
    parser.add_argument("--db", metavar="PATH", help="SQLite work item store; --data is imported into it first")
    parser.add_argument("--owner", default="local", help="Owner whose items are read from --db")
    parser.add_argument("--commit", action="store_true", help="Write the proposed dates into --db")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)
    if not args.data and not args.db:
        parser.error("one of --data or --db is required")
    if args.commit and not args.db:
        parser.error("--commit needs --db")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = RebalanceConfig.from_env()
    overrides = {
        "capacity_per_day": args.capacity,
        "horizon_days": args.horizon,
        "keep_policy": args.keep_policy,
    }
    config = replace(config, **{k: v for k, v in overrides.items() if v is not None}).validate()

    source = args.data or args.db
    items = _adapter_for(Path(args.data)).parse(args.data) if args.data else []
    store = None
    if args.db:
        store = WorkItemStore(args.db)
        store.upsert_many(args.owner, items)
        items = store.load(args.owner)
    now = args.now or datetime.now()
    reasons = build_reason_generator()

    if args.missed:
        missed = next((item for item in items if item.id == args.missed), None)
        if missed is None:
            parser.error(f"no item with id {args.missed!r} in {source}")
        changes = [replan_missed(missed, items, now, config=config, reason_generator=reasons)]
        report = {
            "changes_log": [change.to_dict() for change in changes],
            "summary": f"Your {missed.subject} session has been rescheduled. {changes[0].reason}",
        }
    else:
        plan = build_plan(items, now, config=config, reason_generator=reasons)
        changes = plan.changes
        report = plan.to_dict()

    print(json.dumps(report, indent=2))

    outputs_dir = Path("outputs")
    outputs_dir.mkdir(parents=True, exist_ok=True)
    out_path = outputs_dir / "rebalance_report.json"
    out_path.write_text(json.dumps(report, indent=2), encoding="utf-8")
    print(f"Saved rebalance report to {out_path}")

    if args.apply:
        apply_path = Path(args.apply)
        _adapter_for(apply_path).write(apply_changes(items, changes), str(apply_path))
        print(f"Applied {len(changes)} changes to {apply_path}")

    if args.commit:
        updated = store.apply_changes(args.owner, changes)
        print(f"Committed {updated} changes to {args.db}")


if __name__ == "__main__":
    main()
