"""Demo script for study-rebalancer."""

import json
import sys
from datetime import datetime
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from study_rebalancer.adapters.csv_adapter import parse
from study_rebalancer.planner import build_plan
from study_rebalancer.rebalancer import replan_missed

NOW = datetime(2025, 1, 6, 9, 0)


def main() -> None:
    items = parse("examples/sample_dataset.csv")
    plan = build_plan(items, NOW)
    print("Changes:", json.dumps([change.to_dict() for change in plan.changes], indent=2))
    print("Summary:", plan.overall_summary)
    print("Comparison:", plan.comparison)

    missed = next(item for item in items if item.id == "s1")
    print("Missed session:", replan_missed(missed, items, NOW).to_dict())


if __name__ == "__main__":
    main()
