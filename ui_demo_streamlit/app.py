"""Streamlit demo UI for study-rebalancer."""

from __future__ import annotations

import tempfile
from collections import Counter
from datetime import datetime, time
from pathlib import Path
from typing import Any

from study_rebalancer.adapters import csv_adapter, json_adapter
from study_rebalancer.apply import apply_changes
from study_rebalancer.config import RebalanceConfig
from study_rebalancer.planner import build_plan
from study_rebalancer.reasons import build_reason_generator
from study_rebalancer.schema import WorkItem


DEMO_DATASET = "examples/sample_dataset.csv"


def _parse_items_from_path(file_path: str) -> list[WorkItem]:
    suffix = Path(file_path).suffix.lower()
    if suffix == ".csv":
        return csv_adapter.parse(file_path)
    if suffix == ".json":
        return json_adapter.parse(file_path)
    raise ValueError("Unsupported file type. Please use .csv or .json")


def _parse_uploaded(uploaded_file) -> list[WorkItem]:
    suffix = Path(uploaded_file.name).suffix.lower()
    with tempfile.NamedTemporaryFile(delete=False, suffix=suffix) as handle:
        handle.write(uploaded_file.getbuffer())
        temp_path = handle.name
    return _parse_items_from_path(temp_path)


def _build_summary(items: list[WorkItem]) -> dict[str, Any]:
    priorities = Counter(item.priority for item in items)
    return {
        "total_items": len(items),
        "subjects": len({item.subject for item in items}),
        "undated": sum(1 for item in items if item.due_or_start is None),
        "priority_counts": {name: priorities.get(name, 0) for name in ("high", "medium", "low")},
    }


def run_engine(items: list[WorkItem], now: datetime, config: RebalanceConfig, use_llm: bool) -> dict[str, Any]:
    """Build a plan and return a UI-friendly result payload."""

    reasons = build_reason_generator() if use_llm else None
    plan = build_plan(items, now, config=config, reason_generator=reasons)
    applied = apply_changes(items, plan.changes)
    return {
        "summary": _build_summary(items),
        "plan": plan.to_dict(),
        "applied": [item.to_dict() for item in applied],
    }


def main() -> None:
    import streamlit as st

    st.set_page_config(page_title="Study Rebalancer Demo", layout="wide")
    st.title("Study Rebalancer — Streamlit Demo")

    with st.sidebar:
        st.header("Controls")
        uploaded = st.file_uploader("Upload work items", type=["csv", "json"])
        use_demo = st.checkbox("Load demo dataset", value=True)
        now_date = st.date_input("Today", value=datetime(2025, 1, 6).date())
        now_hour = st.slider("Now hour", min_value=0, max_value=23, value=9)
        capacity = st.number_input("Max items per day", min_value=1, max_value=12, value=3, step=1)
        horizon = st.number_input("Horizon (days)", min_value=1, max_value=60, value=14, step=1)
        keep_policy = st.selectbox("Items kept on a full day", options=["insertion", "priority"], index=0)
        reschedule_hour = st.slider("Moved items start at", min_value=0, max_value=23, value=10)
        reschedule_overdue = st.checkbox("Also move overdue items", value=False)
        use_llm = st.checkbox("Phrase reasons with the language model", value=False)
        run = st.button("Rebalance", type="primary")

    if not run:
        st.info("Configure inputs in the sidebar and click **Rebalance**.")
        return

    try:
        if use_demo:
            items = csv_adapter.parse(DEMO_DATASET)
            data_source = f"demo dataset ({DEMO_DATASET})"
        elif uploaded is not None:
            items = _parse_uploaded(uploaded)
            data_source = f"uploaded file ({uploaded.name})"
        else:
            st.error("Please upload a CSV/JSON file or enable 'Load demo dataset'.")
            return

        if not items:
            st.error("No work items were found in the selected input.")
            return

        config = RebalanceConfig(
            capacity_per_day=int(capacity),
            horizon_days=int(horizon),
            reschedule_time=time(int(reschedule_hour), 0),
            keep_policy=keep_policy,
            reschedule_overdue=reschedule_overdue,
        )
        now = datetime.combine(now_date, time(int(now_hour), 0))
        result = run_engine(items, now, config, use_llm)
        optimization = result["plan"]["optimization"]
        metrics = result["plan"]["metrics"]

        st.success(f"Loaded {len(items)} work items from {data_source}.")

        st.subheader("A) Workload")
        summary = result["summary"]
        c1, c2, c3 = st.columns(3)
        c1.metric("Total items", summary["total_items"])
        c2.metric("Subjects", summary["subjects"])
        c3.metric("Undated", summary["undated"])
        st.table([summary["priority_counts"]])

        st.subheader("B) Proposed Changes")
        st.write(optimization["overall_summary"])
        if optimization["schedule_changes"]:
            st.table(optimization["schedule_changes"])

        st.subheader("C) Days After Rebalancing")
        st.table(optimization["daily_summary"])

        st.subheader("D) Insights")
        for insight in optimization["insights"]:
            st.markdown(f"**{insight['type'].title()}: {insight['title']}**: {insight['description']}")

        st.subheader("E) Load Metrics")
        mc1, mc2, mc3 = st.columns(3)
        mc1.write("**Before**")
        mc1.table([metrics["before"]])
        mc2.write("**After**")
        mc2.table([metrics["after"]])
        mc3.write("**Comparison**")
        mc3.table([metrics["comparison"]])

        with st.expander("Items with changes applied"):
            st.table(result["applied"])

    except ValueError as exc:
        st.error(f"Input error: {exc}")
    except Exception:
        st.error("Something went wrong while running the demo. Please verify the input format.")


if __name__ == "__main__":
    main()
