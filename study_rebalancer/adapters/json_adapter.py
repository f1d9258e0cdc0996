"""JSON adapter for work items."""

from __future__ import annotations

import json
import logging
from datetime import datetime

from study_rebalancer.schema import PRIORITIES, ScheduleChange, WorkItem

logger = logging.getLogger(__name__)

_REQUIRED_FIELDS = {"id", "title"}


def _parse_date(raw, index: int) -> datetime | None:
    if raw in (None, ""):
        return None
    try:
        return datetime.fromisoformat(str(raw).strip())
    except ValueError:
        logger.warning("Item %d: unreadable date %r, treating item as undated", index, raw)
        return None


def _parse_item(item: dict, index: int) -> WorkItem:
    if not isinstance(item, dict):
        raise ValueError(f"Item {index}: expected an object")

    missing = sorted(field for field in _REQUIRED_FIELDS if not str(item.get(field) or "").strip())
    if missing:
        raise ValueError(f"Item {index}: missing required fields {missing}")

    duration_raw = item.get("duration_minutes")
    duration = 45
    if duration_raw is not None:
        try:
            duration = int(duration_raw)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Item {index}: invalid duration_minutes") from exc

    priority = str(item.get("priority") or "medium").strip().lower()
    if priority not in PRIORITIES:
        raise ValueError(f"Item {index}: invalid priority '{priority}'")

    subject_raw = item.get("subject")
    subject = str(subject_raw).strip() if subject_raw else "General"

    return WorkItem(
        id=str(item["id"]).strip(),
        title=str(item["title"]).strip(),
        subject=subject or "General",
        due_or_start=_parse_date(item.get("due_or_start"), index),
        duration_minutes=duration,
        priority=priority,
    )


def parse(file_path: str) -> list[WorkItem]:
    """Parse JSON file into work items."""

    with open(file_path, encoding="utf-8") as handle:
        payload = json.load(handle)

    if not isinstance(payload, list):
        raise ValueError("JSON payload must be a list of objects")

    return [_parse_item(item, i) for i, item in enumerate(payload, start=1)]


def write(items: list[WorkItem], file_path: str) -> None:
    with open(file_path, "w", encoding="utf-8") as handle:
        json.dump([item.to_dict() for item in items], handle, indent=2)


def dump_changes(changes: list[ScheduleChange], file_path: str) -> None:
    """Write proposals so a later apply step can commit them."""

    with open(file_path, "w", encoding="utf-8") as handle:
        json.dump([change.to_dict() for change in changes], handle, indent=2)
