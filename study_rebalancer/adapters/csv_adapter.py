"""CSV adapter for work items."""

from __future__ import annotations

import csv
import logging
from datetime import datetime

from study_rebalancer.schema import PRIORITIES, WorkItem

logger = logging.getLogger(__name__)

_REQUIRED_FIELDS = {"id", "title"}
FIELDNAMES = ["id", "title", "subject", "due_or_start", "duration_minutes", "priority"]


def _parse_date(raw: str | None, row_number: int) -> datetime | None:
    if raw in (None, ""):
        return None
    try:
        return datetime.fromisoformat(raw.strip())
    except ValueError:
        logger.warning("Row %d: unreadable date %r, treating item as undated", row_number, raw)
        return None


def _parse_row(row: dict, row_number: int) -> WorkItem:
    missing = sorted(field for field in _REQUIRED_FIELDS if not (row.get(field) or "").strip())
    if missing:
        raise ValueError(f"Row {row_number}: missing required fields {missing}")

    duration_raw = row.get("duration_minutes")
    duration = 45
    if duration_raw not in (None, ""):
        try:
            duration = int(duration_raw)
        except ValueError as exc:
            raise ValueError(f"Row {row_number}: invalid duration_minutes") from exc

    priority = (row.get("priority") or "medium").strip().lower()
    if priority not in PRIORITIES:
        raise ValueError(f"Row {row_number}: invalid priority '{priority}'")

    subject_raw = row.get("subject")
    subject = subject_raw.strip() if subject_raw and subject_raw.strip() else "General"

    return WorkItem(
        id=row["id"].strip(),
        title=row["title"].strip(),
        subject=subject,
        due_or_start=_parse_date(row.get("due_or_start"), row_number),
        duration_minutes=duration,
        priority=priority,
    )


def parse(file_path: str) -> list[WorkItem]:
    """Parse CSV file into a list of work items."""

    with open(file_path, newline="", encoding="utf-8") as handle:
        reader = csv.DictReader(handle)
        if not reader.fieldnames:
            return []

        items: list[WorkItem] = []
        for row_number, row in enumerate(reader, start=2):
            items.append(_parse_row(row, row_number))
        return items


def write(items: list[WorkItem], file_path: str) -> None:
    """Write work items back to CSV, e.g. after applying schedule changes."""

    with open(file_path, "w", newline="", encoding="utf-8") as handle:
        writer = csv.DictWriter(handle, fieldnames=FIELDNAMES)
        writer.writeheader()
        for item in items:
            row = item.to_dict()
            row["due_or_start"] = row["due_or_start"] or ""
            writer.writerow(row)
