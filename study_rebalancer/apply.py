"""Commit schedule proposals onto work items."""

from __future__ import annotations

import logging
from dataclasses import replace

from study_rebalancer.schema import ScheduleChange, WorkItem

logger = logging.getLogger(__name__)


def apply_changes(items: list[WorkItem], changes: list[ScheduleChange]) -> list[WorkItem]:
    """Return a copy of ``items`` with each proposal's new date written in place.

    Missed-session replans and bulk rebalancing are committed the same way: the
    existing item keeps its id and only ``due_or_start`` changes.
    """

    new_dates = {}
    known = {item.id for item in items}
    for change in changes:
        if change.item_id not in known:
            logger.warning("Skipping change for unknown item %s", change.item_id)
            continue
        new_dates[change.item_id] = change.new_date

    return [replace(item, due_or_start=new_dates[item.id]) if item.id in new_dates else item for item in items]
