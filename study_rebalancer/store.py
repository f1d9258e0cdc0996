"""SQLite persistence for work items.

Items are stored per owner. ``apply_changes`` commits a batch of proposals in
one ``BEGIN IMMEDIATE`` transaction, so two rebalancing runs applied against
the same database cannot interleave their writes.
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime

from study_rebalancer.schema import ScheduleChange, WorkItem

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS work_items (
    owner_id TEXT NOT NULL,
    id TEXT NOT NULL,
    title TEXT NOT NULL,
    subject TEXT NOT NULL DEFAULT 'General',
    due_or_start TEXT,
    duration_minutes INTEGER NOT NULL DEFAULT 45,
    priority TEXT NOT NULL DEFAULT 'medium',
    position INTEGER NOT NULL DEFAULT 0,
    PRIMARY KEY (owner_id, id)
)
"""


class WorkItemStore:
    """Owner-scoped work item table backed by a SQLite file."""

    def __init__(self, db_path: str):
        self.db_path = db_path
        with self._get_conn() as conn:
            conn.execute(_SCHEMA)
        logger.debug("WorkItemStore ready at %s", db_path)

    @contextmanager
    def _get_conn(self):
        conn = sqlite3.connect(self.db_path, isolation_level=None)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        finally:
            conn.close()

    def upsert_many(self, owner_id: str, items: list[WorkItem]) -> int:
        """Insert or replace items, remembering their order. Returns count."""

        if not items:
            return 0

        with self._get_conn() as conn:
            conn.execute("BEGIN IMMEDIATE")
            try:
                next_position = conn.execute(
                    "SELECT COALESCE(MAX(position), -1) + 1 FROM work_items WHERE owner_id = ?", (owner_id,)
                ).fetchone()[0]
                for item in items:
                    existing = conn.execute(
                        "SELECT position FROM work_items WHERE owner_id = ? AND id = ?", (owner_id, item.id)
                    ).fetchone()
                    if existing is not None:
                        position = existing["position"]
                    else:
                        position = next_position
                        next_position += 1
                    conn.execute(
                        "INSERT OR REPLACE INTO work_items "
                        "(owner_id, id, title, subject, due_or_start, duration_minutes, priority, position) "
                        "VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                        (
                            owner_id,
                            item.id,
                            item.title,
                            item.subject,
                            item.due_or_start.isoformat() if item.due_or_start else None,
                            item.duration_minutes,
                            item.priority,
                            position,
                        ),
                    )
            except sqlite3.Error:
                conn.execute("ROLLBACK")
                raise
            conn.execute("COMMIT")
        return len(items)

    def load(self, owner_id: str) -> list[WorkItem]:
        """Load one owner's items in their stored order."""

        with self._get_conn() as conn:
            rows = conn.execute(
                "SELECT * FROM work_items WHERE owner_id = ? ORDER BY position, id", (owner_id,)
            ).fetchall()

        return [
            WorkItem(
                id=row["id"],
                title=row["title"],
                subject=row["subject"],
                due_or_start=datetime.fromisoformat(row["due_or_start"]) if row["due_or_start"] else None,
                duration_minutes=row["duration_minutes"],
                priority=row["priority"],
            )
            for row in rows
        ]

    def apply_changes(self, owner_id: str, changes: list[ScheduleChange]) -> int:
        """Write proposed dates for one owner atomically. Returns rows updated."""

        updated = 0
        with self._get_conn() as conn:
            conn.execute("BEGIN IMMEDIATE")
            try:
                for change in changes:
                    cursor = conn.execute(
                        "UPDATE work_items SET due_or_start = ? WHERE owner_id = ? AND id = ?",
                        (change.new_date.isoformat(), owner_id, change.item_id),
                    )
                    if cursor.rowcount == 0:
                        logger.warning("Skipping change for unknown item %s (owner %s)", change.item_id, owner_id)
                    updated += cursor.rowcount
            except sqlite3.Error:
                conn.execute("ROLLBACK")
                raise
            conn.execute("COMMIT")

        logger.info("Applied %d of %d schedule changes for %s", updated, len(changes), owner_id)
        return updated
