"""Core data schema for work items and schedule proposals."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

PRIORITIES = ("low", "medium", "high")


@dataclass(frozen=True)
class WorkItem:
    """A pending task or study session, optionally placed on a date."""

    id: str
    title: str
    subject: str = "General"
    due_or_start: Optional[datetime] = None
    duration_minutes: int = 45
    priority: str = "medium"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "subject": self.subject,
            "due_or_start": self.due_or_start.isoformat() if self.due_or_start else None,
            "duration_minutes": self.duration_minutes,
            "priority": self.priority,
        }


@dataclass
class ScheduleChange:
    """A proposed, not yet applied, date reassignment."""

    item_id: str
    title: str
    subject: str
    original_date: Optional[datetime]
    new_date: datetime
    reason: str
    prior_load: int = 0
    overflow: bool = False

    def to_dict(self) -> dict:
        return {
            "item_id": self.item_id,
            "title": self.title,
            "subject": self.subject,
            "original_date": self.original_date.isoformat() if self.original_date else None,
            "new_date": self.new_date.isoformat(),
            "reason": self.reason,
            "prior_load": self.prior_load,
            "overflow": self.overflow,
        }


@dataclass
class Insight:
    type: str
    title: str
    description: str
    reasoning: str = ""

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "title": self.title,
            "description": self.description,
            "reasoning": self.reasoning,
        }


@dataclass
class DaySummary:
    date: date
    task_count: int
    tasks: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"date": self.date.isoformat(), "task_count": self.task_count, "tasks": list(self.tasks)}
