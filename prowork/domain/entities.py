from __future__ import annotations

import re
import uuid
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Optional

from .enums import Priority, RepetitionPattern, TaskType


def new_task_id() -> str:
    return str(uuid.uuid4())


_DEADLINE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


def parse_deadline(raw: str) -> date:
    """Parse a ``YYYY-MM-DD`` deadline; other ISO forms raise ``ValueError``."""
    if not _DEADLINE_RE.fullmatch(raw):
        raise ValueError(f"Invalid deadline {raw!r}, expected YYYY-MM-DD")
    return date.fromisoformat(raw)


@dataclass
class Task:
    """A single task record.

    Mutated in place only by the repository; everything handed out to callers
    is a copy (see ``copy``).
    """

    name: str
    deadline: date
    type: TaskType
    priority: Priority
    repetition: RepetitionPattern
    id: str = field(default_factory=new_task_id)
    notes: str = ""
    completed: bool = False
    completed_at: Optional[datetime] = None

    def set_completed(self, completed: bool) -> None:
        # completed_at is kept when a task is reopened.
        if completed and not self.completed:
            self.completed_at = datetime.now()
        self.completed = completed

    def can_have_notes(self) -> bool:
        return self.type is TaskType.TEST

    def is_repeating(self) -> bool:
        return self.repetition is not RepetitionPattern.NONE

    def copy(self) -> Task:
        return replace(self)
