from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from .enums import TaskType


@dataclass(frozen=True)
class TaskFilters:
    due_on: Optional[date] = None
    task_type: Optional[TaskType] = None
    active_only: bool = False
    sort: bool = False
