from __future__ import annotations

import logging
import threading
from datetime import date, datetime
from typing import Any, Optional

from prowork.domain.entities import Task, parse_deadline
from prowork.domain.enums import Priority, RepetitionPattern, TaskType
from prowork.domain.filters import TaskFilters
from prowork.infra.repository import TaskRepository

logger = logging.getLogger(__name__)


def task_to_view(task: Task) -> dict[str, Any]:
    return {
        "id": task.id,
        "name": task.name,
        "deadline": task.deadline.isoformat(),
        "type": task.type.value,
        "priority": task.priority.value,
        "repetition": task.repetition.value,
        "notes": task.notes,
        "completed": task.completed,
        "completedAt": task.completed_at.isoformat() if task.completed_at else None,
        "typeLabel": task.type.label,
        "color": task.type.color,
        "priorityLabel": task.priority.label,
        "repetitionLabel": task.repetition.label,
        "canHaveNotes": task.can_have_notes(),
    }


def task_to_legacy_view(task: Task) -> dict[str, Any]:
    """View with the ``dueDate``/``taskType`` names older web views read."""
    view = task_to_view(task)
    view["dueDate"] = view.pop("deadline")
    view["taskType"] = view.pop("type")
    return view


def _parse_day(value: str | date) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return parse_deadline(value.strip())


class TaskService:
    """Commands used by the presentation layer.

    All commands hold one lock, so a single service instance can be shared
    between threads.
    """

    def __init__(self, repo: TaskRepository) -> None:
        self._repo = repo
        self._lock = threading.Lock()

    def add_task(
        self,
        name: str,
        task_type: str,
        priority: str,
        deadline: str | date,
        repetition: str,
        notes: Optional[str] = None,
    ) -> Optional[str]:
        try:
            if not name or not name.strip():
                raise ValueError("name is required")
            task = Task(
                name=name,
                deadline=_parse_day(deadline),
                type=TaskType.parse(task_type),
                priority=Priority.parse(priority),
                repetition=RepetitionPattern.parse(repetition),
            )
        except (ValueError, AttributeError) as exc:
            logger.warning("Rejected new task %r: %s", name, exc)
            return None
        if notes:
            task.notes = notes
        with self._lock:
            self._repo.add(task)
        logger.info("Task added: %s (id=%s)", task.name, task.id)
        return task.id

    def get_all_tasks(self) -> list[dict[str, Any]]:
        with self._lock:
            tasks = self._repo.all()
        return [task_to_view(task) for task in tasks]

    def get_task(self, task_id: str) -> Optional[dict[str, Any]]:
        with self._lock:
            task = self._repo.get(task_id)
        return task_to_view(task) if task else None

    def get_tasks_for_date(self, day: str | date) -> list[dict[str, Any]]:
        try:
            parsed = _parse_day(day)
        except (ValueError, AttributeError):
            logger.warning("Invalid date %r", day)
            return []
        with self._lock:
            tasks = self._repo.for_date(parsed)
        return [task_to_view(task) for task in tasks]

    def get_tasks_by_type(self, task_type: str) -> list[dict[str, Any]]:
        try:
            parsed = TaskType.parse(task_type)
        except ValueError:
            logger.warning("Invalid task type %r", task_type)
            return []
        with self._lock:
            tasks = self._repo.by_type(parsed)
        return [task_to_view(task) for task in tasks]

    def list_tasks(self, filters: TaskFilters) -> list[dict[str, Any]]:
        with self._lock:
            tasks = self._repo.list_tasks(filters)
        return [task_to_view(task) for task in tasks]

    def get_sorted_tasks(self) -> list[dict[str, Any]]:
        with self._lock:
            tasks = self._repo.sorted()
        return [task_to_view(task) for task in tasks]

    def get_active_tasks(self) -> list[dict[str, Any]]:
        with self._lock:
            tasks = self._repo.active()
        return [task_to_view(task) for task in tasks]

    def delete_task(self, task_id: str) -> bool:
        with self._lock:
            removed = self._repo.delete(task_id)
        logger.info("Delete task %s: %s", task_id, removed)
        return removed

    def complete_task(self, task_id: str) -> bool:
        with self._lock:
            done = self._repo.set_completed(task_id, True)
        if done:
            logger.info("Task completed: %s", task_id)
        return done

    def update_notes(self, task_id: str, notes: str) -> bool:
        with self._lock:
            updated = self._repo.update_notes(task_id, notes)
        if not updated:
            logger.info("Could not update notes for task %s", task_id)
        return updated

    def cleanup_completed(self, days_old: int) -> int:
        with self._lock:
            return self._repo.cleanup(days_old)

    def storage_path(self) -> str:
        return str(self._repo.storage_path())
