from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Optional

from prowork.domain.entities import Task
from prowork.domain.enums import TaskType
from prowork.domain.filters import TaskFilters

from .storage import TaskFileStore

logger = logging.getLogger(__name__)


def _sort_key(task: Task) -> tuple[int, date, str]:
    return (task.priority.rank, task.deadline, task.name)


def _apply_filters(tasks: Iterable[Task], filters: TaskFilters) -> list[Task]:
    selected = list(tasks)
    if filters.due_on is not None:
        selected = [task for task in selected if task.deadline == filters.due_on]
    if filters.task_type is not None:
        selected = [task for task in selected if task.type is filters.task_type]
    if filters.active_only:
        selected = [task for task in selected if not task.completed]
    if filters.sort:
        selected.sort(key=_sort_key)
    return selected


def _is_expired(task: Task, cutoff: datetime) -> bool:
    return (
        task.completed
        and not task.is_repeating()
        and task.completed_at is not None
        and task.completed_at < cutoff
    )


class TaskRepository:
    """In-memory task list backed by a ``TaskFileStore``.

    Every mutation rewrites the whole file. Not thread-safe; callers that
    share an instance must serialize access (``TaskService`` does).
    Duplicate ids are tolerated: lookups, updates and deletes act on the
    first task with a given id.
    """

    def __init__(self, store: TaskFileStore) -> None:
        self._store = store
        self._tasks: list[Task] = []
        self.reload()

    def __len__(self) -> int:
        return len(self._tasks)

    def _find(self, task_id: str) -> Optional[Task]:
        return next((task for task in self._tasks if task.id == task_id), None)

    def add(self, task: Task) -> None:
        self._tasks.append(task.copy())
        self.save()

    def delete(self, task_id: str) -> bool:
        task = self._find(task_id)
        if task is None:
            return False
        self._tasks.remove(task)
        self.save()
        return True

    def get(self, task_id: str) -> Optional[Task]:
        task = self._find(task_id)
        return task.copy() if task else None

    def all(self) -> list[Task]:
        return [task.copy() for task in self._tasks]

    def list_tasks(self, filters: TaskFilters) -> list[Task]:
        return [task.copy() for task in _apply_filters(self._tasks, filters)]

    def for_date(self, day: date) -> list[Task]:
        return self.list_tasks(TaskFilters(due_on=day))

    def by_type(self, task_type: TaskType) -> list[Task]:
        return self.list_tasks(TaskFilters(task_type=task_type))

    def sorted(self) -> list[Task]:
        return self.list_tasks(TaskFilters(sort=True))

    def active(self) -> list[Task]:
        return self.list_tasks(TaskFilters(active_only=True))

    def update_notes(self, task_id: str, notes: str) -> bool:
        task = self._find(task_id)
        if task is None or not task.can_have_notes():
            return False
        task.notes = notes
        self.save()
        return True

    def set_completed(self, task_id: str, completed: bool = True) -> bool:
        task = self._find(task_id)
        if task is None:
            return False
        task.set_completed(completed)
        self.save()
        return True

    def cleanup(self, days_old: int, now: Optional[datetime] = None) -> int:
        cutoff = (now or datetime.now()) - timedelta(days=days_old)
        kept = [task for task in self._tasks if not _is_expired(task, cutoff)]
        removed = len(self._tasks) - len(kept)
        if removed:
            self._tasks = kept
            self.save()
            logger.info("Cleanup removed %s completed tasks older than %s days", removed, days_old)
        return removed

    def save(self) -> bool:
        return self._store.write(self._tasks)

    def reload(self) -> None:
        self._tasks = self._store.read()
        duplicates = [task_id for task_id, count in Counter(t.id for t in self._tasks).items() if count > 1]
        if duplicates:
            logger.warning("Duplicate task ids in %s: %s", self._store.path, ", ".join(duplicates))
        logger.info("Repository holds %s tasks", len(self._tasks))

    def storage_path(self) -> Path:
        return self._store.path
