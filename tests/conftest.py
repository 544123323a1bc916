from __future__ import annotations

from collections.abc import Sequence
from datetime import date
from pathlib import Path

import pytest

from prowork.domain.entities import Task
from prowork.domain.enums import Priority, RepetitionPattern, TaskType
from prowork.infra.repository import TaskRepository


class FakeStore:
    """In-memory stand-in for TaskFileStore that records every write."""

    def __init__(self, tasks: Sequence[Task] = ()) -> None:
        self.path = Path("tasks.json")
        self.persistent = True
        self.writes: list[list[Task]] = []
        self._tasks = [task.copy() for task in tasks]

    def read(self) -> list[Task]:
        return [task.copy() for task in self._tasks]

    def write(self, tasks: Sequence[Task]) -> bool:
        self._tasks = [task.copy() for task in tasks]
        self.writes.append([task.copy() for task in tasks])
        return True


def _make_task(
    name: str = "Task",
    deadline: date = date(2024, 1, 1),
    task_type: TaskType = TaskType.WORK,
    priority: Priority = Priority.MEDIUM,
    repetition: RepetitionPattern = RepetitionPattern.NONE,
    **fields,
) -> Task:
    task = Task(name=name, deadline=deadline, type=task_type, priority=priority, repetition=repetition)
    for key, value in fields.items():
        setattr(task, key, value)
    return task


@pytest.fixture()
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture()
def repo(store: FakeStore) -> TaskRepository:
    return TaskRepository(store)


@pytest.fixture()
def make_task():
    return _make_task
