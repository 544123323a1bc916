from __future__ import annotations

import argparse
import sys
from typing import Any, Sequence

from prowork.config import SETTINGS, Settings
from prowork.domain.entities import parse_deadline
from prowork.domain.enums import Priority, RepetitionPattern, TaskType
from prowork.domain.filters import TaskFilters
from prowork.infra.logging import setup_logging
from prowork.infra.repository import TaskRepository
from prowork.infra.storage import TaskFileStore
from prowork.services.task_service import TaskService


def build_service(settings: Settings) -> TaskService:
    store = TaskFileStore(settings.tasks_path)
    return TaskService(TaskRepository(store))


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="prowork", description="Track tasks and deadlines.")
    commands = parser.add_subparsers(dest="command", required=True)

    add = commands.add_parser("add", help="create a task")
    add.add_argument("name")
    add.add_argument("--type", dest="task_type", default=TaskType.WORK.value,
                     choices=[t.value for t in TaskType])
    add.add_argument("--priority", default=Priority.MEDIUM.value,
                     choices=[p.value for p in Priority])
    add.add_argument("--deadline", required=True, help="YYYY-MM-DD")
    add.add_argument("--repeat", default=RepetitionPattern.NONE.value,
                     choices=[r.value for r in RepetitionPattern])
    add.add_argument("--notes")

    listing = commands.add_parser("list", help="list tasks")
    listing.add_argument("--date", help="only tasks due on YYYY-MM-DD")
    listing.add_argument("--type", dest="task_type", choices=[t.value for t in TaskType])
    listing.add_argument("--active", action="store_true", help="hide completed tasks")
    listing.add_argument("--sorted", action="store_true", help="order by priority, deadline, name")

    for name, help_text in (("show", "show one task"), ("done", "mark a task completed"),
                            ("delete", "delete a task")):
        command = commands.add_parser(name, help=help_text)
        command.add_argument("task_id")

    notes = commands.add_parser("notes", help="replace the notes of a TEST task")
    notes.add_argument("task_id")
    notes.add_argument("text")

    cleanup = commands.add_parser("cleanup", help="drop old completed one-off tasks")
    cleanup.add_argument("--days", type=int, default=settings.cleanup_days)

    commands.add_parser("path", help="print the tasks file location")
    return parser


def _format(view: dict[str, Any]) -> str:
    mark = "x" if view["completed"] else " "
    line = (
        f"[{mark}] {view['deadline']}  {view['priorityLabel']:<8} "
        f"{view['typeLabel']:<9} {view['name']}  ({view['id']})"
    )
    if view["repetition"] != RepetitionPattern.NONE.value:
        line += f"  every {view['repetitionLabel'].lower()}"
    if view["notes"]:
        line += f"\n      notes: {view['notes']}"
    return line


def _filters(args: argparse.Namespace) -> TaskFilters:
    return TaskFilters(
        due_on=parse_deadline(args.date) if args.date else None,
        task_type=TaskType.parse(args.task_type) if args.task_type else None,
        active_only=args.active,
        sort=args.sorted,
    )


def run(service: TaskService, args: argparse.Namespace) -> int:
    if args.command == "add":
        task_id = service.add_task(
            args.name, args.task_type, args.priority, args.deadline, args.repeat, args.notes
        )
        if task_id is None:
            print("Could not add task (check the deadline format)", file=sys.stderr)
            return 1
        print(task_id)
        return 0

    if args.command == "list":
        try:
            filters = _filters(args)
        except ValueError as exc:
            print(exc, file=sys.stderr)
            return 1
        for view in service.list_tasks(filters):
            print(_format(view))
        return 0

    if args.command == "show":
        view = service.get_task(args.task_id)
        if view is None:
            print(f"No task {args.task_id}", file=sys.stderr)
            return 1
        print(_format(view))
        return 0

    if args.command == "done":
        ok = service.complete_task(args.task_id)
    elif args.command == "delete":
        ok = service.delete_task(args.task_id)
    elif args.command == "notes":
        ok = service.update_notes(args.task_id, args.text)
    elif args.command == "cleanup":
        print(f"Removed {service.cleanup_completed(args.days)} tasks")
        return 0
    else:
        print(service.storage_path())
        return 0

    if not ok:
        print(f"{args.command} failed for {args.task_id}", file=sys.stderr)
    return 0 if ok else 1


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser(SETTINGS).parse_args(argv)
    setup_logging(SETTINGS)
    return run(build_service(SETTINGS), args)


if __name__ == "__main__":
    sys.exit(main())
