"""Reader and writer for the tasks file.

The file is a JSON array of flat objects with a fixed key set. It is written
and read by hand; only the fields listed in ``FIELD_ORDER`` are understood.

Objects are split with ``split_objects_naive``, which counts braces without
looking at quoting. A ``{`` or ``}`` inside a name or notes value throws the
split off and the affected records are lost on the next load. Files written by
earlier versions depend on this exact behavior, so it stays.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from datetime import datetime
from typing import Optional

from prowork.domain.entities import Task, parse_deadline
from prowork.domain.enums import Priority, RepetitionPattern, TaskType

logger = logging.getLogger(__name__)

FIELD_ORDER = (
    "id",
    "name",
    "deadline",
    "type",
    "priority",
    "repetition",
    "notes",
    "completed",
    "completedAt",
)

_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}
_UNESCAPES = {
    "\\": "\\",
    '"': '"',
    "n": "\n",
    "r": "\r",
    "t": "\t",
}


def escape(value: str) -> str:
    return "".join(_ESCAPES.get(ch, ch) for ch in value)


def unescape(value: str) -> str:
    out: list[str] = []
    index = 0
    length = len(value)
    while index < length:
        ch = value[index]
        if ch == "\\" and index + 1 < length:
            nxt = value[index + 1]
            # Unknown escapes are kept verbatim.
            out.append(_UNESCAPES.get(nxt, ch + nxt))
            index += 2
            continue
        out.append(ch)
        index += 1
    return "".join(out)


def encode_task(task: Task) -> str:
    completed = "true" if task.completed else "false"
    completed_at = f'"{task.completed_at.isoformat()}"' if task.completed_at else "null"
    return (
        "{"
        f'"id":"{escape(task.id)}",'
        f'"name":"{escape(task.name)}",'
        f'"deadline":"{task.deadline.isoformat()}",'
        f'"type":"{task.type.value}",'
        f'"priority":"{task.priority.value}",'
        f'"repetition":"{task.repetition.value}",'
        f'"notes":"{escape(task.notes)}",'
        f'"completed":{completed},'
        f'"completedAt":{completed_at}'
        "}"
    )


def encode_tasks(tasks: Iterable[Optional[Task]]) -> str:
    lines: list[str] = []
    for index, task in enumerate(tasks):
        if task is None:
            logger.warning("Skipping empty task entry at index %s", index)
            continue
        lines.append("  " + encode_task(task))
    if not lines:
        return "[]"
    return "[\n" + ",\n".join(lines) + "\n]"


def split_objects_naive(text: str) -> Iterator[str]:
    """Yield top-level ``{...}`` chunks by brace depth, ignoring quotes."""
    body = text.strip()
    if body.startswith("["):
        body = body[1:]
    if body.endswith("]"):
        body = body[:-1]

    depth = 0
    start = 0
    for index, ch in enumerate(body):
        if ch == "{":
            if depth == 0:
                start = index
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                yield body[start:index + 1]


def extract_field(chunk: str, key: str) -> str:
    """Return the raw value for ``key`` in an object chunk, or ``""``.

    String values come back unescaped; anything else (``true``, ``null``)
    is returned as the trimmed token.
    """
    marker = f'"{key}":'
    pos = chunk.find(marker)
    if pos == -1:
        return ""
    pos += len(marker)
    length = len(chunk)
    while pos < length and chunk[pos].isspace():
        pos += 1
    if pos >= length:
        return ""

    if chunk[pos] == '"':
        pos += 1
        end = pos
        while end < length:
            ch = chunk[end]
            if ch == "\\":
                end += 2
                continue
            if ch == '"':
                return unescape(chunk[pos:end])
            end += 1
        return ""

    end = pos
    while end < length and chunk[end] not in ",}":
        end += 1
    return chunk[pos:end].strip()


def _parse_timestamp(raw: str) -> Optional[datetime]:
    if not raw or raw == "null":
        return None
    try:
        value = datetime.fromisoformat(raw)
    except ValueError:
        logger.warning("Ignoring invalid completedAt value %r", raw)
        return None
    if value.tzinfo is not None:
        # Stored timestamps are naive local time.
        value = value.astimezone().replace(tzinfo=None)
    return value


def decode_task(chunk: str) -> Optional[Task]:
    name = extract_field(chunk, "name")
    if not name:
        logger.warning("Skipping task without a name: %.80s", chunk)
        return None

    raw_deadline = extract_field(chunk, "deadline")
    try:
        deadline = parse_deadline(raw_deadline)
    except ValueError:
        logger.warning("Skipping task %r with invalid deadline %r", name, raw_deadline)
        return None

    task = Task(
        name=name,
        deadline=deadline,
        type=TaskType.from_stored(extract_field(chunk, "type")),
        priority=Priority.from_stored(extract_field(chunk, "priority")),
        repetition=RepetitionPattern.from_stored(extract_field(chunk, "repetition")),
    )
    task_id = extract_field(chunk, "id")
    if task_id:
        task.id = task_id
    task.notes = extract_field(chunk, "notes")
    task.completed = extract_field(chunk, "completed") == "true"
    task.completed_at = _parse_timestamp(extract_field(chunk, "completedAt"))
    if task.completed and task.completed_at is None:
        task.completed_at = datetime.now()
    return task


def decode_tasks(text: Optional[str]) -> list[Task]:
    if not text or not text.strip():
        return []
    tasks: list[Task] = []
    for chunk in split_objects_naive(text):
        task = decode_task(chunk)
        if task is not None:
            tasks.append(task)
    return tasks
