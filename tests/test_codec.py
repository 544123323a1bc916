from __future__ import annotations

from datetime import date, datetime, timezone

from prowork.domain.entities import Task
from prowork.domain.enums import Priority, RepetitionPattern, TaskType
from prowork.infra.codec import (
    decode_tasks,
    encode_task,
    encode_tasks,
    extract_field,
    split_objects_naive,
)


def _record(task_id: str, name: str, deadline: str) -> str:
    return (
        f'{{"id":"{task_id}","name":"{name}","deadline":"{deadline}","type":"WORK",'
        '"priority":"HIGH","repetition":"NONE","notes":"","completed":false,"completedAt":null}'
    )


def test_encode_empty_sequence() -> None:
    assert encode_tasks([]) == "[]"


def test_encode_uses_fixed_key_order() -> None:
    task = Task(
        name="Essay",
        deadline=date(2024, 3, 1),
        type=TaskType.HOMEWORK,
        priority=Priority.LOW,
        repetition=RepetitionPattern.WEEKLY,
        id="abc",
    )

    assert encode_task(task) == (
        '{"id":"abc","name":"Essay","deadline":"2024-03-01","type":"HOMEWORK",'
        '"priority":"LOW","repetition":"WEEKLY","notes":"","completed":false,"completedAt":null}'
    )


def test_encode_skips_none_entries(make_task) -> None:
    task = make_task("Only")

    text = encode_tasks([None, task, None])

    assert text == "[\n  " + encode_task(task) + "\n]"


def test_round_trip_preserves_every_field(make_task) -> None:
    done = make_task(
        "Exam prep",
        deadline=date(2024, 5, 20),
        task_type=TaskType.TEST,
        priority=Priority.HIGH,
        repetition=RepetitionPattern.YEARLY,
        notes='Chapters 1-3\n"bring calculator"\ttabs\\slashes\r',
        completed=True,
        completed_at=datetime(2024, 5, 18, 9, 30, 15, 123456),
    )
    reopened = make_task(
        "Standup",
        task_type=TaskType.MEETING,
        priority=Priority.NOT_USED,
        completed=False,
        completed_at=datetime(2023, 12, 31, 23, 59),
    )
    fresh = make_task("C:\\temp\\")

    tasks = [done, reopened, fresh]

    assert decode_tasks(encode_tasks(tasks)) == tasks


def test_escapes_special_characters(make_task) -> None:
    task = make_task('Say "hi"\nnow')

    encoded = encode_task(task)

    assert '"name":"Say \\"hi\\"\\nnow"' in encoded


def test_decode_blank_input() -> None:
    assert decode_tasks(None) == []
    assert decode_tasks("") == []
    assert decode_tasks("  \n\t ") == []
    assert decode_tasks("[]") == []


def test_decode_defaults_missing_classifiers() -> None:
    tasks = decode_tasks('[{"id":"x","name":"Minimal","deadline":"2024-03-01"}]')

    assert len(tasks) == 1
    task = tasks[0]
    assert task.id == "x"
    assert task.type is TaskType.WORK
    assert task.priority is Priority.MEDIUM
    assert task.repetition is RepetitionPattern.NONE
    assert task.notes == ""
    assert task.completed is False
    assert task.completed_at is None


def test_decode_defaults_unknown_classifiers() -> None:
    text = '{"name":"Odd","deadline":"2024-03-01","type":"PARTY","priority":"","repetition":"HOURLY"}'

    [task] = decode_tasks(text)

    assert task.type is TaskType.WORK
    assert task.priority is Priority.MEDIUM
    assert task.repetition is RepetitionPattern.NONE


def test_decode_generates_id_when_missing() -> None:
    [task] = decode_tasks('[{"name":"No id","deadline":"2024-03-01"}]')

    assert task.id


def test_decode_drops_invalid_records_and_keeps_the_rest() -> None:
    text = "[\n  " + ",\n  ".join(
        [
            _record("a", "One", "2024-01-01"),
            _record("b", "Bad", "2024-13-45"),
            _record("c", "Two", "2024-02-01"),
        ]
    ) + "\n]"

    tasks = decode_tasks(text)

    assert [task.id for task in tasks] == ["a", "c"]


def test_decode_drops_records_without_name_or_deadline() -> None:
    text = "[" + ",".join(
        [
            '{"id":"a","name":"","deadline":"2024-01-01"}',
            '{"id":"b","deadline":"2024-01-01"}',
            '{"id":"c","name":"No date"}',
            _record("d", "Kept", "2024-01-01"),
        ]
    ) + "]"

    assert [task.id for task in decode_tasks(text)] == ["d"]


def test_decode_tolerates_whitespace_after_colon() -> None:
    [task] = decode_tasks('[ { "name": "Spaced", "deadline":  "2024-01-01", "completed": true } ]')

    assert task.name == "Spaced"
    assert task.completed is True


def test_completed_requires_exact_true_token() -> None:
    [upper, numeric] = decode_tasks(
        '[{"name":"T","deadline":"2024-01-01","completed":True},'
        '{"name":"U","deadline":"2024-01-01","completed":1}]'
    )

    assert upper.completed is False
    assert numeric.completed is False
    assert upper.completed_at is None


def test_completed_without_timestamp_gets_load_time() -> None:
    before = datetime.now()

    [task] = decode_tasks('[{"name":"T","deadline":"2024-01-01","completed":true,"completedAt":null}]')

    assert task.completed is True
    assert task.completed_at is not None
    assert task.completed_at >= before


def test_extract_field_handles_escaped_quotes() -> None:
    chunk = '{"name":"a \\"quoted\\" word","notes":"x"}'

    assert extract_field(chunk, "name") == 'a "quoted" word'
    assert extract_field(chunk, "missing") == ""


def test_balanced_braces_in_values_survive() -> None:
    task = Task(
        name="Plan {draft}",
        deadline=date(2024, 1, 1),
        type=TaskType.WORK,
        priority=Priority.MEDIUM,
        repetition=RepetitionPattern.NONE,
    )

    assert decode_tasks(encode_tasks([task])) == [task]


def test_unbalanced_open_brace_swallows_following_records(make_task) -> None:
    tasks = [make_task("Fix {bug"), make_task("Other")]

    assert decode_tasks(encode_tasks(tasks)) == []


def test_stray_close_brace_loses_its_record_and_later_ones(make_task) -> None:
    first = make_task("Fine")
    tasks = [first, make_task("a}b"), make_task("Later")]

    assert decode_tasks(encode_tasks(tasks)) == [first]


def test_split_objects_ignores_quoting() -> None:
    chunks = list(split_objects_naive('[{"name":"}"},{"name":"ok"}]'))

    assert chunks == ['{"name":"}']


def test_decode_rejects_non_calendar_date_forms() -> None:
    text = "[" + ",".join(
        [
            _record("week", "Week date", "2024-W01-1"),
            _record("basic", "Basic form", "20240101"),
            _record("short", "Short parts", "2024-1-5"),
            _record("ok", "Kept", "2024-01-05"),
        ]
    ) + "]"

    assert [task.id for task in decode_tasks(text)] == ["ok"]


def test_offset_timestamps_become_naive_local_time() -> None:
    [task] = decode_tasks(
        '[{"name":"T","deadline":"2024-01-01","completed":true,"completedAt":"2024-01-01T10:00:00Z"}]'
    )

    expected = datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc).astimezone().replace(tzinfo=None)
    assert task.completed_at.tzinfo is None
    assert task.completed_at == expected
