from __future__ import annotations

from enum import StrEnum


class _StoredEnum(StrEnum):
    """Enum persisted by member name; value == name."""

    @classmethod
    def parse(cls, raw: str | None):
        if not raw or not raw.strip():
            raise ValueError(f"{cls.__name__} value is required")
        try:
            return cls(raw.strip())
        except ValueError:
            raise ValueError(f"Unknown {cls.__name__}: {raw!r}") from None

    @classmethod
    def from_stored(cls, raw: str | None):
        try:
            return cls.parse(raw)
        except ValueError:
            return cls.default()

    @classmethod
    def default(cls):
        raise NotImplementedError

    @property
    def label(self) -> str:
        return _LABELS[type(self)][self]


class TaskType(_StoredEnum):
    TEST = "TEST"
    HOMEWORK = "HOMEWORK"
    MEETING = "MEETING"
    TRAINING = "TRAINING"
    WORK = "WORK"

    @classmethod
    def default(cls) -> TaskType:
        return cls.WORK

    @property
    def color(self) -> str:
        return TASK_TYPE_COLORS[self]


class Priority(_StoredEnum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"
    NOT_USED = "NOT_USED"

    @classmethod
    def default(cls) -> Priority:
        return cls.MEDIUM

    @property
    def rank(self) -> int:
        return PRIORITY_RANK[self]


class RepetitionPattern(_StoredEnum):
    NONE = "NONE"
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"

    @classmethod
    def default(cls) -> RepetitionPattern:
        return cls.NONE


# Sort order for priorities; lower rank sorts first.
PRIORITY_RANK: dict[Priority, int] = {
    Priority.HIGH: 0,
    Priority.MEDIUM: 1,
    Priority.LOW: 2,
    Priority.NOT_USED: 3,
}

TASK_TYPE_COLORS: dict[TaskType, str] = {
    TaskType.TEST: "#FF6B6B",
    TaskType.HOMEWORK: "#4ECDC4",
    TaskType.MEETING: "#DDE66D",
    TaskType.TRAINING: "#95E1D3",
    TaskType.WORK: "#A8E6CF",
}

TASK_TYPE_LABELS: dict[TaskType, str] = {
    TaskType.TEST: "Test",
    TaskType.HOMEWORK: "Homework",
    TaskType.MEETING: "Meeting",
    TaskType.TRAINING: "Training",
    TaskType.WORK: "Work",
}

PRIORITY_LABELS: dict[Priority, str] = {
    Priority.HIGH: "High",
    Priority.MEDIUM: "Medium",
    Priority.LOW: "Low",
    Priority.NOT_USED: "Not Used",
}

REPETITION_LABELS: dict[RepetitionPattern, str] = {
    RepetitionPattern.NONE: "None",
    RepetitionPattern.DAILY: "Daily",
    RepetitionPattern.WEEKLY: "Weekly",
    RepetitionPattern.MONTHLY: "Monthly",
    RepetitionPattern.YEARLY: "Yearly",
}

# One table per enum; members of different enums may share a value.
_LABELS: dict[type, dict] = {
    TaskType: TASK_TYPE_LABELS,
    Priority: PRIORITY_LABELS,
    RepetitionPattern: REPETITION_LABELS,
}
