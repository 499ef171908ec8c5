"""Task, daily stats and adjustment record definitions."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import date, datetime

MIN_DURATION_MINUTES = 5
MAX_DURATION_MINUTES = 480


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp as naive local time.

    Offsets are converted to the local zone so stored timestamps stay
    comparable with ``datetime.now()``.
    """
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


class Priority(enum.StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TaskStatus(enum.StrEnum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    POSTPONED = "postponed"
    COMPLETED = "completed"


class EnergyLevel(enum.StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class AdjustmentReason(enum.StrEnum):
    POSTPONED = "postponed"
    ENERGY_MISMATCH = "energy_mismatch"
    TIME_CONSTRAINT = "time_constraint"
    USER_REQUEST = "user_request"


class GoalAdjustmentType(enum.StrEnum):
    REDUCE_TASKS = "reduce_tasks"
    EXTEND_DEADLINE = "extend_deadline"
    SPLIT_TASKS = "split_tasks"
    LOWER_PRIORITY = "lower_priority"


@dataclass
class Subtask:
    id: str
    title: str
    duration: int
    is_completed: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "duration": self.duration,
            "is_completed": self.is_completed,
        }

    @classmethod
    def from_dict(cls, d: dict) -> Subtask:
        return cls(
            id=d["id"],
            title=d["title"],
            duration=d["duration"],
            is_completed=d.get("is_completed", False),
        )


@dataclass
class Task:
    """A single schedulable task. Durations are in minutes."""

    id: str
    title: str
    estimated_duration: int
    priority: Priority = Priority.MEDIUM
    category: str = "work"
    is_flexible: bool = True  # false: fixed-schedule task, never displaced
    status: TaskStatus = TaskStatus.PENDING
    description: str = ""
    subtasks: list[Subtask] = field(default_factory=list)
    postponed_count: int = 0
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def is_pending(self) -> bool:
        return self.status == TaskStatus.PENDING

    def to_dict(self) -> dict:
        d = {
            "title": self.title,
            "estimated_duration": self.estimated_duration,
            "priority": self.priority.value,
            "category": self.category,
            "is_flexible": self.is_flexible,
            "status": self.status.value,
            "postponed_count": self.postponed_count,
            "created_at": self.created_at.isoformat(),
        }
        if self.description:
            d["description"] = self.description
        if self.subtasks:
            d["subtasks"] = [s.to_dict() for s in self.subtasks]
        return d

    @classmethod
    def from_dict(cls, task_id: str, d: dict) -> Task:
        created_at = d.get("created_at")
        return cls(
            id=task_id,
            title=d["title"],
            estimated_duration=d["estimated_duration"],
            priority=Priority(d.get("priority", "medium")),
            category=d.get("category", "work"),
            is_flexible=d.get("is_flexible", True),
            status=TaskStatus(d.get("status", "pending")),
            description=d.get("description") or "",
            subtasks=[Subtask.from_dict(s) for s in d.get("subtasks", [])],
            postponed_count=d.get("postponed_count", 0),
            created_at=parse_timestamp(created_at) if created_at else datetime.now(),
        )


@dataclass
class DailyStats:
    """One day's planning/completion snapshot."""

    date: date
    tasks_planned: int
    tasks_completed: int
    focus_minutes: int = 0
    pomodoros_completed: int = 0

    @property
    def completion_rate(self) -> float | None:
        """Completed / planned, or None for a day with nothing planned."""
        if self.tasks_planned == 0:
            return None
        return self.tasks_completed / self.tasks_planned

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "tasks_planned": self.tasks_planned,
            "tasks_completed": self.tasks_completed,
            "focus_minutes": self.focus_minutes,
            "pomodoros_completed": self.pomodoros_completed,
        }

    @classmethod
    def from_dict(cls, d: dict) -> DailyStats:
        return cls(
            date=date.fromisoformat(d["date"]),
            tasks_planned=d["tasks_planned"],
            tasks_completed=d["tasks_completed"],
            focus_minutes=d.get("focus_minutes", 0),
            pomodoros_completed=d.get("pomodoros_completed", 0),
        )


@dataclass
class ScheduleAdjustment:
    """A priority/position change for one task, applied by the caller."""

    task_id: str
    new_priority: Priority
    new_position: int
    reason: AdjustmentReason

    def to_dict(self) -> dict:
        return {
            "task_id": self.task_id,
            "new_priority": self.new_priority.value,
            "new_position": self.new_position,
            "reason": self.reason.value,
        }


@dataclass
class GoalAdjustment:
    """A suggested shrinkage of tomorrow's plan with a user-facing message."""

    type: GoalAdjustmentType
    message: str
    suggested_tasks: list[Task]
    original_task_count: int
    adjusted_task_count: int
    reason: str

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "message": self.message,
            "suggested_task_ids": [t.id for t in self.suggested_tasks],
            "original_task_count": self.original_task_count,
            "adjusted_task_count": self.adjusted_task_count,
            "reason": self.reason,
        }


@dataclass
class DailySchedule:
    """The ordered plan for one day."""

    date: date
    tasks: list[Task]
    total_estimated_time: int
    total_with_buffers: int
    completion_rate: float = 0.0
    adjustments: list[ScheduleAdjustment] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "task_ids": [t.id for t in self.tasks],
            "total_estimated_time": self.total_estimated_time,
            "total_with_buffers": self.total_with_buffers,
            "completion_rate": self.completion_rate,
            "adjustments": [a.to_dict() for a in self.adjustments],
        }
