"""Shared scoring helpers for scheduling and goal adjustment."""

from __future__ import annotations

from collections.abc import Callable, Iterable

from focusplan.models import EnergyLevel, Priority, Task

SHORT_TASK_MINUTES = 30
LONG_TASK_MINUTES = 60
COMPLEX_SUBTASK_COUNT = 3

# design, idea, brainstorming, creative work, planning, architecture
CREATIVE_KEYWORDS: tuple[str, ...] = ("디자인", "아이디어", "브레인스토밍", "창작", "기획", "설계")

CreativityPredicate = Callable[[Task], bool]

_PRIORITY_WEIGHTS = {
    Priority.LOW: 1,
    Priority.MEDIUM: 2,
    Priority.HIGH: 3,
}


def priority_weight(priority: Priority) -> int:
    return _PRIORITY_WEIGHTS[priority]


def raise_priority(priority: Priority) -> Priority:
    """One step up; high stays high."""
    if priority == Priority.LOW:
        return Priority.MEDIUM
    return Priority.HIGH


def lower_priority(priority: Priority) -> Priority:
    """One step down; low stays low."""
    if priority == Priority.HIGH:
        return Priority.MEDIUM
    return Priority.LOW


def is_short_task(task: Task) -> bool:
    return task.estimated_duration <= SHORT_TASK_MINUTES


def is_long_task(task: Task) -> bool:
    return task.estimated_duration > LONG_TASK_MINUTES


def is_complex_task(task: Task) -> bool:
    return is_long_task(task) or len(task.subtasks) > COMPLEX_SUBTASK_COUNT


class KeywordCreativityDetector:
    """Flags a task as creative when its title or description contains a keyword.

    Matching is a case-insensitive substring test, so the keyword set can be
    swapped for another language without touching the scheduling logic.
    """

    def __init__(self, keywords: Iterable[str] = CREATIVE_KEYWORDS):
        self.keywords = tuple(k.lower() for k in keywords)

    def __call__(self, task: Task) -> bool:
        text = f"{task.title} {task.description or ''}".lower()
        return any(k in text for k in self.keywords)


is_creative_task = KeywordCreativityDetector()


def energy_weight(
    task: Task,
    energy_level: EnergyLevel,
    is_creative: CreativityPredicate = is_creative_task,
) -> int:
    """How well a task fits the current energy level (1 = poor, 3 = good)."""
    short = is_short_task(task)
    complex_ = is_complex_task(task)

    if energy_level == EnergyLevel.LOW:
        if short or is_creative(task):
            return 3
        if complex_:
            return 1
        return 2

    if energy_level == EnergyLevel.HIGH:
        if complex_:
            return 3
        if short:
            return 1
        return 2

    # Medium energy: priority alone decides.
    return 2


def realism_score(task: Task, energy_level: EnergyLevel) -> int:
    """Score used to pick a realistic subset of tasks for the day."""
    score = priority_weight(task.priority) * 10

    if energy_level == EnergyLevel.LOW:
        if is_short_task(task):
            score += 15
        if is_long_task(task):
            score -= 10
    elif energy_level == EnergyLevel.HIGH:
        if is_long_task(task):
            score += 15
        if is_short_task(task):
            score -= 5
    else:
        score += 5

    if not task.is_flexible:
        score += 20

    # Each postponement makes the task more pressing.
    score += task.postponed_count * 5
    return score
