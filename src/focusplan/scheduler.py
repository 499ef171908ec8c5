"""Energy-aware daily scheduling and postponement handling."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date

from focusplan.models import (
    AdjustmentReason,
    DailySchedule,
    EnergyLevel,
    Priority,
    ScheduleAdjustment,
    Task,
    TaskStatus,
)
from focusplan.scoring import (
    CreativityPredicate,
    energy_weight,
    is_creative_task,
    is_short_task,
    priority_weight,
    raise_priority,
)

logger = logging.getLogger(__name__)


@dataclass
class SchedulingOptions:
    respect_fixed_tasks: bool = True
    consider_energy_level: bool = True
    max_daily_tasks: int = 8
    buffer_time: int = 10  # minutes between tasks


def _pending(tasks: list[Task]) -> list[Task]:
    return [t for t in tasks if t.status == TaskStatus.PENDING]


def sort_by_priority(tasks: list[Task]) -> list[Task]:
    """Priority descending; older tasks first on ties."""
    return sorted(tasks, key=lambda t: (-priority_weight(t.priority), t.created_at))


def _sort_flexible(
    tasks: list[Task],
    energy_level: EnergyLevel,
    options: SchedulingOptions,
    is_creative: CreativityPredicate,
) -> list[Task]:
    if not options.consider_energy_level:
        return sorted(tasks, key=lambda t: -priority_weight(t.priority))
    return sorted(
        tasks,
        key=lambda t: (
            -energy_weight(t, energy_level, is_creative),
            -priority_weight(t.priority),
        ),
    )


# ---------------------------------------------------------------------------
# Daily schedule
# ---------------------------------------------------------------------------


def schedule_tasks_by_type(
    tasks: list[Task],
    energy_level: EnergyLevel,
    options: SchedulingOptions | None = None,
    is_creative: CreativityPredicate = is_creative_task,
) -> list[Task]:
    """Order today's pending tasks: fixed tasks first, then flexible ones.

    Fixed tasks are never displaced. Flexible tasks only fill the slots left
    under ``max_daily_tasks``, which may be none at all.
    """
    opts = options or SchedulingOptions()

    fixed = sort_by_priority([t for t in _pending(tasks) if not t.is_flexible])
    flexible = _sort_flexible(
        [t for t in _pending(tasks) if t.is_flexible], energy_level, opts, is_creative
    )

    total = min(len(fixed) + len(flexible), opts.max_daily_tasks)
    remaining_slots = total - len(fixed)

    scheduled = list(fixed)
    if remaining_slots > 0:
        scheduled.extend(flexible[:remaining_slots])

    logger.debug(
        "Scheduled %d fixed + %d flexible task(s) at %s energy (cap %d)",
        len(fixed),
        len(scheduled) - len(fixed),
        energy_level,
        opts.max_daily_tasks,
    )
    return scheduled


def build_daily_schedule(
    tasks: list[Task],
    energy_level: EnergyLevel,
    day: date,
    options: SchedulingOptions | None = None,
    is_creative: CreativityPredicate = is_creative_task,
) -> DailySchedule:
    """Wrap the day's ordered tasks with their time totals."""
    opts = options or SchedulingOptions()
    scheduled = schedule_tasks_by_type(tasks, energy_level, opts, is_creative)
    total = sum(t.estimated_duration for t in scheduled)
    buffers = opts.buffer_time * (len(scheduled) - 1) if scheduled else 0
    return DailySchedule(
        date=day,
        tasks=scheduled,
        total_estimated_time=total,
        total_with_buffers=total + buffers,
    )


def recommend_tasks_by_energy(
    tasks: list[Task],
    energy_level: EnergyLevel,
    is_creative: CreativityPredicate = is_creative_task,
) -> list[Task]:
    """Recommend pending tasks that suit the current energy level."""
    available = _pending(tasks)

    if energy_level == EnergyLevel.LOW:
        # Short or creative work only, shortest first.
        fitting = [t for t in available if is_short_task(t) or is_creative(t)]
        return sorted(fitting, key=lambda t: t.estimated_duration)

    if energy_level == EnergyLevel.HIGH:
        # Important and substantial work first.
        return sorted(
            available,
            key=lambda t: priority_weight(t.priority) * 2 + t.estimated_duration * 0.1,
            reverse=True,
        )

    return sort_by_priority(available)


# ---------------------------------------------------------------------------
# Postponement
# ---------------------------------------------------------------------------


def _find_optimal_position(
    tasks: list[Task],
    new_priority: Priority,
    options: SchedulingOptions,
) -> int:
    pending = _pending(tasks)
    target = priority_weight(new_priority)

    for i, current in enumerate(pending):
        if not current.is_flexible and options.respect_fixed_tasks:
            continue
        if priority_weight(current.priority) <= target:
            return i

    return len(pending)


def calculate_priority_adjustment(
    task: Task,
    all_tasks: list[Task],
    options: SchedulingOptions,
) -> ScheduleAdjustment | None:
    """Rebalance a flexible task after another task was postponed.

    Extension point: no rebalancing is performed, so this always returns None.
    """
    return None


def adjust_priority_on_postpone(
    tasks: list[Task],
    postponed_task_id: str,
    options: SchedulingOptions | None = None,
) -> list[ScheduleAdjustment]:
    """Compute the priority bump and new position for a postponed task.

    Returns an empty list when the task is unknown or already high priority.
    """
    opts = options or SchedulingOptions()
    adjustments: list[ScheduleAdjustment] = []

    postponed = next((t for t in tasks if t.id == postponed_task_id), None)
    if postponed is None:
        logger.debug("Postponed task %s not found", postponed_task_id)
        return adjustments

    new_priority = raise_priority(postponed.priority)
    if new_priority != postponed.priority:
        adjustments.append(
            ScheduleAdjustment(
                task_id=postponed_task_id,
                new_priority=new_priority,
                new_position=_find_optimal_position(tasks, new_priority, opts),
                reason=AdjustmentReason.POSTPONED,
            )
        )

    for task in tasks:
        if task.is_flexible and task.id != postponed_task_id and task.status == TaskStatus.PENDING:
            adjustment = calculate_priority_adjustment(task, tasks, opts)
            if adjustment:
                adjustments.append(adjustment)

    return adjustments


# ---------------------------------------------------------------------------
# Applying results (caller side)
# ---------------------------------------------------------------------------


def apply_schedule_adjustments(
    tasks: list[Task],
    adjustments: list[ScheduleAdjustment],
) -> list[Task]:
    """Return copies of *tasks* with each adjustment's new priority applied."""
    new_priorities = {a.task_id: a.new_priority for a in adjustments}
    return [
        replace(t, priority=new_priorities[t.id]) if t.id in new_priorities else replace(t)
        for t in tasks
    ]


def postpone_task(tasks: list[Task], task_id: str) -> list[Task]:
    """Return copies of *tasks* with *task_id* marked postponed and bumped one step."""
    result: list[Task] = []
    for t in tasks:
        if t.id == task_id:
            result.append(
                replace(
                    t,
                    status=TaskStatus.POSTPONED,
                    postponed_count=t.postponed_count + 1,
                    priority=raise_priority(t.priority),
                )
            )
        else:
            result.append(replace(t))
    return result
