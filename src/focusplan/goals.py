"""Goal adjustment after low-completion days.

When today's completion rate falls below the threshold, tomorrow's plan is
shrunk according to how the recent days went:

- recent average under 30%: drastic reduction (keep ~40%),
- 30% to 50%: moderate reduction (keep ~60%, every fixed task stays),
- 50% and above: a one-off dip, minor adjustment (keep ~80%).

Messages never blame the user. The phrasing is picked at random; pass a
seeded ``random.Random`` as *rng* to make it reproducible.
"""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, replace

from focusplan.models import (
    DailyStats,
    EnergyLevel,
    GoalAdjustment,
    GoalAdjustmentType,
    Task,
    TaskStatus,
)
from focusplan.scoring import lower_priority, priority_weight, realism_score

logger = logging.getLogger(__name__)

ENCOURAGING_PHRASES: tuple[str, ...] = (
    "괜찮아요! 완벽하지 않아도 됩니다.",
    "작은 진전도 의미있는 성취입니다.",
    "오늘은 쉬어가는 날이었네요.",
    "내일은 더 나은 하루가 될 거예요.",
    "자신을 너무 몰아붙이지 마세요.",
)

ADJUSTMENT_MESSAGES: dict[GoalAdjustmentType, str] = {
    GoalAdjustmentType.REDUCE_TASKS: "내일은 좀 더 여유롭게 계획해보세요.",
    GoalAdjustmentType.EXTEND_DEADLINE: "시간에 쫓기지 말고 천천히 해보세요.",
    GoalAdjustmentType.SPLIT_TASKS: "큰 작업을 작은 단위로 나누어 보세요.",
    GoalAdjustmentType.LOWER_PRIORITY: "우선순위를 조정해서 부담을 줄여보세요.",
}

REASON_ABOVE_THRESHOLD = "완료율이 기준 이상"
REASON_NOTHING_PLANNED = "계획된 작업 없음"
REASON_VERY_LOW = "최근 완료율이 매우 낮음 (30% 미만)"
REASON_LOW = "최근 완료율이 낮음 (30-50%)"
REASON_TEMPORARY_DIP = "일시적인 완료율 저조"

VERY_LOW_RATE = 0.3
LOW_RATE = 0.5


@dataclass
class GoalAdjustmentOptions:
    min_completion_rate: float = 0.5
    max_daily_tasks: int = 6
    encouraging_messages: bool = True


def recent_completion_rate(stats: list[DailyStats]) -> float | None:
    """Mean completion rate over days that had anything planned."""
    rates = [s.completion_rate for s in stats if s.completion_rate is not None]
    if not rates:
        return None
    return sum(rates) / len(rates)


def generate_encouraging_message(
    completion_rate: float,
    adjustment_type: GoalAdjustmentType,
    rng: random.Random | None = None,
) -> str:
    """A random encouraging phrase followed by the type-specific suggestion."""
    chooser = rng or random
    phrase = chooser.choice(ENCOURAGING_PHRASES)
    return f"{phrase} {ADJUSTMENT_MESSAGES[adjustment_type]}"


# ---------------------------------------------------------------------------
# Task selection strategies
# ---------------------------------------------------------------------------


def _select_high_priority(tasks: list[Task], count: int) -> list[Task]:
    """Fixed tasks before flexible ones, then priority descending."""
    ranked = sorted(tasks, key=lambda t: (t.is_flexible, -priority_weight(t.priority)))
    return ranked[:count]


def _select_balanced(tasks: list[Task], count: int) -> list[Task]:
    """Every fixed task, then the best flexible tasks in the remaining slots."""
    fixed = [t for t in tasks if not t.is_flexible]
    flexible = sorted(
        (t for t in tasks if t.is_flexible),
        key=lambda t: -priority_weight(t.priority),
    )
    remaining_slots = max(0, count - len(fixed))
    return fixed + flexible[:remaining_slots]


def _created_ms(task: Task) -> float:
    return task.created_at.timestamp() * 1000


def _select_recent(tasks: list[Task], count: int) -> list[Task]:
    """Blend of priority and recency: one priority step outweighs 1000s of age."""
    ranked = sorted(
        tasks,
        key=lambda t: priority_weight(t.priority) * 1000 + _created_ms(t) * 0.001,
        reverse=True,
    )
    return ranked[:count]


# ---------------------------------------------------------------------------
# Adjustment tiers
# ---------------------------------------------------------------------------


def _message(
    options: GoalAdjustmentOptions,
    rate: float,
    adjustment_type: GoalAdjustmentType,
    fallback: str,
    rng: random.Random | None,
) -> str:
    if options.encouraging_messages:
        return generate_encouraging_message(rate, adjustment_type, rng)
    return fallback


def _no_adjustment(tasks: list[Task], completion_rate: float | None) -> GoalAdjustment:
    if completion_rate is None:
        message = "오늘 계획된 작업이 없었어요. 현재 계획을 유지하세요!"
        reason = REASON_NOTHING_PLANNED
    else:
        message = f"완료율이 {round(completion_rate * 100)}%로 양호합니다. 현재 계획을 유지하세요!"
        reason = REASON_ABOVE_THRESHOLD
    return GoalAdjustment(
        type=GoalAdjustmentType.REDUCE_TASKS,
        message=message,
        suggested_tasks=list(tasks),
        original_task_count=len(tasks),
        adjusted_task_count=len(tasks),
        reason=reason,
    )


def _drastic_reduction(
    tasks: list[Task],
    options: GoalAdjustmentOptions,
    rng: random.Random | None,
) -> GoalAdjustment:
    target = max(2, math.floor(len(tasks) * 0.4))
    selected = _select_high_priority(tasks, target)
    return GoalAdjustment(
        type=GoalAdjustmentType.REDUCE_TASKS,
        message=_message(
            options, 0.3, GoalAdjustmentType.REDUCE_TASKS,
            "작업 수를 대폭 줄여서 부담을 덜어보세요.", rng,
        ),
        suggested_tasks=selected,
        original_task_count=len(tasks),
        adjusted_task_count=len(selected),
        reason=REASON_VERY_LOW,
    )


def _moderate_reduction(
    tasks: list[Task],
    options: GoalAdjustmentOptions,
    rng: random.Random | None,
) -> GoalAdjustment:
    target = max(3, math.floor(len(tasks) * 0.6))
    selected = _select_balanced(tasks, target)
    return GoalAdjustment(
        type=GoalAdjustmentType.REDUCE_TASKS,
        message=_message(
            options, 0.4, GoalAdjustmentType.REDUCE_TASKS,
            "작업 수를 적당히 줄여서 현실적인 목표를 세워보세요.", rng,
        ),
        suggested_tasks=selected,
        original_task_count=len(tasks),
        adjusted_task_count=len(selected),
        reason=REASON_LOW,
    )


def _minor_adjustment(
    tasks: list[Task],
    options: GoalAdjustmentOptions,
    rng: random.Random | None,
) -> GoalAdjustment:
    target = max(4, math.floor(len(tasks) * 0.8))
    selected = _select_recent(tasks, target)
    return GoalAdjustment(
        type=GoalAdjustmentType.LOWER_PRIORITY,
        message=_message(
            options, 0.5, GoalAdjustmentType.LOWER_PRIORITY,
            "우선순위를 조정해서 부담을 조금 줄여보세요.", rng,
        ),
        suggested_tasks=selected,
        original_task_count=len(tasks),
        adjusted_task_count=len(selected),
        reason=REASON_TEMPORARY_DIP,
    )


def adjust_goals_for_low_completion(
    today_stats: DailyStats,
    tomorrow_tasks: list[Task],
    recent_stats: list[DailyStats],
    options: GoalAdjustmentOptions | None = None,
    rng: random.Random | None = None,
) -> GoalAdjustment:
    """Decide whether and how to shrink tomorrow's plan."""
    opts = options or GoalAdjustmentOptions()
    completion_rate = today_stats.completion_rate

    if completion_rate is None or completion_rate >= opts.min_completion_rate:
        logger.debug("No goal adjustment needed (rate=%s)", completion_rate)
        return _no_adjustment(tomorrow_tasks, completion_rate)

    average = recent_completion_rate(recent_stats)
    if average is None:
        average = completion_rate

    if average < VERY_LOW_RATE:
        adjustment = _drastic_reduction(tomorrow_tasks, opts, rng)
    elif average < LOW_RATE:
        adjustment = _moderate_reduction(tomorrow_tasks, opts, rng)
    else:
        adjustment = _minor_adjustment(tomorrow_tasks, opts, rng)

    logger.debug(
        "Goal adjustment %s: %d -> %d task(s) (today=%.2f, recent=%.2f)",
        adjustment.type,
        adjustment.original_task_count,
        adjustment.adjusted_task_count,
        completion_rate,
        average,
    )
    return adjustment


# ---------------------------------------------------------------------------
# Realistic goals
# ---------------------------------------------------------------------------


def _max_tasks_for_energy(count: int, energy_level: EnergyLevel) -> int:
    if energy_level == EnergyLevel.LOW:
        return max(2, math.floor(count * 0.3))
    if energy_level == EnergyLevel.HIGH:
        return min(8, count)
    return max(3, math.floor(count * 0.6))


def suggest_realistic_goals(
    tasks: list[Task],
    energy_level: EnergyLevel,
    recent_completion_rate: float,
) -> list[Task]:
    """Pick the pending tasks that are realistic for today."""
    available = [t for t in tasks if t.status == TaskStatus.PENDING]

    max_tasks = _max_tasks_for_energy(len(available), energy_level)
    if recent_completion_rate < LOW_RATE:
        max_tasks = math.floor(max_tasks * 0.7)

    ranked = sorted(available, key=lambda t: realism_score(t, energy_level), reverse=True)
    return ranked[:max_tasks]


# ---------------------------------------------------------------------------
# Applying results (caller side)
# ---------------------------------------------------------------------------


def accept_goal_adjustment(tasks: list[Task], suggested_tasks: list[Task]) -> list[Task]:
    """Return copies of *tasks* with every unselected pending task postponed."""
    keep = {t.id for t in suggested_tasks}
    return [
        replace(t, status=TaskStatus.POSTPONED, postponed_count=t.postponed_count + 1)
        if t.status == TaskStatus.PENDING and t.id not in keep
        else replace(t)
        for t in tasks
    ]


def apply_realistic_goals(tasks: list[Task], realistic_tasks: list[Task]) -> list[Task]:
    """Return copies of *tasks* with unselected pending tasks lowered one step."""
    keep = {t.id for t in realistic_tasks}
    return [
        replace(t, priority=lower_priority(t.priority))
        if t.status == TaskStatus.PENDING and t.id not in keep
        else replace(t)
        for t in tasks
    ]
