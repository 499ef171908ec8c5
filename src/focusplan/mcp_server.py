"""MCP server for focusplan: exposes planning tools to AI assistants."""

from __future__ import annotations

import json
from datetime import date

from mcp.server.fastmcp import FastMCP

from focusplan.config import PlannerConfig
from focusplan.goals import (
    accept_goal_adjustment,
    adjust_goals_for_low_completion,
    recent_completion_rate,
    suggest_realistic_goals,
)
from focusplan.models import EnergyLevel, Priority, Task, TaskStatus
from focusplan.persistence import Store, validate_duration
from focusplan.scheduler import (
    adjust_priority_on_postpone,
    build_daily_schedule,
    postpone_task as scheduler_postpone_task,
    recommend_tasks_by_energy,
)

RECENT_DAYS = 7

mcp = FastMCP(
    "focusplan",
    instructions="""\
focusplan is a gentle daily planner for people who struggle with attention \
regulation. Tasks have an estimated duration in minutes, a priority \
(low, medium, high), and are either fixed (must happen as scheduled) or \
flexible (can be moved around).

Key concepts:
- **Energy level**: low, medium or high. Low energy favours short (<= 30 min) \
or creative tasks; high energy favours long or complex tasks; medium energy \
orders by priority only.
- **Fixed tasks** always come first in the day's schedule and are never \
dropped to make room for flexible ones.
- **Postponing** a task raises its priority one step (low -> medium -> high).
- **Goal adjustment**: when the latest logged day's completion rate is below \
the threshold, tomorrow's plan is shrunk. Messages are encouraging, never blaming.

Typical workflow:
1. Use add_task to create tasks
2. Use get_schedule with the user's energy level to plan the day
3. Use recommend_tasks when the user asks what fits their energy right now
4. Use postpone_task when the user can't get to something
5. Use adjust_goals at the end of the day, suggest_goals in the morning\
""",
)


def _get_store() -> Store:
    return Store()


def _load(store: Store):
    config, tasks, stats = store.load()
    return config or PlannerConfig(), tasks, stats


def _task_to_dict(t: Task) -> dict:
    """Convert a task to a JSON-friendly dict with its id."""
    d = {"id": t.id}
    d.update(t.to_dict())
    return d


# ---------------------------------------------------------------------------
# Write tools
# ---------------------------------------------------------------------------


@mcp.tool()
def add_task(
    title: str,
    estimated_duration: int,
    priority: str = "medium",
    category: str = "work",
    is_flexible: bool = True,
    description: str | None = None,
) -> str:
    """Add a new pending task.

    Args:
        title: Task title
        estimated_duration: Estimated duration in minutes (5-480)
        priority: low, medium or high
        category: Display label (e.g. work, personal, study)
        is_flexible: False for a fixed-schedule task
        description: Optional free-text description
    """
    try:
        validate_duration(estimated_duration)
        prio = Priority(priority)
    except ValueError as e:
        return f"Error: {e}"

    store = _get_store()
    try:
        config, tasks, stats = _load(store)
    except ValueError as e:
        return f"Error: {e}"
    tid = store.generate_id(tasks)
    tasks[tid] = Task(
        id=tid,
        title=title,
        estimated_duration=estimated_duration,
        priority=prio,
        category=category,
        is_flexible=is_flexible,
        description=description or "",
    )
    store.save(config, tasks, stats)
    return json.dumps(_task_to_dict(tasks[tid]), indent=2, ensure_ascii=False)


@mcp.tool()
def postpone_task(task_id: str) -> str:
    """Postpone a task. Its priority is raised one step for next time.

    Args:
        task_id: The task ID (e.g. "T-3")
    """
    store = _get_store()
    try:
        config, tasks, stats = _load(store)
    except ValueError as e:
        return f"Error: {e}"
    if task_id not in tasks:
        return f"Error: Task {task_id} not found."

    adjustments = adjust_priority_on_postpone(
        list(tasks.values()), task_id, config.scheduling_options()
    )
    updated = scheduler_postpone_task(list(tasks.values()), task_id)
    store.save(config, {u.id: u for u in updated}, stats)

    result = {
        "task_id": task_id,
        "adjustments": [a.to_dict() for a in adjustments],
    }
    return json.dumps(result, indent=2)


# ---------------------------------------------------------------------------
# Read tools
# ---------------------------------------------------------------------------


@mcp.tool()
def list_tasks(status: str | None = None) -> str:
    """List tasks, optionally filtered by status.

    Args:
        status: pending, in-progress, postponed or completed
    """
    store = _get_store()
    try:
        _, tasks, _ = _load(store)
    except ValueError as e:
        return f"Error: {e}"
    filtered = list(tasks.values())
    if status:
        try:
            sf = TaskStatus(status)
        except ValueError:
            return f"Error: Invalid status '{status}'."
        filtered = [t for t in filtered if t.status == sf]
    return json.dumps([_task_to_dict(t) for t in filtered], indent=2, ensure_ascii=False)


@mcp.tool()
def get_schedule(energy_level: str = "medium") -> str:
    """Today's ordered plan: fixed tasks first, flexible tasks by energy fit.

    Args:
        energy_level: low, medium or high
    """
    try:
        energy = EnergyLevel(energy_level)
    except ValueError:
        return f"Error: Invalid energy level '{energy_level}'."

    store = _get_store()
    try:
        config, tasks, _ = _load(store)
    except ValueError as e:
        return f"Error: {e}"
    plan = build_daily_schedule(
        list(tasks.values()),
        energy,
        date.today(),
        config.scheduling_options(),
        config.creativity_detector(),
    )
    result = plan.to_dict()
    result["tasks"] = [_task_to_dict(t) for t in plan.tasks]
    return json.dumps(result, indent=2, ensure_ascii=False)


@mcp.tool()
def recommend_tasks(energy_level: str = "medium") -> str:
    """Pending tasks that suit the user's current energy level.

    Args:
        energy_level: low, medium or high
    """
    try:
        energy = EnergyLevel(energy_level)
    except ValueError:
        return f"Error: Invalid energy level '{energy_level}'."

    store = _get_store()
    try:
        config, tasks, _ = _load(store)
    except ValueError as e:
        return f"Error: {e}"
    recommended = recommend_tasks_by_energy(
        list(tasks.values()), energy, config.creativity_detector()
    )
    return json.dumps([_task_to_dict(t) for t in recommended], indent=2, ensure_ascii=False)


@mcp.tool()
def adjust_goals(accept: bool = False) -> str:
    """Check the latest logged day and suggest a lighter plan for tomorrow.

    Args:
        accept: If true, postpone the pending tasks left out of the suggestion
    """
    store = _get_store()
    try:
        config, tasks, stats = _load(store)
    except ValueError as e:
        return f"Error: {e}"
    if not stats:
        return "Error: No daily stats logged yet."

    tomorrow = [t for t in tasks.values() if t.status == TaskStatus.PENDING]
    adjustment = adjust_goals_for_low_completion(
        stats[-1], tomorrow, stats[:-1][-RECENT_DAYS:], config.goal_options()
    )
    if accept:
        updated = accept_goal_adjustment(list(tasks.values()), adjustment.suggested_tasks)
        store.save(config, {u.id: u for u in updated}, stats)

    return json.dumps(adjustment.to_dict(), indent=2, ensure_ascii=False)


@mcp.tool()
def suggest_goals(energy_level: str = "medium") -> str:
    """A realistic subset of pending tasks for today.

    Args:
        energy_level: low, medium or high
    """
    try:
        energy = EnergyLevel(energy_level)
    except ValueError:
        return f"Error: Invalid energy level '{energy_level}'."

    store = _get_store()
    try:
        _, tasks, stats = _load(store)
    except ValueError as e:
        return f"Error: {e}"
    rate = recent_completion_rate(stats[-RECENT_DAYS:])
    realistic = suggest_realistic_goals(
        list(tasks.values()), energy, rate if rate is not None else 1.0
    )
    return json.dumps([_task_to_dict(t) for t in realistic], indent=2, ensure_ascii=False)


def main():
    """Entry point for the MCP server."""
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
