"""Typer CLI for focusplan."""

from __future__ import annotations

import logging
from datetime import date
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from focusplan.config import PlannerConfig
from focusplan.goals import (
    accept_goal_adjustment,
    adjust_goals_for_low_completion,
    apply_realistic_goals,
    recent_completion_rate,
    suggest_realistic_goals,
)
from focusplan.models import DailyStats, EnergyLevel, Priority, Subtask, Task, TaskStatus
from focusplan.persistence import DEFAULT_DB_FILE, Store, validate_duration
from focusplan.scheduler import (
    adjust_priority_on_postpone,
    build_daily_schedule,
    postpone_task,
    recommend_tasks_by_energy,
)

RECENT_DAYS = 7

app = typer.Typer(
    name="focusplan",
    help="Energy-aware daily planner with gentle goal adjustment.",
    no_args_is_help=True,
)
console = Console()

_state = {"db": DEFAULT_DB_FILE}


@app.callback()
def main(
    db: Annotated[str, typer.Option("--db", help="Path to the snapshot file")] = DEFAULT_DB_FILE,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging")] = False,
) -> None:
    """Energy-aware daily planner."""
    _state["db"] = db
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)-8s [%(name)s:%(lineno)d] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _get_store() -> Store:
    return Store(_state["db"])


def _load(store: Store) -> tuple[PlannerConfig, dict[str, Task], list[DailyStats]]:
    try:
        config, tasks, stats = store.load()
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    return config or PlannerConfig(), tasks, stats


def _require_task(tasks: dict[str, Task], task_id: str) -> Task:
    if task_id not in tasks:
        console.print(f"[red]Task {task_id} not found.[/red]")
        raise typer.Exit(1)
    return tasks[task_id]


def _parse_subtask(raw: str, index: int) -> Subtask:
    """Parse 'Title:minutes' (minutes default to 15)."""
    title, _, minutes = raw.rpartition(":")
    if not title:
        return Subtask(id=f"s-{index}", title=raw.strip(), duration=15)
    if not minutes.strip().isdigit():
        console.print(f"[red]Invalid subtask '{raw}'. Use 'Title:minutes'.[/red]")
        raise typer.Exit(1)
    return Subtask(id=f"s-{index}", title=title.strip(), duration=int(minutes))


def _task_table(tasks: list[Task], title: str, numbered: bool = False) -> Table:
    table = Table(title=title)
    if numbered:
        table.add_column("#")
    table.add_column("ID")
    table.add_column("Title")
    table.add_column("Min")
    table.add_column("Priority")
    table.add_column("Type")
    table.add_column("Status")
    table.add_column("Postponed")

    for i, t in enumerate(tasks, start=1):
        style = "bold" if not t.is_flexible else None
        row = [
            t.id,
            t.title,
            str(t.estimated_duration),
            t.priority.value,
            "fixed" if not t.is_flexible else "flex",
            t.status.value,
            str(t.postponed_count) if t.postponed_count else "-",
        ]
        if numbered:
            row.insert(0, str(i))
        table.add_row(*row, style=style)
    return table


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command()
def init(
    max_daily_tasks: int = 8,
    buffer_time: int = 10,
    min_completion_rate: float = 0.5,
    goal_max_daily_tasks: int = 6,
    respect_fixed: Annotated[bool, typer.Option("--respect-fixed/--ignore-fixed")] = True,
    energy_aware: Annotated[bool, typer.Option("--energy-aware/--priority-only")] = True,
    encouraging: Annotated[bool, typer.Option("--encouraging/--plain")] = True,
    keyword: Annotated[Optional[list[str]], typer.Option("--keyword", "-k", help="Creative keyword (replaces the default set)")] = None,
) -> None:
    """Initialize (or reinitialize) planner configuration."""
    store = _get_store()
    _, tasks, stats = _load(store)
    config = PlannerConfig(
        max_daily_tasks=max_daily_tasks,
        buffer_time=buffer_time,
        respect_fixed_tasks=respect_fixed,
        consider_energy_level=energy_aware,
        min_completion_rate=min_completion_rate,
        goal_max_daily_tasks=goal_max_daily_tasks,
        encouraging_messages=encouraging,
    )
    if keyword:
        config.creative_keywords = list(keyword)
    store.save(config, tasks, stats)
    console.print(f"[green]Planner initialized. Max {max_daily_tasks} tasks/day.[/green]")


@app.command()
def add(
    title: str,
    duration: Annotated[int, typer.Option("--duration", "-d", help="Estimated duration in minutes")],
    priority: Annotated[Priority, typer.Option("--priority", "-p")] = Priority.MEDIUM,
    category: Annotated[str, typer.Option("--category", "-c", help="Display label (e.g. work, study)")] = "work",
    fixed: Annotated[bool, typer.Option("--fixed", help="Fixed-schedule task; never displaced")] = False,
    description: Annotated[Optional[str], typer.Option(help="Free-text description")] = None,
    subtasks: Annotated[Optional[list[str]], typer.Option("--subtask", "-s", help="Subtask as 'Title:minutes'")] = None,
) -> None:
    """Add a new pending task."""
    try:
        validate_duration(duration)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    store = _get_store()
    config, tasks, stats = _load(store)
    tid = store.generate_id(tasks)
    tasks[tid] = Task(
        id=tid,
        title=title,
        estimated_duration=duration,
        priority=priority,
        category=category,
        is_flexible=not fixed,
        description=description or "",
        subtasks=[_parse_subtask(s, i) for i, s in enumerate(subtasks or [], start=1)],
    )
    store.save(config, tasks, stats)
    console.print(f"[green]Added '{title}' as {tid}[/green]")


@app.command("list")
def list_tasks(
    status_filter: Annotated[Optional[str], typer.Option("--status", help="Filter by status")] = None,
) -> None:
    """List all tasks."""
    store = _get_store()
    _, tasks, _ = _load(store)
    if not tasks:
        console.print("No tasks found.")
        return

    filtered = list(tasks.values())
    if status_filter:
        try:
            sf = TaskStatus(status_filter)
        except ValueError:
            valid = ", ".join(s.value for s in TaskStatus)
            console.print(f"[red]Invalid status '{status_filter}'. Use: {valid}[/red]")
            raise typer.Exit(1)
        filtered = [t for t in filtered if t.status == sf]

    if not filtered:
        console.print("No tasks match the filter.")
        return

    console.print(_task_table(filtered, "Tasks"))
    if status_filter:
        console.print(f"[dim]Showing {len(filtered)} of {len(tasks)} tasks[/dim]")


@app.command("set-status")
def set_status(
    task_id: str,
    status: Annotated[TaskStatus, typer.Argument(help="Target status")],
) -> None:
    """Override a task's status directly."""
    store = _get_store()
    config, tasks, stats = _load(store)
    t = _require_task(tasks, task_id)

    if t.status == status:
        console.print(f"{task_id} is already {status.value}.")
        return

    old_status = t.status
    t.status = status
    store.save(config, tasks, stats)
    console.print(f"[green]Set {task_id} from {old_status.value} to {status.value}.[/green]")


@app.command("log-day")
def log_day(
    planned: Annotated[int, typer.Option("--planned", help="Tasks planned for the day")],
    completed: Annotated[int, typer.Option("--completed", help="Tasks completed")],
    day: Annotated[Optional[str], typer.Option("--date", help="Day (YYYY-MM-DD), default today")] = None,
    focus_minutes: int = 0,
) -> None:
    """Record one day's completion stats (replaces an existing entry for that day)."""
    if planned < 0 or completed < 0:
        console.print("[red]Counts must be non-negative.[/red]")
        raise typer.Exit(1)
    try:
        the_day = date.fromisoformat(day) if day else date.today()
    except ValueError:
        console.print(f"[red]Invalid date '{day}'. Use YYYY-MM-DD.[/red]")
        raise typer.Exit(1)

    store = _get_store()
    config, tasks, stats = _load(store)
    stats = [s for s in stats if s.date != the_day]
    entry = DailyStats(
        date=the_day,
        tasks_planned=planned,
        tasks_completed=completed,
        focus_minutes=focus_minutes,
        pomodoros_completed=focus_minutes // 25,
    )
    stats.append(entry)
    stats.sort(key=lambda s: s.date)
    store.save(config, tasks, stats)

    rate = entry.completion_rate
    rate_str = f"{rate:.0%}" if rate is not None else "n/a"
    console.print(f"[green]Logged {the_day.isoformat()}: {completed}/{planned} ({rate_str})[/green]")


@app.command()
def schedule(
    energy: Annotated[EnergyLevel, typer.Option("--energy", "-e", help="Current energy level")] = EnergyLevel.MEDIUM,
) -> None:
    """Today's plan: fixed tasks first, flexible tasks by energy fit."""
    store = _get_store()
    config, tasks, _ = _load(store)

    plan = build_daily_schedule(
        list(tasks.values()),
        energy,
        date.today(),
        config.scheduling_options(),
        config.creativity_detector(),
    )
    if not plan.tasks:
        console.print("No pending tasks to schedule.")
        return

    console.print(_task_table(plan.tasks, f"Today ({energy.value} energy)", numbered=True))
    console.print(
        f"  {len(plan.tasks)} task(s), {plan.total_estimated_time} min "
        f"([dim]{plan.total_with_buffers} min with breaks[/dim])"
    )


@app.command()
def recommend(
    energy: Annotated[EnergyLevel, typer.Option("--energy", "-e", help="Current energy level")] = EnergyLevel.MEDIUM,
) -> None:
    """Tasks that suit your energy right now."""
    store = _get_store()
    config, tasks, _ = _load(store)

    recommended = recommend_tasks_by_energy(
        list(tasks.values()), energy, config.creativity_detector()
    )
    if not recommended:
        console.print("Nothing fits this energy level right now. A short break is fine too.")
        return

    console.print(_task_table(recommended, f"Recommended ({energy.value} energy)", numbered=True))


@app.command()
def postpone(
    task_id: str,
    apply: Annotated[bool, typer.Option("--apply", help="Mark the task postponed and save")] = False,
) -> None:
    """Postpone a task: its priority goes up one step for next time."""
    store = _get_store()
    config, tasks, stats = _load(store)
    t = _require_task(tasks, task_id)

    adjustments = adjust_priority_on_postpone(
        list(tasks.values()), task_id, config.scheduling_options()
    )
    if not adjustments:
        console.print(f"{task_id} is already {t.priority.value} priority; no change needed.")
    for a in adjustments:
        console.print(
            f"  [bold]{a.task_id}[/bold]  {t.priority.value} -> [bold]{a.new_priority.value}[/bold]"
            f"  (position {a.new_position}, {a.reason.value})"
        )

    if apply:
        updated = postpone_task(list(tasks.values()), task_id)
        store.save(config, {u.id: u for u in updated}, stats)
        console.print(f"[green]Postponed {task_id}.[/green]")


@app.command("adjust-goals")
def adjust_goals(
    apply: Annotated[bool, typer.Option("--apply", help="Accept: postpone the tasks left out")] = False,
    seed: Annotated[Optional[int], typer.Option(help="Seed for message phrasing")] = None,
) -> None:
    """Check the latest logged day and suggest a lighter plan if needed."""
    import random

    store = _get_store()
    config, tasks, stats = _load(store)
    if not stats:
        console.print("[red]No daily stats logged. Run 'focusplan log-day' first.[/red]")
        raise typer.Exit(1)

    today_stats = stats[-1]
    recent = stats[:-1][-RECENT_DAYS:]
    tomorrow = [t for t in tasks.values() if t.status == TaskStatus.PENDING]

    adjustment = adjust_goals_for_low_completion(
        today_stats,
        tomorrow,
        recent,
        config.goal_options(),
        random.Random(seed) if seed is not None else None,
    )

    console.print(f"\n  {adjustment.message}")
    console.print(f"  [dim]{adjustment.reason}[/dim]")
    console.print(
        f"  Tasks: {adjustment.original_task_count} -> [bold]{adjustment.adjusted_task_count}[/bold]"
        f"  ({adjustment.type.value})\n"
    )
    if adjustment.suggested_tasks:
        console.print(_task_table(adjustment.suggested_tasks, "Suggested plan"))

    if apply and adjustment.adjusted_task_count < adjustment.original_task_count:
        updated = accept_goal_adjustment(list(tasks.values()), adjustment.suggested_tasks)
        store.save(config, {u.id: u for u in updated}, stats)
        left_out = adjustment.original_task_count - adjustment.adjusted_task_count
        console.print(f"[green]Accepted. {left_out} task(s) moved to postponed.[/green]")


@app.command()
def suggest(
    energy: Annotated[EnergyLevel, typer.Option("--energy", "-e", help="Current energy level")] = EnergyLevel.MEDIUM,
    recent_rate: Annotated[Optional[float], typer.Option(help="Override the recent completion rate (0-1)")] = None,
    apply: Annotated[bool, typer.Option("--apply", help="Lower the priority of tasks left out")] = False,
) -> None:
    """Suggest a realistic set of goals for today."""
    store = _get_store()
    config, tasks, stats = _load(store)

    if recent_rate is None:
        recent_rate = recent_completion_rate(stats[-RECENT_DAYS:])
    if recent_rate is None:
        recent_rate = 1.0

    realistic = suggest_realistic_goals(list(tasks.values()), energy, recent_rate)
    if not realistic:
        console.print("No realistic goals for today. Rest is productive too.")
        return

    console.print(_task_table(realistic, f"Realistic goals ({energy.value} energy)", numbered=True))
    console.print(f"  [dim]Recent completion rate: {recent_rate:.0%}[/dim]")

    if apply:
        updated = apply_realistic_goals(list(tasks.values()), realistic)
        store.save(config, {u.id: u for u in updated}, stats)
        console.print("[green]Lowered the priority of the remaining tasks.[/green]")
