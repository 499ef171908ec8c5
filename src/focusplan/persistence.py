"""JSON snapshot file for tasks, daily stats and planner config."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from focusplan.config import PlannerConfig
from focusplan.models import MAX_DURATION_MINUTES, MIN_DURATION_MINUTES, DailyStats, Task

logger = logging.getLogger(__name__)

DEFAULT_DB_FILE = "focusplan.json"


def validate_duration(minutes: int) -> None:
    """Raise ValueError when a duration is outside the allowed range."""
    if not MIN_DURATION_MINUTES <= minutes <= MAX_DURATION_MINUTES:
        raise ValueError(
            f"Duration must be between {MIN_DURATION_MINUTES} and "
            f"{MAX_DURATION_MINUTES} minutes, got {minutes}"
        )


class Store:
    """Reads and writes the planner snapshot (JSON file)."""

    def __init__(self, db_path: str | Path = DEFAULT_DB_FILE):
        self.db_path = Path(db_path)

    def load(self) -> tuple[PlannerConfig | None, dict[str, Task], list[DailyStats]]:
        """Return (config_or_None, {task_id: Task}, [DailyStats])."""
        if not self.db_path.exists():
            return None, {}, []

        try:
            raw = json.loads(self.db_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {self.db_path}: {e}") from e

        config = None
        if "config" in raw:
            config = PlannerConfig.from_dict(raw["config"])

        tasks: dict[str, Task] = {}
        for tid, tdata in raw.get("tasks", {}).items():
            try:
                task = Task.from_dict(tid, tdata)
            except KeyError as e:
                raise ValueError(f"Task {tid} is missing field {e}") from e
            validate_duration(task.estimated_duration)
            tasks[tid] = task

        stats: list[DailyStats] = []
        for i, sdata in enumerate(raw.get("stats", [])):
            try:
                stats.append(DailyStats.from_dict(sdata))
            except KeyError as e:
                raise ValueError(f"Stats entry {i} is missing field {e}") from e
        stats.sort(key=lambda s: s.date)

        logger.debug("Loaded %d task(s) and %d day(s) from %s", len(tasks), len(stats), self.db_path)
        return config, tasks, stats

    def save(
        self,
        config: PlannerConfig | None,
        tasks: dict[str, Task],
        stats: list[DailyStats],
    ) -> None:
        """Persist config, tasks and stats to disk."""
        raw: dict = {}
        if config is not None:
            raw["config"] = config.to_dict()
        raw["tasks"] = {tid: t.to_dict() for tid, t in tasks.items()}
        raw["stats"] = [s.to_dict() for s in stats]
        self.db_path.write_text(json.dumps(raw, indent=4, ensure_ascii=False), encoding="utf-8")

    def generate_id(self, tasks: dict[str, Task]) -> str:
        """Generate the next T-N id."""
        existing = [
            int(k.split("-")[1]) for k in tasks if k.startswith("T-") and k.split("-")[1].isdigit()
        ]
        next_num = max(existing, default=0) + 1
        return f"T-{next_num}"
