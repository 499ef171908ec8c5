"""Planner settings stored alongside tasks."""

from __future__ import annotations

from dataclasses import dataclass, field

from focusplan.goals import GoalAdjustmentOptions
from focusplan.scheduler import SchedulingOptions
from focusplan.scoring import CREATIVE_KEYWORDS, KeywordCreativityDetector


@dataclass
class PlannerConfig:
    """Tunables for the scheduler and the goal adjuster."""

    max_daily_tasks: int = 8
    buffer_time: int = 10
    respect_fixed_tasks: bool = True
    consider_energy_level: bool = True
    min_completion_rate: float = 0.5
    goal_max_daily_tasks: int = 6
    encouraging_messages: bool = True
    creative_keywords: list[str] = field(default_factory=lambda: list(CREATIVE_KEYWORDS))

    def scheduling_options(self) -> SchedulingOptions:
        return SchedulingOptions(
            respect_fixed_tasks=self.respect_fixed_tasks,
            consider_energy_level=self.consider_energy_level,
            max_daily_tasks=self.max_daily_tasks,
            buffer_time=self.buffer_time,
        )

    def goal_options(self) -> GoalAdjustmentOptions:
        return GoalAdjustmentOptions(
            min_completion_rate=self.min_completion_rate,
            max_daily_tasks=self.goal_max_daily_tasks,
            encouraging_messages=self.encouraging_messages,
        )

    def creativity_detector(self) -> KeywordCreativityDetector:
        return KeywordCreativityDetector(self.creative_keywords)

    def to_dict(self) -> dict:
        return {
            "max_daily_tasks": self.max_daily_tasks,
            "buffer_time": self.buffer_time,
            "respect_fixed_tasks": self.respect_fixed_tasks,
            "consider_energy_level": self.consider_energy_level,
            "min_completion_rate": self.min_completion_rate,
            "goal_max_daily_tasks": self.goal_max_daily_tasks,
            "encouraging_messages": self.encouraging_messages,
            "creative_keywords": self.creative_keywords,
        }

    @classmethod
    def from_dict(cls, d: dict) -> PlannerConfig:
        return cls(
            max_daily_tasks=d.get("max_daily_tasks", 8),
            buffer_time=d.get("buffer_time", 10),
            respect_fixed_tasks=d.get("respect_fixed_tasks", True),
            consider_energy_level=d.get("consider_energy_level", True),
            min_completion_rate=d.get("min_completion_rate", 0.5),
            goal_max_daily_tasks=d.get("goal_max_daily_tasks", 6),
            encouraging_messages=d.get("encouraging_messages", True),
            creative_keywords=d.get("creative_keywords", list(CREATIVE_KEYWORDS)),
        )
