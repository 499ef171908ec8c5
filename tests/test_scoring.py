from focusplan.models import EnergyLevel, Priority, Subtask, Task
from focusplan.scoring import (
    KeywordCreativityDetector,
    energy_weight,
    is_complex_task,
    is_creative_task,
    lower_priority,
    raise_priority,
    realism_score,
)


def _subtasks(n):
    return [Subtask(f"s-{i}", f"step {i}", 10) for i in range(n)]


def test_priority_steps():
    assert raise_priority(Priority.LOW) == Priority.MEDIUM
    assert raise_priority(Priority.MEDIUM) == Priority.HIGH
    assert raise_priority(Priority.HIGH) == Priority.HIGH
    assert lower_priority(Priority.HIGH) == Priority.MEDIUM
    assert lower_priority(Priority.LOW) == Priority.LOW


def test_creative_keywords():
    for title in ["디자인 작업", "아이디어 회의", "브레인스토밍 세션", "창작 글쓰기", "서비스 기획", "DB 설계"]:
        assert is_creative_task(Task("T-1", title, 45))
    assert not is_creative_task(Task("T-1", "데이터 분석", 45))
    assert is_creative_task(Task("T-1", "meeting", 45, description="아이디어 정리"))


def test_creativity_detector_is_replaceable():
    english = KeywordCreativityDetector(["Design", "brainstorm"])
    assert english(Task("T-1", "UI DESIGN review", 45))
    assert not english(Task("T-1", "디자인 작업", 45))


def test_complexity():
    assert is_complex_task(Task("T-1", "x", 90))
    assert is_complex_task(Task("T-1", "x", 20, subtasks=_subtasks(4)))
    assert not is_complex_task(Task("T-1", "x", 60, subtasks=_subtasks(3)))


def test_energy_weight_low():
    assert energy_weight(Task("T-1", "x", 15), EnergyLevel.LOW) == 3
    assert energy_weight(Task("T-1", "기획", 120), EnergyLevel.LOW) == 3
    assert energy_weight(Task("T-1", "x", 90), EnergyLevel.LOW) == 1
    assert energy_weight(Task("T-1", "x", 45), EnergyLevel.LOW) == 2


def test_energy_weight_medium_ignores_task():
    assert energy_weight(Task("T-1", "x", 15), EnergyLevel.MEDIUM) == 2
    assert energy_weight(Task("T-1", "x", 300), EnergyLevel.MEDIUM) == 2


def test_energy_weight_high():
    assert energy_weight(Task("T-1", "x", 90, subtasks=_subtasks(4)), EnergyLevel.HIGH) == 3
    assert energy_weight(Task("T-1", "x", 15), EnergyLevel.HIGH) == 1
    assert energy_weight(Task("T-1", "x", 45), EnergyLevel.HIGH) == 2


def test_energy_weight_uses_injected_predicate():
    task = Task("T-1", "x", 45)
    assert energy_weight(task, EnergyLevel.LOW, is_creative=lambda t: True) == 3


def test_realism_score():
    fixed_high = Task("T-1", "x", 15, priority=Priority.HIGH, is_flexible=False, postponed_count=2)
    # 30 + 15 (short, low energy) + 20 (fixed) + 10 (postponed twice)
    assert realism_score(fixed_high, EnergyLevel.LOW) == 75

    long_low = Task("T-2", "x", 90, priority=Priority.LOW)
    assert realism_score(long_low, EnergyLevel.LOW) == 0
    assert realism_score(long_low, EnergyLevel.HIGH) == 25
    assert realism_score(long_low, EnergyLevel.MEDIUM) == 15
