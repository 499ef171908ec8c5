import json

from focusplan.mcp_server import (
    add_task,
    adjust_goals,
    get_schedule,
    list_tasks,
    postpone_task,
    recommend_tasks,
    suggest_goals,
)
from focusplan.models import DailyStats
from focusplan.persistence import Store


def test_add_and_schedule(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)

    add_task("Flex", 30, priority="high")
    created = json.loads(add_task("Meeting", 60, is_flexible=False))
    assert created["id"] == "T-2"

    plan = json.loads(get_schedule("medium"))
    assert plan["task_ids"] == ["T-2", "T-1"]
    assert plan["total_estimated_time"] == 90


def test_add_task_validation(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)

    assert add_task("Too long", 1000).startswith("Error:")
    assert add_task("Odd", 30, priority="urgent").startswith("Error:")
    assert get_schedule("sleepy").startswith("Error:")


def test_postpone_task_tool(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)

    add_task("Laundry", 20, priority="low")
    result = json.loads(postpone_task("T-1"))
    assert result["adjustments"][0]["new_priority"] == "medium"
    assert result["adjustments"][0]["reason"] == "postponed"

    postponed = json.loads(list_tasks("postponed"))
    assert [t["id"] for t in postponed] == ["T-1"]
    assert postpone_task("T-9").startswith("Error:")


def test_recommend_and_suggest(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)

    add_task("Long report", 120)
    add_task("Short reply", 10)
    low = json.loads(recommend_tasks("low"))
    assert [t["id"] for t in low] == ["T-2"]

    suggested = json.loads(suggest_goals("high"))
    assert [t["id"] for t in suggested] == ["T-1", "T-2"]


def test_adjust_goals_tool(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)

    assert adjust_goals().startswith("Error:")

    for i in range(5):
        add_task(f"Task {i}", 30)
    store = Store()
    config, tasks, _ = store.load()
    store.save(config, tasks, [DailyStats.from_dict({"date": "2026-03-02", "tasks_planned": 5, "tasks_completed": 0})])

    result = json.loads(adjust_goals(accept=True))
    assert result["type"] == "reduce_tasks"
    assert result["adjusted_task_count"] == 2

    remaining = json.loads(list_tasks("pending"))
    assert {t["id"] for t in remaining} == set(result["suggested_task_ids"])


def test_malformed_snapshot_returns_error(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)

    (tmp_path / "focusplan.json").write_text(
        json.dumps({"stats": [{"date": "2026-03-01", "tasks_planned": 3}]})
    )
    for result in (list_tasks(), get_schedule("low"), adjust_goals(), suggest_goals(), add_task("x", 30)):
        assert result.startswith("Error:")
        assert "tasks_completed" in result
