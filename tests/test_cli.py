import json

from typer.testing import CliRunner

from focusplan.cli import app

runner = CliRunner()


def _add(*args):
    result = runner.invoke(app, ["add", *args])
    assert result.exit_code == 0, result.stdout
    return result


def test_schedule_puts_fixed_first_and_fits_energy(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)

    _add("Standup", "-d", "60", "--fixed")
    _add("Quick email", "-d", "10")
    _add("Deep work", "-d", "120", "-p", "high")
    runner.invoke(app, ["add", "Old chore", "-d", "20"])
    runner.invoke(app, ["set-status", "T-4", "completed"])

    result = runner.invoke(app, ["schedule", "-e", "low"])
    assert result.exit_code == 0, result.stdout
    out = result.stdout
    assert "low energy" in out
    assert out.index("T-1") < out.index("T-2") < out.index("T-3")
    assert "T-4" not in out
    assert "3 task(s), 190 min" in out


def test_max_daily_tasks_from_config(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)

    runner.invoke(app, ["init", "--max-daily-tasks", "2"])
    for name in ["a", "b", "c"]:
        _add(name, "-d", "30")

    result = runner.invoke(app, ["schedule"])
    assert "2 task(s)" in result.stdout


def test_add_rejects_bad_duration(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)

    result = runner.invoke(app, ["add", "Marathon", "-d", "600"])
    assert result.exit_code == 1
    assert "between 5 and 480" in result.stdout


def test_recommend_low_energy(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)

    _add("Report", "-d", "90")
    _add("디자인 시안", "-d", "45")
    _add("Reply", "-d", "15")

    result = runner.invoke(app, ["recommend", "-e", "low"])
    assert result.exit_code == 0
    assert "T-1" not in result.stdout
    assert result.stdout.index("T-3") < result.stdout.index("T-2")


def test_postpone_apply(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)

    _add("Taxes", "-d", "60", "-p", "medium")
    result = runner.invoke(app, ["postpone", "T-1", "--apply"])
    assert result.exit_code == 0, result.stdout
    assert "medium -> high" in result.stdout

    raw = json.loads((tmp_path / "focusplan.json").read_text(encoding="utf-8"))
    assert raw["tasks"]["T-1"]["status"] == "postponed"
    assert raw["tasks"]["T-1"]["priority"] == "high"
    assert raw["tasks"]["T-1"]["postponed_count"] == 1


def test_postpone_unknown_task(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)

    result = runner.invoke(app, ["postpone", "T-99"])
    assert result.exit_code == 1
    assert "not found" in result.stdout


def test_adjust_goals_after_bad_week(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)

    for i in range(10):
        _add(f"Task {i}", "-d", "30")
    runner.invoke(app, ["log-day", "--date", "2026-03-01", "--planned", "5", "--completed", "1"])
    result = runner.invoke(app, ["log-day", "--date", "2026-03-02", "--planned", "10", "--completed", "2"])
    assert "2/10 (20%)" in result.stdout

    result = runner.invoke(app, ["adjust-goals", "--apply", "--seed", "1"])
    assert result.exit_code == 0, result.stdout
    assert "10 -> 4" in result.stdout
    assert "6 task(s) moved to postponed" in result.stdout

    result = runner.invoke(app, ["list", "--status", "postponed"])
    assert "Showing 6 of 10 tasks" in result.stdout


def test_adjust_goals_good_day_keeps_plan(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)

    _add("One", "-d", "30")
    runner.invoke(app, ["log-day", "--planned", "4", "--completed", "4"])
    result = runner.invoke(app, ["adjust-goals", "--apply"])
    assert "1 -> 1" in result.stdout
    assert "Accepted" not in result.stdout


def test_adjust_goals_requires_stats(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)

    result = runner.invoke(app, ["adjust-goals"])
    assert result.exit_code == 1
    assert "log-day" in result.stdout


def test_suggest_uses_history(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)

    for i in range(10):
        _add(f"Task {i}", "-d", "30")

    result = runner.invoke(app, ["suggest", "-e", "medium"])
    assert "Recent completion rate: 100%" in result.stdout

    runner.invoke(app, ["log-day", "--date", "2026-03-01", "--planned", "10", "--completed", "3"])
    result = runner.invoke(app, ["suggest", "-e", "medium", "--apply"])
    assert "Recent completion rate: 30%" in result.stdout
    assert "Lowered" in result.stdout


def test_custom_db_path(tmp_path):
    db = tmp_path / "plan.json"
    result = runner.invoke(app, ["--db", str(db), "add", "Walk", "-d", "20"])
    assert result.exit_code == 0
    assert db.exists()


def test_schedule_with_offset_timestamp_in_snapshot(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)

    snapshot = {
        "tasks": {
            "T-1": {
                "title": "Standup",
                "estimated_duration": 15,
                "is_flexible": False,
                "created_at": "2026-03-01T09:00:00+09:00",
            }
        }
    }
    (tmp_path / "focusplan.json").write_text(json.dumps(snapshot))
    _add("Review", "-d", "30", "--fixed")

    for args in (["schedule"], ["recommend", "-e", "medium"]):
        result = runner.invoke(app, args)
        assert result.exit_code == 0, result.stdout
        assert result.stdout.index("T-1") < result.stdout.index("T-2")


def test_malformed_stats_reported_as_error(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)

    (tmp_path / "focusplan.json").write_text(
        json.dumps({"stats": [{"date": "2026-03-01", "tasks_planned": 3}]})
    )
    result = runner.invoke(app, ["adjust-goals"])
    assert result.exit_code == 1
    assert "tasks_completed" in result.stdout
