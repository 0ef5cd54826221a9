# ABOUTME: Verifies the risk CLI exposes every engine view and runs against CSV snapshots.
# ABOUTME: Uses Typer's test runner with a temporary snapshot directory.

from pathlib import Path

import pandas as pd
from typer.testing import CliRunner

from scripts import risk_cli

runner = CliRunner()


def _write_snapshot(root: Path) -> Path:
    data_dir = root / "data"
    data_dir.mkdir()
    (data_dir / "students.csv").write_text("id,name\n1,Luca Rossi\n2,Anna Bruno\n", encoding="utf-8")
    (data_dir / "subjects.csv").write_text("id,name,teacher_id\nm,Matematica,t\n", encoding="utf-8")
    (data_dir / "teachers.csv").write_text("id,name\nt,Giuseppe Verdi\n", encoding="utf-8")
    (data_dir / "schedule.csv").write_text("subject_id,day_of_week\nm,1\n", encoding="utf-8")
    (data_dir / "interrogations.csv").write_text(
        "id,student_id,subject_id,date,grade\n1,1,m,2024-02-26,8\n", encoding="utf-8"
    )
    return data_dir


def test_cli_registers_engine_commands():
    command_names = {cmd.name or cmd.callback.__name__ for cmd in risk_cli.app.registered_commands}
    assert {"risk", "dashboard", "weekly", "class-stats", "history", "next-day", "check", "export", "roster"} <= command_names


def test_risk_command_prints_explanation(tmp_path):
    data_dir = _write_snapshot(tmp_path)
    result = runner.invoke(
        risk_cli.app,
        ["risk", "--student-id", "2", "--subject-id", "m", "--date", "2024-03-04", "--data-dir", str(data_dir)],
    )
    assert result.exit_code == 0, result.output
    assert "100.0%" in result.output
    assert "A rischio" in result.output


def test_unknown_student_exits_with_error(tmp_path):
    data_dir = _write_snapshot(tmp_path)
    result = runner.invoke(risk_cli.app, ["dashboard", "--student-id", "99", "--data-dir", str(data_dir)])
    assert result.exit_code == 1
    assert "Unknown student id 99" in result.output


def test_bad_date_is_rejected(tmp_path):
    data_dir = _write_snapshot(tmp_path)
    result = runner.invoke(
        risk_cli.app, ["dashboard", "--student-id", "1", "--date", "04/03/2024", "--data-dir", str(data_dir)]
    )
    assert result.exit_code != 0


def test_next_day_skips_weekend(tmp_path):
    data_dir = _write_snapshot(tmp_path)
    result = runner.invoke(risk_cli.app, ["next-day", "--date", "2024-03-08", "--data-dir", str(data_dir)])
    assert result.exit_code == 0
    assert result.output.strip() == "2024-03-11"


def test_check_flags_inconsistent_snapshot(tmp_path):
    data_dir = _write_snapshot(tmp_path)
    assert runner.invoke(risk_cli.app, ["check", "--data-dir", str(data_dir)]).exit_code == 0

    (data_dir / "vacations.csv").write_text("id,date\n1,2024-02-26\n", encoding="utf-8")
    result = runner.invoke(risk_cli.app, ["check", "--data-dir", str(data_dir)])
    assert result.exit_code == 1
    assert "interrogation_on_vacation" in result.output


def test_export_writes_csv_reports(tmp_path):
    data_dir = _write_snapshot(tmp_path)
    out = tmp_path / "reports"
    result = runner.invoke(
        risk_cli.app,
        ["export", "--student-id", "1", "--date", "2024-03-04", "--output-dir", str(out), "--data-dir", str(data_dir)],
    )
    assert result.exit_code == 0, result.output

    stats = pd.read_csv(out / "class_stats_m_2024-03-04.csv")
    assert stats["student_name"].tolist() == ["Anna Bruno", "Luca Rossi"]
    assert stats["status"].tolist() == ["at-risk", "already-interrogated"]
    history = pd.read_csv(out / "history_1_m.csv")
    assert history["date"].tolist() == ["2024-02-26"]
    assert (out / "weekly_1_2024-03-04.csv").exists()
