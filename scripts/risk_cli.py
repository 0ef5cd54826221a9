# ABOUTME: Provides a CLI that reports interrogation risk from a class snapshot directory.
# ABOUTME: Wraps every engine view (single risk, dashboards, class stats, history) in Rich tables.

from datetime import date as _date
from pathlib import Path
from typing import Iterable, Optional

import typer
from rich.console import Console
from rich.table import Table

from src.common.names import initials, sort_by_surname
from src.common.school_calendar import format_date, format_date_short, parse_iso_date
from src.common.schemas import ClassSnapshot
from src.common.snapshot_io import load_snapshot
from src.common.validation import check_snapshot
from src.risk_engine.aggregators import (
    calculate_all_risks,
    calculate_dashboard,
    calculate_weekly,
    class_stats,
    get_next_school_day,
    subject_history,
)
from src.risk_engine.evaluator import calculate_risk
from src.risk_engine.levels import RiskLevel, risk_level, status_label
from src.risk_engine.reports import (
    class_stats_frame,
    history_frame,
    status_summary,
    subject_risks_frame,
    weekly_frame,
)

console = Console()
app = typer.Typer(help="Estimate who is likely to be called for an oral exam.")

LEVEL_STYLES = {
    RiskLevel.NULL: "green",
    RiskLevel.LOW: "cyan",
    RiskLevel.MEDIUM: "yellow",
    RiskLevel.HIGH: "red",
    RiskLevel.CRITICAL: "bold red",
}


def _default_data_dir() -> Path:
    return Path("data")


def _load(data_dir: Path, config: Optional[Path]) -> ClassSnapshot:
    try:
        return load_snapshot(data_dir, config)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--data-dir/--config") from exc


def _resolve_date(snapshot: ClassSnapshot, date: Optional[str]) -> str:
    """Explicit dates are taken as-is; otherwise use the next lesson day after today."""

    if date:
        try:
            parse_iso_date(date)
        except ValueError as exc:
            raise typer.BadParameter(str(exc), param_hint="--date") from exc
        return date
    return get_next_school_day(snapshot, _date.today().strftime("%Y-%m-%d"))


def _require_student(snapshot: ClassSnapshot, student_id: str) -> None:
    if snapshot.find_student(student_id) is None:
        console.print(f"[red]Unknown student id {student_id}[/red]")
        raise typer.Exit(code=1)


def _require_subject(snapshot: ClassSnapshot, subject_id: str) -> None:
    if snapshot.find_subject(subject_id) is None:
        console.print(f"[red]Unknown subject id {subject_id}[/red]")
        raise typer.Exit(code=1)


def _styled_risk(risk: float) -> str:
    style = LEVEL_STYLES[risk_level(risk)]
    return f"[{style}]{risk:.1f}%[/{style}]"


def _subject_table(items: Iterable) -> Table:
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Subject")
    table.add_column("Teacher")
    table.add_column("Risk", justify="right")
    table.add_column("Status")
    table.add_column("Explanation")
    for item in items:
        table.add_row(
            item.subject_name,
            item.teacher_name,
            _styled_risk(item.risk),
            status_label(item.status),
            item.explanation,
        )
    return table


DATA_DIR_OPTION = typer.Option(_default_data_dir(), "--data-dir", help="Directory holding the snapshot CSV tables.")
CONFIG_OPTION = typer.Option(None, "--config", help="Risk config YAML; defaults to <data-dir>/config.yaml.")
DATE_OPTION = typer.Option(None, "--date", help="ISO date; defaults to the next school day.")


@app.command()
def roster(
    data_dir: Path = DATA_DIR_OPTION,
    config: Optional[Path] = CONFIG_OPTION,
) -> None:
    """
    List the class ordered by surname.
    """
    snapshot = _load(data_dir, config)
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("ID")
    table.add_column("")
    table.add_column("Student")
    for student in sort_by_surname(snapshot.students):
        table.add_row(str(student.id), initials(student.name), student.name)
    console.print(table)


@app.command()
def risk(
    student_id: str = typer.Option(..., "--student-id", help="Student identifier."),
    subject_id: str = typer.Option(..., "--subject-id", help="Subject identifier."),
    date: Optional[str] = DATE_OPTION,
    data_dir: Path = DATA_DIR_OPTION,
    config: Optional[Path] = CONFIG_OPTION,
) -> None:
    """
    Explain the risk for one student, subject, and day.
    """
    snapshot = _load(data_dir, config)
    _require_student(snapshot, student_id)
    _require_subject(snapshot, subject_id)
    day = _resolve_date(snapshot, date)

    result = calculate_risk(snapshot, student_id, subject_id, day)
    subject = snapshot.find_subject(subject_id)
    console.rule(f"[bold blue]{subject.name} — {format_date(day)}[/bold blue]")
    console.print(f"[bold]Risk:[/] {_styled_risk(result.risk)}")
    console.print(f"[bold]Status:[/] {status_label(result.status)}")
    console.print(f"[bold]Why:[/] {result.explanation}")
    if result.eligible is not None:
        console.print(
            f"  slots={result.slots} eligible={result.eligible} interrogated={result.interrogated} "
            f"absent={result.absent} volunteers={result.volunteers}"
        )


@app.command()
def dashboard(
    student_id: str = typer.Option(..., "--student-id", help="Student identifier."),
    date: Optional[str] = DATE_OPTION,
    all_subjects: bool = typer.Option(False, "--all", help="Include subjects not taught that day."),
    data_dir: Path = DATA_DIR_OPTION,
    config: Optional[Path] = CONFIG_OPTION,
) -> None:
    """
    List the day's subjects ordered by risk.
    """
    snapshot = _load(data_dir, config)
    _require_student(snapshot, student_id)
    day = _resolve_date(snapshot, date)

    items = calculate_all_risks(snapshot, student_id, day) if all_subjects else calculate_dashboard(snapshot, student_id, day)
    student = snapshot.find_student(student_id)
    console.rule(f"[bold blue]{student.name} — {format_date(day)}[/bold blue]")
    if not items:
        console.print("[yellow]No subjects found for this day.[/yellow]")
        return
    console.print(_subject_table(items))


@app.command()
def weekly(
    student_id: str = typer.Option(..., "--student-id", help="Student identifier."),
    date: Optional[str] = DATE_OPTION,
    data_dir: Path = DATA_DIR_OPTION,
    config: Optional[Path] = CONFIG_OPTION,
) -> None:
    """
    Show the risk of every lesson in the week containing the date.
    """
    snapshot = _load(data_dir, config)
    _require_student(snapshot, student_id)
    day = _resolve_date(snapshot, date)

    week = calculate_weekly(snapshot, student_id, day)
    table = Table(show_header=True, header_style="bold magenta")
    for d in week:
        table.add_column(format_date_short(d))
    depth = max((len(items) for items in week.values()), default=0)
    for row in range(depth):
        cells = []
        for items in week.values():
            if row < len(items):
                cells.append(f"{items[row].subject_name} {_styled_risk(items[row].risk)}")
            else:
                cells.append("")
        table.add_row(*cells)
    if depth == 0:
        table.add_row(*["No lessons"] * len(week))
    console.print(table)


@app.command("class-stats")
def class_stats_cmd(
    subject_id: str = typer.Option(..., "--subject-id", help="Subject identifier."),
    date: Optional[str] = DATE_OPTION,
    data_dir: Path = DATA_DIR_OPTION,
    config: Optional[Path] = CONFIG_OPTION,
) -> None:
    """
    Show every student's risk for one subject and day.
    """
    snapshot = _load(data_dir, config)
    _require_subject(snapshot, subject_id)
    day = _resolve_date(snapshot, date)

    stats = class_stats(snapshot, subject_id, day)
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("")
    table.add_column("Student")
    table.add_column("Risk", justify="right")
    table.add_column("Status")
    for s in stats:
        table.add_row(s.initials, s.student_name, _styled_risk(s.risk), status_label(s.status))
    console.print(table)

    summary = status_summary(stats)
    for _, row in summary.iterrows():
        console.print(f"  {row['label']}: {row['count']}")


@app.command()
def history(
    student_id: str = typer.Option(..., "--student-id", help="Student identifier."),
    subject_id: str = typer.Option(..., "--subject-id", help="Subject identifier."),
    data_dir: Path = DATA_DIR_OPTION,
    config: Optional[Path] = CONFIG_OPTION,
) -> None:
    """
    List a student's past interrogations in a subject, newest first.
    """
    snapshot = _load(data_dir, config)
    _require_student(snapshot, student_id)
    _require_subject(snapshot, subject_id)

    past = subject_history(snapshot, student_id, subject_id)
    if not past:
        console.print("[yellow]No interrogations recorded.[/yellow]")
        return
    for i in past:
        grade = f"{i.grade:g}/10" if i.grade is not None else "—"
        console.print(f"{format_date(i.date)}  {grade}")


@app.command("next-day")
def next_day(
    date: Optional[str] = typer.Option(None, "--date", help="ISO date to start from; defaults to today."),
    data_dir: Path = DATA_DIR_OPTION,
    config: Optional[Path] = CONFIG_OPTION,
) -> None:
    """
    Print the next lesson day, skipping weekends and vacations.
    """
    snapshot = _load(data_dir, config)
    start = date or _date.today().strftime("%Y-%m-%d")
    try:
        typer.echo(get_next_school_day(snapshot, start))
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--date") from exc


@app.command()
def check(
    data_dir: Path = DATA_DIR_OPTION,
    config: Optional[Path] = CONFIG_OPTION,
) -> None:
    """
    Report records that break the engine's assumptions.
    """
    snapshot = _load(data_dir, config)
    issues = check_snapshot(snapshot)
    if not issues:
        console.print("[green]✅ Snapshot is consistent[/green]")
        return
    for issue in issues:
        color = {"low": "yellow", "medium": "orange3", "high": "red"}.get(issue.severity, "white")
        console.print(f"[{color}]{issue.kind} ({issue.severity})[/{color}] {issue.message}")
        for k, v in issue.evidence.items():
            console.print(f"  {k}: {v}")
    raise typer.Exit(code=1)


@app.command()
def export(
    student_id: str = typer.Option(..., "--student-id", help="Student identifier for the personal views."),
    date: Optional[str] = DATE_OPTION,
    output_dir: Path = typer.Option(Path("reports"), "--output-dir", help="Directory to write CSV reports."),
    data_dir: Path = DATA_DIR_OPTION,
    config: Optional[Path] = CONFIG_OPTION,
) -> None:
    """
    Write the student's dashboard, week, and per-subject class statistics as CSV.
    """
    snapshot = _load(data_dir, config)
    _require_student(snapshot, student_id)
    day = _resolve_date(snapshot, date)
    output_dir.mkdir(parents=True, exist_ok=True)

    subject_risks_frame(calculate_all_risks(snapshot, student_id, day)).to_csv(
        output_dir / f"dashboard_{student_id}_{day}.csv", index=False
    )
    weekly_frame(calculate_weekly(snapshot, student_id, day)).to_csv(
        output_dir / f"weekly_{student_id}_{day}.csv", index=False
    )
    for subject in snapshot.subjects:
        class_stats_frame(class_stats(snapshot, subject.id, day)).to_csv(
            output_dir / f"class_stats_{subject.id}_{day}.csv", index=False
        )
        history_frame(subject_history(snapshot, student_id, subject.id)).to_csv(
            output_dir / f"history_{student_id}_{subject.id}.csv", index=False
        )
    console.print(f"[bold]Reports for {len(snapshot.subjects)} subjects saved to {output_dir}[/bold]")


if __name__ == "__main__":
    app()
