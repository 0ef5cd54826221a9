# ABOUTME: Loads a class snapshot from CSV tables and a YAML risk config.
# ABOUTME: Normalizes blank cells and id types so the engine sees plain records.

from __future__ import annotations

from dataclasses import fields
from pathlib import Path
from typing import Callable, Dict, List, Optional

import pandas as pd
import yaml

from .schemas import (
    Absence,
    ClassSnapshot,
    Interrogation,
    RiskConfig,
    ScheduleEntry,
    Student,
    Subject,
    Teacher,
    Vacation,
    Volunteer,
)

DEFAULT_CONFIG_NAME = "config.yaml"

# file name -> (required columns, optional columns)
TABLE_COLUMNS: Dict[str, tuple] = {
    "students.csv": (["id", "name"], ["first_name", "last_name", "is_class_admin"]),
    "subjects.csv": (["id", "name"], ["teacher_id"]),
    "teachers.csv": (["id", "name"], []),
    "schedule.csv": (["subject_id", "day_of_week"], ["hours", "id"]),
    "interrogations.csv": (["id", "student_id", "subject_id", "date"], ["grade"]),
    "absences.csv": (["id", "student_id", "date"], ["subject_id"]),
    "volunteers.csv": (["id", "student_id", "subject_id", "date"], []),
    "vacations.csv": (["id", "date"], ["note"]),
}

TRUE_VALUES = {"1", "true", "yes", "y", "t"}


def load_risk_config(config_path: Path) -> RiskConfig:
    """
    Read the risk settings YAML into a validated ``RiskConfig``.

    Per-subject averages are keyed by the subject id as a string, matching the
    ids read from the CSV tables.
    """

    with open(config_path) as f:
        cfg = yaml.safe_load(f) or {}
    if not isinstance(cfg, dict):
        raise ValueError(f"Config {config_path} must be a mapping, got {type(cfg).__name__}.")

    allowed = {f.name for f in fields(RiskConfig)}
    unknown = sorted(set(cfg) - allowed)
    if unknown:
        raise ValueError(f"Unknown config keys in {config_path}: {', '.join(unknown)}.")

    averages = cfg.get("avg_interrogations_per_subject_per_day") or {}
    cfg["avg_interrogations_per_subject_per_day"] = {str(k): int(v) for k, v in averages.items()}
    return RiskConfig(**cfg)


def _read_table(data_dir: Path, name: str) -> pd.DataFrame:
    required, optional = TABLE_COLUMNS[name]
    path = data_dir / name
    if not path.exists():
        return pd.DataFrame(columns=required + optional)

    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    df.columns = [c.strip() for c in df.columns]
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise ValueError(f"{path} is missing required column(s): {', '.join(missing)}.")
    for column in optional:
        if column not in df.columns:
            df[column] = ""
    return df.apply(lambda col: col.str.strip())


def _blank_to_none(value: str) -> Optional[str]:
    return value if value != "" else None


def _to_int(value: str, default: Optional[int] = None) -> Optional[int]:
    return int(value) if value != "" else default


def _to_float(value: str) -> Optional[float]:
    return float(value) if value != "" else None


def _records(df: pd.DataFrame, build: Callable[[Dict[str, str]], object]) -> List:
    return [build(row) for row in df.to_dict(orient="records")]


def load_snapshot(data_dir: Path, config_path: Optional[Path] = None) -> ClassSnapshot:
    """
    Build an immutable ``ClassSnapshot`` from a directory of CSV tables.

    Missing tables are treated as empty. The config is read from
    ``config_path`` or ``data_dir/config.yaml``; defaults apply when neither
    exists.
    """

    data_dir = Path(data_dir)
    if not data_dir.is_dir():
        raise ValueError(f"Snapshot directory {data_dir} does not exist.")

    if config_path is None and (data_dir / DEFAULT_CONFIG_NAME).exists():
        config_path = data_dir / DEFAULT_CONFIG_NAME
    config = load_risk_config(config_path) if config_path is not None else RiskConfig()

    tables = {name: _read_table(data_dir, name) for name in TABLE_COLUMNS}

    return ClassSnapshot(
        students=_records(
            tables["students.csv"],
            lambda r: Student(
                id=r["id"],
                name=r["name"],
                first_name=r["first_name"],
                last_name=r["last_name"],
                is_class_admin=r["is_class_admin"].lower() in TRUE_VALUES,
            ),
        ),
        subjects=_records(
            tables["subjects.csv"],
            lambda r: Subject(id=r["id"], name=r["name"], teacher_id=_blank_to_none(r["teacher_id"])),
        ),
        teachers=_records(tables["teachers.csv"], lambda r: Teacher(id=r["id"], name=r["name"])),
        schedule=_records(
            tables["schedule.csv"],
            lambda r: ScheduleEntry(
                subject_id=r["subject_id"],
                day_of_week=int(r["day_of_week"]),
                hours=_to_int(r["hours"], default=1),
                id=_blank_to_none(r["id"]),
            ),
        ),
        interrogations=_records(
            tables["interrogations.csv"],
            lambda r: Interrogation(
                id=r["id"],
                student_id=r["student_id"],
                subject_id=r["subject_id"],
                date=r["date"],
                grade=_to_float(r["grade"]),
            ),
        ),
        absences=_records(
            tables["absences.csv"],
            lambda r: Absence(
                id=r["id"],
                student_id=r["student_id"],
                date=r["date"],
                subject_id=_blank_to_none(r["subject_id"]),
            ),
        ),
        volunteers=_records(
            tables["volunteers.csv"],
            lambda r: Volunteer(id=r["id"], student_id=r["student_id"], subject_id=r["subject_id"], date=r["date"]),
        ),
        vacations=_records(
            tables["vacations.csv"],
            lambda r: Vacation(id=r["id"], date=r["date"], note=_blank_to_none(r["note"])),
        ),
        config=config,
    )
