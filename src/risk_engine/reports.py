# ABOUTME: Flattens aggregator outputs into pandas DataFrames for export.
# ABOUTME: Keeps column layouts stable so CSV reports stay comparable across runs.

from __future__ import annotations

from typing import Dict, Iterable, List, Sequence

import pandas as pd

from src.common.schemas import Interrogation

from .aggregators import StudentRisk, SubjectRisk
from .evaluator import RiskStatus
from .levels import risk_level, status_label

SUBJECT_RISK_COLUMNS = ["subject_id", "subject_name", "teacher_name", "risk", "status", "level", "explanation"]
STUDENT_RISK_COLUMNS = ["student_id", "student_name", "initials", "risk", "status", "level", "explanation"]
WEEKLY_COLUMNS = ["date"] + SUBJECT_RISK_COLUMNS
HISTORY_COLUMNS = ["interrogation_id", "date", "grade"]


def _risk_fields(item) -> Dict:
    return {
        "risk": float(item.risk),
        "status": item.status.value,
        "level": risk_level(item.risk).value,
        "explanation": item.explanation,
    }


def subject_risks_frame(items: Sequence[SubjectRisk]) -> pd.DataFrame:
    rows = [
        {"subject_id": i.subject_id, "subject_name": i.subject_name, "teacher_name": i.teacher_name, **_risk_fields(i)}
        for i in items
    ]
    return pd.DataFrame(rows, columns=SUBJECT_RISK_COLUMNS)


def class_stats_frame(items: Sequence[StudentRisk]) -> pd.DataFrame:
    rows = [
        {"student_id": i.student_id, "student_name": i.student_name, "initials": i.initials, **_risk_fields(i)}
        for i in items
    ]
    return pd.DataFrame(rows, columns=STUDENT_RISK_COLUMNS)


def weekly_frame(weekly: Dict[str, List[SubjectRisk]]) -> pd.DataFrame:
    """Long format: one row per (date, subject)."""

    rows = []
    for day, items in weekly.items():
        frame = subject_risks_frame(items)
        frame.insert(0, "date", day)
        rows.append(frame)
    if not rows:
        return pd.DataFrame(columns=WEEKLY_COLUMNS)
    return pd.concat(rows, ignore_index=True)[WEEKLY_COLUMNS]


def history_frame(history: Iterable[Interrogation]) -> pd.DataFrame:
    rows = [{"interrogation_id": i.id, "date": i.date, "grade": i.grade} for i in history]
    return pd.DataFrame(rows, columns=HISTORY_COLUMNS)


def status_summary(items: Sequence) -> pd.DataFrame:
    """Count results per status in first-seen order, labelled for display."""

    counts: Dict[RiskStatus, int] = {}
    for item in items:
        counts[item.status] = counts.get(item.status, 0) + 1
    rows = [{"status": status.value, "label": status_label(status), "count": n} for status, n in counts.items()]
    return pd.DataFrame(rows, columns=["status", "label", "count"])
