# ABOUTME: Makes the shared common package importable across the engine and CLI.
# ABOUTME: Re-exports the class snapshot records and loading helpers for convenience.

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
from .snapshot_io import load_risk_config, load_snapshot
from .validation import check_snapshot

__all__ = [
    "Absence",
    "ClassSnapshot",
    "Interrogation",
    "RiskConfig",
    "ScheduleEntry",
    "Student",
    "Subject",
    "Teacher",
    "Vacation",
    "Volunteer",
    "load_risk_config",
    "load_snapshot",
    "check_snapshot",
]
