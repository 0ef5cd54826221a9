# ABOUTME: Exposes the interrogation risk engine entrypoints.
# ABOUTME: Groups the cycle resolver, per-instance evaluator, and aggregators.

from .aggregators import (
    StudentRisk,
    SubjectRisk,
    calculate_all_risks,
    calculate_dashboard,
    calculate_weekly,
    class_stats,
    get_next_school_day,
    get_week_dates,
    subject_history,
)
from .cycle import compute_cycle_adjusted_interrogated
from .evaluator import RiskResult, RiskStatus, calculate_risk
from .levels import RiskLevel, risk_level

__all__ = [
    "StudentRisk",
    "SubjectRisk",
    "calculate_all_risks",
    "calculate_dashboard",
    "calculate_weekly",
    "class_stats",
    "get_next_school_day",
    "get_week_dates",
    "subject_history",
    "compute_cycle_adjusted_interrogated",
    "RiskResult",
    "RiskStatus",
    "calculate_risk",
    "RiskLevel",
    "risk_level",
]
