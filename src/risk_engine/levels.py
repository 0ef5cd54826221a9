# ABOUTME: Maps numeric risk and statuses onto display bands and labels.
# ABOUTME: Shared by the CLI tables and tabular report exports.

from __future__ import annotations

from enum import Enum
from typing import Dict, Tuple

from .evaluator import RiskStatus


class RiskLevel(Enum):
    NULL = "null"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    def __str__(self):
        return self.value


# Upper bounds (inclusive) of each band; anything above the last is critical.
LEVEL_BOUNDS: Tuple[Tuple[float, RiskLevel], ...] = (
    (1, RiskLevel.NULL),
    (10, RiskLevel.LOW),
    (18, RiskLevel.MEDIUM),
    (33, RiskLevel.HIGH),
)

LEVEL_COLORS: Dict[RiskLevel, str] = {
    RiskLevel.NULL: "#34C759",
    RiskLevel.LOW: "#4A90D9",
    RiskLevel.MEDIUM: "#FF9500",
    RiskLevel.HIGH: "#FF3B30",
    RiskLevel.CRITICAL: "#C0392B",
}

STATUS_LABELS: Dict[RiskStatus, str] = {
    RiskStatus.VACATION: "Vacanza",
    RiskStatus.NOT_SCHEDULED: "Non in orario",
    RiskStatus.NO_STUDENTS: "Nessuno studente",
    RiskStatus.VOLUNTEER: "Volontario",
    RiskStatus.ALREADY_INTERROGATED: "Già interrogato",
    RiskStatus.ABSENT: "Assente",
    RiskStatus.NO_ELIGIBLE: "Nessun eleggibile",
    RiskStatus.NO_SLOTS: "Slot coperti",
    RiskStatus.AT_RISK: "A rischio",
}


def risk_level(risk: float) -> RiskLevel:
    for bound, level in LEVEL_BOUNDS:
        if risk <= bound:
            return level
    return RiskLevel.CRITICAL


def risk_color(risk: float) -> str:
    return LEVEL_COLORS[risk_level(risk)]


def status_label(status: RiskStatus) -> str:
    return STATUS_LABELS[status]
