# ABOUTME: Scores how likely a student is to be examined in a subject on a date.
# ABOUTME: Walks a fixed-priority decision table over rotation state and same-day facts.

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Optional

from src.common.school_calendar import day_of_week
from src.common.schemas import ClassSnapshot, EntityId

from .cycle import compute_cycle_adjusted_interrogated


class RiskStatus(Enum):
    VACATION = "vacation"
    NOT_SCHEDULED = "not-scheduled"
    NO_STUDENTS = "no-students"
    VOLUNTEER = "volunteer"
    ALREADY_INTERROGATED = "already-interrogated"
    ABSENT = "absent"
    NO_ELIGIBLE = "no-eligible"
    NO_SLOTS = "no-slots"
    AT_RISK = "at-risk"

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class RiskResult:
    """Outcome of one (student, subject, date) evaluation.

    The counters are filled once the class-level numbers have been computed,
    i.e. for every status after ``no-students``.
    """

    risk: float
    status: RiskStatus
    explanation: str
    slots: Optional[int] = None
    eligible: Optional[int] = None
    interrogated: Optional[int] = None
    absent: Optional[int] = None
    volunteers: Optional[int] = None


@dataclass(frozen=True)
class ClassRiskContext:
    """Class-level numbers shared by every student for one subject and date."""

    class_size: int
    interrogated_ids: FrozenSet[EntityId]
    absent_ids: FrozenSet[EntityId]
    volunteer_ids: FrozenSet[EntityId]
    avg_per_day: int

    @property
    def eligible(self) -> int:
        return max(
            0,
            self.class_size - len(self.interrogated_ids) - len(self.absent_ids) - len(self.volunteer_ids),
        )

    @property
    def slots(self) -> int:
        return max(0, self.avg_per_day - len(self.volunteer_ids))

    @property
    def risk(self) -> float:
        """Uniform risk for every eligible student; 0 when nobody can be picked."""

        if self.eligible == 0 or self.slots == 0:
            return 0.0
        ratio = min(100.0, max(0.0, self.slots / self.eligible * 100))
        # half-up, so 6.25 -> 6.3
        return math.floor(ratio * 10 + 0.5) / 10


def is_vacation(snapshot: ClassSnapshot, date: str) -> bool:
    return any(v.date == date for v in snapshot.vacations)


def is_scheduled(snapshot: ClassSnapshot, subject_id: EntityId, date: str) -> bool:
    weekday = day_of_week(date)
    return any(s.subject_id == subject_id and s.day_of_week == weekday for s in snapshot.schedule)


def class_risk_context(snapshot: ClassSnapshot, subject_id: EntityId, date: str) -> ClassRiskContext:
    class_size = len(snapshot.students)
    absent_ids = frozenset(
        a.student_id
        for a in snapshot.absences
        if a.date == date and (a.subject_id is None or a.subject_id == subject_id)
    )
    volunteer_ids = frozenset(
        v.student_id for v in snapshot.volunteers if v.subject_id == subject_id and v.date == date
    )
    return ClassRiskContext(
        class_size=class_size,
        interrogated_ids=compute_cycle_adjusted_interrogated(snapshot, subject_id, class_size),
        absent_ids=absent_ids,
        volunteer_ids=volunteer_ids,
        avg_per_day=snapshot.config.avg_for(subject_id),
    )


def calculate_risk(
    snapshot: ClassSnapshot,
    student_id: EntityId,
    subject_id: EntityId,
    date: str,
    context: Optional[ClassRiskContext] = None,
) -> RiskResult:
    """
    Evaluate the risk decision table for one student, first match wins.

    ``context`` may be passed by callers that score many students for the same
    subject and date; it must have been built from the same snapshot.
    """

    if is_vacation(snapshot, date):
        return RiskResult(0.0, RiskStatus.VACATION, "Giorno di vacanza")
    if not is_scheduled(snapshot, subject_id, date):
        return RiskResult(0.0, RiskStatus.NOT_SCHEDULED, "Materia non in orario oggi")
    if not snapshot.students:
        return RiskResult(0.0, RiskStatus.NO_STUDENTS, "Nessuno studente in classe")

    if context is None:
        context = class_risk_context(snapshot, subject_id, date)
    counters = dict(
        slots=context.slots,
        eligible=context.eligible,
        interrogated=len(context.interrogated_ids),
        absent=len(context.absent_ids),
        volunteers=len(context.volunteer_ids),
    )

    if student_id in context.volunteer_ids:
        return RiskResult(
            100.0, RiskStatus.VOLUNTEER, "Hai dato disponibilità — verrai interrogato", **counters
        )
    if student_id in context.interrogated_ids:
        return RiskResult(
            0.0, RiskStatus.ALREADY_INTERROGATED, "Già interrogato in questa materia", **counters
        )
    if student_id in context.absent_ids:
        return RiskResult(0.0, RiskStatus.ABSENT, "Sei assente oggi", **counters)
    if context.eligible == 0:
        return RiskResult(0.0, RiskStatus.NO_ELIGIBLE, "Nessuno studente eleggibile", **counters)
    if context.slots == 0:
        return RiskResult(
            0.0, RiskStatus.NO_SLOTS, "Tutti gli slot sono coperti dai volontari", **counters
        )

    explanation = (
        f"{context.slots} slot per {context.eligible} studenti eleggibili "
        f"(I={len(context.interrogated_ids)} dopo ciclo)"
    )
    return RiskResult(context.risk, RiskStatus.AT_RISK, explanation, **counters)
