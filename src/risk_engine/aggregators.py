# ABOUTME: Fans the per-instance risk evaluator out across subjects, students, and days.
# ABOUTME: Builds dashboard, weekly, class statistics, and history views for one snapshot.

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

from src.common.names import MISSING_NAME, initials, surname, surname_key
from src.common.school_calendar import day_of_week, next_school_day, week_dates
from src.common.schemas import ClassSnapshot, EntityId, Interrogation, Subject

from .evaluator import RiskResult, RiskStatus, calculate_risk, class_risk_context


@dataclass(frozen=True)
class SubjectRisk:
    subject_id: EntityId
    subject_name: str
    teacher_name: str
    result: RiskResult

    @property
    def risk(self) -> float:
        return self.result.risk

    @property
    def status(self) -> RiskStatus:
        return self.result.status

    @property
    def explanation(self) -> str:
        return self.result.explanation


@dataclass(frozen=True)
class StudentRisk:
    student_id: EntityId
    student_name: str
    initials: str
    result: RiskResult

    @property
    def risk(self) -> float:
        return self.result.risk

    @property
    def status(self) -> RiskStatus:
        return self.result.status

    @property
    def explanation(self) -> str:
        return self.result.explanation


def _subject_risk(snapshot: ClassSnapshot, student_id: EntityId, subject: Subject, date: str) -> SubjectRisk:
    teacher = snapshot.find_teacher(subject.teacher_id)
    return SubjectRisk(
        subject_id=subject.id,
        subject_name=subject.name,
        teacher_name=surname(teacher.name) if teacher else MISSING_NAME,
        result=calculate_risk(snapshot, student_id, subject.id, date),
    )


def _by_risk_desc(items: List[SubjectRisk]) -> List[SubjectRisk]:
    return sorted(items, key=lambda item: item.risk, reverse=True)


def calculate_dashboard(snapshot: ClassSnapshot, student_id: EntityId, date: str) -> List[SubjectRisk]:
    """Risk for every subject taught on the weekday of ``date``, highest first."""

    weekday = day_of_week(date)
    scheduled_ids = list(dict.fromkeys(s.subject_id for s in snapshot.schedule if s.day_of_week == weekday))
    results = []
    for subject_id in scheduled_ids:
        subject = snapshot.find_subject(subject_id)
        if subject is None:
            continue
        results.append(_subject_risk(snapshot, student_id, subject, date))
    return _by_risk_desc(results)


def calculate_all_risks(snapshot: ClassSnapshot, student_id: EntityId, date: str) -> List[SubjectRisk]:
    """Risk for every subject regardless of the timetable, highest first."""

    return _by_risk_desc([_subject_risk(snapshot, student_id, subject, date) for subject in snapshot.subjects])


def calculate_weekly(snapshot: ClassSnapshot, student_id: EntityId, date: str) -> Dict[str, List[SubjectRisk]]:
    return {day: calculate_dashboard(snapshot, student_id, day) for day in get_week_dates(snapshot, date)}


def class_stats(snapshot: ClassSnapshot, subject_id: EntityId, date: str) -> List[StudentRisk]:
    """Risk of every student for one subject and date, ordered by surname."""

    # The class-level numbers are identical for every student; compute them once.
    context = class_risk_context(snapshot, subject_id, date) if snapshot.students else None
    results = [
        StudentRisk(
            student_id=student.id,
            student_name=student.name,
            initials=initials(student.name),
            result=calculate_risk(snapshot, student.id, subject_id, date, context=context),
        )
        for student in snapshot.students
    ]
    return sorted(results, key=lambda item: surname_key(item.student_name))


def subject_history(snapshot: ClassSnapshot, student_id: EntityId, subject_id: EntityId) -> List[Interrogation]:
    matches = [i for i in snapshot.interrogations if i.student_id == student_id and i.subject_id == subject_id]
    return sorted(matches, key=lambda i: i.date, reverse=True)


def get_week_dates(snapshot: ClassSnapshot, date: str) -> List[str]:
    return week_dates(date, snapshot.config.school_days)


def get_next_school_day(snapshot: ClassSnapshot, date: str) -> str:
    return next_school_day(date, snapshot.config.school_days, snapshot.vacation_dates())
