# ABOUTME: Flags snapshot records that break the invariants the risk engine assumes.
# ABOUTME: Reports duplicates, conflicts with vacations or absences, and dangling ids.

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Dict, List

from .schemas import ClassSnapshot


@dataclass
class SnapshotIssue:
    kind: str
    severity: str
    evidence: Dict
    message: str


def _duplicate_interrogations(snapshot: ClassSnapshot) -> List[SnapshotIssue]:
    counts = Counter((i.student_id, i.subject_id, i.date) for i in snapshot.interrogations)
    return [
        SnapshotIssue(
            kind="duplicate_interrogation",
            severity="high",
            evidence={"student_id": student_id, "subject_id": subject_id, "date": date, "count": n},
            message="More than one interrogation for the same student, subject, and day.",
        )
        for (student_id, subject_id, date), n in counts.items()
        if n > 1
    ]


def _interrogations_on_vacation(snapshot: ClassSnapshot) -> List[SnapshotIssue]:
    vacations = set(snapshot.vacation_dates())
    return [
        SnapshotIssue(
            kind="interrogation_on_vacation",
            severity="medium",
            evidence={"interrogation_id": i.id, "date": i.date},
            message="Interrogation recorded on a vacation day.",
        )
        for i in snapshot.interrogations
        if i.date in vacations
    ]


def _interrogations_while_absent(snapshot: ClassSnapshot) -> List[SnapshotIssue]:
    issues = []
    for i in snapshot.interrogations:
        blocking = next(
            (
                a
                for a in snapshot.absences
                if a.student_id == i.student_id
                and a.date == i.date
                and (a.subject_id is None or a.subject_id == i.subject_id)
            ),
            None,
        )
        if blocking is not None:
            issues.append(
                SnapshotIssue(
                    kind="interrogation_while_absent",
                    severity="medium",
                    evidence={"interrogation_id": i.id, "absence_id": blocking.id, "date": i.date},
                    message="Interrogation recorded while the student was absent.",
                )
            )
    return issues


def _volunteer_conflicts(snapshot: ClassSnapshot) -> List[SnapshotIssue]:
    issues = []
    interrogated = {(i.student_id, i.subject_id, i.date) for i in snapshot.interrogations}
    seen = set()
    for v in snapshot.volunteers:
        key = (v.student_id, v.subject_id, v.date)
        if key in interrogated:
            issues.append(
                SnapshotIssue(
                    kind="volunteer_already_interrogated",
                    severity="low",
                    evidence={"volunteer_id": v.id, "date": v.date},
                    message="Student volunteered on a day they were already interrogated.",
                )
            )
        if key in seen:
            issues.append(
                SnapshotIssue(
                    kind="duplicate_volunteer",
                    severity="low",
                    evidence={"volunteer_id": v.id, "date": v.date},
                    message="Student volunteered twice for the same subject and day.",
                )
            )
        seen.add(key)
    return issues


def _duplicate_vacations(snapshot: ClassSnapshot) -> List[SnapshotIssue]:
    counts = Counter(snapshot.vacation_dates())
    return [
        SnapshotIssue(
            kind="duplicate_vacation",
            severity="low",
            evidence={"date": date, "count": n},
            message="Vacation declared more than once for the same date.",
        )
        for date, n in counts.items()
        if n > 1
    ]


def _unknown_references(snapshot: ClassSnapshot) -> List[SnapshotIssue]:
    student_ids = {s.id for s in snapshot.students}
    subject_ids = {s.id for s in snapshot.subjects}
    issues = []

    def flag(record_type: str, record_id, field_name: str, value) -> None:
        issues.append(
            SnapshotIssue(
                kind="unknown_reference",
                severity="high",
                evidence={"record": record_type, "id": record_id, "field": field_name, "value": value},
                message=f"{record_type} {record_id!r} points at a missing {field_name}.",
            )
        )

    for entry in snapshot.schedule:
        if entry.subject_id not in subject_ids:
            flag("schedule", entry.id, "subject_id", entry.subject_id)
    for group, records in (
        ("interrogation", snapshot.interrogations),
        ("absence", snapshot.absences),
        ("volunteer", snapshot.volunteers),
    ):
        for record in records:
            if record.student_id not in student_ids:
                flag(group, record.id, "student_id", record.student_id)
            if record.subject_id is not None and record.subject_id not in subject_ids:
                flag(group, record.id, "subject_id", record.subject_id)
    return issues


def _schedule_days(snapshot: ClassSnapshot) -> List[SnapshotIssue]:
    school_days = snapshot.config.school_days
    return [
        SnapshotIssue(
            kind="schedule_day_out_of_range",
            severity="medium",
            evidence={"subject_id": s.subject_id, "day_of_week": s.day_of_week, "school_days": school_days},
            message=f"Schedule entry falls outside school days 1..{school_days}.",
        )
        for s in snapshot.schedule
        if not 1 <= s.day_of_week <= school_days
    ]


def check_snapshot(snapshot: ClassSnapshot) -> List[SnapshotIssue]:
    """Run every consistency check; an empty list means the snapshot is clean."""

    issues: List[SnapshotIssue] = []
    for check in (
        _duplicate_interrogations,
        _interrogations_on_vacation,
        _interrogations_while_absent,
        _volunteer_conflicts,
        _duplicate_vacations,
        _unknown_references,
        _schedule_days,
    ):
        issues.extend(check(snapshot))
    return issues
