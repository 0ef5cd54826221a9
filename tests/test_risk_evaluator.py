# ABOUTME: Tests the per-instance risk decision table and its slot-sharing formula.
# ABOUTME: Builds small class snapshots in-test to hit every status in priority order.

import pytest

from src.common.schemas import (
    Absence,
    ClassSnapshot,
    Interrogation,
    RiskConfig,
    ScheduleEntry,
    Student,
    Subject,
    Vacation,
    Volunteer,
)
from src.risk_engine.evaluator import RiskStatus, calculate_risk, class_risk_context

MONDAY = "2024-03-04"
TUESDAY = "2024-03-05"


def _class(
    size=20,
    interrogations=(),
    absences=(),
    volunteers=(),
    vacations=(),
    averages=None,
    threshold=80,
    cycle_return=2,
):
    return ClassSnapshot(
        students=[Student(id=f"s{i}", name=f"Student {i}") for i in range(1, size + 1)],
        subjects=[Subject(id="math", name="Matematica"), Subject(id="art", name="Arte")],
        schedule=[ScheduleEntry(subject_id="math", day_of_week=1), ScheduleEntry(subject_id="art", day_of_week=2)],
        interrogations=list(interrogations),
        absences=list(absences),
        volunteers=list(volunteers),
        vacations=list(vacations),
        config=RiskConfig(
            avg_interrogations_per_subject_per_day=averages or {},
            cycle_threshold=threshold,
            cycle_return=cycle_return,
        ),
    )


def _examined(*student_ids, subject_id="math"):
    return [
        Interrogation(id=n, student_id=sid, subject_id=subject_id, date=f"2024-02-{n + 1:02d}")
        for n, sid in enumerate(student_ids)
    ]


def test_fresh_class_shares_one_slot():
    result = calculate_risk(_class(), "s1", "math", MONDAY)

    assert result.status is RiskStatus.AT_RISK
    assert result.risk == 5.0
    assert (result.slots, result.eligible, result.interrogated) == (1, 20, 0)
    assert "1 slot" in result.explanation and "20 studenti" in result.explanation and "I=0" in result.explanation


def test_vacation_wins_over_everything():
    snapshot = _class(vacations=[Vacation(id=1, date=MONDAY)], volunteers=[Volunteer(1, "s1", "math", MONDAY)])
    for sid in ("s1", "s2"):
        result = calculate_risk(snapshot, sid, "math", MONDAY)
        assert (result.risk, result.status) == (0.0, RiskStatus.VACATION)


def test_unscheduled_subject_is_zero():
    result = calculate_risk(_class(), "s1", "art", MONDAY)
    assert (result.risk, result.status) == (0.0, RiskStatus.NOT_SCHEDULED)
    assert result.eligible is None


def test_empty_roster():
    result = calculate_risk(_class(size=0), "s1", "math", MONDAY)
    assert (result.risk, result.status) == (0.0, RiskStatus.NO_STUDENTS)


def test_volunteer_beats_previous_interrogation():
    snapshot = _class(interrogations=_examined("s1"), volunteers=[Volunteer(1, "s1", "math", MONDAY)])
    result = calculate_risk(snapshot, "s1", "math", MONDAY)
    assert (result.risk, result.status) == (100.0, RiskStatus.VOLUNTEER)


def test_volunteer_beats_absence():
    snapshot = _class(
        absences=[Absence(id=1, student_id="s1", date=MONDAY)],
        volunteers=[Volunteer(1, "s1", "math", MONDAY)],
    )
    assert calculate_risk(snapshot, "s1", "math", MONDAY).status is RiskStatus.VOLUNTEER


def test_already_interrogated_beats_absence():
    snapshot = _class(interrogations=_examined("s1"), absences=[Absence(id=1, student_id="s1", date=MONDAY)])
    result = calculate_risk(snapshot, "s1", "math", MONDAY)
    assert (result.risk, result.status) == (0.0, RiskStatus.ALREADY_INTERROGATED)


def test_full_day_and_subject_absences_block():
    snapshot = _class(
        absences=[
            Absence(id=1, student_id="s1", date=MONDAY),
            Absence(id=2, student_id="s2", date=MONDAY, subject_id="math"),
            Absence(id=3, student_id="s3", date=MONDAY, subject_id="art"),
        ]
    )
    assert calculate_risk(snapshot, "s1", "math", MONDAY).status is RiskStatus.ABSENT
    assert calculate_risk(snapshot, "s2", "math", MONDAY).status is RiskStatus.ABSENT
    other = calculate_risk(snapshot, "s3", "math", MONDAY)
    assert other.status is RiskStatus.AT_RISK
    assert other.eligible == 18
    assert other.risk == pytest.approx(5.6)


def test_duplicate_absences_count_once():
    snapshot = _class(
        absences=[
            Absence(id=1, student_id="s1", date=MONDAY),
            Absence(id=2, student_id="s1", date=MONDAY, subject_id="math"),
        ]
    )
    assert calculate_risk(snapshot, "s5", "math", MONDAY).absent == 1


def test_volunteers_consume_slots():
    volunteers = [Volunteer(1, "s1", "math", MONDAY)]
    snapshot = _class(volunteers=volunteers, averages={"math": 3})
    result = calculate_risk(snapshot, "s2", "math", MONDAY)
    assert (result.slots, result.eligible) == (2, 19)
    assert result.risk == pytest.approx(10.5)


def test_no_slots_when_volunteers_cover_capacity():
    snapshot = _class(volunteers=[Volunteer(1, "s1", "math", MONDAY), Volunteer(2, "s2", "math", MONDAY)])
    result = calculate_risk(snapshot, "s3", "math", MONDAY)
    assert (result.risk, result.status) == (0.0, RiskStatus.NO_SLOTS)


def test_history_of_departed_students_can_empty_the_pool():
    # "gone" left the class but still counts as examined; s1 is absent.
    snapshot = _class(
        size=2,
        interrogations=_examined("gone"),
        absences=[Absence(id=1, student_id="s1", date=MONDAY)],
        threshold=100,
    )
    result = calculate_risk(snapshot, "s2", "math", MONDAY)
    assert (result.risk, result.status) == (0.0, RiskStatus.NO_ELIGIBLE)
    assert result.slots == 1


def test_risk_is_clamped_to_one_hundred():
    result = calculate_risk(_class(size=2, averages={"math": 5}), "s1", "math", MONDAY)
    assert result.risk == 100.0


def test_cycle_reset_returns_students_to_risk():
    snapshot = _class(interrogations=_examined(*[f"s{i}" for i in range(1, 18)]))

    reset = calculate_risk(snapshot, "s1", "math", MONDAY)
    assert reset.status is RiskStatus.AT_RISK
    assert reset.interrogated == 15
    assert reset.eligible == 5
    assert reset.risk == 20.0

    kept = calculate_risk(snapshot, "s3", "math", MONDAY)
    assert kept.status is RiskStatus.ALREADY_INTERROGATED


def test_at_risk_students_share_identical_risk():
    snapshot = _class(
        interrogations=_examined("s1", "s2", "s3"),
        absences=[Absence(id=1, student_id="s4", date=MONDAY)],
        volunteers=[Volunteer(1, "s5", "math", MONDAY)],
        averages={"math": 2},
    )
    at_risk = [
        calculate_risk(snapshot, f"s{i}", "math", MONDAY)
        for i in range(1, 21)
    ]
    values = {(r.risk, r.eligible, r.slots) for r in at_risk if r.status is RiskStatus.AT_RISK}
    assert values == {(round(1 / 15 * 100, 1), 15, 1)}


def test_repeated_calls_are_identical():
    snapshot = _class(interrogations=_examined("s1", "s2"), averages={"math": 2})
    assert calculate_risk(snapshot, "s7", "math", MONDAY) == calculate_risk(snapshot, "s7", "math", MONDAY)


def test_shared_context_matches_fresh_computation():
    snapshot = _class(interrogations=_examined("s1"), volunteers=[Volunteer(1, "s2", "math", MONDAY)])
    context = class_risk_context(snapshot, "math", MONDAY)
    for sid in ("s1", "s2", "s3"):
        assert calculate_risk(snapshot, sid, "math", MONDAY, context=context) == calculate_risk(
            snapshot, sid, "math", MONDAY
        )


def test_tuesday_subject_uses_its_own_history():
    snapshot = _class(interrogations=_examined("s1", subject_id="art"))
    assert calculate_risk(snapshot, "s1", "art", TUESDAY).status is RiskStatus.ALREADY_INTERROGATED
    assert calculate_risk(snapshot, "s1", "math", MONDAY).status is RiskStatus.AT_RISK


def test_risk_rounds_half_up():
    # 1 slot / 16 eligible = 6.25%
    result = calculate_risk(_class(size=16), "s1", "math", MONDAY)
    assert result.explanation == "1 slot per 16 studenti eleggibili (I=0 dopo ciclo)"
    assert result.risk == 6.3


def test_capacity_cannot_change_after_snapshot_is_built():
    averages = {"math": 2}
    snapshot = _class(averages=averages)
    averages["math"] = 9

    assert snapshot.config.avg_for("math") == 2
    with pytest.raises(TypeError):
        snapshot.config.avg_interrogations_per_subject_per_day["math"] = 9
    assert calculate_risk(snapshot, "s1", "math", MONDAY).risk == 10.0
