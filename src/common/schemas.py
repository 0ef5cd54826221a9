# ABOUTME: Defines canonical class records shared by the risk engine and loaders.
# ABOUTME: Centralizes student, subject, schedule, event, and config definitions.

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Tuple, Union

EntityId = Union[int, str]


@dataclass(frozen=True)
class Student:
    """Class roster entry; first/last name are only used for ordering."""

    id: EntityId
    name: str
    first_name: str = ""
    last_name: str = ""
    is_class_admin: bool = False


@dataclass(frozen=True)
class Subject:
    id: EntityId
    name: str
    teacher_id: Optional[EntityId] = None


@dataclass(frozen=True)
class Teacher:
    id: EntityId
    name: str


@dataclass(frozen=True)
class ScheduleEntry:
    """A subject taught on a weekday (1=Monday)."""

    subject_id: EntityId
    day_of_week: int
    hours: int = 1
    id: Optional[EntityId] = None


@dataclass(frozen=True)
class Interrogation:
    """A recorded oral exam, optionally graded."""

    id: EntityId
    student_id: EntityId
    subject_id: EntityId
    date: str
    grade: Optional[float] = None


@dataclass(frozen=True)
class Absence:
    """Absence for one subject, or the whole day when subject_id is None."""

    id: EntityId
    student_id: EntityId
    date: str
    subject_id: Optional[EntityId] = None

    @property
    def is_full_day(self) -> bool:
        return self.subject_id is None


@dataclass(frozen=True)
class Volunteer:
    id: EntityId
    student_id: EntityId
    subject_id: EntityId
    date: str


@dataclass(frozen=True)
class Vacation:
    id: EntityId
    date: str
    note: Optional[str] = None


@dataclass(frozen=True)
class RiskConfig:
    """Class-wide knobs for the rotation mechanic and daily exam capacity."""

    avg_interrogations_per_subject_per_day: Mapping[EntityId, int] = field(default_factory=dict)
    school_days: int = 5
    cycle_threshold: int = 80
    cycle_return: int = 2

    def __post_init__(self) -> None:
        if self.school_days not in (5, 6):
            raise ValueError(f"school_days must be 5 or 6, got {self.school_days!r}.")
        if not 1 <= self.cycle_threshold <= 100:
            raise ValueError(f"cycle_threshold must be a percentage in 1..100, got {self.cycle_threshold!r}.")
        if self.cycle_return < 1:
            raise ValueError(f"cycle_return must be >= 1, got {self.cycle_return!r}.")
        for subject_id, avg in self.avg_interrogations_per_subject_per_day.items():
            if avg < 1:
                raise ValueError(f"Average interrogations for subject {subject_id!r} must be >= 1, got {avg!r}.")
        object.__setattr__(
            self,
            "avg_interrogations_per_subject_per_day",
            MappingProxyType(dict(self.avg_interrogations_per_subject_per_day)),
        )

    def avg_for(self, subject_id: EntityId) -> int:
        return self.avg_interrogations_per_subject_per_day.get(subject_id) or 1


@dataclass(frozen=True)
class ClassSnapshot:
    """Read-only view of one class, handed explicitly to every engine call."""

    students: Tuple[Student, ...] = ()
    subjects: Tuple[Subject, ...] = ()
    teachers: Tuple[Teacher, ...] = ()
    schedule: Tuple[ScheduleEntry, ...] = ()
    interrogations: Tuple[Interrogation, ...] = ()
    absences: Tuple[Absence, ...] = ()
    volunteers: Tuple[Volunteer, ...] = ()
    vacations: Tuple[Vacation, ...] = ()
    config: RiskConfig = field(default_factory=RiskConfig)

    def __post_init__(self) -> None:
        # Freeze list inputs so a snapshot cannot change under a running computation.
        for name in (
            "students",
            "subjects",
            "teachers",
            "schedule",
            "interrogations",
            "absences",
            "volunteers",
            "vacations",
        ):
            object.__setattr__(self, name, tuple(getattr(self, name)))

    def find_subject(self, subject_id: EntityId) -> Optional[Subject]:
        return next((s for s in self.subjects if s.id == subject_id), None)

    def find_student(self, student_id: EntityId) -> Optional[Student]:
        return next((s for s in self.students if s.id == student_id), None)

    def find_teacher(self, teacher_id: Optional[EntityId]) -> Optional[Teacher]:
        if teacher_id is None:
            return None
        return next((t for t in self.teachers if t.id == teacher_id), None)

    def vacation_dates(self) -> Tuple[str, ...]:
        return tuple(v.date for v in self.vacations)
