# ABOUTME: Resolves which students count as already examined in a subject.
# ABOUTME: Applies the rotation rule that returns the least recently examined to the pool.

from __future__ import annotations

import math
from typing import Dict, FrozenSet, List, Tuple

from src.common.schemas import ClassSnapshot, EntityId


def ordered_last_interrogations(snapshot: ClassSnapshot, subject_id: EntityId) -> List[Tuple[EntityId, str]]:
    """
    Return ``(student_id, last_date)`` pairs for a subject, oldest activity first.

    Equal dates keep snapshot order, both when folding a student's history and
    when ordering students, so the result is reproducible for a given snapshot.
    """

    history = sorted(
        (i for i in snapshot.interrogations if i.subject_id == subject_id),
        key=lambda i: i.date,
    )
    last_date: Dict[EntityId, str] = {}
    for interrogation in history:
        last_date[interrogation.student_id] = interrogation.date
    return sorted(last_date.items(), key=lambda pair: pair[1])


def cycle_threshold_count(cycle_threshold: int, class_size: int) -> int:
    return math.ceil((cycle_threshold / 100) * class_size)


def compute_cycle_adjusted_interrogated(
    snapshot: ClassSnapshot,
    subject_id: EntityId,
    class_size: int,
) -> FrozenSet[EntityId]:
    """
    Effective "already interrogated" set for a subject.

    While at least ``cycle_threshold`` percent of the class sits in the set,
    the ``cycle_return`` students examined longest ago are dropped and become
    eligible again.
    """

    config = snapshot.config
    remaining = ordered_last_interrogations(snapshot, subject_id)
    threshold_count = cycle_threshold_count(config.cycle_threshold, class_size)

    while remaining and len(remaining) >= threshold_count:
        remaining = remaining[min(config.cycle_return, len(remaining)):]

    return frozenset(student_id for student_id, _ in remaining)
