# ABOUTME: Calendar helpers over ISO date strings for school-week arithmetic.
# ABOUTME: Computes weekdays, week ranges, and the next lesson day skipping vacations.

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterable, List

NEXT_SCHOOL_DAY_HORIZON = 30


def parse_iso_date(value: str) -> date:
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Expected an ISO date (YYYY-MM-DD), got {value!r}.") from exc


def to_iso(value: date) -> str:
    return value.strftime("%Y-%m-%d")


def day_of_week(value: str) -> int:
    """Return 1 for Monday through 7 for Sunday."""

    return parse_iso_date(value).isoweekday()


def week_dates(value: str, school_days: int) -> List[str]:
    """Lesson days of the Monday-anchored week containing ``value``."""

    current = parse_iso_date(value)
    monday = current - timedelta(days=current.isoweekday() - 1)
    return [to_iso(monday + timedelta(days=offset)) for offset in range(school_days)]


def next_school_day(value: str, school_days: int, vacation_dates: Iterable[str]) -> str:
    """
    First day after ``value`` that is a lesson day and not a vacation.

    The scan is capped at 30 days; when nothing qualifies the 30th day is
    returned.
    """

    vacations = set(vacation_dates)
    current = parse_iso_date(value)
    for _ in range(NEXT_SCHOOL_DAY_HORIZON):
        current += timedelta(days=1)
        iso = to_iso(current)
        if current.isoweekday() <= school_days and iso not in vacations:
            return iso
    return to_iso(current)


def format_date(value: str) -> str:
    return parse_iso_date(value).strftime("%d %b %Y")


def format_date_short(value: str) -> str:
    return parse_iso_date(value).strftime("%d %b")
