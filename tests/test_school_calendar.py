# ABOUTME: Tests calendar helpers for weekday math and school-week ranges.
# ABOUTME: Covers weekend/vacation skipping and the bounded next-day scan.

import pytest

from src.common.school_calendar import (
    day_of_week,
    format_date,
    format_date_short,
    next_school_day,
    parse_iso_date,
    week_dates,
)


def test_day_of_week_maps_sunday_to_seven():
    assert day_of_week("2024-03-04") == 1
    assert day_of_week("2024-03-09") == 6
    assert day_of_week("2024-03-10") == 7


def test_week_dates_is_monday_anchored_and_truncated():
    assert week_dates("2024-03-07", 5) == [
        "2024-03-04",
        "2024-03-05",
        "2024-03-06",
        "2024-03-07",
        "2024-03-08",
    ]
    # Sunday belongs to the week that started the previous Monday.
    assert week_dates("2024-03-10", 6)[0] == "2024-03-04"
    assert week_dates("2024-03-10", 6)[-1] == "2024-03-09"


def test_week_dates_crosses_month_boundary():
    assert week_dates("2024-03-01", 5) == [
        "2024-02-26",
        "2024-02-27",
        "2024-02-28",
        "2024-02-29",
        "2024-03-01",
    ]


def test_next_school_day_skips_weekend_and_vacations():
    assert next_school_day("2024-03-08", 5, []) == "2024-03-11"
    assert next_school_day("2024-03-08", 6, []) == "2024-03-09"
    assert next_school_day("2024-03-08", 5, ["2024-03-11", "2024-03-12"]) == "2024-03-13"


def test_next_school_day_falls_back_after_thirty_days():
    vacations = [f"2024-04-{d:02d}" for d in range(1, 31)] + ["2024-05-01"]
    assert next_school_day("2024-03-31", 5, vacations) == "2024-04-30"


def test_parse_iso_date_rejects_malformed_input():
    with pytest.raises(ValueError):
        parse_iso_date("04/03/2024")
    with pytest.raises(ValueError):
        day_of_week("2024-02-30")


def test_format_date_for_display():
    assert format_date("2024-03-05") == "05 Mar 2024"
    assert format_date_short("2024-03-05") == "05 Mar"
