from datetime import date, datetime

import pytest

from app.core.exceptions import ValidationError
from app.services.intervals import (
    duration_minutes,
    normalize_time,
    parse_time_to_minutes,
    ranges_overlap,
    same_day,
    weekday_number,
)


def test_parse_time_to_minutes():
    assert parse_time_to_minutes("00:00") == 0
    assert parse_time_to_minutes("09:30") == 570
    assert parse_time_to_minutes("9:30") == 570
    assert parse_time_to_minutes("23:59") == 1439


@pytest.mark.parametrize("value", ["24:00", "12:60", "noon", "", "9h30", "09:5"])
def test_parse_time_rejects_malformed_values(value):
    with pytest.raises(ValidationError):
        parse_time_to_minutes(value)


def test_normalize_time_zero_pads():
    assert normalize_time("9:05") == "09:05"
    assert normalize_time("14:00") == "14:00"


def test_duration_requires_end_after_start():
    assert duration_minutes("09:00", "10:30") == 90
    with pytest.raises(ValidationError):
        duration_minutes("10:00", "10:00")
    with pytest.raises(ValidationError):
        duration_minutes("11:00", "10:00")


def test_adjacent_ranges_do_not_overlap():
    assert not ranges_overlap("09:00", "10:00", "10:00", "11:00")
    assert not ranges_overlap("10:00", "11:00", "09:00", "10:00")


def test_overlapping_and_contained_ranges():
    assert ranges_overlap("09:00", "10:00", "09:59", "11:00")
    assert ranges_overlap("09:00", "12:00", "10:00", "11:00")
    assert ranges_overlap("10:00", "11:00", "09:00", "12:00")
    assert ranges_overlap("09:00", "10:00", "09:00", "10:00")


def test_same_day_ignores_time_of_day():
    assert same_day(date(2026, 11, 2), datetime(2026, 11, 2, 23, 30))
    assert not same_day(date(2026, 11, 2), date(2026, 11, 3))


def test_weekday_number_starts_on_sunday():
    assert weekday_number(date(2026, 11, 1)) == 0  # Sunday
    assert weekday_number(date(2026, 11, 2)) == 1  # Monday
    assert weekday_number(date(2026, 11, 7)) == 6  # Saturday


@pytest.mark.parametrize(
    "first, second",
    [
        (("09:00", "10:00"), ("09:30", "10:30")),
        (("09:00", "10:00"), ("10:00", "11:00")),
        (("08:00", "12:00"), ("09:00", "09:15")),
        (("13:00", "14:00"), ("09:00", "10:00")),
    ],
)
def test_overlap_is_symmetric(first, second):
    assert ranges_overlap(*first, *second) == ranges_overlap(*second, *first)
