from datetime import date

import pytest

from academy_console.consultations.availability import (
    BookingAvailability,
    blocked_dates,
    parse_time_range,
    slots_for_range,
    weekday_key,
)
from academy_console.core.exceptions import ValidationError

MONDAY = date(2026, 10, 19)
TUESDAY = date(2026, 10, 20)


def test_weekday_key_is_monday_first():
    assert weekday_key(MONDAY) == "mon"
    assert weekday_key(date(2026, 10, 25)) == "sun"


def test_one_hour_range_gives_two_half_hour_slots():
    availability = BookingAvailability(weekly_hours={"mon": ["09:00-10:00"]}, duration_minutes=30)

    assert availability.generate_slots(MONDAY) == ["09:00", "09:30"]


def test_trailing_partial_slot_is_dropped():
    availability = BookingAvailability(weekly_hours={"mon": ["09:00-09:40"]}, duration_minutes=30)

    assert availability.generate_slots(MONDAY) == ["09:00"]


def test_multiple_ranges_are_concatenated_in_order():
    availability = BookingAvailability(
        weekly_hours={"mon": ["09:00-10:00", "14:00-15:00"]},
        duration_minutes=60,
    )

    assert availability.generate_slots("2026-10-19") == ["09:00", "14:00"]


def test_overlapping_ranges_are_not_merged():
    availability = BookingAvailability(weekly_hours={"mon": ["09:00-10:00", "09:30-10:30"]}, duration_minutes=30)

    assert availability.generate_slots(MONDAY) == ["09:00", "09:30", "09:30", "10:00"]


def test_ranges_keep_their_given_order():
    availability = BookingAvailability(weekly_hours={"mon": ["14:00-15:00", "09:00-10:00"]}, duration_minutes=30)

    assert availability.generate_slots(MONDAY) == ["14:00", "14:30", "09:00", "09:30"]


def test_blocked_date_has_no_slots():
    availability = BookingAvailability(
        weekly_hours={"mon": ["09:00-12:00"]},
        blocked_slots=[{"date": "2026-10-19", "start_time": "09:00", "end_time": "10:00"}],
    )

    assert availability.is_date_available(MONDAY) is False
    assert availability.generate_slots(MONDAY) == []


def test_blocked_date_accepts_datetime_strings():
    assert blocked_dates([{"date": "2026-10-19T00:00:00.000Z"}, {"reason": "no date"}]) == frozenset({"2026-10-19"})


def test_no_weekly_hours_means_every_unblocked_day_is_open():
    availability = BookingAvailability(weekly_hours={}, blocked_slots=[{"date": "2026-10-20"}])

    assert availability.is_date_available(MONDAY) is True
    assert availability.is_date_available(TUESDAY) is False
    assert availability.generate_slots(MONDAY) == []


def test_weekday_missing_from_hours_is_closed():
    availability = BookingAvailability(weekly_hours={"mon": ["09:00-10:00"]})

    assert availability.is_date_available(TUESDAY) is False
    assert availability.generate_slots(TUESDAY) == []


def test_weekday_with_empty_list_is_closed():
    availability = BookingAvailability(weekly_hours={"mon": ["09:00-10:00"], "tue": []})

    assert availability.is_date_available(TUESDAY) is False


def test_slots_never_run_past_range_end():
    availability = BookingAvailability(weekly_hours={"mon": ["13:10-17:55"]}, duration_minutes=45)

    for slot in availability.generate_slots(MONDAY):
        hours, minutes = slot.split(":")
        assert int(hours) * 60 + int(minutes) + 45 <= 17 * 60 + 55


def test_generation_is_deterministic():
    availability = BookingAvailability(weekly_hours={"mon": ["09:00-18:00"]}, duration_minutes=20)

    assert availability.generate_slots(MONDAY) == availability.generate_slots(MONDAY)


def test_malformed_ranges_are_skipped():
    availability = BookingAvailability(
        weekly_hours={"mon": ["9시-10시", "10:00~11:00", "11:00-12:00"]},
        duration_minutes=30,
    )

    assert availability.generate_slots(MONDAY) == ["11:00", "11:30"]


def test_inverted_range_yields_nothing():
    assert slots_for_range(600, 540, 30) == []


def test_parse_time_range():
    assert parse_time_range("09:00-10:30") == (540, 630)
    assert parse_time_range("09:00") is None
    assert parse_time_range("25:00-26:00") is None


@pytest.mark.parametrize("duration", [0, -30])
def test_non_positive_duration_is_rejected(duration):
    with pytest.raises(ValidationError):
        BookingAvailability(weekly_hours={"mon": ["09:00-10:00"]}, duration_minutes=duration)


def test_bad_date_string_is_rejected():
    availability = BookingAvailability()

    with pytest.raises(ValidationError):
        availability.is_date_available("2026/10/19")
