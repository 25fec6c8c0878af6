from datetime import date, datetime, time

import pytest

from namaz_timer.core.clock import ClockTime, local_utc_offset, seconds_of_day, to_clock_time


def test_from_minutes_wraps_both_directions():
    assert ClockTime.from_minutes(-15) == ClockTime(23, 45)
    assert ClockTime.from_minutes(1440 + 5) == ClockTime(0, 5)
    assert ClockTime.from_minutes(3 * 1440) == ClockTime(0, 0)


def test_add_minutes_carries_across_hour_and_day():
    assert ClockTime(6, 21).add_minutes(20) == ClockTime(6, 41)
    assert ClockTime(6, 50).add_minutes(20) == ClockTime(7, 10)
    assert ClockTime(23, 50).add_minutes(20) == ClockTime(0, 10)
    assert ClockTime(5, 12).add_minutes(1440) == ClockTime(5, 12)


def test_subtract_minutes_borrows_across_hour_and_day():
    assert ClockTime(12, 41).subtract_minutes(15) == ClockTime(12, 26)
    assert ClockTime(12, 10).subtract_minutes(15) == ClockTime(11, 55)
    assert ClockTime(0, 5).subtract_minutes(20) == ClockTime(23, 45)


@pytest.mark.parametrize("clock", [ClockTime(0, 0), ClockTime(5, 10), ClockTime(12, 59), ClockTime(23, 59)])
@pytest.mark.parametrize("minutes", [1, 59, 150, 1440, 2000, -75])
def test_add_then_subtract_round_trips(clock, minutes):
    assert clock.add_minutes(minutes).subtract_minutes(minutes) == clock


def test_ordering_is_minute_of_day():
    assert ClockTime(5, 10) < ClockTime(6, 0) < ClockTime(23, 59)
    assert ClockTime(12, 41).minute_of_day == 761
    assert sorted([ClockTime(20, 5), ClockTime(3, 0), ClockTime(12, 41)]) == [
        ClockTime(3, 0), ClockTime(12, 41), ClockTime(20, 5)
    ]


def test_minutes_until_rolls_forward():
    assert ClockTime(20, 5).minutes_until(ClockTime(21, 5)) == 60
    assert ClockTime(23, 59).minutes_until(ClockTime(5, 10)) == 311
    assert ClockTime(5, 10).minutes_until(ClockTime(5, 10)) == 0


def test_from_fractional_hours_floors_and_wraps():
    assert ClockTime.from_fractional_hours(12.6834) == ClockTime(12, 41)
    assert ClockTime.from_fractional_hours(5.999) == ClockTime(5, 59)
    assert ClockTime.from_fractional_hours(-0.5) == ClockTime(23, 30)
    assert ClockTime.from_fractional_hours(24.25) == ClockTime(0, 15)


@pytest.mark.parametrize("text,expected", [
    ("05:10", ClockTime(5, 10)),
    ("5:10", ClockTime(5, 10)),
    ("05:10:59", ClockTime(5, 10)),
    ("05:10 (PKT)", ClockTime(5, 10)),
    ("5:30 PM", ClockTime(17, 30)),
    ("12:41 pm", ClockTime(12, 41)),
    ("12:00 AM", ClockTime(0, 0)),
    ("03:00 AM", ClockTime(3, 0)),
])
def test_parse(text, expected):
    assert ClockTime.parse(text) == expected


@pytest.mark.parametrize("text", ["", "abc", "25:00", "10:75", "13:00 PM", "0:30 AM"])
def test_parse_rejects_garbage(text):
    with pytest.raises(ValueError):
        ClockTime.parse(text)


def test_constructor_validates_range():
    with pytest.raises(ValueError):
        ClockTime(24, 0)
    with pytest.raises(ValueError):
        ClockTime(3, 60)


def test_on_attaches_date_with_day_shift():
    assert ClockTime(5, 12).on(date(2024, 3, 20)) == datetime(2024, 3, 20, 5, 12)
    assert ClockTime(5, 12).on(date(2024, 3, 31), days=1) == datetime(2024, 4, 1, 5, 12)


def test_str_is_zero_padded():
    assert str(ClockTime(3, 0)) == "03:00"


def test_coercion_helpers():
    assert to_clock_time(datetime(2024, 3, 20, 6, 0, 45)) == ClockTime(6, 0)
    assert to_clock_time(time(23, 59)) == ClockTime(23, 59)
    assert to_clock_time("9:15 PM") == ClockTime(21, 15)
    assert seconds_of_day(time(6, 0, 30)) == 21630
    assert seconds_of_day(ClockTime(6, 0)) == 21600
    with pytest.raises(TypeError):
        to_clock_time(615)


def test_local_utc_offset_uses_the_date(device_timezone):
    device_timezone("AEST-10AEDT,M10.1.0,M4.1.0/3")
    assert local_utc_offset(date(2024, 1, 15)) == 11.0
    assert local_utc_offset(date(2024, 7, 15)) == 10.0

    device_timezone("IST-5:30")
    assert local_utc_offset(date(2024, 7, 15)) == 5.5

    device_timezone("UTC0")
    assert local_utc_offset() == 0.0
