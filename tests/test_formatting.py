import math

import pytest

from salahtime.formatting import OUTPUT_POLICIES, format_prayer_times, format_time
from salahtime.models import EVENTS, PrayerTimesResult


@pytest.mark.parametrize(
    "hours, rounding, expected",
    [
        (13.5, "round", "13:30"),
        (13.5, "floor", "13:30"),
        (13.999, "floor", "13:59"),
        (13.999, "round", "14:00"),
        (5.0, "round", "05:00"),
        (23.995, "round", "00:00"),
        (23.995, "floor", "23:59"),
        (24.25, "round", "00:15"),
        (25.25, "floor", "01:15"),
        (-0.5, "round", "23:30"),
        (0.0, "floor", "00:00"),
    ],
)
def test_format_time(hours, rounding, expected):
    assert format_time(hours, rounding) == expected


def test_format_time_rounds_to_nearest_minute():
    assert format_time(13.5 + 0.75 / 60, "round") == "13:31"
    assert format_time(13.5 + 0.25 / 60, "round") == "13:30"


def test_format_time_rejects_nan():
    with pytest.raises(ValueError):
        format_time(math.nan)


def test_format_time_rejects_unknown_rounding():
    with pytest.raises(ValueError, match="ceil"):
        format_time(12.0, "ceil")


def test_policies_cover_every_event():
    for policy in OUTPUT_POLICIES.values():
        assert set(policy) == set(EVENTS)


def test_mixed_policy_floors_margin_events():
    mixed = OUTPUT_POLICIES["mixed"]
    assert {event for event, rounding in mixed.items() if rounding == "floor"} == {
        "sunrise",
        "sunset",
        "maghrib",
    }


@pytest.fixture
def result():
    return PrayerTimesResult(
        fajr=5.74,
        sunrise=7.33,
        dhuhr=12.599,
        asr=15.45,
        sunset=17.89,
        maghrib=18.99,
        isha=None,
        midnight=23.99,
        unreachable=("isha",),
    )


def test_format_prayer_times_mixed(result):
    assert format_prayer_times(result) == {
        "fajr": "05:44",
        "sunrise": "07:19",
        "dhuhr": "12:36",
        "asr": "15:27",
        "sunset": "17:53",
        "maghrib": "18:59",
        "isha": None,
        "midnight": "23:59",
    }


def test_format_prayer_times_round(result):
    formatted = format_prayer_times(result, "round")
    assert formatted["sunrise"] == "07:20"
    assert formatted["midnight"] == "23:59"
    assert formatted["isha"] is None


def test_format_prayer_times_floor(result):
    formatted = format_prayer_times(result, "floor")
    assert formatted["fajr"] == "05:44"
    assert formatted["dhuhr"] == "12:35"


def test_format_prayer_times_keeps_event_order(result):
    assert list(format_prayer_times(result)) == list(EVENTS)


def test_format_prayer_times_rejects_unknown_format(result):
    with pytest.raises(ValueError):
        format_prayer_times(result, "nearest")
