"""Julian Day time base for the solar series."""

import math

from salahtime.models import CalendarMoment, JulianTime

J2000 = 2451545.0
DAYS_PER_CENTURY = 36525.0


def julian_day(year: int, month: int, day: int, hours: float = 0.0) -> float:
    """Julian Day for a Gregorian calendar date at the given UTC hour.

    January and February count as months 13 and 14 of the previous year.
    Inputs are not range-checked; impossible dates give meaningless values.
    """
    if month <= 2:
        year -= 1
        month += 12
    a = math.floor(year / 100)
    b = 2 - a + math.floor(a / 4)
    return (
        math.floor(365.25 * (year + 4716))
        + math.floor(30.6001 * (month + 1))
        + day
        + hours / 24.0
        + b
        - 1524.5
    )


def julian_century(jd: float) -> float:
    return (jd - J2000) / DAYS_PER_CENTURY


def julian_time(moment: CalendarMoment) -> JulianTime:
    jd = julian_day(moment.year, moment.month, moment.day, moment.hours)
    return JulianTime(julian_day=jd, julian_century=julian_century(jd))
