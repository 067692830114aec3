"""Solar position model: low-precision series from Meeus, Astronomical Algorithms ch. 12, 22, 25.

Every function of ``t`` takes the Julian Century from J2000.0. Angles are
degrees in and out; conversion to radians happens at the trigonometric call.
"""

import math

from salahtime.julian import J2000, DAYS_PER_CENTURY, julian_century
from salahtime.models import SolarPosition, SolarWindow


def normalize_to_scale(value: float, scale: float) -> float:
    """Reduce value into [0, scale), correct for negative dividends."""
    return value - scale * math.floor(value / scale)


def unwind_angle(angle: float) -> float:
    """Reduce an angle into [0, 360)."""
    return normalize_to_scale(angle, 360.0)


def quadrant_shift_angle(angle: float) -> float:
    """Reduce an angle into [-180, 180], the signed shortest path."""
    if -180.0 <= angle <= 180.0:
        return angle
    return angle - 360.0 * round(angle / 360.0)


def mean_solar_longitude(t: float) -> float:
    return unwind_angle(280.4664567 + 36000.76983 * t + 0.0003032 * t**2)


def mean_lunar_longitude(t: float) -> float:
    return unwind_angle(218.3165 + 481267.8813 * t)


def ascending_lunar_node_longitude(t: float) -> float:
    return unwind_angle(
        125.04452 - 1934.136261 * t + 0.0020708 * t**2 + t**3 / 450000
    )


def mean_solar_anomaly(t: float) -> float:
    return unwind_angle(357.52911 + 35999.05029 * t - 0.0001537 * t**2)


def solar_equation_of_center(t: float, mean_anomaly: float) -> float:
    """Difference between true and mean solar longitude (degrees)."""
    m = math.radians(mean_anomaly)
    return (
        (1.914602 - 0.004817 * t - 0.000014 * t**2) * math.sin(m)
        + (0.019993 - 0.000101 * t) * math.sin(2 * m)
        + 0.000289 * math.sin(3 * m)
    )


def apparent_solar_longitude(t: float, mean_longitude: float) -> float:
    """True longitude corrected for nutation and aberration."""
    longitude = mean_longitude + solar_equation_of_center(t, mean_solar_anomaly(t))
    omega = 125.04 - 1934.136 * t
    return unwind_angle(longitude - 0.00569 - 0.00478 * math.sin(math.radians(omega)))


def mean_obliquity_of_the_ecliptic(t: float) -> float:
    return 23.439291 - 0.013004167 * t - 0.0000001639 * t**2 + 0.0000005036 * t**3


def apparent_obliquity_of_the_ecliptic(t: float, mean_obliquity: float) -> float:
    omega = 125.04 - 1934.136 * t
    return mean_obliquity + 0.00256 * math.cos(math.radians(omega))


def mean_sidereal_time(t: float) -> float:
    """Mean sidereal time at Greenwich for the instant t (degrees)."""
    jd = t * DAYS_PER_CENTURY + J2000
    theta = (
        280.46061837
        + 360.98564736629 * (jd - J2000)
        + 0.000387933 * t**2
        - t**3 / 38710000
    )
    return unwind_angle(theta)


def nutation_in_longitude(
    solar_longitude: float, lunar_longitude: float, ascending_node: float
) -> float:
    l0 = math.radians(solar_longitude)
    lp = math.radians(lunar_longitude)
    omega = math.radians(ascending_node)
    return (
        (-17.2 / 3600) * math.sin(omega)
        - (1.32 / 3600) * math.sin(2 * l0)
        - (0.23 / 3600) * math.sin(2 * lp)
        + (0.21 / 3600) * math.sin(2 * omega)
    )


def nutation_in_obliquity(
    solar_longitude: float, lunar_longitude: float, ascending_node: float
) -> float:
    l0 = math.radians(solar_longitude)
    lp = math.radians(lunar_longitude)
    omega = math.radians(ascending_node)
    return (
        (9.2 / 3600) * math.cos(omega)
        + (0.57 / 3600) * math.cos(2 * l0)
        + (0.1 / 3600) * math.cos(2 * lp)
        - (0.09 / 3600) * math.cos(2 * omega)
    )


def solar_position(jd: float) -> SolarPosition:
    """Apparent declination, right ascension and sidereal time for a Julian Day.

    Args:
        jd: Julian Day, normally at 0h UTC.

    Returns:
        SolarPosition in degrees.
    """
    t = julian_century(jd)
    l0 = mean_solar_longitude(t)
    lp = mean_lunar_longitude(t)
    omega = ascending_lunar_node_longitude(t)
    longitude = math.radians(apparent_solar_longitude(t, l0))

    theta0 = mean_sidereal_time(t)
    delta_psi = nutation_in_longitude(l0, lp, omega)
    delta_epsilon = nutation_in_obliquity(l0, lp, omega)

    epsilon0 = mean_obliquity_of_the_ecliptic(t)
    epsilon = math.radians(apparent_obliquity_of_the_ecliptic(t, epsilon0))

    declination = math.degrees(math.asin(math.sin(epsilon) * math.sin(longitude)))
    right_ascension = unwind_angle(
        math.degrees(
            math.atan2(math.cos(epsilon) * math.sin(longitude), math.cos(longitude))
        )
    )
    sidereal_time = theta0 + delta_psi * math.cos(
        math.radians(epsilon0 + delta_epsilon)
    )

    return SolarPosition(
        declination=declination,
        right_ascension=right_ascension,
        apparent_sidereal_time=sidereal_time,
    )


def solar_window(jd: float) -> SolarWindow:
    """Solar positions for jd - 1, jd and jd + 1, used by the interpolation step."""
    return SolarWindow(
        previous=solar_position(jd - 1),
        current=solar_position(jd),
        following=solar_position(jd + 1),
    )
