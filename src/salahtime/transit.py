"""Transit and hour-angle solver: Meeus, Astronomical Algorithms ch. 15.

Times are returned as UTC hours from 0h of the target day. They are not
reduced to [0, 24): an evening event west of Greenwich can fall after 24h
UTC and only comes back into range once the local offset is added.
"""

import logging
import math

from salahtime.models import GeoCoordinate, SolarWindow
from salahtime.solar import normalize_to_scale, quadrant_shift_angle, unwind_angle

log = logging.getLogger(__name__)

# Sidereal degrees per solar day.
SIDEREAL_RATE = 360.985647

# Below this, the Newton step denominator is treated as zero.
_DEGENERATE_DENOMINATOR = 1e-12


class AltitudeUnreachableError(Exception):
    """The Sun never reaches the requested altitude on this day at this latitude."""

    def __init__(self, altitude: float, ratio: float, event: str | None = None):
        self.altitude = altitude
        self.ratio = ratio
        self.event = event
        if math.isnan(ratio):
            condition = "undefined hour angle"
        elif ratio < -1:
            condition = "polar day"
        else:
            condition = "polar night"
        subject = f"{event}: " if event else ""
        super().__init__(
            f"{subject}the Sun never reaches altitude {altitude:.3f}° ({condition})"
        )


def approximate_transit(
    longitude: float, sidereal_time: float, right_ascension: float
) -> float:
    """Fraction of the UTC day at which the Sun crosses the local meridian, in [0, 1)."""
    lw = -longitude
    return normalize_to_scale((right_ascension + lw - sidereal_time) / 360.0, 1.0)


def interpolate(y2: float, y1: float, y3: float, n: float) -> float:
    """Three-point interpolation of an unwrapped quantity (declination)."""
    a = y2 - y1
    b = y3 - y2
    c = b - a
    return y2 + (n / 2) * (a + b + n * c)


def interpolate_angles(y2: float, y1: float, y3: float, n: float) -> float:
    """Three-point interpolation of an angle that wraps at 360° (right ascension)."""
    a = quadrant_shift_angle(y2 - y1)
    b = quadrant_shift_angle(y3 - y2)
    c = b - a
    return y2 + (n / 2) * (a + b + n * c)


def altitude_of_celestial_body(
    latitude: float, declination: float, hour_angle: float
) -> float:
    phi = math.radians(latitude)
    delta = math.radians(declination)
    h = math.radians(hour_angle)
    return math.degrees(
        math.asin(
            math.sin(phi) * math.sin(delta)
            + math.cos(phi) * math.cos(delta) * math.cos(h)
        )
    )


def _right_ascension_at(window: SolarWindow, m: float) -> float:
    return unwind_angle(
        interpolate_angles(
            window.current.right_ascension,
            window.previous.right_ascension,
            window.following.right_ascension,
            m,
        )
    )


def _declination_at(window: SolarWindow, m: float) -> float:
    return interpolate(
        window.current.declination,
        window.previous.declination,
        window.following.declination,
        m,
    )


def corrected_transit(m0: float, longitude: float, window: SolarWindow) -> float:
    """Solar noon in UTC hours after one correction step.

    Args:
        m0: Approximate transit as a fraction of the day.
        longitude: Observer longitude (degrees, east positive).
        window: Solar positions around the target day.

    Returns:
        Transit time in UTC hours.
    """
    lw = -longitude
    theta = unwind_angle(window.current.apparent_sidereal_time + SIDEREAL_RATE * m0)
    alpha = _right_ascension_at(window, m0)
    h = quadrant_shift_angle(theta - lw - alpha)
    delta_m = h / -360.0
    return (m0 + delta_m) * 24


def corrected_hour_angle(
    m0: float,
    altitude: float,
    coordinate: GeoCoordinate,
    after_transit: bool,
    window: SolarWindow,
) -> float:
    """Time at which the Sun passes the given altitude, after one Newton step.

    Args:
        m0: Approximate transit as a fraction of the day.
        altitude: Target solar altitude (degrees, negative below the horizon).
        coordinate: Observer position.
        after_transit: True for afternoon/evening events, False for morning ones.
        window: Solar positions around the target day.

    Returns:
        Event time in UTC hours.

    Raises:
        AltitudeUnreachableError: The Sun stays entirely above or below the
            altitude all day.
    """
    lw = -coordinate.lng
    phi = math.radians(coordinate.lat)
    delta2 = math.radians(window.current.declination)

    numerator = math.sin(math.radians(altitude)) - math.sin(phi) * math.sin(delta2)
    denominator = math.cos(phi) * math.cos(delta2)
    ratio = numerator / denominator if denominator else math.nan
    if not -1.0 <= ratio <= 1.0:
        raise AltitudeUnreachableError(altitude, ratio)
    h0 = math.degrees(math.acos(ratio))

    m = m0 + h0 / 360.0 if after_transit else m0 - h0 / 360.0
    theta = unwind_angle(window.current.apparent_sidereal_time + SIDEREAL_RATE * m)
    alpha = _right_ascension_at(window, m)
    delta = _declination_at(window, m)
    hour_angle = theta - lw - alpha
    achieved = altitude_of_celestial_body(coordinate.lat, delta, hour_angle)

    slope = (
        360.0
        * math.cos(math.radians(delta))
        * math.cos(phi)
        * math.sin(math.radians(hour_angle))
    )
    if abs(slope) < _DEGENERATE_DENOMINATOR:
        log.warning(
            "Skipping hour-angle correction for altitude %.3f at lat=%s: "
            "degenerate derivative (H=%.6f)",
            altitude,
            coordinate.lat,
            hour_angle,
        )
        delta_m = 0.0
    else:
        delta_m = (achieved - altitude) / slope
    return (m + delta_m) * 24


def asr_altitude(shadow_ratio: float, latitude: float, declination: float) -> float:
    """Solar altitude at which a shadow is shadow_ratio times the object plus its noon shadow."""
    zenith_at_noon = abs(latitude - declination)
    if zenith_at_noon >= 90.0:
        raise AltitudeUnreachableError(90.0 - zenith_at_noon, math.inf)
    inverse = shadow_ratio + math.tan(math.radians(zenith_at_noon))
    return math.degrees(math.atan(1.0 / inverse))
