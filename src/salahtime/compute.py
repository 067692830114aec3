"""Prayer time assembly: UTC offset lookup, per-event solving and conversion to local hours."""

import calendar
import dataclasses
import logging
import math
from datetime import date, datetime, time

from pytz import timezone
from timezonefinder import TimezoneFinder

from salahtime.config import DEFAULT_CONFIG
from salahtime.formatting import format_prayer_times
from salahtime.julian import julian_time
from salahtime.models import (
    CalendarMoment,
    GeoCoordinate,
    PrayerAngleConfig,
    PrayerTimesResult,
    QueryInput,
)
from salahtime.solar import solar_window
from salahtime.transit import (
    AltitudeUnreachableError,
    approximate_transit,
    asr_altitude,
    corrected_hour_angle,
    corrected_transit,
)

log = logging.getLogger(__name__)

_tf = TimezoneFinder()

# Events solved through the hour-angle routine, with their side of the transit.
_HOUR_ANGLE_EVENTS: tuple[tuple[str, bool], ...] = (
    ("fajr", False),
    ("sunrise", False),
    ("asr", True),
    ("sunset", True),
    ("maghrib", True),
    ("isha", True),
)


class TimezoneLookupError(Exception):
    """No timezone covers the coordinate."""


def resolve_utc_offset(coordinate: GeoCoordinate, day: date) -> float:
    """UTC offset in hours in force at local midnight of the given day.

    On a DST transition day this is the pre-transition offset, matching
    how published timetables label that day.

    Raises:
        TimezoneLookupError: When the coordinate has no timezone.
    """
    tz_str = _tf.timezone_at(lat=coordinate.lat, lng=coordinate.lng)
    if tz_str is None:
        raise TimezoneLookupError(
            f"Timezone not found: lat={coordinate.lat}, lng={coordinate.lng}"
        )
    local_tz = timezone(tz_str)
    local_dt = local_tz.localize(datetime.combine(day, time()), is_dst=False)
    offset = local_dt.utcoffset()
    assert offset is not None
    return offset.total_seconds() / 3600


def _event_altitude(
    event: str, config: PrayerAngleConfig, latitude: float, declination: float
) -> float:
    """Target solar altitude (degrees, negative below the horizon) for an event."""
    if event == "asr":
        return asr_altitude(config.asr_shadow_ratio, latitude, declination)
    depressions = {
        "fajr": config.fajr_angle,
        "sunrise": config.sunrise_altitude,
        "sunset": config.sunrise_altitude,
        "maghrib": config.maghrib_angle,
        "isha": config.isha_angle,
    }
    return -depressions[event]


def compute_prayer_times(
    day: date,
    coordinate: GeoCoordinate,
    utc_offset: float,
    config: PrayerAngleConfig = DEFAULT_CONFIG,
    strict: bool = True,
) -> PrayerTimesResult:
    """Compute local decimal-hour prayer times for one day.

    Args:
        day: Gregorian date; the astronomy uses 0h UTC of this date.
        coordinate: Observer position.
        utc_offset: Local offset from UTC in hours (may be fractional or negative).
        config: Calculation convention.
        strict: Raise on events the Sun never reaches instead of returning None.

    Returns:
        PrayerTimesResult in local decimal hours.

    Raises:
        ValueError: On NaN or infinite coordinates or offset.
        AltitudeUnreachableError: In strict mode, for the first event that
            does not occur.
    """
    if not all(math.isfinite(v) for v in (coordinate.lat, coordinate.lng, utc_offset)):
        raise ValueError(
            f"Non-finite input: lat={coordinate.lat}, lng={coordinate.lng}, "
            f"utc_offset={utc_offset}"
        )

    window = solar_window(julian_time(CalendarMoment.from_date(day)).julian_day)
    m0 = approximate_transit(
        coordinate.lng,
        window.current.apparent_sidereal_time,
        window.current.right_ascension,
    )
    log.debug("Solar window for %s: %s (m0=%.6f)", day, window.current, m0)

    utc: dict[str, float | None] = {
        "dhuhr": corrected_transit(m0, coordinate.lng, window)
    }
    unreachable: list[str] = []
    for event, after_transit in _HOUR_ANGLE_EVENTS:
        if event == "isha" and config.isha_interval is not None:
            maghrib = utc["maghrib"]
            utc[event] = (
                None if maghrib is None else maghrib + config.isha_interval / 60
            )
            if maghrib is None:
                unreachable.append(event)
            continue
        try:
            altitude = _event_altitude(
                event, config, coordinate.lat, window.current.declination
            )
            utc[event] = corrected_hour_angle(
                m0, altitude, coordinate, after_transit, window
            )
        except AltitudeUnreachableError as exc:
            if strict:
                raise AltitudeUnreachableError(
                    exc.altitude, exc.ratio, event=event
                ) from None
            log.info("%s does not occur on %s at lat=%s", event, day, coordinate.lat)
            utc[event] = None
            unreachable.append(event)

    local = {
        event: None if hours is None else hours + utc_offset
        for event, hours in utc.items()
    }
    fajr, sunset = local["fajr"], local["sunset"]
    midnight = None
    if fajr is not None and sunset is not None:
        midnight = sunset + (fajr + 24 - sunset) / 2

    return PrayerTimesResult(
        fajr=fajr,
        sunrise=local["sunrise"],
        dhuhr=local["dhuhr"],  # type: ignore[arg-type]
        asr=local["asr"],
        sunset=sunset,
        maghrib=local["maghrib"],
        isha=local["isha"],
        midnight=midnight,
        unreachable=tuple(unreachable),
    )


def calculate_prayer_times(
    day: date,
    lat: float,
    lng: float,
    utc_offset: float,
    config: PrayerAngleConfig | None = None,
    **overrides: object,
) -> dict[str, str | None]:
    """Primary entry point: formatted "HH:MM" prayer times for one day.

    Args:
        day: Gregorian date.
        lat: Latitude (decimal degrees).
        lng: Longitude (decimal degrees, east positive).
        utc_offset: Local offset from UTC in hours.
        config: Base convention. Defaults to DEFAULT_CONFIG.
        **overrides: PrayerAngleConfig fields to replace, e.g. fajr_angle=17.98.

    Returns:
        Event name → "HH:MM", or None for events that do not occur.
    """
    config = config or DEFAULT_CONFIG
    if overrides:
        config = dataclasses.replace(config, **overrides)  # type: ignore[arg-type]
    result = compute_prayer_times(
        day, GeoCoordinate(lat=lat, lng=lng), utc_offset, config, strict=False
    )
    return format_prayer_times(result, config.output_format)


def compute_month_timetable(
    year: int,
    month: int,
    coordinate: GeoCoordinate,
    utc_offset: float | None = None,
    config: PrayerAngleConfig = DEFAULT_CONFIG,
) -> tuple[tuple[date, PrayerTimesResult], ...]:
    """Prayer times for every day of a month.

    When utc_offset is None the offset is resolved per day, so DST changes
    inside the month are followed.
    """
    rows: list[tuple[date, PrayerTimesResult]] = []
    for day_number in range(1, calendar.monthrange(year, month)[1] + 1):
        day = date(year, month, day_number)
        offset = utc_offset
        if offset is None:
            offset = resolve_utc_offset(coordinate, day)
        rows.append(
            (day, compute_prayer_times(day, coordinate, offset, config, strict=False))
        )
    return tuple(rows)


def run(
    query: QueryInput, config: PrayerAngleConfig | None = None
) -> dict[str, str | None]:
    """Top-level entry point: takes a QueryInput and returns formatted times.

    Args:
        query: User input (date string, coordinates, optional offset).
        config: Calculation convention. Defaults to DEFAULT_CONFIG.

    Returns:
        Event name → "HH:MM", or None for events that do not occur.

    Raises:
        ValueError: When ``when`` is not a "YYYY-MM-DD" date.
        TimezoneLookupError: When no offset is given and none can be resolved.
    """
    config = config or DEFAULT_CONFIG
    day = datetime.strptime(query.when, "%Y-%m-%d").date()
    coordinate = GeoCoordinate(lat=query.lat, lng=query.lng)
    utc_offset = query.utc_offset
    if utc_offset is None:
        utc_offset = resolve_utc_offset(coordinate, day)
    result = compute_prayer_times(day, coordinate, utc_offset, config, strict=False)
    return format_prayer_times(result, config.output_format)
