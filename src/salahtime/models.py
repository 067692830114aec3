"""Value types passed between the astronomy, assembly and output layers."""

from dataclasses import dataclass
from datetime import date

EVENTS: tuple[str, ...] = (
    "fajr",
    "sunrise",
    "dhuhr",
    "asr",
    "sunset",
    "maghrib",
    "isha",
    "midnight",
)

OUTPUT_FORMATS: tuple[str, ...] = ("floor", "round", "mixed")


@dataclass(frozen=True)
class QueryInput:
    """Raw user input. Not yet validated."""

    when: str  # "YYYY-MM-DD" format string
    lat: float  # Latitude (decimal degrees)
    lng: float  # Longitude (decimal degrees, east positive)
    utc_offset: float | None = None  # Hours; None resolves it from the coordinates


@dataclass(frozen=True)
class GeoCoordinate:
    """Observer position on the Earth's surface."""

    lat: float  # Latitude (decimal degrees, north positive)
    lng: float  # Longitude (decimal degrees, east positive)


@dataclass(frozen=True)
class CalendarMoment:
    """Gregorian calendar date plus a fractional UTC hour."""

    year: int
    month: int
    day: int
    hours: float = 0.0  # Fractional hour of day, UTC

    @classmethod
    def from_date(cls, day: date, hours: float = 0.0) -> "CalendarMoment":
        return cls(year=day.year, month=day.month, day=day.day, hours=hours)


@dataclass(frozen=True)
class JulianTime:
    """Continuous astronomical time axis."""

    julian_day: float
    julian_century: float  # Centuries since J2000.0


@dataclass(frozen=True)
class SolarPosition:
    """Apparent equatorial position of the Sun at 0h UTC of one day."""

    declination: float  # Degrees
    right_ascension: float  # Degrees, [0, 360)
    apparent_sidereal_time: float  # Degrees, Greenwich


@dataclass(frozen=True)
class SolarWindow:
    """Solar positions for the day before, the target day and the day after."""

    previous: SolarPosition
    current: SolarPosition
    following: SolarPosition


@dataclass(frozen=True)
class PrayerAngleConfig:
    """Calculation convention. Angles are degrees below the horizon."""

    fajr_angle: float = 18.0
    sunrise_altitude: float = 0.833  # Refraction + solar semi-diameter
    maghrib_angle: float = 4.1
    isha_angle: float = 14.0
    isha_interval: float | None = None  # Minutes after maghrib; replaces isha_angle
    asr_shadow_ratio: float = 1.0  # 1 = standard, 2 = Hanafi
    output_format: str = "mixed"

    def __post_init__(self) -> None:
        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError(
                f"Unknown output format: {self.output_format!r} "
                f"(expected one of {', '.join(OUTPUT_FORMATS)})"
            )
        if not self.asr_shadow_ratio > 0:
            raise ValueError(
                f"Asr shadow ratio must be positive: {self.asr_shadow_ratio}"
            )


@dataclass(frozen=True)
class PrayerTimesResult:
    """Local decimal-hour times for one day. None marks an event that does not occur."""

    fajr: float | None
    sunrise: float | None
    dhuhr: float
    asr: float | None
    sunset: float | None
    maghrib: float | None
    isha: float | None
    midnight: float | None
    unreachable: tuple[str, ...] = ()  # Event names the Sun never reaches

    def as_dict(self) -> dict[str, float | None]:
        return {event: getattr(self, event) for event in EVENTS}


@dataclass(frozen=True)
class TimingRecord:
    """One day of a published reference timetable."""

    prayer_date: date
    times: dict[str, str]  # Event name → "HH:MM", keys as published


@dataclass(frozen=True)
class TimingTable:
    """A reference timetable for a single location."""

    coordinate: GeoCoordinate
    records: tuple[TimingRecord, ...]


@dataclass(frozen=True)
class TimingComparison:
    """Calculated vs. published time for one event."""

    event: str
    reference: str  # "HH:MM"
    calculated: str | None  # "HH:MM", None when the event is unreachable
    difference: int | None  # Circular absolute difference in minutes
