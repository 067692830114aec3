"""Published reference timetables: loading, grouping by month, comparing against the calculator."""

import calendar
import json
from collections import defaultdict
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path

from salahtime.compute import compute_prayer_times
from salahtime.config import DEFAULT_CONFIG
from salahtime.formatting import format_prayer_times
from salahtime.models import (
    EVENTS,
    GeoCoordinate,
    PrayerAngleConfig,
    TimingComparison,
    TimingRecord,
    TimingTable,
)

# Published key → calculator event name
_KEY_ALIASES: dict[str, str] = {"maghreb": "maghrib"}

_MINUTES_PER_DAY = 24 * 60


def _parse_record(entry: dict) -> TimingRecord:
    prayer_date = datetime.strptime(entry["prayerDate"], "%Y/%m/%d").date()
    times = {key: str(value) for key, value in entry.items() if key != "prayerDate"}
    return TimingRecord(prayer_date=prayer_date, times=times)


def load_timing_table(path: Path) -> TimingTable:
    """Read a timetable JSON file.

    File format::

        {"latitude": 43.44, "longitude": -80.48,
         "data": {"prayerTimes": [{"prayerDate": "2026/02/19", "fajr": "05:39", ...}]}}

    Args:
        path: JSON file location.

    Returns:
        TimingTable with records in file order.
    """
    with path.open(encoding="utf-8") as f:
        payload = json.load(f)
    coordinate = GeoCoordinate(
        lat=float(payload["latitude"]), lng=float(payload["longitude"])
    )
    records = tuple(_parse_record(entry) for entry in payload["data"]["prayerTimes"])
    return TimingTable(coordinate=coordinate, records=records)


def group_by_month(records: Iterable[TimingRecord]) -> dict[str, list[TimingRecord]]:
    """Group records under English month names, months in calendar order."""
    grouped: dict[int, list[TimingRecord]] = defaultdict(list)
    for record in records:
        grouped[record.prayer_date.month].append(record)
    return {calendar.month_name[month]: grouped[month] for month in sorted(grouped)}


def _to_minutes(hhmm: str) -> int:
    hours, minutes = hhmm.split(":")
    return int(hours) * 60 + int(minutes)


def minute_difference(a: str, b: str) -> int:
    """Absolute difference between two "HH:MM" times, the short way around midnight."""
    raw = abs(_to_minutes(a) - _to_minutes(b))
    return min(raw, _MINUTES_PER_DAY - raw)


def compare_record(
    record: TimingRecord,
    coordinate: GeoCoordinate,
    utc_offset: float,
    config: PrayerAngleConfig = DEFAULT_CONFIG,
) -> dict[str, TimingComparison]:
    """Compare one published day against the calculator.

    Only events present in both sources are compared; published keys such
    as ``astronomicalMidnight`` that have no calculator counterpart are
    skipped.

    Returns:
        Event name → TimingComparison.
    """
    result = compute_prayer_times(
        record.prayer_date, coordinate, utc_offset, config, strict=False
    )
    calculated = format_prayer_times(result, config.output_format)

    comparisons: dict[str, TimingComparison] = {}
    for key, reference in record.times.items():
        event = _KEY_ALIASES.get(key, key)
        if event not in EVENTS:
            continue
        value = calculated[event]
        comparisons[event] = TimingComparison(
            event=event,
            reference=reference,
            calculated=value,
            difference=None if value is None else minute_difference(reference, value),
        )
    return comparisons
