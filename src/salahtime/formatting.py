"""Decimal-hour → "HH:MM" rendering under per-event rounding policies."""

import math
from collections.abc import Callable

from salahtime.models import EVENTS, PrayerTimesResult

_MINUTES_PER_DAY = 24 * 60

_ROUNDERS: dict[str, Callable[[float], int]] = {
    "floor": math.floor,
    "round": lambda minutes: math.floor(minutes + 0.5),
}

# Published timetables truncate the events that carry a safety margin
# and round the rest to the nearest minute.
_FLOORED_IN_MIXED = frozenset({"sunrise", "sunset", "maghrib"})

OUTPUT_POLICIES: dict[str, dict[str, str]] = {
    "floor": {event: "floor" for event in EVENTS},
    "round": {event: "round" for event in EVENTS},
    "mixed": {
        event: "floor" if event in _FLOORED_IN_MIXED else "round" for event in EVENTS
    },
}


def format_time(hours: float, rounding: str = "round") -> str:
    """Render decimal hours as a zero-padded 24-hour "HH:MM" string.

    Values outside [0, 24) wrap around midnight, so 23.995 rounds to "00:00".
    """
    if not math.isfinite(hours):
        raise ValueError(f"Cannot format non-finite time: {hours}")
    try:
        rounder = _ROUNDERS[rounding]
    except KeyError:
        raise ValueError(f"Unknown rounding: {rounding!r}") from None
    minutes = rounder(hours * 60) % _MINUTES_PER_DAY
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def format_prayer_times(
    result: PrayerTimesResult, output_format: str = "mixed"
) -> dict[str, str | None]:
    """Format every event of a result. Unreachable events stay None.

    Args:
        result: Local decimal-hour times.
        output_format: Key of OUTPUT_POLICIES.

    Returns:
        Event name → "HH:MM" (or None), in canonical event order.
    """
    try:
        policy = OUTPUT_POLICIES[output_format]
    except KeyError:
        raise ValueError(f"Unknown output format: {output_format!r}") from None
    return {
        event: None if hours is None else format_time(hours, policy[event])
        for event, hours in result.as_dict().items()
    }
