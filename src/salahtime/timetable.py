"""CLI entry point for prayer time tables.

Run:
    uv run salahtime --lat 43.4296 --lng -80.4214 --date 2026-02-15 --utc-offset -5
    uv run salahtime --lat 43.4296 --lng -80.4214 --date 2026-02-01 --month --chart feb.png
"""

import argparse
import logging
import os
import sys
from datetime import date, datetime
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

from salahtime.compute import (  # noqa: E402
    TimezoneLookupError,
    compute_month_timetable,
    compute_prayer_times,
    resolve_utc_offset,
)
from salahtime.config import CALCULATION_METHODS, load_config  # noqa: E402
from salahtime.formatting import format_prayer_times  # noqa: E402
from salahtime.models import EVENTS, OUTPUT_FORMATS, GeoCoordinate  # noqa: E402
from salahtime.renderers.static import save_month_chart  # noqa: E402

_MISSING = "--:--"


def _parse_date(value: str) -> date:
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"expected YYYY-MM-DD, got {value!r}"
        ) from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="salahtime", description="Astronomical prayer time calculator"
    )
    parser.add_argument("--lat", type=float, help="Latitude, decimal degrees")
    parser.add_argument(
        "--lng", type=float, help="Longitude, decimal degrees (east positive)"
    )
    parser.add_argument(
        "--date",
        type=_parse_date,
        default=date.today(),
        help="YYYY-MM-DD (default: today)",
    )
    parser.add_argument(
        "--utc-offset",
        type=float,
        help="Hours from UTC (default: resolved from coordinates)",
    )
    parser.add_argument(
        "--method", choices=sorted(CALCULATION_METHODS), help="Calculation convention"
    )
    parser.add_argument(
        "--format", choices=OUTPUT_FORMATS, help="Minute rounding policy"
    )
    parser.add_argument(
        "--month", action="store_true", help="Print the whole month of --date"
    )
    parser.add_argument(
        "--chart", type=Path, help="Save a PNG chart of the month to this path"
    )
    parser.add_argument(
        "--list-methods", action="store_true", help="List calculation methods"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def _print_methods() -> None:
    for name, config in CALCULATION_METHODS.items():
        isha = (
            f"{config.isha_interval:g} min"
            if config.isha_interval is not None
            else f"{config.isha_angle:g}°"
        )
        print(
            f"{name:<8} fajr={config.fajr_angle:g}° maghrib={config.maghrib_angle:g}° "
            f"isha={isha} asr×{config.asr_shadow_ratio:g}"
        )


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.list_methods:
        _print_methods()
        return 0
    if args.lat is None or args.lng is None:
        print("error: --lat and --lng are required", file=sys.stderr)
        return 2

    environ = dict(os.environ)
    if args.method:
        environ["SALAHTIME_METHOD"] = args.method
    if args.format:
        environ["SALAHTIME_OUTPUT_FORMAT"] = args.format

    coordinate = GeoCoordinate(lat=args.lat, lng=args.lng)
    try:
        config = load_config(environ)
        if args.month or args.chart:
            timetable = compute_month_timetable(
                args.date.year, args.date.month, coordinate, args.utc_offset, config
            )
        else:
            offset = args.utc_offset
            if offset is None:
                offset = resolve_utc_offset(coordinate, args.date)
            result = compute_prayer_times(
                args.date, coordinate, offset, config, strict=False
            )
            timetable = ((args.date, result),)
    except (TimezoneLookupError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    if args.month:
        print("date        " + " ".join(f"{event:<8}" for event in EVENTS))
        for day, result in timetable:
            formatted = format_prayer_times(result, config.output_format)
            print(
                f"{day.isoformat()}  "
                + " ".join(f"{formatted[event] or _MISSING:<8}" for event in EVENTS)
            )
    else:
        _, result = next(row for row in timetable if row[0] == args.date)
        for event, value in format_prayer_times(result, config.output_format).items():
            print(f"{event:<9}{value or _MISSING}")

    if args.chart:
        path = save_month_chart(timetable, args.chart)
        print(f"Saved: {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
