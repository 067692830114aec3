"""Matplotlib static PNG renderer for a month of prayer times."""

from datetime import date
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.figure import Figure

from salahtime.models import EVENTS, PrayerTimesResult

_ROOT = Path(__file__).parent.parent.parent.parent

_EVENT_COLORS: dict[str, str] = {
    "fajr": "#3b4cc0",
    "sunrise": "#f4a261",
    "dhuhr": "#e9c46a",
    "asr": "#2a9d8f",
    "sunset": "#e76f51",
    "maghrib": "#9b2226",
    "isha": "#264653",
    "midnight": "#6c757d",
}


def render_month_chart(
    timetable: tuple[tuple[date, PrayerTimesResult], ...],
    title: str | None = None,
    chart_width: int = 10,
) -> Figure:
    """Render a month timetable as one line per event.

    Args:
        timetable: (date, result) rows, as returned by compute_month_timetable.
        title: Figure title. Derived from the first date if None.
        chart_width: Output image width in inches.

    Returns:
        matplotlib Figure object.
    """
    fig, ax = plt.subplots(figsize=(chart_width, chart_width * 0.6))

    days = np.array([day.day for day, _ in timetable])
    for event in EVENTS:
        # None (unreachable) → NaN leaves a gap in the line
        hours = np.array(
            [getattr(result, event) for _, result in timetable], dtype=float
        )
        ax.plot(
            days,
            hours,
            label=event,
            color=_EVENT_COLORS[event],
            linewidth=1.5,
            marker=".",
        )

    if title is None and timetable:
        title = timetable[0][0].strftime("%B %Y")
    if title:
        ax.set_title(title)
    ax.set_xlabel("Day of month")
    ax.set_ylabel("Local time (h)")
    ax.set_yticks(range(0, 27, 3))
    ax.grid(True, alpha=0.3)
    ax.legend(loc="upper left", bbox_to_anchor=(1.0, 1.0), fontsize="small")
    fig.tight_layout()

    return fig


def save_month_chart(
    timetable: tuple[tuple[date, PrayerTimesResult], ...],
    output_path: Path | None = None,
) -> Path:
    """Save a month timetable chart as a PNG file.

    Args:
        timetable: (date, result) rows.
        output_path: Destination path. Auto-generated under results/ if None.

    Returns:
        Path to the saved file.
    """
    if output_path is None:
        first_day = timetable[0][0] if timetable else date.today()
        output_path = _ROOT / "results" / f"prayer_times_{first_day:%Y_%m}.png"

    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig = render_month_chart(timetable)
    fig.savefig(output_path)
    plt.close(fig)
    return output_path
