"""
Calculate trailing-window journey statistics.
"""

from dataclasses import dataclass
from datetime import date, timedelta

BUSIEST_DAY_FORMAT = "%d %b %Y"
NO_DATA_LABEL = "–"
DEFAULT_WINDOW_DAYS = 365


@dataclass
class Summary:
    """Totals shown underneath the heatmap."""

    total_count: int
    active_day_count: int
    busiest_date_label: str


def calculate_summary(
    counts: dict[date, int],
    today: date,
    window_days: int = DEFAULT_WINDOW_DAYS,
) -> Summary:
    """
    Calculate journey statistics over the trailing window ending today.

    A record is included when its date lies in [today - window_days, today].
    Every included record counts as an active day, even one with a count of
    zero, since it represents a day that was observed in the source.

    Args:
        counts: Mapping of date to journey count
        today: Last day of the window (inclusive)
        window_days: Window length in days (default 365)

    Returns:
        Summary with:
            - total_count: Sum of included counts
            - active_day_count: Number of included records
            - busiest_date_label: Date of the highest count, earliest on ties,
              or NO_DATA_LABEL when no included day has any journeys
    """
    window_start = today - timedelta(days=window_days)

    total_count = 0
    active_day_count = 0
    busiest_count = 0
    busiest_date = None

    for day in sorted(counts):
        if day < window_start or day > today:
            continue

        count = counts[day]
        total_count += count
        active_day_count += 1

        # Strictly greater keeps the earliest day on ties
        if count > busiest_count:
            busiest_count = count
            busiest_date = day

    if busiest_date is None:
        busiest_label = NO_DATA_LABEL
    else:
        busiest_label = busiest_date.strftime(BUSIEST_DAY_FORMAT)

    return Summary(
        total_count=total_count,
        active_day_count=active_day_count,
        busiest_date_label=busiest_label,
    )
