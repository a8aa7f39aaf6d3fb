"""
Heatmap calculator for journey activity.

Builds a calendar-aligned grid of day cells with intensity levels for a
GitHub-style heatmap, plus the month labels that sit above the week columns.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Optional

from pearl.stats_calculator import calculate_summary

DATE_FORMAT = "%Y-%m-%d"
LABEL_FORMAT = "%d %b %Y"

TRAILING_WEEKS = 53
CELL_WIDTH = 13  # 11px cell + 2px gap


class DateParseError(ValueError):
    """Raised when an activity key is not a valid calendar date."""

    pass


class WeekStart(Enum):
    """First weekday of each grid column."""

    MONDAY = "monday"
    SUNDAY = "sunday"


@dataclass(frozen=True)
class GridMode:
    """Alignment policy for a heatmap grid.

    trailing_weeks=None spans the data's own date range; otherwise the grid
    is a fixed number of weeks ending with the week that contains today.
    """

    week_start: WeekStart
    trailing_weeks: Optional[int] = None


FULL_RANGE = GridMode(week_start=WeekStart.MONDAY)
TRAILING_WINDOW = GridMode(week_start=WeekStart.SUNDAY, trailing_weeks=TRAILING_WEEKS)


@dataclass(frozen=True)
class Cell:
    """A single day in the heatmap grid."""

    is_placeholder: bool = False
    level: int = 0
    description: str = ""
    count: int = 0


PLACEHOLDER = Cell(is_placeholder=True)


@dataclass
class Grid:
    """Week columns of seven day cells, oldest week first."""

    weeks: list[list[Cell]]
    week_starts: list[date]
    week_start: WeekStart

    @property
    def start(self) -> Optional[date]:
        return self.week_starts[0] if self.week_starts else None

    @property
    def end(self) -> Optional[date]:
        return self.week_starts[-1] + timedelta(days=6) if self.week_starts else None


@dataclass
class MonthLabel:
    """Month name positioned over a run of week columns."""

    name: str
    offset: int
    width: int = 0


@dataclass
class HeatmapData:
    """Everything the heatmap template needs."""

    weeks: list[list[Cell]]
    month_labels: list[MonthLabel] = field(default_factory=list)
    total_count: int = 0
    active_day_count: int = 0
    busiest_date_label: str = ""


def parse_activity(activity: dict[str, int]) -> dict[date, int]:
    """
    Convert an ISO-keyed activity mapping into a date-keyed one.

    Args:
        activity: Mapping of "YYYY-MM-DD" strings to journey counts

    Returns:
        Mapping of date to journey count

    Raises:
        DateParseError: If any key is not a valid calendar date
    """
    parsed: dict[date, int] = {}
    for key, count in activity.items():
        try:
            day = datetime.strptime(key, DATE_FORMAT).date()
        except (TypeError, ValueError) as e:
            raise DateParseError(f"parsing date {key!r}: {e}") from e
        parsed[day] = count
    return parsed


def classify(count: int, max_count: int) -> int:
    """
    Calculate intensity level for heatmap coloring.

    Args:
        count: Number of journeys for the day
        max_count: Highest daily count across the whole data set

    Returns:
        Level from 0-4:
            0: No journeys (or no data at all)
            1: up to 25% of the busiest day
            2: up to 50%
            3: up to 75%
            4: above 75%
    """
    if count == 0 or max_count == 0:
        return 0

    ratio = count / max_count
    if ratio <= 0.25:
        return 1
    elif ratio <= 0.50:
        return 2
    elif ratio <= 0.75:
        return 3
    else:
        return 4


def week_start_of(day: date, week_start: WeekStart) -> date:
    """Return the first day of the week containing day."""
    if week_start is WeekStart.MONDAY:
        return day - timedelta(days=day.weekday())
    # weekday(): Monday=0 ... Sunday=6
    return day - timedelta(days=(day.weekday() + 1) % 7)


def describe_day(day: date, count: int) -> str:
    """Hover text for a day cell, e.g. "02 Jan 2006: 3 journeys"."""
    return f"{day.strftime(LABEL_FORMAT)}: {count} journeys"


def build_grid(
    activity: dict[str, int],
    today: Optional[date] = None,
    mode: GridMode = FULL_RANGE,
) -> Grid:
    """
    Build a calendar-aligned heatmap grid.

    In full-range mode the grid runs from the start of the week holding the
    earliest date in activity to the end of the week holding the latest one.
    In trailing mode it holds mode.trailing_weeks columns, the last of which
    contains today; days after today become placeholder cells.

    Args:
        activity: Mapping of "YYYY-MM-DD" strings to journey counts
        today: Reference date (required for trailing mode; full-range mode
            ignores it)
        mode: FULL_RANGE, TRAILING_WINDOW or a custom GridMode

    Returns:
        Grid with complete seven-day weeks

    Raises:
        DateParseError: If any key in activity is not a valid date
    """
    return grid_from_counts(parse_activity(activity), today=today, mode=mode)


def grid_from_counts(
    counts: dict[date, int],
    today: Optional[date] = None,
    mode: GridMode = FULL_RANGE,
) -> Grid:
    """Build a grid from an already-parsed date-to-count mapping."""
    max_count = max(counts.values(), default=0)

    if mode.trailing_weeks is None:
        if not counts:
            return Grid(weeks=[], week_starts=[], week_start=mode.week_start)
        start = week_start_of(min(counts), mode.week_start)
        end = week_start_of(max(counts), mode.week_start) + timedelta(days=6)
        num_weeks = (end - start).days // 7 + 1
    else:
        if today is None:
            raise ValueError("today is required for a trailing-window grid")
        last_week = week_start_of(today, mode.week_start)
        num_weeks = mode.trailing_weeks
        start = last_week - timedelta(days=num_weeks * 7 - 7)

    weeks = []
    week_starts = []
    for w in range(num_weeks):
        week_first = start + timedelta(days=w * 7)
        week_starts.append(week_first)

        column = []
        for d in range(7):
            day = week_first + timedelta(days=d)
            if mode.trailing_weeks is not None and day > today:
                column.append(PLACEHOLDER)
                continue
            count = counts.get(day, 0)
            column.append(
                Cell(
                    level=classify(count, max_count),
                    description=describe_day(day, count),
                    count=count,
                )
            )
        weeks.append(column)

    return Grid(weeks=weeks, week_starts=week_starts, week_start=mode.week_start)


def build_month_labels(
    week_starts: list[date], cell_width: int = CELL_WIDTH
) -> list[MonthLabel]:
    """
    Build month labels positioned above the week columns.

    A label starts at every column whose first day falls in a different month
    from the previous column's, and runs until the next label starts (the last
    one runs to the right edge of the grid).

    Args:
        week_starts: First day of each week column, oldest first
        cell_width: Width of one column including its gap

    Returns:
        Labels whose [offset, offset + width) ranges partition the grid width
    """
    labels: list[MonthLabel] = []
    prev_month = None

    for w, week_first in enumerate(week_starts):
        month = (week_first.year, week_first.month)
        if month == prev_month:
            continue
        offset = w * cell_width
        if labels:
            labels[-1].width = offset - labels[-1].offset
        labels.append(MonthLabel(name=week_first.strftime("%b"), offset=offset))
        prev_month = month

    if labels:
        labels[-1].width = len(week_starts) * cell_width - labels[-1].offset

    return labels


def build_heatmap_data(
    activity: dict[str, int],
    today: date,
    window_days: int = 365,
) -> HeatmapData:
    """
    Build the trailing 53-week heatmap shown on the dashboard.

    Args:
        activity: Mapping of "YYYY-MM-DD" strings to journey counts
        today: Reference date; later days are placeholders
        window_days: Length of the statistics window in days

    Returns:
        HeatmapData with the Sunday-start grid, month labels and summary
    """
    counts = parse_activity(activity)
    grid = grid_from_counts(counts, today=today, mode=TRAILING_WINDOW)
    summary = calculate_summary(counts, today=today, window_days=window_days)

    return HeatmapData(
        weeks=grid.weeks,
        month_labels=build_month_labels(grid.week_starts),
        total_count=summary.total_count,
        active_day_count=summary.active_day_count,
        busiest_date_label=summary.busiest_date_label,
    )
