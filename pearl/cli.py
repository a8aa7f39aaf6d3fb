"""
CLI display functions for pearl.

Renders journey activity as a GitHub-style heatmap in the terminal.
"""

import sys
from dataclasses import dataclass
from datetime import date
from typing import Optional, TextIO

from pearl.heatmap_calculator import (
    FULL_RANGE,
    WeekStart,
    build_grid,
    build_month_labels,
)

# Each cell is a two-character glyph followed by a space
TEXT_CELL_WIDTH = 3
ROW_LABEL_WIDTH = 4

DAY_LABELS = {
    WeekStart.MONDAY: ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"),
    WeekStart.SUNDAY: ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"),
}


@dataclass(frozen=True)
class Palette:
    """Glyphs, colours and legend names, indexed by intensity level 0-4."""

    glyphs: tuple[str, ...]
    colors: tuple[str, ...]
    names: tuple[str, ...]
    reset: str = ""

    def paint(self, level: int) -> str:
        return f"{self.colors[level]}{self.glyphs[level]}{self.reset}"


ANSI_PALETTE = Palette(
    glyphs=("  ", "░░", "▒▒", "▓▓", "██"),
    colors=(
        "\033[48;5;237m",  # dark grey
        "\033[48;5;22m",  # dark green
        "\033[48;5;28m",  # mid green
        "\033[48;5;34m",  # bright green
        "\033[48;5;46m",  # vivid green
    ),
    names=("0", "low", "med", "high", "peak"),
    reset="\033[0m",
)

PLAIN_PALETTE = Palette(
    glyphs=("··", "░░", "▒▒", "▓▓", "██"),
    colors=("", "", "", "", ""),
    names=ANSI_PALETTE.names,
)


def format_month_header(week_starts: list[date]) -> str:
    """Build the month row that sits above the week columns."""
    header = " " * ROW_LABEL_WIDTH
    for label in build_month_labels(week_starts, cell_width=TEXT_CELL_WIDTH):
        header += f"{label.name:<{label.width}}"[: label.width]
    return header.rstrip()


def format_legend(palette: Palette) -> str:
    """Format the legend line, e.g. "Legend: ██ peak"."""
    parts = [
        f"{palette.paint(level)} {name}" for level, name in enumerate(palette.names)
    ]
    return "Legend: " + "  ".join(parts)


def render_heatmap(
    activity: dict[str, int],
    out: Optional[TextIO] = None,
    palette: Palette = ANSI_PALETTE,
) -> None:
    """
    Write a heatmap of daily journey activity.

    The grid covers the full date range of the data in Monday-start weeks.

    Args:
        activity: Mapping of "YYYY-MM-DD" strings to journey counts
        out: Stream to write to (default sys.stdout)
        palette: Glyphs and colours for each intensity level

    Raises:
        DateParseError: If any key in activity is not a valid date
    """
    if out is None:
        out = sys.stdout

    if not activity:
        print("No journey data found.", file=out)
        return

    grid = build_grid(activity, mode=FULL_RANGE)

    print(format_month_header(grid.week_starts), file=out)

    for row, day_label in enumerate(DAY_LABELS[grid.week_start]):
        cells = " ".join(palette.paint(week[row].level) for week in grid.weeks)
        print(f"{day_label} {cells}", file=out)

    print(file=out)
    print(format_legend(palette), file=out)

    total = sum(activity.values())
    print(file=out)
    print(f"Total journeys: {total} across {len(activity)} days", file=out)
