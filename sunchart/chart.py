"""Helpers that turn a :class:`~sunchart.series.YearSeries` into chart inputs."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, timedelta
from typing import List, Optional

import numpy as np

from .series import MINUTES_PER_DAY, DailyRecord, YearSeries

__all__ = [
    "SeriesSummary",
    "carry_selection",
    "format_clock",
    "format_daylight",
    "hour_ticks",
    "month_ticks",
    "parse_date_str",
    "summarize_series",
]

_DATE_STR_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")


def format_clock(minutes: Optional[int]) -> str:
    if minutes is None:
        return "--:--"
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def format_daylight(minutes: Optional[int]) -> str:
    total = minutes or 0
    return f"{total // 60}h {total % 60}m"


def hour_ticks(step_hours: int = 2) -> List[int]:
    """Minute-of-day axis ticks from midnight to midnight inclusive."""

    if step_hours <= 0:
        raise ValueError("step_hours must be positive")
    return list(range(0, MINUTES_PER_DAY + 1, step_hours * 60))


def month_ticks(series: YearSeries) -> List[str]:
    return [record.date_str for record in series if record.day.day == 1]


def parse_date_str(value: str) -> date:
    """Parse a zero-padded ``YYYY-MM-DD`` string."""

    match = _DATE_STR_RE.match(value)
    if match is None:
        raise ValueError(f"Expected a YYYY-MM-DD date, got {value!r}")
    year, month, day = (int(part) for part in match.groups())
    return date(year, month, day)


def carry_selection(date_str: str, year: int) -> str:
    """Move a selected ``YYYY-MM-DD`` date into *year*, keeping month and day.

    A day that does not exist in *year* rolls over into the next month, so
    February 29th becomes March 1st in a common year.
    """

    match = _DATE_STR_RE.match(date_str)
    if match is None:
        raise ValueError(f"Expected a YYYY-MM-DD date, got {date_str!r}")
    month, day = int(match.group(2)), int(match.group(3))
    if not 1 <= month <= 12 or day < 1:
        raise ValueError(f"Invalid calendar date: {date_str!r}")
    moved = date(year, month, 1) + timedelta(days=day - 1)
    return moved.isoformat()


@dataclass(frozen=True)
class SeriesSummary:
    """Aggregate daylight figures of a year series."""

    days: int
    days_without_crossing: int
    longest: Optional[DailyRecord]
    shortest: Optional[DailyRecord]
    mean_daylight_minutes: Optional[float]


def summarize_series(series: YearSeries) -> SeriesSummary:
    daylight = np.array(
        [
            np.nan if record.daylight_minutes is None else float(record.daylight_minutes)
            for record in series
        ],
        dtype=float,
    )
    valid = ~np.isnan(daylight)
    missing = int(np.count_nonzero(~valid))

    if not valid.any():
        return SeriesSummary(
            days=len(series),
            days_without_crossing=missing,
            longest=None,
            shortest=None,
            mean_daylight_minutes=None,
        )

    # nanargmax/nanargmin return the first index on ties.
    return SeriesSummary(
        days=len(series),
        days_without_crossing=missing,
        longest=series[int(np.nanargmax(daylight))],
        shortest=series[int(np.nanargmin(daylight))],
        mean_daylight_minutes=round(float(np.nanmean(daylight)), 1),
    )
