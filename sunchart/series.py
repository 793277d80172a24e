"""Full-year series of daily sunrise/sunset records."""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterator, Optional, Tuple

from joblib import Parallel, delayed

from .solar import SolarEvent, compute_sun_times

__all__ = [
    "DailyRecord",
    "YearSeries",
    "build_daily_record",
    "build_year_series",
    "day_count",
    "is_leap_year",
    "minutes_of_day",
    "record_from_event",
]

LOGGER = logging.getLogger(__name__)

MINUTES_PER_DAY = 24 * 60


def is_leap_year(year: int) -> bool:
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def day_count(year: int) -> int:
    return 366 if is_leap_year(year) else 365


def minutes_of_day(instant: datetime) -> int:
    """Minutes since midnight on the instant's own (UTC) clock."""

    return instant.hour * 60 + instant.minute


@dataclass(frozen=True)
class DailyRecord:
    """One day of a :class:`YearSeries`."""

    day: date
    date_str: str
    sunrise: Optional[datetime]
    sunset: Optional[datetime]
    sunrise_minutes: Optional[int]
    sunset_minutes: Optional[int]
    daylight_minutes: Optional[int]

    @property
    def month_number(self) -> int:
        return self.day.month

    @property
    def daylight_range(self) -> Optional[Tuple[int, int]]:
        if self.sunrise_minutes is None or self.sunset_minutes is None:
            return None
        return self.sunrise_minutes, self.sunset_minutes


@dataclass(frozen=True)
class YearSeries:
    """Ordered daily records of one year at one coordinate."""

    year: int
    latitude: float
    longitude: float
    twilight: str
    records: Tuple[DailyRecord, ...]

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[DailyRecord]:
        return iter(self.records)

    def __getitem__(self, index: int) -> DailyRecord:
        return self.records[index]

    def find(self, date_str: str) -> Optional[DailyRecord]:
        """Return the record whose ``date_str`` equals *date_str* exactly."""

        for record in self.records:
            if record.date_str == date_str:
                return record
        return None


def record_from_event(day: date, event: Optional[SolarEvent]) -> DailyRecord:
    """Wrap an already computed event (or its absence) as a :class:`DailyRecord`."""

    date_str = f"{day.year:04d}-{day.month:02d}-{day.day:02d}"
    if event is None:
        return DailyRecord(
            day=day,
            date_str=date_str,
            sunrise=None,
            sunset=None,
            sunrise_minutes=None,
            sunset_minutes=None,
            daylight_minutes=None,
        )

    sunrise_minutes = minutes_of_day(event.sunrise)
    sunset_minutes = minutes_of_day(event.sunset)
    daylight = sunset_minutes - sunrise_minutes
    if daylight < 0:
        # Sunset wrapped past midnight on the UTC clock.
        daylight += MINUTES_PER_DAY
    return DailyRecord(
        day=day,
        date_str=date_str,
        sunrise=event.sunrise,
        sunset=event.sunset,
        sunrise_minutes=sunrise_minutes,
        sunset_minutes=sunset_minutes,
        daylight_minutes=daylight,
    )


def build_daily_record(
    day: date, lat: float, lon: float, twilight: str = "official"
) -> DailyRecord:
    return record_from_event(day, compute_sun_times(day, lat, lon, twilight))


def build_year_series(
    year: int,
    lat: float,
    lon: float,
    twilight: str = "official",
    n_jobs: int = 1,
) -> YearSeries:
    """Compute one :class:`DailyRecord` per day of *year*.

    Days are independent of each other. With ``n_jobs != 1`` they are
    evaluated through :class:`joblib.Parallel`, which returns results in
    submission order, so the series is identical to a sequential build.

    Raises
    ------
    ValueError
        If *year* is outside the range supported by :class:`datetime.date`
        or *twilight* is unknown.
    """

    start_time = time.perf_counter()
    first_day = date(year, 1, 1)
    days = [first_day + timedelta(days=offset) for offset in range(day_count(year))]

    if n_jobs == 1:
        records = [build_daily_record(day, lat, lon, twilight) for day in days]
    else:
        records = Parallel(n_jobs=n_jobs)(
            delayed(build_daily_record)(day, lat, lon, twilight) for day in days
        )

    series = YearSeries(
        year=year,
        latitude=lat,
        longitude=lon,
        twilight=twilight,
        records=tuple(records),
    )
    LOGGER.debug(
        json.dumps(
            {
                "event": "year_series_built",
                "year": year,
                "lat": lat,
                "lon": lon,
                "twilight": twilight,
                "days": len(series),
                "n_jobs": n_jobs,
                "duration_ms": round((time.perf_counter() - start_time) * 1000.0, 3),
            }
        )
    )
    return series
