"""Sunrise/sunset computations and year series for daylight charts."""

from .series import DailyRecord, YearSeries, build_daily_record, build_year_series, is_leap_year
from .solar import ZENITH_ANGLES, SolarEvent, compute_sun_times, solar_status, solve_day

__all__ = [
    "DailyRecord",
    "SolarEvent",
    "YearSeries",
    "ZENITH_ANGLES",
    "build_daily_record",
    "build_year_series",
    "compute_sun_times",
    "is_leap_year",
    "solar_status",
    "solve_day",
]
