"""Sunrise and sunset instants from the generalized sunrise equation."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import UTC, date, datetime
from typing import Dict, Optional, Tuple

__all__ = [
    "SolarEvent",
    "ZENITH_ANGLES",
    "compute_sun_times",
    "solar_status",
    "solve_day",
]

ZENITH_ANGLES: Dict[str, float] = {
    "official": 90.8333,
    "civil": 96.0,
    "nautical": 102.0,
    "astronomical": 108.0,
}

RISING_BASE_HOUR = 6.0
SETTING_BASE_HOUR = 18.0

STATUS_OK = "ok"
STATUS_POLAR_NIGHT = "polar_night"
STATUS_POLAR_DAY = "polar_day"
STATUS_INDETERMINATE = "indeterminate"


@dataclass(frozen=True)
class SolarEvent:
    """Sunrise and sunset of one calendar day, as UTC datetimes."""

    sunrise: datetime
    sunset: datetime


def _zenith_degrees(twilight: str) -> float:
    try:
        return ZENITH_ANGLES[twilight]
    except KeyError as exc:
        raise ValueError(f"Unsupported twilight selector: {twilight}") from exc


def _sin(degrees: float) -> float:
    return math.sin(math.radians(degrees))


def _cos(degrees: float) -> float:
    return math.cos(math.radians(degrees))


def _event_hour(
    day_of_year: int,
    lat: float,
    lng_hour: float,
    zenith: float,
    rising: bool,
) -> Tuple[str, Optional[float]]:
    """Return ``(status, ut_hours)`` for a single rising or setting event.

    ``ut_hours`` lies in ``[0, 24)`` when status is ``"ok"`` and is ``None``
    otherwise.
    """

    base_hour = RISING_BASE_HOUR if rising else SETTING_BASE_HOUR
    t = day_of_year + (base_hour - lng_hour) / 24.0

    mean_anomaly = 0.9856 * t - 3.289

    true_longitude = (
        mean_anomaly
        + 1.916 * _sin(mean_anomaly)
        + 0.020 * _sin(2.0 * mean_anomaly)
        + 282.634
    ) % 360.0

    right_ascension = math.degrees(
        math.atan(0.91764 * math.tan(math.radians(true_longitude)))
    ) % 360.0
    # Right ascension must share the quadrant of the true longitude.
    right_ascension += 90.0 * (
        math.floor(true_longitude / 90.0) - math.floor(right_ascension / 90.0)
    )
    right_ascension /= 15.0

    sin_dec = 0.39782 * _sin(true_longitude)
    cos_dec = math.cos(math.asin(sin_dec))

    denominator = cos_dec * _cos(lat)
    if denominator == 0.0:
        return STATUS_INDETERMINATE, None
    cos_h = (_cos(zenith) - sin_dec * _sin(lat)) / denominator

    if not math.isfinite(cos_h):
        return STATUS_INDETERMINATE, None
    if cos_h > 1.0:
        return STATUS_POLAR_NIGHT, None
    if cos_h < -1.0:
        return STATUS_POLAR_DAY, None

    hour_angle = math.degrees(math.acos(cos_h))
    if rising:
        hour_angle = 360.0 - hour_angle
    hour_angle /= 15.0

    local_mean_time = hour_angle + right_ascension - 0.06571 * t - 6.622

    ut = local_mean_time - lng_hour
    if not math.isfinite(ut):
        return STATUS_INDETERMINATE, None
    ut %= 24.0
    # A tiny negative remainder rounds up to exactly 24.0.
    if ut >= 24.0:
        ut = 0.0
    return STATUS_OK, ut


def _materialize(day: date, ut: float) -> datetime:
    """Attach fractional UTC hours to the calendar day of *day*.

    The date is never shifted, even when *ut* came from a value that wrapped
    around midnight.
    """

    hours = math.floor(ut)
    minutes = min(math.floor((ut - hours) * 60.0), 59)
    seconds = min(math.floor(((ut - hours) * 60.0 - minutes) * 60.0), 59)
    return datetime(day.year, day.month, day.day, hours, minutes, seconds, tzinfo=UTC)


def _solve_day(
    day: date, lat: float, lon: float, twilight: str
) -> Tuple[Tuple[str, Optional[float]], Tuple[str, Optional[float]]]:
    zenith = _zenith_degrees(twilight)
    if not (math.isfinite(lat) and math.isfinite(lon)):
        indeterminate = (STATUS_INDETERMINATE, None)
        return indeterminate, indeterminate

    day_of_year = day.timetuple().tm_yday
    lng_hour = lon / 15.0
    rise = _event_hour(day_of_year, lat, lng_hour, zenith, rising=True)
    set_ = _event_hour(day_of_year, lat, lng_hour, zenith, rising=False)
    return rise, set_


def solve_day(
    day: date,
    lat: float,
    lon: float,
    twilight: str = "official",
) -> Tuple[str, Optional[SolarEvent]]:
    """Return the day's status together with its event.

    The status is the rising event's when that one fails, else the setting
    event's. The event is present only when both crossings exist, so a day on
    which only one of them crosses the horizon has a non-``"ok"`` status and
    no event.
    """

    (rise_status, rise_ut), (set_status, set_ut) = _solve_day(day, lat, lon, twilight)
    status = rise_status if rise_status != STATUS_OK else set_status
    if rise_ut is None or set_ut is None:
        return status, None
    return status, SolarEvent(sunrise=_materialize(day, rise_ut), sunset=_materialize(day, set_ut))


def compute_sun_times(
    day: date,
    lat: float,
    lon: float,
    twilight: str = "official",
) -> Optional[SolarEvent]:
    """Compute sunrise and sunset for *day* at the given coordinate.

    Parameters
    ----------
    day:
        Civil calendar date. Only year, month and day are used.
    lat, lon:
        Geographic coordinates in degrees (east-positive longitude). Ranges
        are not validated; non-finite values give ``None``.
    twilight:
        Key of :data:`ZENITH_ANGLES`; ``"official"`` is the standard horizon.

    Returns
    -------
    SolarEvent or None
        ``None`` when the sun does not cross the horizon that day (polar day
        or polar night). Both instants are UTC, truncated to whole seconds,
        and carry the Y-M-D of *day*.
    """

    return solve_day(day, lat, lon, twilight)[1]


def solar_status(
    day: date,
    lat: float,
    lon: float,
    twilight: str = "official",
) -> str:
    """Classify the day as ``ok``, ``polar_night``, ``polar_day`` or ``indeterminate``."""

    return solve_day(day, lat, lon, twilight)[0]
