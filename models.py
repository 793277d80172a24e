"""Pydantic models for API requests and responses."""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Twilight(str, Enum):
    """Enumeration of supported horizon definitions."""

    official = "official"
    civil = "civil"
    nautical = "nautical"
    astronomical = "astronomical"


class SunQueryParams(BaseModel):
    """Validated query parameters for the ``/sun`` endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    lat: float = Field(..., ge=-90.0, le=90.0, description="Latitude in degrees")
    lon: float = Field(..., ge=-180.0, le=180.0, description="Longitude in degrees")
    day: date = Field(..., alias="date", description="Calendar date (YYYY-MM-DD)")
    twilight: Twilight = Field(Twilight.official, description="Horizon definition")


class YearQueryParams(BaseModel):
    """Validated query parameters for the ``/year`` endpoint."""

    lat: float = Field(..., ge=-90.0, le=90.0, description="Latitude in degrees")
    lon: float = Field(..., ge=-180.0, le=180.0, description="Longitude in degrees")
    year: int = Field(..., ge=1, le=9999, description="Gregorian calendar year")
    twilight: Twilight = Field(Twilight.official, description="Horizon definition")
    selected: Optional[str] = Field(
        None,
        pattern=r"^\d{4}-\d{2}-\d{2}$",
        description="Date (YYYY-MM-DD) whose record is returned separately",
    )


class LocationQueryParams(BaseModel):
    """Validated query parameters for the ``/location`` endpoint."""

    lat: float = Field(..., ge=-90.0, le=90.0, description="Latitude in degrees")
    lon: float = Field(..., ge=-180.0, le=180.0, description="Longitude in degrees")
    locale: str = Field("en", min_length=2, max_length=16, description="Locality language")

    @field_validator("locale")
    def validate_locale(cls, value: str) -> str:
        if not value.replace("-", "").replace("_", "").isalpha():
            raise ValueError("locale must be a language tag such as 'en' or 'pt-BR'")
        return value


class SunResponse(BaseModel):
    """Sunrise/sunset of a single day."""

    ok: bool = True
    status: str = Field(..., description="Computation status")
    calendar_date: date = Field(..., description="Requested calendar date")
    latitude: float = Field(..., description="Latitude in degrees")
    longitude: float = Field(..., description="Longitude in degrees")
    twilight: Twilight = Field(..., description="Applied horizon definition")
    sunrise_utc: Optional[str] = Field(None, description="Sunrise time in UTC (ISO-8601)")
    sunset_utc: Optional[str] = Field(None, description="Sunset time in UTC (ISO-8601)")
    sunrise_minutes: Optional[int] = Field(None, description="Sunrise minute of the UTC day")
    sunset_minutes: Optional[int] = Field(None, description="Sunset minute of the UTC day")
    daylight_minutes: Optional[int] = Field(None, description="Daylight length in minutes")


class DailyRecordModel(BaseModel):
    """One bar of the year chart."""

    date_str: str = Field(..., description="Calendar date (YYYY-MM-DD)")
    month: int = Field(..., ge=1, le=12)
    sunrise_utc: Optional[str] = None
    sunset_utc: Optional[str] = None
    sunrise_minutes: Optional[int] = None
    sunset_minutes: Optional[int] = None
    daylight_minutes: Optional[int] = None
    sunrise_label: str = Field(..., description="Sunrise as HH:MM or --:--")
    sunset_label: str = Field(..., description="Sunset as HH:MM or --:--")
    daylight_label: str = Field(..., description="Daylight as '<h>h <m>m'")


class SummaryModel(BaseModel):
    """Aggregate daylight figures of the year."""

    days: int
    days_without_crossing: int
    longest_date: Optional[str] = None
    longest_minutes: Optional[int] = None
    shortest_date: Optional[str] = None
    shortest_minutes: Optional[int] = None
    mean_daylight_minutes: Optional[float] = None


class YearResponse(BaseModel):
    """Year series payload for chart collaborators."""

    ok: bool = True
    year: int
    latitude: float
    longitude: float
    twilight: Twilight
    day_count: int
    records: List[DailyRecordModel]
    month_ticks: List[str]
    hour_ticks: List[int]
    summary: SummaryModel
    selected: Optional[DailyRecordModel] = None


class LocationResponse(BaseModel):
    """Display name of a coordinate."""

    ok: bool = True
    name: str
    resolved: bool = Field(..., description="False when name is the coordinate fallback")
    latitude: float
    longitude: float


class HealthResponse(BaseModel):
    """Health-check response."""

    ok: bool = True
    twilights: List[str]
    geocoder_url: str


class ErrorResponse(BaseModel):
    """Error payload."""

    ok: bool = False
    code: str
    error: str
