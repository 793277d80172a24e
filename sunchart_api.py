"""FastAPI application exposing sunrise/sunset and year-series computations."""

from __future__ import annotations

import json
import logging
import os
import time
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Annotated, List, Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from models import (
    DailyRecordModel,
    ErrorResponse,
    HealthResponse,
    LocationQueryParams,
    LocationResponse,
    SummaryModel,
    SunQueryParams,
    SunResponse,
    YearQueryParams,
    YearResponse,
)
from sunchart.chart import (
    format_clock,
    format_daylight,
    hour_ticks,
    month_ticks,
    summarize_series,
)
from sunchart.location import geocoder_url, lookup_location_name
from sunchart.series import DailyRecord, build_year_series, record_from_event
from sunchart.solar import ZENITH_ANGLES, solve_day

logging.basicConfig(level=logging.INFO, format="%(message)s")
LOGGER = logging.getLogger("sunchart-api")

APP_DESCRIPTION = "Sunrise, sunset and daylight series for any coordinate"

DEFAULT_CORS_ORIGINS = "http://localhost:5173"


def _cors_origins() -> List[str]:
    raw = os.environ.get("SUNCHART_CORS_ORIGINS", DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def _year_jobs() -> int:
    raw = os.environ.get("SUNCHART_N_JOBS", "1")
    try:
        n_jobs = int(raw)
    except ValueError:
        n_jobs = 0
    # joblib rejects zero workers.
    if n_jobs == 0:
        LOGGER.warning(json.dumps({"event": "n_jobs_invalid", "value": raw}))
        return 1
    return n_jobs


@asynccontextmanager
async def lifespan(app: FastAPI):  # pragma: no cover - exercised in integration tests
    LOGGER.info(
        json.dumps(
            {
                "event": "startup",
                "geocoder_url": geocoder_url(),
                "n_jobs": _year_jobs(),
            }
        )
    )
    yield


app = FastAPI(
    title="Sunchart API",
    description=APP_DESCRIPTION,
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _format_utc(dt: Optional[datetime]) -> Optional[str]:
    if dt is None:
        return None
    return dt.astimezone(UTC).isoformat().replace("+00:00", "Z")


def _record_model(record: DailyRecord) -> DailyRecordModel:
    return DailyRecordModel(
        date_str=record.date_str,
        month=record.month_number,
        sunrise_utc=_format_utc(record.sunrise),
        sunset_utc=_format_utc(record.sunset),
        sunrise_minutes=record.sunrise_minutes,
        sunset_minutes=record.sunset_minutes,
        daylight_minutes=record.daylight_minutes,
        sunrise_label=format_clock(record.sunrise_minutes),
        sunset_label=format_clock(record.sunset_minutes),
        daylight_label=format_daylight(record.daylight_minutes),
    )


def _error_response(status_code: int, code: str, message: str) -> JSONResponse:
    payload = ErrorResponse(code=code, error=message)
    LOGGER.error(json.dumps({"event": "error", "code": code, "message": message}))
    return JSONResponse(status_code=status_code, content=payload.model_dump())


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    messages = ", ".join(error["msg"] for error in exc.errors())
    return _error_response(422, "validation_error", messages)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    detail = exc.detail
    if isinstance(detail, dict):
        message = detail.get("error") or detail.get("message") or str(detail)
    elif isinstance(detail, list):
        message = ", ".join(str(item) for item in detail)
    else:
        message = str(detail)
    return _error_response(exc.status_code, f"http_{exc.status_code}", message)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    LOGGER.exception("Unhandled exception", exc_info=exc)
    return _error_response(500, "internal_error", "Unhandled server error")


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(
        ok=True,
        twilights=list(ZENITH_ANGLES),
        geocoder_url=geocoder_url(),
    )


@app.get(
    "/sun",
    response_model=SunResponse,
    responses={422: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def sun_endpoint(params: Annotated[SunQueryParams, Query()]) -> SunResponse:
    start_time = time.perf_counter()
    twilight = params.twilight.value
    status, event = solve_day(params.day, params.lat, params.lon, twilight)
    record = record_from_event(params.day, event)
    duration_ms = (time.perf_counter() - start_time) * 1000.0

    response = SunResponse(
        status=status,
        calendar_date=params.day,
        latitude=params.lat,
        longitude=params.lon,
        twilight=params.twilight,
        sunrise_utc=_format_utc(record.sunrise),
        sunset_utc=_format_utc(record.sunset),
        sunrise_minutes=record.sunrise_minutes,
        sunset_minutes=record.sunset_minutes,
        daylight_minutes=record.daylight_minutes,
    )

    LOGGER.info(
        json.dumps(
            {
                "event": "sun",
                "lat": params.lat,
                "lon": params.lon,
                "date": params.day.isoformat(),
                "twilight": twilight,
                "status": status,
                "duration_ms": round(duration_ms, 3),
            }
        )
    )
    return response


@app.get(
    "/year",
    response_model=YearResponse,
    responses={422: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def year_endpoint(params: Annotated[YearQueryParams, Query()]) -> YearResponse:
    start_time = time.perf_counter()
    series = build_year_series(
        params.year,
        params.lat,
        params.lon,
        twilight=params.twilight.value,
        n_jobs=_year_jobs(),
    )
    summary = summarize_series(series)
    selected = series.find(params.selected) if params.selected else None

    response = YearResponse(
        year=series.year,
        latitude=series.latitude,
        longitude=series.longitude,
        twilight=params.twilight,
        day_count=len(series),
        records=[_record_model(record) for record in series],
        month_ticks=month_ticks(series),
        hour_ticks=hour_ticks(),
        summary=SummaryModel(
            days=summary.days,
            days_without_crossing=summary.days_without_crossing,
            longest_date=summary.longest.date_str if summary.longest else None,
            longest_minutes=summary.longest.daylight_minutes if summary.longest else None,
            shortest_date=summary.shortest.date_str if summary.shortest else None,
            shortest_minutes=summary.shortest.daylight_minutes if summary.shortest else None,
            mean_daylight_minutes=summary.mean_daylight_minutes,
        ),
        selected=_record_model(selected) if selected else None,
    )

    LOGGER.info(
        json.dumps(
            {
                "event": "year",
                "lat": params.lat,
                "lon": params.lon,
                "year": params.year,
                "twilight": params.twilight.value,
                "days": len(series),
                "duration_ms": round((time.perf_counter() - start_time) * 1000.0, 3),
            }
        )
    )
    return response


@app.get(
    "/location",
    response_model=LocationResponse,
    responses={422: {"model": ErrorResponse}},
)
def location_endpoint(params: Annotated[LocationQueryParams, Query()]) -> LocationResponse:
    name, resolved = lookup_location_name(params.lat, params.lon, params.locale)
    return LocationResponse(
        name=name, resolved=resolved, latitude=params.lat, longitude=params.lon
    )
