"""Reverse geocoding of a coordinate into a display name."""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, Optional, Tuple

import httpx

LOGGER = logging.getLogger(__name__)

DEFAULT_GEOCODER_URL = "https://api.bigdatacloud.net/data/reverse-geocode-client"
DEFAULT_GEOCODER_TIMEOUT = 10.0


class LocationLookupError(RuntimeError):
    """Raised when the reverse-geocoding service cannot be used."""


def geocoder_url() -> str:
    return os.environ.get("SUNCHART_GEOCODER_URL", DEFAULT_GEOCODER_URL)


def _geocoder_timeout() -> float:
    raw = os.environ.get("SUNCHART_GEOCODER_TIMEOUT")
    if not raw:
        return DEFAULT_GEOCODER_TIMEOUT
    try:
        return float(raw)
    except ValueError:
        LOGGER.warning(
            json.dumps({"event": "geocoder_timeout_invalid", "value": raw})
        )
        return DEFAULT_GEOCODER_TIMEOUT


def coordinate_label(lat: float, lon: float) -> str:
    return f"{lat:.2f}, {lon:.2f}"


def fetch_place(
    lat: float,
    lon: float,
    locale: str = "en",
    client: Optional[httpx.Client] = None,
) -> Dict[str, Any]:
    """Return the geocoder's JSON payload for the coordinate.

    Raises
    ------
    LocationLookupError
        On transport errors, non-success status codes or a body that is not a
        JSON object.
    """

    url = geocoder_url()
    params = {"latitude": lat, "longitude": lon, "localityLanguage": locale}
    try:
        if client is None:
            with httpx.Client(timeout=httpx.Timeout(_geocoder_timeout())) as own_client:
                response = own_client.get(url, params=params)
        else:
            response = client.get(url, params=params)
        response.raise_for_status()
        payload = response.json()
    except (httpx.HTTPError, ValueError) as exc:
        raise LocationLookupError(f"Reverse geocoding failed for {url}: {exc}") from exc

    if not isinstance(payload, dict):
        raise LocationLookupError(f"Unexpected geocoder payload type: {type(payload).__name__}")
    return payload


def lookup_location_name(
    lat: float,
    lon: float,
    locale: str = "en",
    client: Optional[httpx.Client] = None,
) -> Tuple[str, bool]:
    """Return ``(name, resolved)``.

    ``resolved`` is ``False`` when *name* is the :func:`coordinate_label`
    fallback, either because the lookup failed or because the geocoder knew
    neither a place nor a country.
    """

    try:
        payload = fetch_place(lat, lon, locale, client=client)
    except LocationLookupError as exc:
        LOGGER.error(
            json.dumps(
                {"event": "geocoder_failed", "lat": lat, "lon": lon, "error": str(exc)}
            )
        )
        return coordinate_label(lat, lon), False

    city = payload.get("city") or payload.get("locality") or payload.get("principalSubdivision")
    country = payload.get("countryName")
    if city and country:
        return f"{city}, {country}", True
    if country:
        return country, True
    return coordinate_label(lat, lon), False


def resolve_location_name(
    lat: float,
    lon: float,
    locale: str = "en",
    client: Optional[httpx.Client] = None,
) -> str:
    """Return ``"City, Country"``, ``"Country"`` or the coordinate label.

    Lookup failures are logged and answered with :func:`coordinate_label`.
    """

    return lookup_location_name(lat, lon, locale, client=client)[0]
