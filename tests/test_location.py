from __future__ import annotations

from typing import Callable

import httpx
import pytest

from sunchart.location import (
    DEFAULT_GEOCODER_URL,
    LocationLookupError,
    coordinate_label,
    fetch_place,
    lookup_location_name,
    resolve_location_name,
)


def _client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


def _json_client(payload: object, status_code: int = 200) -> httpx.Client:
    return _client(lambda request: httpx.Response(status_code, json=payload))


def test_coordinate_label():
    assert coordinate_label(48.8566, 2.3522) == "48.86, 2.35"
    assert coordinate_label(-33.0, -70.5) == "-33.00, -70.50"


def test_city_and_country():
    client = _json_client({"city": "Lisbon", "countryName": "Portugal"})
    assert resolve_location_name(38.72, -9.14, client=client) == "Lisbon, Portugal"


def test_city_falls_back_to_locality_then_subdivision():
    client = _json_client({"city": "", "locality": "Sintra", "countryName": "Portugal"})
    assert resolve_location_name(38.8, -9.38, client=client) == "Sintra, Portugal"

    client = _json_client({"principalSubdivision": "Lisbon", "countryName": "Portugal"})
    assert resolve_location_name(38.8, -9.38, client=client) == "Lisbon, Portugal"


def test_country_only():
    client = _json_client({"countryName": "Greenland"})
    assert resolve_location_name(72.0, -40.0, client=client) == "Greenland"


def test_empty_payload_uses_coordinates():
    client = _json_client({})
    assert resolve_location_name(0.0, -150.0, client=client) == "0.00, -150.00"


def test_request_parameters(monkeypatch: pytest.MonkeyPatch):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = request.url
        return httpx.Response(200, json={"countryName": "Deutschland"})

    monkeypatch.setenv("SUNCHART_GEOCODER_URL", "https://geo.example.test/reverse")
    assert resolve_location_name(52.52, 13.405, "de", client=_client(handler)) == "Deutschland"
    assert seen["url"].host == "geo.example.test"
    assert seen["url"].params["latitude"] == "52.52"
    assert seen["url"].params["longitude"] == "13.405"
    assert seen["url"].params["localityLanguage"] == "de"


def test_default_url(monkeypatch: pytest.MonkeyPatch):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        return httpx.Response(200, json={})

    monkeypatch.delenv("SUNCHART_GEOCODER_URL", raising=False)
    fetch_place(1.0, 2.0, client=_client(handler))
    assert seen["url"].startswith(DEFAULT_GEOCODER_URL)


def test_http_error_raises_lookup_error():
    with pytest.raises(LocationLookupError):
        fetch_place(1.0, 2.0, client=_json_client({"error": "nope"}, status_code=500))


def test_http_error_falls_back_to_coordinates():
    client = _json_client({"error": "nope"}, status_code=503)
    assert resolve_location_name(12.345, 67.891, client=client) == "12.35, 67.89"


def test_transport_error_falls_back_to_coordinates():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    assert resolve_location_name(1.0, 2.0, client=_client(handler)) == "1.00, 2.00"


def test_invalid_json_falls_back_to_coordinates():
    client = _client(lambda request: httpx.Response(200, content=b"<html>"))
    assert resolve_location_name(1.0, 2.0, client=client) == "1.00, 2.00"


def test_non_object_payload_falls_back_to_coordinates():
    client = _json_client(["Lisbon", "Portugal"])
    with pytest.raises(LocationLookupError):
        fetch_place(1.0, 2.0, client=client)
    assert resolve_location_name(1.0, 2.0, client=client) == "1.00, 2.00"


def test_lookup_reports_resolved_names():
    client = _json_client({"city": "Lisbon", "countryName": "Portugal"})
    assert lookup_location_name(38.72, -9.14, client=client) == ("Lisbon, Portugal", True)

    client = _json_client({"countryName": "Greenland"})
    assert lookup_location_name(72.0, -40.0, client=client) == ("Greenland", True)


def test_lookup_flags_coordinate_fallback():
    assert lookup_location_name(0.0, -150.0, client=_json_client({})) == ("0.00, -150.00", False)

    client = _json_client({"error": "nope"}, status_code=503)
    assert lookup_location_name(12.345, 67.891, client=client) == ("12.35, 67.89", False)
