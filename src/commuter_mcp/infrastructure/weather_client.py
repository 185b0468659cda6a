from __future__ import annotations

import logging
from typing import Any

import httpx

from commuter_mcp.domain.exceptions import ParseError, TransportError
from commuter_mcp.infrastructure.headers import ACCEPT_JSON, ACCEPT_XML, make_headers

logger = logging.getLogger(__name__)

FMI_URL = "https://opendata.fmi.fi/wfs"
FMI_STORED_QUERY = "fmi::forecast::harmonie::surface::point::multipointcoverage"
# Column order of every returned tuple follows this list
FMI_PARAMETERS = "temperature,weathersymbol3,humidity,windspeedms"

OPEN_METEO_URL = "https://api.open-meteo.com/v1/forecast"


def _raise_for_status(response: httpx.Response, source: str) -> None:
    """Raise TransportError for non-2xx responses."""
    if response.status_code >= 400:
        logger.warning("%s returned %s for %s", source, response.status_code, response.url)
        raise TransportError(response.status_code, source)


class FmiClient:
    """Client for the FMI open-data WFS service (XML multipoint coverage)."""

    SOURCE = "FMI"

    def __init__(self, http_client: httpx.AsyncClient) -> None:
        self._http = http_client

    async def get_forecast(self, place: str) -> str:
        """GET the harmonie point forecast for a place name; returns the raw XML text."""
        params: dict[str, Any] = {
            "service": "WFS",
            "version": "2.0.0",
            "request": "getFeature",
            "storedquery_id": FMI_STORED_QUERY,
            "place": place,
            "parameters": FMI_PARAMETERS,
        }
        logger.debug("GET %s place=%s", FMI_URL, place)
        response = await self._http.get(FMI_URL, params=params, headers=make_headers(ACCEPT_XML))
        _raise_for_status(response, self.SOURCE)
        return response.text


class OpenMeteoClient:
    """Client for the Open-Meteo forecast API (JSON)."""

    SOURCE = "Open-Meteo"

    def __init__(self, http_client: httpx.AsyncClient) -> None:
        self._http = http_client

    async def get_current_weather(self, lat: float, lon: float) -> dict[str, Any]:
        """GET current weather plus the hourly apparent temperature series."""
        params: dict[str, Any] = {
            "latitude": lat,
            "longitude": lon,
            "current_weather": "true",
            "hourly": "apparent_temperature",
            "timezone": "auto",
        }
        logger.debug("GET %s lat=%s lon=%s", OPEN_METEO_URL, lat, lon)
        response = await self._http.get(
            OPEN_METEO_URL, params=params, headers=make_headers(ACCEPT_JSON)
        )
        _raise_for_status(response, self.SOURCE)
        try:
            data: dict[str, Any] = response.json()
        except ValueError as exc:
            raise ParseError(f"{self.SOURCE} returned a non-JSON body") from exc
        return data
