from __future__ import annotations

import dataclasses
import json
import logging

import httpx
from mcp import types
from mcp.server.fastmcp import FastMCP

from commuter_mcp.application.departure_service import DepartureService
from commuter_mcp.application.weather_service import WeatherSource
from commuter_mcp.domain.exceptions import (
    LocationNotFoundError,
    NoDataError,
    ParseError,
    TransportError,
)
from commuter_mcp.domain.stations import LOCATIONS, find_location

logger = logging.getLogger(__name__)

_RESULT_URI = "mcp://commuter-mcp/result"


def _as_resource(json_str: str) -> list[types.EmbeddedResource]:
    """Wrap a JSON string as an embedded resource so the LLM does not narrate it."""
    return [
        types.EmbeddedResource(
            type="resource",
            resource=types.TextResourceContents(
                uri=_RESULT_URI,  # type: ignore[arg-type]
                mimeType="application/json",
                text=json_str,
            ),
        )
    ]


def _error_json(message: str) -> str:
    return json.dumps({"error": message}, ensure_ascii=False)


def _handle_exception(exc: Exception) -> list[types.EmbeddedResource]:
    if isinstance(exc, LocationNotFoundError):
        return _as_resource(_error_json(str(exc)))
    if isinstance(exc, TransportError):
        if exc.status_code == 404:
            return _as_resource(_error_json(f"{exc.source}: resource not found."))
        if exc.status_code >= 500:
            return _as_resource(
                _error_json(f"{exc.source} API error ({exc.status_code}). Please try again later.")
            )
        return _as_resource(_error_json(str(exc)))
    if isinstance(exc, (ParseError, NoDataError)):
        return _as_resource(_error_json(str(exc)))
    if isinstance(exc, httpx.TimeoutException):
        return _as_resource(_error_json("Request timed out. Please try again."))
    logger.exception("Unexpected error in MCP tool: %s", exc)
    return _as_resource(_error_json("An unexpected error occurred."))


def register_tools(
    mcp: FastMCP, departure_svc: DepartureService, weather_source: WeatherSource
) -> None:
    """Bind all @mcp.tool decorators. Called once during server setup."""

    @mcp.tool()
    async def get_departures() -> list[types.EmbeddedResource]:
        """Get the next commuter train departures from the tracked station.

        Returns at most 15 departures sorted by scheduled time, each with its
        destination city and commuter line id.
        """
        try:
            departures = await departure_svc.fetch_departures()
            result = {
                "station": departure_svc.station,
                "departures": [dataclasses.asdict(d) for d in departures],
                "count": len(departures),
            }
            return _as_resource(json.dumps(result, default=str, ensure_ascii=False))
        except Exception as exc:
            return _handle_exception(exc)

    @mcp.tool()
    async def get_weather(city: str) -> list[types.EmbeddedResource]:
        """Get the current weather for a registered city.

        Args:
            city: City name as listed by list_locations, e.g. "Helsinki".
        """
        try:
            if not city.strip():
                return _as_resource(_error_json("city cannot be empty"))
            location = find_location(city)
            weather = await weather_source.fetch(location)
            result = dataclasses.asdict(weather)
            result["source"] = weather_source.name
            return _as_resource(json.dumps(result, default=str, ensure_ascii=False))
        except Exception as exc:
            return _handle_exception(exc)

    @mcp.tool()
    async def list_locations() -> list[types.EmbeddedResource]:
        """List the cities weather is available for."""
        result = {"locations": [dataclasses.asdict(loc) for loc in LOCATIONS]}
        return _as_resource(json.dumps(result, ensure_ascii=False))
