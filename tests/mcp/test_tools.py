"""Tests for MCP tool functions: success and error paths."""
from __future__ import annotations

import json
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import httpx

from commuter_mcp.application.departure_service import DepartureService
from commuter_mcp.domain.entities import CityLocation, Departure, Train, Weather
from commuter_mcp.domain.exceptions import NoDataError, ParseError, TransportError
from commuter_mcp.infrastructure.time_utils import HELSINKI_TZ
from commuter_mcp.mcp.tools import register_tools


def make_departure(number: int = 9611, destination: str = "Helsinki") -> Departure:
    dt = datetime(2026, 2, 20, 14, 10, tzinfo=HELSINKI_TZ)
    return Departure(
        scheduled_time=dt,
        live_estimate_time=dt,
        destination=destination,
        train=Train(train_number=number, line_id="R"),
    )


def make_weather_source(weather: Weather | None = None, error: Exception | None = None) -> MagicMock:
    source = MagicMock()
    source.name = "fmi"
    source.fetch = AsyncMock(return_value=weather, side_effect=error)
    return source


def make_departure_svc(
    departures: list[Departure] | None = None, error: Exception | None = None
) -> MagicMock:
    svc = MagicMock(spec=DepartureService)
    svc.station = "JP"
    svc.fetch_departures = AsyncMock(return_value=departures or [], side_effect=error)
    return svc


def build_tool_functions(departure_svc: MagicMock, weather_source: MagicMock) -> dict:  # type: ignore[type-arg]
    """Register tools on a mock MCP and extract the tool functions."""
    registered: dict = {}  # type: ignore[type-arg]

    class MockMcp:
        def tool(self, meta: dict | None = None):  # type: ignore[type-arg]
            def decorator(fn):  # type: ignore[type-arg]
                registered[fn.__name__] = fn
                return fn
            return decorator

    register_tools(MockMcp(), departure_svc, weather_source)  # type: ignore[arg-type]
    return registered


def parse_result(result: list) -> dict:  # type: ignore[type-arg]
    return json.loads(result[0].resource.text)  # type: ignore[no-any-return]


# ---------------------------------------------------------------------------
# get_departures tool
# ---------------------------------------------------------------------------

async def test_get_departures_returns_resource() -> None:
    svc = make_departure_svc([make_departure(1), make_departure(2, "Tampere")])
    tools = build_tool_functions(svc, make_weather_source())

    parsed = parse_result(await tools["get_departures"]())

    assert parsed["station"] == "JP"
    assert parsed["count"] == 2
    assert parsed["departures"][0]["train"] == {"train_number": 1, "line_id": "R"}
    assert parsed["departures"][1]["destination"] == "Tampere"


async def test_get_departures_transport_5xx_friendly_message() -> None:
    svc = make_departure_svc(error=TransportError(503, "Digitraffic"))
    tools = build_tool_functions(svc, make_weather_source())

    parsed = parse_result(await tools["get_departures"]())
    assert "503" in parsed["error"]
    assert "Digitraffic" in parsed["error"]


async def test_get_departures_timeout() -> None:
    svc = make_departure_svc(error=httpx.ReadTimeout("timed out"))
    tools = build_tool_functions(svc, make_weather_source())

    parsed = parse_result(await tools["get_departures"]())
    assert "timed out" in parsed["error"]


async def test_unexpected_exception_returns_resource_not_exception() -> None:
    """Exception from service must NOT propagate; an error resource is returned."""
    svc = make_departure_svc(error=RuntimeError("Unexpected internal error"))
    tools = build_tool_functions(svc, make_weather_source())

    result = await tools["get_departures"]()
    assert isinstance(result, list)
    assert parse_result(result)["error"] == "An unexpected error occurred."


# ---------------------------------------------------------------------------
# get_weather tool
# ---------------------------------------------------------------------------

async def test_get_weather_returns_resource() -> None:
    location = CityLocation(lat=60.1708, lon=24.9375, city="Helsinki")
    weather = Weather(
        location=location,
        temperature=-3.0,
        feels_like=-7.5,
        condition_emoji="❄️",
        condition_label="Snowing",
    )
    source = make_weather_source(weather)
    tools = build_tool_functions(make_departure_svc(), source)

    parsed = parse_result(await tools["get_weather"]("helsinki"))

    assert parsed["temperature"] == -3.0
    assert parsed["feels_like"] == -7.5
    assert parsed["location"]["city"] == "Helsinki"
    assert parsed["source"] == "fmi"
    source.fetch.assert_awaited_once_with(location)


async def test_get_weather_unknown_city() -> None:
    source = make_weather_source()
    tools = build_tool_functions(make_departure_svc(), source)

    parsed = parse_result(await tools["get_weather"]("Oulu"))
    assert "Location not found" in parsed["error"]
    source.fetch.assert_not_awaited()


async def test_get_weather_empty_city() -> None:
    tools = build_tool_functions(make_departure_svc(), make_weather_source())
    parsed = parse_result(await tools["get_weather"]("  "))
    assert "empty" in parsed["error"]


async def test_get_weather_not_found_status() -> None:
    source = make_weather_source(error=TransportError(404, "FMI"))
    tools = build_tool_functions(make_departure_svc(), source)

    parsed = parse_result(await tools["get_weather"]("Helsinki"))
    assert parsed["error"] == "FMI: resource not found."


async def test_get_weather_no_data() -> None:
    source = make_weather_source(error=NoDataError("No weather data available from FMI"))
    tools = build_tool_functions(make_departure_svc(), source)

    parsed = parse_result(await tools["get_weather"]("Helsinki"))
    assert parsed["error"] == "No weather data available from FMI"


async def test_get_weather_parse_error() -> None:
    source = make_weather_source(error=ParseError("Failed to parse FMI response"))
    tools = build_tool_functions(make_departure_svc(), source)

    parsed = parse_result(await tools["get_weather"]("Järvenpää"))
    assert parsed["error"] == "Failed to parse FMI response"


# ---------------------------------------------------------------------------
# list_locations tool
# ---------------------------------------------------------------------------

async def test_list_locations() -> None:
    tools = build_tool_functions(make_departure_svc(), make_weather_source())
    parsed = parse_result(await tools["list_locations"]())
    assert [loc["city"] for loc in parsed["locations"]] == ["Järvenpää", "Helsinki"]
