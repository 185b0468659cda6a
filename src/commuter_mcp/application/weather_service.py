from __future__ import annotations

import logging
import math
from typing import Any, Protocol
from xml.etree import ElementTree

import httpx

from commuter_mcp.domain.entities import CityLocation, Weather
from commuter_mcp.domain.exceptions import NoDataError, ParseError
from commuter_mcp.domain.weather import (
    apparent_temperature,
    condition_from_fmi_symbol,
    condition_from_wmo_code,
    nearest_time_index,
)
from commuter_mcp.infrastructure.time_utils import parse_forecast_time
from commuter_mcp.infrastructure.weather_client import FmiClient, OpenMeteoClient

logger = logging.getLogger(__name__)

FMI_SOURCE = "fmi"
OPEN_METEO_SOURCE = "open-meteo"

_TUPLE_LIST_TAG = "doubleOrNilReasonTupleList"


class WeatherSource(Protocol):
    """A weather upstream that yields one normalized Weather record per location."""

    name: str

    async def fetch(self, location: CityLocation) -> Weather: ...

    def parse(self, payload: Any, location: CityLocation) -> Weather: ...


def _local_name(tag: str) -> str:
    """Strip the "{namespace}" prefix ElementTree puts on qualified tags."""
    return tag.rsplit("}", 1)[-1]


class FmiWeatherSource:
    """Weather from the FMI WFS multipoint coverage (XML).

    Only the first tuple (nearest forecast time) is used. When the tuple has
    no humidity/wind columns, feels_like falls back to the raw temperature.
    """

    name = FMI_SOURCE

    def __init__(self, client: FmiClient) -> None:
        self._client = client

    async def fetch(self, location: CityLocation) -> Weather:
        xml_text = await self._client.get_forecast(location.city)
        return self.parse(xml_text, location)

    def parse(self, payload: str, location: CityLocation) -> Weather:
        try:
            root = ElementTree.fromstring(payload.strip())
        except ElementTree.ParseError as exc:
            raise ParseError("Failed to parse FMI response") from exc

        root_name = _local_name(root.tag)
        if root_name == "parsererror":
            raise ParseError("Failed to parse FMI response")
        if root_name == "ExceptionReport":
            detail = " ".join(t.strip() for t in root.itertext() if t.strip())
            raise ParseError(f"FMI returned an exception report: {detail}")

        block = next((el for el in root.iter() if _local_name(el.tag) == _TUPLE_LIST_TAG), None)
        text = block.text if block is not None and block.text else ""
        tuples = [line.strip() for line in text.strip().split("\n") if line.strip()]
        if not tuples:
            raise NoDataError("No weather data available from FMI")

        # Column order follows the requested parameters:
        # temperature weathersymbol3 [humidity windspeedms]
        columns = tuples[0].split()
        if len(columns) < 2:
            raise NoDataError(f"Incomplete FMI weather tuple: {tuples[0]!r}")
        try:
            values = [float(c) for c in columns]
        except ValueError as exc:
            raise ParseError(f"Non-numeric FMI weather tuple: {tuples[0]!r}") from exc

        temperature = values[0]
        if math.isnan(temperature):
            raise NoDataError("FMI returned no temperature")
        symbol = int(values[1]) if math.isfinite(values[1]) else None

        feels_like = temperature
        if len(values) >= 4 and not (math.isnan(values[2]) or math.isnan(values[3])):
            feels_like = apparent_temperature(temperature, values[2], values[3])

        condition = condition_from_fmi_symbol(symbol)
        logger.debug("FMI weather for %s: %s %s", location.city, temperature, condition.label)
        return Weather(
            location=location,
            temperature=temperature,
            feels_like=feels_like,
            condition_emoji=condition.emoji,
            condition_label=condition.label,
        )


class OpenMeteoWeatherSource:
    """Weather from the Open-Meteo forecast API (JSON).

    feels_like comes from the hourly apparent temperature nearest to the
    current-weather timestamp; it stays None when no hourly value matches.
    """

    name = OPEN_METEO_SOURCE

    def __init__(self, client: OpenMeteoClient) -> None:
        self._client = client

    async def fetch(self, location: CityLocation) -> Weather:
        payload = await self._client.get_current_weather(location.lat, location.lon)
        return self.parse(payload, location)

    def parse(self, payload: dict[str, Any], location: CityLocation) -> Weather:
        if not isinstance(payload, dict):
            raise ParseError("Unexpected Open-Meteo payload: expected a JSON object")
        current = payload.get("current_weather")
        if not isinstance(current, dict) or current.get("temperature") is None:
            raise NoDataError("No current weather data available from Open-Meteo")

        code = current.get("weathercode")
        try:
            temperature = float(current["temperature"])
            condition = condition_from_wmo_code(int(code) if code is not None else None)
        except (OverflowError, TypeError, ValueError) as exc:
            raise ParseError(f"Malformed Open-Meteo current weather: {current!r}") from exc
        feels_like = self._feels_like(payload.get("hourly"), current.get("time"))

        return Weather(
            location=location,
            temperature=temperature,
            feels_like=feels_like,
            condition_emoji=condition.emoji,
            condition_label=condition.label,
        )

    def _feels_like(self, hourly: Any, current_time: Any) -> float | None:
        """Pick the hourly apparent temperature at the current-weather time."""
        if not isinstance(hourly, dict) or current_time is None:
            return None
        times = hourly.get("time") or []
        values = hourly.get("apparent_temperature") or []
        if not isinstance(times, list) or not isinstance(values, list):
            raise ParseError("Malformed Open-Meteo hourly series")

        if current_time in times:
            index: int | None = times.index(current_time)
        else:
            try:
                parsed = [parse_forecast_time(t) for t in times]
                target = parse_forecast_time(current_time)
                # Mixing offset-aware and naive timestamps raises TypeError
                index = nearest_time_index(parsed, target)
            except (TypeError, ValueError) as exc:
                raise ParseError("Unparseable Open-Meteo timestamp") from exc

        if index is None or index >= len(values) or values[index] is None:
            return None
        value = values[index]
        try:
            return float(value)
        except (TypeError, ValueError) as exc:
            raise ParseError(f"Non-numeric Open-Meteo apparent temperature: {value!r}") from exc


def create_weather_source(name: str, http_client: httpx.AsyncClient) -> WeatherSource:
    """Build the configured weather source ("fmi" or "open-meteo").

    Raises ValueError for an unknown source name.
    """
    normalized = name.strip().lower()
    if normalized == FMI_SOURCE:
        return FmiWeatherSource(FmiClient(http_client))
    if normalized == OPEN_METEO_SOURCE:
        return OpenMeteoWeatherSource(OpenMeteoClient(http_client))
    raise ValueError(f"Unknown weather source: {name}")
