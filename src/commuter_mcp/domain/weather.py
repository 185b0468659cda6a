from __future__ import annotations

import math
from collections.abc import Sequence
from datetime import datetime

from commuter_mcp.domain.value_objects import WeatherCondition

# NWS heat index regression coefficients (Rothfusz), applied to Celsius input
_HI_C1 = -42.379
_HI_C2 = 2.04901523
_HI_C3 = 10.14333127
_HI_C4 = -0.22475541
_HI_C5 = -0.00683783
_HI_C6 = -0.05481717
_HI_C7 = 0.00122874
_HI_C8 = 0.00085282
_HI_C9 = -0.00000199


def apparent_temperature(temp_c: float, humidity_pct: float, wind_speed_ms: float) -> float:
    """Return the "feels like" temperature in Celsius.

    - temp_c < 10: wind chill, with wind speed converted to km/h.
    - temp_c > 26 and humidity_pct > 40: heat index polynomial.
    - otherwise: temp_c unchanged.

    No clamping or rounding is applied.
    """
    if temp_c < 10:
        wind_factor = math.pow(wind_speed_ms * 3.6, 0.16)
        return 13.12 + 0.6215 * temp_c - 11.37 * wind_factor + 0.3965 * temp_c * wind_factor

    if temp_c > 26 and humidity_pct > 40:
        t = temp_c
        rh = humidity_pct
        return (
            _HI_C1
            + _HI_C2 * t
            + _HI_C3 * rh
            + _HI_C4 * t * rh
            + _HI_C5 * t * t
            + _HI_C6 * rh * rh
            + _HI_C7 * t * t * rh
            + _HI_C8 * t * rh * rh
            + _HI_C9 * t * t * rh * rh
        )

    return temp_c


def condition_from_fmi_symbol(symbol: int | None) -> WeatherCondition:
    """Map an FMI weathersymbol3 code to a condition (first match wins)."""
    if symbol is None:
        return WeatherCondition.CLOUDY
    if symbol == 1:
        return WeatherCondition.SUNNY
    if symbol in (2, 3):
        return WeatherCondition.CLOUDY
    if 31 <= symbol <= 33:
        return WeatherCondition.RAINING
    if 41 <= symbol <= 53:
        return WeatherCondition.SNOWING
    if 61 <= symbol <= 64:
        return WeatherCondition.THUNDERSTORM
    if 71 <= symbol <= 83:
        return WeatherCondition.SLEET
    if 91 <= symbol <= 92:
        return WeatherCondition.FOG
    return WeatherCondition.CLOUDY


def condition_from_wmo_code(code: int | None) -> WeatherCondition:
    """Map an Open-Meteo (WMO) weather code to a condition (first match wins)."""
    if code is None:
        return WeatherCondition.CLOUDY
    if code == 0:
        return WeatherCondition.SUNNY
    if 71 <= code <= 77 or code in (85, 86):
        return WeatherCondition.SNOWING
    if 51 <= code <= 57 or 61 <= code <= 67 or 80 <= code <= 82 or 95 <= code <= 99:
        return WeatherCondition.RAINING
    return WeatherCondition.CLOUDY


def nearest_time_index(times: Sequence[datetime], target: datetime) -> int | None:
    """Return the index of the timestamp closest to target.

    Linear scan; on equal distance the first index seen wins.
    Returns None for an empty sequence.
    """
    best_index: int | None = None
    best_diff: float | None = None
    for i, t in enumerate(times):
        diff = abs((t - target).total_seconds())
        if best_diff is None or diff < best_diff:
            best_index = i
            best_diff = diff
    return best_index
