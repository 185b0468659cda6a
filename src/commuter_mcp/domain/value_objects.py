from __future__ import annotations

from enum import Enum


class RowType(str, Enum):
    """Timetable row type as reported by the Digitraffic API.

    Using (str, Enum) for Python 3.10 compatibility (StrEnum requires 3.11+).
    """

    DEPARTURE = "DEPARTURE"
    ARRIVAL = "ARRIVAL"


class WeatherCondition(str, Enum):
    """Normalized weather condition shown on the dashboard."""

    SUNNY = "Sunny"
    CLOUDY = "Cloudy"
    RAINING = "Raining"
    SNOWING = "Snowing"
    THUNDERSTORM = "Thunderstorm"
    SLEET = "Sleet"
    FOG = "Fog"

    @property
    def emoji(self) -> str:
        return _CONDITION_EMOJI[self]

    @property
    def label(self) -> str:
        return self.value


_CONDITION_EMOJI: dict[WeatherCondition, str] = {
    WeatherCondition.SUNNY: "☀️",
    WeatherCondition.CLOUDY: "☁️",
    WeatherCondition.RAINING: "🌧️",
    WeatherCondition.SNOWING: "❄️",
    WeatherCondition.THUNDERSTORM: "⛈️",
    WeatherCondition.SLEET: "🌨️",
    WeatherCondition.FOG: "🌫️",
}
