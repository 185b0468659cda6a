from __future__ import annotations

from commuter_mcp.domain.entities import CityLocation
from commuter_mcp.domain.exceptions import LocationNotFoundError

TRACKED_STATION = "JP"  # Järvenpää

STATION_TO_CITY: dict[str, str] = {
    "HKI": "Helsinki",
    "RI": "Riihimäki",
    "TPE": "Tampere",
    "TL": "Toijala",
}

LOCATIONS: list[CityLocation] = [
    CityLocation(lat=60.4737, lon=25.0899, city="Järvenpää"),
    CityLocation(lat=60.1708, lon=24.9375, city="Helsinki"),
]


def determine_destination(station_code: str) -> str:
    """Return the city name for a terminal station code, or "" when unknown.

    Exact, case-sensitive match against STATION_TO_CITY.
    """
    return STATION_TO_CITY.get(station_code, "")


def find_location(city: str) -> CityLocation:
    """Look up a registered location by city name (case-insensitive).

    Raises LocationNotFoundError when no location matches.
    """
    wanted = city.strip().casefold()
    for location in LOCATIONS:
        if location.city.casefold() == wanted:
            return location
    raise LocationNotFoundError(f"Location not found: {city}")
