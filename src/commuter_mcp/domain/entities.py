from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from commuter_mcp.domain.value_objects import RowType


@dataclass(frozen=True)
class TimetableRow:
    """One stop of a train's itinerary, as delivered by the live-trains endpoint."""

    train_stopping: bool
    station_code: str  # stationShortCode, e.g. "JP", "HKI"
    row_type: RowType
    scheduled_time: datetime
    live_estimate_time: datetime | None  # None when Digitraffic has no estimate yet


@dataclass
class Train:
    """A train identified by its number; numbers are only unique per calendar day."""

    train_number: int
    line_id: str | None = None  # commuterLineID, e.g. "R", "Z"; None for long-distance trains


@dataclass
class Departure:
    """A single upcoming departure from the tracked station."""

    scheduled_time: datetime
    live_estimate_time: datetime | None
    destination: str  # City of the terminal stop; "" when the station is not registered
    train: Train
    delay_minutes: int = 0  # 0 when on time; clamped to 0 for early trains


@dataclass(frozen=True)
class CityLocation:
    """A place the dashboard shows weather for."""

    lat: float
    lon: float
    city: str


@dataclass
class Weather:
    """Current weather normalized from either upstream weather service."""

    location: CityLocation
    temperature: float | None
    feels_like: float | None  # None when the upstream has no matching hourly value
    condition_emoji: str | None
    condition_label: str | None
