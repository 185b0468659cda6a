"""Shared pytest fixtures for the commuter dashboard test suite."""
from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone

import pytest

from commuter_mcp.domain.entities import CityLocation

FMI_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<wfs:FeatureCollection xmlns:wfs="http://www.opengis.net/wfs/2.0" xmlns:gml="http://www.opengis.net/gml/3.2" xmlns:gmlcov="http://www.opengis.net/gmlcov/1.0">
  <wfs:member>
    <gmlcov:rangeSet>
      <gml:DataBlock>
        <gml:doubleOrNilReasonTupleList>{tuples}</gml:doubleOrNilReasonTupleList>
      </gml:DataBlock>
    </gmlcov:rangeSet>
  </wfs:member>
</wfs:FeatureCollection>"""


@pytest.fixture
def now() -> datetime:
    """Fixed pipeline time: 2026-02-20T12:00:00Z (14:00 in Helsinki)."""
    return datetime(2026, 2, 20, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def helsinki() -> CityLocation:
    return CityLocation(lat=60.1708, lon=24.9375, city="Helsinki")


@pytest.fixture
def fmi_xml() -> Callable[..., str]:
    """Build an FMI multipoint coverage document from tuple lines."""

    def build(*tuples: str) -> str:
        body = "".join(f"\n          {t}" for t in tuples)
        if tuples:
            body += "\n        "
        return FMI_TEMPLATE.format(tuples=body)

    return build


@pytest.fixture
def sample_open_meteo() -> dict:  # type: ignore[type-arg]
    """Sample Open-Meteo forecast response with current_weather and hourly blocks."""
    return {
        "latitude": 60.17,
        "longitude": 24.94,
        "timezone": "Europe/Helsinki",
        "current_weather": {
            "time": "2026-02-20T14:00",
            "temperature": -3.4,
            "windspeed": 12.1,
            "winddirection": 200,
            "weathercode": 71,
            "is_day": 1,
        },
        "hourly": {
            "time": ["2026-02-20T13:00", "2026-02-20T14:00", "2026-02-20T15:00"],
            "apparent_temperature": [-7.9, -8.2, -8.6],
        },
    }
