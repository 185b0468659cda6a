from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Any

from commuter_mcp.application.train_enrichment import TrainEnrichmentCache
from commuter_mcp.domain.entities import Departure, TimetableRow
from commuter_mcp.domain.exceptions import ParseError
from commuter_mcp.domain.services import MAX_DEPARTURES, rank_departures
from commuter_mcp.domain.stations import TRACKED_STATION
from commuter_mcp.domain.value_objects import RowType
from commuter_mcp.infrastructure.digitraffic_client import DigitrafficClient
from commuter_mcp.infrastructure.time_utils import (
    HELSINKI_TZ,
    format_date,
    now_helsinki,
    parse_digitraffic_datetime,
    to_helsinki,
)

logger = logging.getLogger(__name__)


class DepartureService:
    """Orchestrates fetching, filtering, ranking and enriching departures."""

    def __init__(
        self,
        client: DigitrafficClient,
        trains: TrainEnrichmentCache,
        station: str = TRACKED_STATION,
        max_results: int = MAX_DEPARTURES,
    ) -> None:
        self._client = client
        self._trains = trains
        self._station = station
        self._max_results = max_results

    @property
    def station(self) -> str:
        return self._station

    async def fetch_departures(self, now: datetime | None = None) -> list[Departure]:
        """Return the upcoming departures from the tracked station, enriched with line ids.

        Steps:
        1. Fetch live trains for the station (TransportError on non-2xx)
        2. Map raw trains → (train_number, [TimetableRow])
        3. Filter, rank and truncate (domain.services.rank_departures)
        4. Resolve every departure's Train concurrently through the enrichment cache,
           scoped to the calendar date of ``now`` in Helsinki
        5. Return once all enrichments succeeded; any failure aborts the call

        A naive ``now`` is taken as Helsinki local time.
        """
        effective_now = now if now is not None else now_helsinki()
        if effective_now.tzinfo is None:
            # Naive moments are Helsinki wall-clock time
            effective_now = effective_now.replace(tzinfo=HELSINKI_TZ)

        raw_trains = await self._client.get_live_trains(self._station)
        trains = [self._map_train(raw) for raw in raw_trains]
        departures = rank_departures(
            trains, effective_now, station=self._station, limit=self._max_results
        )
        logger.debug(
            "%d of %d trains depart from %s", len(departures), len(trains), self._station
        )

        departure_date = format_date(to_helsinki(effective_now))
        enriched = await asyncio.gather(
            *(self._trains.get(d.train.train_number, departure_date) for d in departures)
        )
        for departure, train in zip(departures, enriched):
            departure.train = train
        return departures

    def _map_train(self, raw: dict[str, Any]) -> tuple[int, list[TimetableRow]]:
        """Map a raw live-trains entry to (train_number, rows)."""
        try:
            train_number = int(raw["trainNumber"])
        except (KeyError, TypeError, ValueError) as exc:
            raise ParseError(f"Malformed train entry: {raw!r}") from exc
        rows = [self._map_row(r) for r in raw.get("timeTableRows", [])]
        return train_number, rows

    def _map_row(self, raw: dict[str, Any]) -> TimetableRow:
        """Map a single raw timetable row to the TimetableRow entity.

        Key mappings:
        - raw["trainStopping"] → train_stopping
        - raw["stationShortCode"] → station_code
        - raw["type"] → row_type
        - raw["scheduledTime"] → scheduled_time
        - raw["liveEstimateTime"] → live_estimate_time (None when missing)
        """
        try:
            live = raw.get("liveEstimateTime")
            return TimetableRow(
                train_stopping=bool(raw.get("trainStopping", False)),
                station_code=raw.get("stationShortCode", ""),
                row_type=RowType(raw["type"]),
                scheduled_time=parse_digitraffic_datetime(raw["scheduledTime"]),
                live_estimate_time=parse_digitraffic_datetime(live) if live else None,
            )
        except (KeyError, ValueError) as exc:
            raise ParseError(f"Malformed timetable row: {raw!r}") from exc
