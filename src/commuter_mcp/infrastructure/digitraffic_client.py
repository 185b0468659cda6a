from __future__ import annotations

import logging
from typing import Any

import httpx

from commuter_mcp.domain.exceptions import ParseError, TransportError
from commuter_mcp.infrastructure.headers import ACCEPT_JSON, make_headers

logger = logging.getLogger(__name__)

BASE_URL = "https://rata.digitraffic.fi/api/v1"
DEFAULT_TIMEOUT = 15.0  # seconds
SOURCE = "Digitraffic"

# Window of trains requested around the tracked station
ARRIVED_TRAINS = 1
ARRIVING_TRAINS = 50
DEPARTING_TRAINS = 50


class DigitrafficClient:
    """HTTP client for the Finnish rail open-data API (rata.digitraffic.fi).

    The API is open and unauthenticated. A single httpx.AsyncClient instance
    is shared for the process lifetime so connections are pooled.
    """

    def __init__(self, http_client: httpx.AsyncClient) -> None:
        self._http = http_client

    async def get_live_trains(self, station: str) -> list[dict[str, Any]]:
        """GET /live-trains — trains around the station with their full itineraries.

        Raises ParseError when the body is not a JSON array.
        """
        url = f"{BASE_URL}/live-trains"
        params: dict[str, Any] = {
            "station": station,
            "arrived_trains": ARRIVED_TRAINS,
            "arriving_trains": ARRIVING_TRAINS,
            "departing_trains": DEPARTING_TRAINS,
        }
        data = await self._get(url, params)
        if not isinstance(data, list):
            raise ParseError(f"Unexpected {SOURCE} live-trains payload: {type(data).__name__}")
        return data

    async def get_train(self, departure_date: str, train_number: int) -> dict[str, Any] | None:
        """GET /trains/{date}/{number} — train details, or None when the API knows no such train.

        departure_date is YYYY-MM-DD; train numbers are only unique per day.
        """
        url = f"{BASE_URL}/trains/{departure_date}/{train_number}"
        data = await self._get(url, None)
        if isinstance(data, list):
            return data[0] if data else None
        return data  # type: ignore[no-any-return]

    async def _get(self, url: str, params: dict[str, Any] | None) -> Any:
        logger.debug("GET %s params=%s", url, params)
        response = await self._http.get(url, params=params, headers=make_headers(ACCEPT_JSON))
        self._raise_for_status(response)
        try:
            return response.json()
        except ValueError as exc:
            raise ParseError(f"{SOURCE} returned a non-JSON body") from exc

    def _raise_for_status(self, response: httpx.Response) -> None:
        """Raise TransportError for non-2xx responses."""
        if response.status_code >= 400:
            logger.warning("%s returned %s for %s", SOURCE, response.status_code, response.url)
            raise TransportError(response.status_code, SOURCE)

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._http.aclose()
