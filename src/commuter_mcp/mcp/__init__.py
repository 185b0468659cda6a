from __future__ import annotations

import httpx
from mcp.server.fastmcp import FastMCP

from commuter_mcp.application.departure_service import DepartureService
from commuter_mcp.application.train_enrichment import (
    MAX_TRAIN_ENTRIES,
    TTL_TRAIN,
    TrainEnrichmentCache,
)
from commuter_mcp.application.weather_service import FMI_SOURCE, create_weather_source
from commuter_mcp.domain.stations import TRACKED_STATION
from commuter_mcp.infrastructure.cache import TTLCache
from commuter_mcp.infrastructure.digitraffic_client import DEFAULT_TIMEOUT, DigitrafficClient
from commuter_mcp.mcp.tools import register_tools


def create_mcp_app(
    weather_source: str = FMI_SOURCE,
    station: str = TRACKED_STATION,
    train_cache_ttl: int = TTL_TRAIN,
    train_cache_max_entries: int = MAX_TRAIN_ENTRIES,
) -> FastMCP:
    """Create and configure the FastMCP application with all services wired."""
    http_client = httpx.AsyncClient(timeout=DEFAULT_TIMEOUT, follow_redirects=True)

    digitraffic = DigitrafficClient(http_client)
    train_cache = TTLCache(default_ttl=train_cache_ttl, max_entries=train_cache_max_entries)
    trains = TrainEnrichmentCache(digitraffic, cache=train_cache, ttl=train_cache_ttl)
    departure_svc = DepartureService(digitraffic, trains, station=station)
    weather = create_weather_source(weather_source, http_client)

    mcp = FastMCP("Commuter Dashboard MCP", stateless_http=True)
    register_tools(mcp, departure_svc, weather)
    return mcp
