#!/usr/bin/env python3
"""Commuter Dashboard MCP Server: repository root entry point.

Usage:
    uv run server.py           # HTTP mode (default)
    uv run server.py --stdio   # stdio mode for desktop MCP clients

Configuration (environment):
    HOST, PORT, LOG_LEVEL
    WEATHER_SOURCE            fmi (default) or open-meteo
    TRACKED_STATION           station short code, default JP
    TRAIN_CACHE_TTL           seconds, default 86400
    TRAIN_CACHE_MAX_ENTRIES   default 512
"""
from __future__ import annotations

import logging
import os
import sys

import uvicorn
from starlette.middleware.cors import CORSMiddleware

from commuter_mcp.mcp import create_mcp_app

HOST = os.environ.get("HOST", "0.0.0.0")
PORT = int(os.environ.get("PORT", "3001"))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
WEATHER_SOURCE = os.environ.get("WEATHER_SOURCE", "fmi")
TRACKED_STATION = os.environ.get("TRACKED_STATION", "JP")
TRAIN_CACHE_TTL = int(os.environ.get("TRAIN_CACHE_TTL", "86400"))
TRAIN_CACHE_MAX_ENTRIES = int(os.environ.get("TRAIN_CACHE_MAX_ENTRIES", "512"))

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)

if __name__ == "__main__":
    mcp = create_mcp_app(
        weather_source=WEATHER_SOURCE,
        station=TRACKED_STATION,
        train_cache_ttl=TRAIN_CACHE_TTL,
        train_cache_max_entries=TRAIN_CACHE_MAX_ENTRIES,
    )
    if "--stdio" in sys.argv:
        mcp.run(transport="stdio")
    else:
        # HTTP mode with CORS
        app = mcp.streamable_http_app()
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_methods=["*"],
            allow_headers=["*"],
        )
        print(f"Commuter Dashboard MCP Server listening on http://{HOST}:{PORT}/mcp")
        uvicorn.run(app, host=HOST, port=PORT)
