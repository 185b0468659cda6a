from __future__ import annotations


class CommuterMcpError(Exception):
    """Base exception for all commuter dashboard errors."""


class TransportError(CommuterMcpError):
    """Raised when an upstream API returns a non-2xx HTTP status."""

    def __init__(self, status_code: int, source: str, message: str = "") -> None:
        self.status_code = status_code
        self.source = source  # "Digitraffic", "FMI", "Open-Meteo"
        super().__init__(message or f"{source} API error: {status_code}")


class ParseError(CommuterMcpError):
    """Raised when an upstream response cannot be parsed."""


class NoDataError(CommuterMcpError):
    """Raised when an upstream response parses but carries no usable weather data."""


class LocationNotFoundError(CommuterMcpError):
    """Raised when a city name is not among the registered locations."""
