from __future__ import annotations

from datetime import date, datetime, time, timezone
from zoneinfo import ZoneInfo

HELSINKI_TZ: ZoneInfo = ZoneInfo("Europe/Helsinki")

# Anchor date for bare "HH:MM" clock times, only compared with each other
_CLOCK_ANCHOR = date(1970, 1, 1)


def now_helsinki() -> datetime:
    """Return the current moment as a timezone-aware datetime in Europe/Helsinki."""
    return datetime.now(tz=HELSINKI_TZ)


def parse_digitraffic_datetime(s: str) -> datetime:
    """Parse a timestamp from Digitraffic responses.

    Handles formats:
    - "2026-02-20T12:00:00.000Z"    (UTC, the usual form)
    - "2026-02-20T14:00:00+02:00"   (offset-aware)
    - "2026-02-20T14:00:00"         (naive, assumed Helsinki)

    Always returns a timezone-aware datetime in Europe/Helsinki.
    Raises ValueError on empty or unparseable input.
    """
    if not s or not s.strip():
        raise ValueError("Empty datetime string")

    s = s.strip()
    # fromisoformat only accepts a trailing "Z" from Python 3.11 on
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"

    try:
        dt = datetime.fromisoformat(s)
    except ValueError:
        raise ValueError(f"Cannot parse datetime string: {s!r}")

    if dt.tzinfo is None:
        return dt.replace(tzinfo=HELSINKI_TZ)
    return dt.astimezone(HELSINKI_TZ)


def parse_forecast_time(value: str | int | float) -> datetime:
    """Parse a forecast timestamp as returned by Open-Meteo.

    Accepts ISO date-times ("2026-02-20T12:00", naive local time as sent with
    timezone=auto), bare clock times ("12:00") and unix seconds. Values from
    one payload are only compared with each other, so naive results are fine.
    Raises ValueError on unparseable input.
    """
    if isinstance(value, bool):
        raise ValueError(f"Cannot parse forecast time: {value!r}")
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            raise ValueError(f"Cannot parse forecast time: {value!r}")
    if not isinstance(value, str):
        raise ValueError(f"Cannot parse forecast time: {value!r}")

    s = value.strip()
    try:
        return datetime.fromisoformat(s)
    except ValueError:
        pass
    try:
        return datetime.combine(_CLOCK_ANCHOR, time.fromisoformat(s))
    except ValueError:
        raise ValueError(f"Cannot parse forecast time: {value!r}")


def format_date(dt: datetime) -> str:
    """Return date string in YYYY-MM-DD format (for the train-detail path)."""
    return dt.strftime("%Y-%m-%d")


def to_helsinki(dt: datetime) -> datetime:
    """Convert a timezone-aware datetime to Europe/Helsinki."""
    return dt.astimezone(HELSINKI_TZ)
