from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime

from commuter_mcp.domain.entities import Departure, TimetableRow, Train
from commuter_mcp.domain.stations import TRACKED_STATION, determine_destination
from commuter_mcp.domain.value_objects import RowType

MAX_DEPARTURES = 15


def delay_minutes(sched: datetime, rt: datetime | None) -> int:
    """Return delay in whole minutes between sched and rt.

    Returns 0 when rt is None (no live estimate) or when rt is earlier than
    sched (early departure is clamped to 0).
    """
    if rt is None:
        return 0
    delta = int((rt - sched).total_seconds() / 60)
    return max(0, delta)


def is_legit_departure(
    row: TimetableRow, now: datetime, station: str = TRACKED_STATION
) -> bool:
    """Return True when the row is a still-upcoming stopping departure from station."""
    return (
        row.train_stopping
        and row.station_code == station
        and row.row_type is RowType.DEPARTURE
        and row.scheduled_time >= now
    )


def sort_rows(rows: Iterable[TimetableRow]) -> list[TimetableRow]:
    """Stable chronological sort by scheduled time."""
    return sorted(rows, key=lambda r: r.scheduled_time)


def terminal_row(rows: Sequence[TimetableRow]) -> TimetableRow:
    """Return the train's final stop (last row after chronological sort).

    Raises ValueError for an empty itinerary.
    """
    if not rows:
        raise ValueError("Train has no timetable rows")
    return sort_rows(rows)[-1]


def select_departure_row(
    rows: Sequence[TimetableRow], now: datetime, station: str = TRACKED_STATION
) -> TimetableRow | None:
    """Return the earliest legitimate row, or None when the train does not qualify.

    A train passing the tracked station more than once yields a single
    departure: its first legitimate stop.
    """
    for row in sort_rows(rows):
        if is_legit_departure(row, now, station):
            return row
    return None


def rank_departures(
    trains: Iterable[tuple[int, Sequence[TimetableRow]]],
    now: datetime,
    station: str = TRACKED_STATION,
    limit: int = MAX_DEPARTURES,
) -> list[Departure]:
    """Build the ranked list of upcoming departures from (train_number, rows) pairs.

    One departure per qualifying train, destination taken from the terminal
    row, sorted ascending by scheduled time (ties keep input order) and
    truncated to ``limit``. Trains are bare (no line id) until enriched.
    """
    departures: list[Departure] = []
    for train_number, rows in trains:
        row = select_departure_row(rows, now, station)
        if row is None:
            continue
        departures.append(
            Departure(
                scheduled_time=row.scheduled_time,
                live_estimate_time=row.live_estimate_time,
                destination=determine_destination(terminal_row(rows).station_code),
                train=Train(train_number=train_number),
                delay_minutes=delay_minutes(row.scheduled_time, row.live_estimate_time),
            )
        )
    departures.sort(key=lambda d: d.scheduled_time)
    return departures[:limit]
