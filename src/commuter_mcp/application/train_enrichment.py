from __future__ import annotations

import asyncio
import logging

from commuter_mcp.domain.entities import Train
from commuter_mcp.infrastructure.cache import TTLCache
from commuter_mcp.infrastructure.digitraffic_client import DigitrafficClient

logger = logging.getLogger(__name__)

TTL_TRAIN = 24 * 60 * 60  # Line ids are fixed for a train's running day
MAX_TRAIN_ENTRIES = 512


class TrainEnrichmentCache:
    """Resolves train numbers to Train records (with line id), fetching each at most once.

    Entries are keyed by (departure date, train number), since Digitraffic
    reuses train numbers every day. Concurrent requests for the same key
    share a single in-flight fetch. Failed fetches are not cached.
    """

    def __init__(
        self,
        client: DigitrafficClient,
        cache: TTLCache | None = None,
        ttl: int = TTL_TRAIN,
    ) -> None:
        self._client = client
        self._cache = cache if cache is not None else TTLCache(ttl, MAX_TRAIN_ENTRIES)
        self._ttl = ttl
        self._inflight: dict[str, asyncio.Task[Train]] = {}

    async def get(self, train_number: int, departure_date: str) -> Train:
        """Return the Train for train_number running on departure_date (YYYY-MM-DD)."""
        key = f"{departure_date}/{train_number}"
        cached = self._cache.get(key)
        if cached is not None:
            return cached  # type: ignore[no-any-return]

        task = self._inflight.get(key)
        if task is None:
            task = asyncio.create_task(self._fetch(key, train_number, departure_date))
            self._inflight[key] = task
            task.add_done_callback(lambda _: self._inflight.pop(key, None))
        # Shielded so one cancelled waiter does not cancel the fetch for the others
        return await asyncio.shield(task)

    async def _fetch(self, key: str, train_number: int, departure_date: str) -> Train:
        logger.debug("Train cache miss for %s", key)
        raw = await self._client.get_train(departure_date, train_number)
        line_id = (raw or {}).get("commuterLineID") or None
        train = Train(train_number=train_number, line_id=line_id)
        self._cache.set(key, train, ttl=self._ttl)
        return train
