from __future__ import annotations

import logging
from typing import Any, Optional

from application.library.json_records import JsonRecordStore, RecordStoreError
from application.ports.kv_store_port import KeyValueStorePort
from domain.library.keys import WATCHLIST_KEY

logger = logging.getLogger(__name__)


def coerce_movie_id(value: Any) -> Optional[int]:
    """Catalog ids are numeric; digit strings are folded into the same int."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def _ids(raw: list[Any]) -> list[int]:
    out: list[int] = []
    for item in raw:
        mid = coerce_movie_id(item)
        if mid is not None and mid not in out:
            out.append(mid)
    return out


class WatchlistService:
    """Legacy flat watchlist of movie ids (one global key, not per user)."""

    def __init__(self, *, kv: KeyValueStorePort) -> None:
        self._records = JsonRecordStore(kv)

    async def list_ids(self) -> list[int]:
        return _ids(await self._records.read_list(WATCHLIST_KEY))

    async def contains(self, movie_id: Any) -> bool:
        return coerce_movie_id(movie_id) in await self.list_ids()

    async def _update(self, movie_id: Any, *, add: bool) -> list[int]:
        mid = coerce_movie_id(movie_id)
        if mid is None:
            raise ValueError(f"watchlist ids must be numeric, got {movie_id!r}")
        try:
            current = _ids(await self._records.read_for_update(WATCHLIST_KEY, []))
        except RecordStoreError as e:
            logger.warning("watchlist update failed id=%s: %s", mid, e)
            return []
        if add:
            if mid in current:
                return current
            nxt = [*current, mid]
        else:
            nxt = [i for i in current if i != mid]
        await self._records.write(WATCHLIST_KEY, nxt)
        return nxt

    async def add(self, movie_id: Any) -> list[int]:
        return await self._update(movie_id, add=True)

    async def remove(self, movie_id: Any) -> list[int]:
        return await self._update(movie_id, add=False)

    async def toggle(self, movie_id: Any) -> bool:
        """Flip membership; returns True when the id is now on the list."""
        if await self.contains(movie_id):
            await self.remove(movie_id)
            return False
        await self.add(movie_id)
        return True
