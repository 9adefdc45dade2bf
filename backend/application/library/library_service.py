from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from application.library.json_records import JsonRecordStore, RecordStoreError
from application.ports.kv_store_port import KeyValueStorePort
from domain.library.entities import LibraryEntry, epoch_ms
from domain.library.keys import DOWNLOADS_BASE, FAVORITES_BASE, HISTORY_BASE, namespace

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _entries(raw: list[Any], *, allow_bare_ids: bool) -> list[LibraryEntry]:
    out: list[LibraryEntry] = []
    for item in raw:
        if not allow_bare_ids and not isinstance(item, dict):
            continue
        entry = LibraryEntry.from_record(item)
        if entry is not None:
            out.append(entry)
    return out


def _require_id(movie: Any) -> Any:
    if not isinstance(movie, dict):
        raise ValueError("movie must be an object")
    mid = movie.get("id")
    if mid is None or mid == "":
        raise ValueError("movie id is required")
    return mid


class LibraryService:
    """Per-user favorites, downloads and watch history.

    Every mutation reads the whole list, changes it in memory and writes it
    back. Failures are logged; mutations then return None and reads return [].
    """

    def __init__(
        self,
        *,
        kv: KeyValueStorePort,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._records = JsonRecordStore(kv)
        self._clock = clock or _utcnow

    def _now_ms(self) -> int:
        return epoch_ms(self._clock())

    async def _read(self, base: str, user_id: str, *, allow_bare_ids: bool) -> list[LibraryEntry]:
        raw = await self._records.read_list(namespace(base, user_id))
        return _entries(raw, allow_bare_ids=allow_bare_ids)

    async def _update(
        self,
        base: str,
        user_id: str,
        mutate: Callable[[list[LibraryEntry]], Optional[list[LibraryEntry]]],
        *,
        allow_bare_ids: bool,
        op: str,
    ) -> Optional[list[LibraryEntry]]:
        key = namespace(base, user_id)
        try:
            raw = await self._records.read_for_update(key, [])
        except RecordStoreError as e:
            logger.warning("%s failed user_id=%s: %s", op, user_id, e)
            return None
        current = _entries(raw, allow_bare_ids=allow_bare_ids)
        nxt = mutate(current)
        if nxt is None:
            # Nothing changed; skip the write.
            return current
        ok = await self._records.write(key, [e.to_record() for e in nxt])
        if not ok:
            logger.warning("%s failed user_id=%s: write rejected", op, user_id)
            return None
        return nxt

    # ───────────────────────────── favorites ──────────────────────────

    async def add_favorite(self, *, user_id: str, movie: dict[str, Any]) -> Optional[list[LibraryEntry]]:
        target = str(_require_id(movie))

        def mutate(current: list[LibraryEntry]) -> Optional[list[LibraryEntry]]:
            if any(e.key == target for e in current):
                return None
            return [*current, LibraryEntry.from_record(dict(movie))]

        return await self._update(FAVORITES_BASE, user_id, mutate, allow_bare_ids=True, op="add_favorite")

    async def remove_favorite(self, *, user_id: str, movie_id: Any) -> Optional[list[LibraryEntry]]:
        target = str(movie_id)
        return await self._update(
            FAVORITES_BASE,
            user_id,
            lambda current: [e for e in current if e.key != target],
            allow_bare_ids=True,
            op="remove_favorite",
        )

    async def get_favorites(self, *, user_id: str) -> list[LibraryEntry]:
        return await self._read(FAVORITES_BASE, user_id, allow_bare_ids=True)

    async def is_favorite(self, *, user_id: str, movie_id: Any) -> bool:
        target = str(movie_id)
        return any(e.key == target for e in await self.get_favorites(user_id=user_id))

    async def clear_favorites(self, *, user_id: str) -> bool:
        return await self._records.remove(namespace(FAVORITES_BASE, user_id))

    # ───────────────────────────── downloads ──────────────────────────

    async def add_download(self, *, user_id: str, entry: dict[str, Any]) -> Optional[list[LibraryEntry]]:
        target = str(_require_id(entry))
        now = self._now_ms()

        def mutate(current: list[LibraryEntry]) -> Optional[list[LibraryEntry]]:
            if any(e.key == target for e in current):
                return None
            return [*current, LibraryEntry.from_record({**entry, "downloadedAt": now})]

        return await self._update(DOWNLOADS_BASE, user_id, mutate, allow_bare_ids=False, op="add_download")

    async def remove_download(self, *, user_id: str, movie_id: Any) -> Optional[list[LibraryEntry]]:
        target = str(movie_id)
        return await self._update(
            DOWNLOADS_BASE,
            user_id,
            lambda current: [e for e in current if e.key != target],
            allow_bare_ids=False,
            op="remove_download",
        )

    async def get_downloads(self, *, user_id: str) -> list[LibraryEntry]:
        return await self._read(DOWNLOADS_BASE, user_id, allow_bare_ids=False)

    async def is_downloaded(self, *, user_id: str, movie_id: Any) -> bool:
        target = str(movie_id)
        return any(e.key == target for e in await self.get_downloads(user_id=user_id))

    async def clear_downloads(self, *, user_id: str) -> bool:
        return await self._records.remove(namespace(DOWNLOADS_BASE, user_id))

    # ───────────────────────────── history ────────────────────────────

    async def add_history(self, *, user_id: str, entry: dict[str, Any]) -> Optional[list[LibraryEntry]]:
        if not isinstance(entry, dict):
            raise ValueError("history entry must be an object")
        now = self._now_ms()
        return await self._update(
            HISTORY_BASE,
            user_id,
            lambda current: [LibraryEntry.from_record({**entry, "watchedAt": now}), *current],
            allow_bare_ids=False,
            op="add_history",
        )

    async def get_history(self, *, user_id: str) -> list[LibraryEntry]:
        return await self._read(HISTORY_BASE, user_id, allow_bare_ids=False)

    async def clear_history(self, *, user_id: str) -> bool:
        return await self._records.remove(namespace(HISTORY_BASE, user_id))
