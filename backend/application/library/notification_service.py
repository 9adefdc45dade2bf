from __future__ import annotations

import logging
import random
import string
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Optional

from application.library.json_records import JsonRecordStore, RecordStoreError
from application.ports.kv_store_port import KeyValueStorePort
from domain.library.entities import AppNotification, epoch_ms
from domain.library.keys import NOTIFICATIONS_KEY, NOTIFIED_IDS_KEY
from domain.library.policy import LibraryPolicy, bounded, is_recent_release, parse_release_date

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.ascii_lowercase + string.digits
DEFAULT_NOTIFICATION_TITLE = "New movie available"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def movie_to_notification(movie: dict[str, Any], *, now: datetime) -> AppNotification:
    title = movie.get("title") or movie.get("name") or DEFAULT_NOTIFICATION_TITLE
    created_at = epoch_ms(now)
    suffix = "".join(random.choices(_ID_ALPHABET, k=6))
    return AppNotification(
        id=f"{movie.get('id') or 'movie'}-{created_at}-{suffix}",
        movie_id=movie.get("id"),
        title=str(title),
        message=f"{title} just dropped for you. Tap to start watching!",
        poster_path=movie.get("poster_path") or movie.get("backdrop_path") or None,
        created_at=created_at,
        read=False,
    )


def _parse_feed(raw: list[Any]) -> list[AppNotification]:
    return [n for n in (AppNotification.from_record(r) for r in raw) if n is not None]


def _parse_seen(raw: list[Any]) -> list[Any]:
    return [x for x in raw if isinstance(x, (int, str)) and not isinstance(x, bool)]


class NotificationService:
    """In-app "new release" feed synthesized from catalog batches.

    Two keys are involved:
      - ``notifications:list``: the bounded feed shown to the user.
      - ``notifications:seenMovieIds``: every movie id ever notified. It is
        never cleared, so a movie is notified at most once.
    """

    def __init__(
        self,
        *,
        kv: KeyValueStorePort,
        policy: Optional[LibraryPolicy] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._records = JsonRecordStore(kv)
        self._policy = policy or LibraryPolicy()
        self._clock = clock or _utcnow

    async def get_notifications(self) -> list[AppNotification]:
        raw = await self._records.read_list(NOTIFICATIONS_KEY)
        return _parse_feed(raw)

    async def get_unread_count(self) -> int:
        return sum(1 for n in await self.get_notifications() if not n.read)

    async def mark_all_read(self) -> list[AppNotification]:
        try:
            current = _parse_feed(await self._records.read_for_update(NOTIFICATIONS_KEY, []))
        except RecordStoreError as e:
            logger.warning("mark_all_read: feed read failed: %s", e)
            return []
        updated = [n if n.read else replace(n, read=True) for n in current]
        await self._records.write(NOTIFICATIONS_KEY, [n.to_record() for n in updated])
        return updated

    async def clear_notifications(self) -> bool:
        # The seen-id set stays so cleared movies are not re-notified.
        return await self._records.remove(NOTIFICATIONS_KEY)

    async def get_notified_ids(self) -> list[Any]:
        return _parse_seen(await self._records.read_list(NOTIFIED_IDS_KEY))

    async def sync_new_movie_notifications(
        self, movies: Optional[Iterable[Any]] = None
    ) -> list[AppNotification]:
        """Notify about recently released movies not seen before.

        A run that finds nothing new performs no writes at all. If either the
        seen-id set or the feed cannot be loaded the run is skipped, so a
        failed read never re-notifies a movie or truncates the stored feed.
        """
        try:
            seen_list = _parse_seen(await self._records.read_for_update(NOTIFIED_IDS_KEY, []))
        except RecordStoreError as e:
            logger.warning("sync_new_movie_notifications: seen-id read failed: %s", e)
            return []
        seen = set(seen_list)
        now = self._clock()
        window = self._policy.notification_window_days
        fresh: list[AppNotification] = []

        for movie in movies or []:
            if not isinstance(movie, dict):
                continue
            mid = movie.get("id")
            if not mid or not isinstance(mid, (int, str)) or mid in seen:
                continue
            release = parse_release_date(movie.get("release_date") or movie.get("first_air_date"))
            if release is None or not is_recent_release(release, now=now, window_days=window):
                continue
            seen.add(mid)
            seen_list.append(mid)
            fresh.append(movie_to_notification(movie, now=now))

        if not fresh:
            return []

        try:
            existing = _parse_feed(await self._records.read_for_update(NOTIFICATIONS_KEY, []))
        except RecordStoreError as e:
            logger.warning("sync_new_movie_notifications: feed read failed: %s", e)
            return []
        feed = bounded([*fresh, *existing], self._policy.notification_feed_limit)
        if not await self._records.write(NOTIFICATIONS_KEY, [n.to_record() for n in feed]):
            logger.warning("sync_new_movie_notifications: feed write failed")
            return []
        if not await self._records.write(NOTIFIED_IDS_KEY, seen_list):
            logger.warning("sync_new_movie_notifications: seen-id write failed")
        logger.info("synthesized %d notification(s)", len(fresh))
        return fresh
