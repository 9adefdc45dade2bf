from __future__ import annotations

import logging
import random
import string
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from application.library.json_records import JsonRecordStore, RecordStoreError
from application.ports.kv_store_port import KeyValueStorePort
from domain.library.entities import UserMovie, UserMovieDraft, epoch_ms
from domain.library.keys import USER_MOVIES_ALL_KEY, USER_MOVIES_BASE, namespace
from domain.library.policy import LibraryPolicy, bounded, matches_user_movie

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.ascii_lowercase + string.digits


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _random_suffix(length: int = 6) -> str:
    return "".join(random.choices(_ID_ALPHABET, k=length))


def _parse(raw: list[Any]) -> list[UserMovie]:
    return [m for m in (UserMovie.from_record(r) for r in raw) if m is not None]


class UserMovieService:
    """User-submitted movies.

    Each upload lives in two lists: the owner's ``userMovies:<uid>`` and the
    shared ``userMovies:all`` feed. The shared feed is newest-first and capped
    at ``policy.user_movies_global_limit``; the per-user list is unbounded.
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

    async def _read_user(self, user_id: str) -> list[UserMovie]:
        return _parse(await self._records.read_list(namespace(USER_MOVIES_BASE, user_id)))

    async def _load(self, key: str, op: str) -> Optional[list[UserMovie]]:
        """Strict read for a read-modify-write; None when the adapter failed."""
        try:
            return _parse(await self._records.read_for_update(key, []))
        except RecordStoreError as e:
            logger.warning("%s: read failed key=%s: %s", op, key, e)
            return None

    async def _write_user(self, user_id: str, movies: list[UserMovie]) -> bool:
        return await self._records.write(
            namespace(USER_MOVIES_BASE, user_id), [m.to_record() for m in movies]
        )

    async def _read_global(self) -> list[UserMovie]:
        return _parse(await self._records.read_list(USER_MOVIES_ALL_KEY))

    async def _write_global(self, movies: list[UserMovie]) -> bool:
        capped = bounded(movies, self._policy.user_movies_global_limit)
        return await self._records.write(USER_MOVIES_ALL_KEY, [m.to_record() for m in capped])

    async def list_user_movies(self, *, user_id: str) -> list[UserMovie]:
        return await self._read_user(user_id)

    async def list_all_user_movies(self) -> list[UserMovie]:
        return await self._read_global()

    async def add_user_movie(self, *, user_id: str, draft: UserMovieDraft) -> UserMovie:
        title = (draft.title or "").strip()
        description = (draft.description or "").strip()
        if not title or not description:
            raise ValueError("title and description are required")

        own = await self._load(namespace(USER_MOVIES_BASE, user_id), "add_user_movie")
        shared = await self._load(USER_MOVIES_ALL_KEY, "add_user_movie")

        now = self._clock()
        taken = {m.id for m in shared or []} | {m.id for m in own or []}
        movie_id = f"{epoch_ms(now)}-{_random_suffix()}"
        while movie_id in taken:
            movie_id = f"{epoch_ms(now)}-{_random_suffix()}"

        movie = UserMovie(
            id=movie_id,
            owner_id=user_id,
            title=title,
            description=description,
            created_at=epoch_ms(now),
            poster_uri=draft.poster_uri or None,
            trailer_url=draft.trailer_url.strip() if draft.trailer_url else None,
            genre=draft.genre.strip() if draft.genre else None,
            year=str(draft.year).strip() if draft.year else None,
            actors=UserMovieDraft.split_actors(draft.actors),
        )

        # A list that could not be loaded is left untouched.
        if own is None or not await self._write_user(user_id, [movie, *own]):
            logger.warning("add_user_movie: per-user list not updated user_id=%s id=%s", user_id, movie.id)
        if shared is None or not await self._write_global([movie, *[m for m in shared if m.id != movie.id]]):
            logger.warning("add_user_movie: global feed not updated id=%s", movie.id)
        return movie

    async def remove_user_movie(self, *, user_id: str, movie_id: str) -> list[UserMovie]:
        """Delete from the owner's list and the shared feed; either may lack it."""
        target = str(movie_id)
        own = await self._load(namespace(USER_MOVIES_BASE, user_id), "remove_user_movie")
        remaining = [m for m in own or [] if m.id != target]
        if own is not None and len(remaining) != len(own) and not await self._write_user(user_id, remaining):
            logger.warning("remove_user_movie: per-user write failed user_id=%s id=%s", user_id, target)

        shared = await self._load(USER_MOVIES_ALL_KEY, "remove_user_movie")
        if shared is not None:
            shared_remaining = [m for m in shared if m.id != target]
            if len(shared_remaining) != len(shared) and not await self._write_global(shared_remaining):
                logger.warning("remove_user_movie: global feed write failed id=%s", target)
        return remaining

    async def clear_user_movies(self, *, user_id: str) -> bool:
        # The shared feed keeps its copies.
        return await self._records.remove(namespace(USER_MOVIES_BASE, user_id))

    async def search_user_movies(self, term: str) -> list[UserMovie]:
        shared = await self._read_global()
        if not (term or "").strip():
            return shared
        return [m for m in shared if matches_user_movie(m, term)]
