from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Literal, Optional, Union

from application.library.notification_service import NotificationService
from application.library.user_movie_service import UserMovieService
from application.ports.catalog_port import CatalogPort
from domain.catalog.query_rules import (
    BHUTAN_DISCOVER_PARAMS,
    build_discover_params,
    dedupe_by_id,
    filter_by_category,
    title_contains,
)
from domain.catalog.trailers import youtube_trailers
from domain.library.entities import AppNotification, UserMovie

logger = logging.getLogger(__name__)

SearchMode = Literal["all", "bhutan"]


@dataclass(frozen=True)
class SearchRow:
    """One merged search result: a local upload ("custom") or a catalog movie ("tmdb")."""

    kind: Literal["custom", "tmdb"]
    movie: Union[UserMovie, dict[str, Any]]


@dataclass(frozen=True)
class HomeFeed:
    trending: list[dict[str, Any]] = field(default_factory=list)
    popular: list[dict[str, Any]] = field(default_factory=list)
    top_rated: list[dict[str, Any]] = field(default_factory=list)
    new_notifications: list[AppNotification] = field(default_factory=list)
    unread_count: int = 0


async def _safe_list(awaitable: Awaitable[list[dict[str, Any]]], *, op: str) -> list[dict[str, Any]]:
    try:
        result = await awaitable
    except Exception as e:
        logger.warning("catalog %s failed: %s", op, e)
        return []
    return [m for m in (result or []) if isinstance(m, dict)]


class CatalogService:
    """Browse/search over the remote catalog merged with local uploads.

    Catalog payloads are passed through untouched and never persisted. The
    home feed doubles as the input batch for the notification synchronizer.
    """

    def __init__(
        self,
        *,
        catalog: CatalogPort,
        notifications: NotificationService,
        user_movies: UserMovieService,
    ) -> None:
        self._catalog = catalog
        self._notifications = notifications
        self._user_movies = user_movies

    async def home_feed(
        self, *, category: Optional[str] = None, sync_notifications: bool = True
    ) -> HomeFeed:
        trending, popular, top_rated = await asyncio.gather(
            _safe_list(self._catalog.trending(window="week"), op="trending"),
            _safe_list(self._catalog.popular(page=1), op="popular"),
            _safe_list(self._catalog.top_rated(page=1), op="top_rated"),
        )

        created: list[AppNotification] = []
        if sync_notifications:
            pool = dedupe_by_id([*trending, *popular, *top_rated])
            created = await self._notifications.sync_new_movie_notifications(pool)
        unread = await self._notifications.get_unread_count()

        return HomeFeed(
            trending=filter_by_category(trending, category),
            popular=filter_by_category(popular, category),
            top_rated=filter_by_category(top_rated, category),
            new_notifications=created,
            unread_count=unread,
        )

    async def search(self, query: str, *, mode: SearchMode = "all") -> list[SearchRow]:
        """Local uploads first, then catalog matches."""
        if mode == "bhutan":
            return await self._search_bhutan(query)

        trimmed = (query or "").strip()
        if not trimmed:
            return []

        use_discover, params = build_discover_params(trimmed)
        if use_discover:
            remote_call = self._catalog.discover(params=params, page=1)
        else:
            remote_call = self._catalog.search(query=trimmed, page=1)
        remote = await _safe_list(remote_call, op="discover" if use_discover else "search")
        local = await self._user_movies.search_user_movies(trimmed)

        return [
            *(SearchRow(kind="custom", movie=m) for m in local),
            *(SearchRow(kind="tmdb", movie=m) for m in remote),
        ]

    async def _search_bhutan(self, query: str) -> list[SearchRow]:
        uploads = await self._user_movies.list_all_user_movies()
        remote = await _safe_list(
            self._catalog.discover(params=dict(BHUTAN_DISCOVER_PARAMS), page=1),
            op="discover(bhutan)",
        )
        q = (query or "").strip().lower()
        if q:
            uploads = [m for m in uploads if q in (m.title or "").lower()]
            remote = [m for m in remote if title_contains(m, q)]
        return [
            *(SearchRow(kind="custom", movie=m) for m in uploads),
            *(SearchRow(kind="tmdb", movie=m) for m in remote),
        ]

    async def movie_details(self, movie_id: int) -> Optional[dict[str, Any]]:
        try:
            return await self._catalog.movie_details(int(movie_id))
        except Exception as e:
            logger.warning("catalog details failed id=%s: %s", movie_id, e)
            return None

    async def trailers(self, movie_id: int) -> list[dict[str, Any]]:
        return youtube_trailers(await self.movie_details(movie_id))
