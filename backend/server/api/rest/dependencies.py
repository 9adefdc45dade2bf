from __future__ import annotations

from functools import lru_cache

from fastapi import HTTPException

from application.library import (
    CatalogService,
    LibraryService,
    NotificationService,
    SessionService,
    UserMovieService,
    WatchlistService,
)
from application.ports.catalog_port import CatalogPort
from application.ports.identity_service_port import IdentityServicePort
from application.ports.kv_store_port import KeyValueStorePort
from domain.library.entities import normalize_email
from domain.library.policy import LibraryPolicy


@lru_cache(maxsize=1)
def _build_kv_store() -> KeyValueStorePort:
    from infrastructure.persistence.factory import KeyValueStoreFactory

    return KeyValueStoreFactory.create()


@lru_cache(maxsize=1)
def _build_policy() -> LibraryPolicy:
    from config.settings import (
        NOTIFICATION_FEED_LIMIT,
        NOTIFICATION_WINDOW_DAYS,
        USER_MOVIES_GLOBAL_LIMIT,
    )

    return LibraryPolicy(
        notification_window_days=int(NOTIFICATION_WINDOW_DAYS),
        notification_feed_limit=int(NOTIFICATION_FEED_LIMIT),
        user_movies_global_limit=int(USER_MOVIES_GLOBAL_LIMIT),
    )


@lru_cache(maxsize=1)
def _build_catalog_client() -> CatalogPort:
    from infrastructure.catalog import TMDBClient

    return TMDBClient()


@lru_cache(maxsize=1)
def _build_identity_client() -> IdentityServicePort:
    from infrastructure.identity import HttpIdentityClient

    return HttpIdentityClient()


@lru_cache(maxsize=1)
def _build_library_service() -> LibraryService:
    return LibraryService(kv=_build_kv_store())


@lru_cache(maxsize=1)
def _build_user_movie_service() -> UserMovieService:
    return UserMovieService(kv=_build_kv_store(), policy=_build_policy())


@lru_cache(maxsize=1)
def _build_notification_service() -> NotificationService:
    return NotificationService(kv=_build_kv_store(), policy=_build_policy())


@lru_cache(maxsize=1)
def _build_session_service() -> SessionService:
    return SessionService(kv=_build_kv_store(), identity=_build_identity_client())


@lru_cache(maxsize=1)
def _build_watchlist_service() -> WatchlistService:
    return WatchlistService(kv=_build_kv_store())


@lru_cache(maxsize=1)
def _build_catalog_service() -> CatalogService:
    return CatalogService(
        catalog=_build_catalog_client(),
        notifications=_build_notification_service(),
        user_movies=_build_user_movie_service(),
    )


def get_library_service() -> LibraryService:
    return _build_library_service()


def get_user_movie_service() -> UserMovieService:
    return _build_user_movie_service()


def get_notification_service() -> NotificationService:
    return _build_notification_service()


def get_session_service() -> SessionService:
    return _build_session_service()


def get_watchlist_service() -> WatchlistService:
    return _build_watchlist_service()


def get_catalog_service() -> CatalogService:
    return _build_catalog_service()


def get_path_user_id(user_id: str) -> str:
    """Per-user routes key storage by the same normalized email sign-in uses."""
    normalized = normalize_email(user_id)
    if not normalized:
        raise HTTPException(status_code=400, detail="user_id is required")
    return normalized


async def shutdown_dependencies() -> None:
    """Close long-lived adapters (connection pools, HTTP sessions) that were built."""
    builders = (_build_kv_store, _build_catalog_client, _build_identity_client)
    for build in builders:
        if build.cache_info().currsize == 0:
            continue
        close = getattr(build(), "close", None)
        if callable(close):
            await close()
