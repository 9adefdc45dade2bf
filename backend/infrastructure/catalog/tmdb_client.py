"""
TMDB API HTTP client for the home feed, search and detail screens.

List endpoints return the raw ``results`` array; every failure is logged and
collapses to an empty list (or None for details) so one broken row never
takes the whole screen down.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

import aiohttp

from application.ports.catalog_port import CatalogPort
from infrastructure.config.settings import (
    TMDB_API_KEY,
    TMDB_API_TOKEN,
    TMDB_BASE_URL,
    TMDB_INCLUDE_ADULT,
    TMDB_LANGUAGE,
    TMDB_TIMEOUT_S,
)

logger = logging.getLogger(__name__)

_TRENDING_WINDOWS = ("day", "week")


class TMDBClient(CatalogPort):
    """Async HTTP client for TMDB API.

    Attributes:
        _base_url: TMDB API base URL
        _api_token: v4 bearer token (preferred)
        _api_key: v3 api_key query param (used when the token is absent)
        _session: aiohttp ClientSession (lazily initialized)
    """

    def __init__(
        self,
        *,
        base_url: str | None = None,
        api_token: str | None = None,
        api_key: str | None = None,
        timeout_s: float | None = None,
        language: str | None = None,
        include_adult: bool | None = None,
    ) -> None:
        self._base_url = (base_url or TMDB_BASE_URL or "").rstrip("/")
        self._api_token = (api_token if api_token is not None else TMDB_API_TOKEN or "").strip()
        self._api_key = (api_key if api_key is not None else TMDB_API_KEY or "").strip()
        self._timeout_s = float(timeout_s or TMDB_TIMEOUT_S or 5.0)
        self._language = (language or TMDB_LANGUAGE or "en-US").strip()
        self._include_adult = TMDB_INCLUDE_ADULT if include_adult is None else bool(include_adult)
        self._session: aiohttp.ClientSession | None = None
        self._lock = asyncio.Lock()

    @property
    def configured(self) -> bool:
        return bool(self._base_url and (self._api_token or self._api_key))

    def _headers(self) -> dict[str, str]:
        headers = {"accept": "application/json"}
        if self._api_token:
            headers["Authorization"] = f"Bearer {self._api_token}"
        return headers

    def _auth_params(self) -> dict[str, str]:
        """v3 auth via api_key query param (used when bearer token is absent)."""
        if self._api_token:
            return {}
        if self._api_key:
            return {"api_key": self._api_key}
        return {}

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is not None and not self._session.closed:
            return self._session

        async with self._lock:
            if self._session is not None and not self._session.closed:
                return self._session

            timeout = aiohttp.ClientTimeout(total=self._timeout_s)
            self._session = aiohttp.ClientSession(timeout=timeout)
            return self._session

    async def _get_json(self, path: str, params: dict[str, Any] | None = None) -> Optional[dict[str, Any]]:
        if not self.configured:
            logger.warning("TMDB client not configured (missing base_url or auth)")
            return None

        url = f"{self._base_url}/{path.lstrip('/')}"
        query: dict[str, Any] = {"language": self._language}
        query.update(params or {})
        query.update(self._auth_params())

        try:
            session = await self._get_session()
            logger.debug("TMDB request url=%s params=%s", url, query)
            async with session.get(url, params=query, headers=self._headers()) as resp:
                if resp.status >= 400:
                    error_text = await resp.text()
                    logger.error("TMDB request %s failed (%s): %s", path, resp.status, error_text[:200])
                    return None
                data = await resp.json(content_type=None)
        except asyncio.TimeoutError:
            logger.error("TMDB request %s timeout after %ss", path, self._timeout_s)
            return None
        except Exception as e:
            logger.exception("TMDB request %s failed: %s", path, e)
            return None

        return data if isinstance(data, dict) else None

    async def _get_results(self, path: str, params: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        data = await self._get_json(path, params)
        if not data:
            return []
        results = data.get("results") or []
        if not isinstance(results, list):
            return []
        return [r for r in results if isinstance(r, dict)]

    async def trending(self, *, window: str = "week") -> list[dict[str, Any]]:
        w = window if window in _TRENDING_WINDOWS else "week"
        return await self._get_results(f"/trending/movie/{w}")

    async def popular(self, *, page: int = 1) -> list[dict[str, Any]]:
        return await self._get_results("/movie/popular", {"page": int(page)})

    async def top_rated(self, *, page: int = 1) -> list[dict[str, Any]]:
        return await self._get_results("/movie/top_rated", {"page": int(page)})

    async def discover(self, *, params: dict[str, Any], page: int = 1) -> list[dict[str, Any]]:
        query: dict[str, Any] = {
            "include_adult": "true" if self._include_adult else "false",
            "page": int(page),
        }
        query.update({k: v for k, v in (params or {}).items() if v is not None})
        return await self._get_results("/discover/movie", query)

    async def search(self, *, query: str, page: int = 1) -> list[dict[str, Any]]:
        q = (query or "").strip()
        if not q:
            return []
        return await self._get_results(
            "/search/movie",
            {
                "query": q,
                "page": int(page),
                "include_adult": "true" if self._include_adult else "false",
            },
        )

    async def movie_details(self, movie_id: int) -> Optional[dict[str, Any]]:
        try:
            mid = int(movie_id)
        except (TypeError, ValueError):
            return None
        return await self._get_json(f"/movie/{mid}", {"append_to_response": "videos"})

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None
