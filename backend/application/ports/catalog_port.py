from __future__ import annotations

from typing import Any, Optional, Protocol


class CatalogPort(Protocol):
    """Remote movie metadata service (TMDB-shaped payloads).

    List calls return the ``results`` array (empty on failure); details return
    None when the movie cannot be fetched.
    """

    async def trending(self, *, window: str = "week") -> list[dict[str, Any]]:
        ...

    async def popular(self, *, page: int = 1) -> list[dict[str, Any]]:
        ...

    async def top_rated(self, *, page: int = 1) -> list[dict[str, Any]]:
        ...

    async def discover(self, *, params: dict[str, Any], page: int = 1) -> list[dict[str, Any]]:
        ...

    async def search(self, *, query: str, page: int = 1) -> list[dict[str, Any]]:
        ...

    async def movie_details(self, movie_id: int) -> Optional[dict[str, Any]]:
        ...

    async def close(self) -> None:
        ...
