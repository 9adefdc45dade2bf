from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends

from application.library import WatchlistService
from server.api.rest.dependencies import get_watchlist_service
from server.models.schemas import WatchlistRequest, WatchlistToggleResponse

router = APIRouter(prefix="/api/v1", tags=["watchlist-v1"])


@router.get("/watchlist")
async def list_watchlist(
    service: WatchlistService = Depends(get_watchlist_service),
) -> List[int]:
    return await service.list_ids()


@router.post("/watchlist")
async def add_to_watchlist(
    request: WatchlistRequest,
    service: WatchlistService = Depends(get_watchlist_service),
) -> List[int]:
    return await service.add(request.movie_id)


@router.post("/watchlist/toggle", response_model=WatchlistToggleResponse)
async def toggle_watchlist(
    request: WatchlistRequest,
    service: WatchlistService = Depends(get_watchlist_service),
) -> WatchlistToggleResponse:
    saved = await service.toggle(request.movie_id)
    return WatchlistToggleResponse(movie_id=request.movie_id, saved=saved)


@router.delete("/watchlist/{movie_id}")
async def remove_from_watchlist(
    movie_id: int,
    service: WatchlistService = Depends(get_watchlist_service),
) -> List[int]:
    return await service.remove(movie_id)
