from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from application.library import CatalogService, SearchRow
from config.settings import HOME_FEED_SYNC_NOTIFICATIONS
from domain.library.entities import UserMovie
from server.api.rest.dependencies import get_catalog_service
from server.models.schemas import HomeFeedResponse, SearchRowResponse

router = APIRouter(prefix="/api/v1", tags=["catalog-v1"])


def _row(row: SearchRow) -> SearchRowResponse:
    movie = row.movie.to_record() if isinstance(row.movie, UserMovie) else dict(row.movie)
    return SearchRowResponse(kind=row.kind, movie=movie)


@router.get("/catalog/home", response_model=HomeFeedResponse)
async def home_feed(
    category: Optional[str] = Query(default=None, description="Action/Comedy/Drama/... or All"),
    service: CatalogService = Depends(get_catalog_service),
) -> HomeFeedResponse:
    feed = await service.home_feed(
        category=category,
        sync_notifications=HOME_FEED_SYNC_NOTIFICATIONS,
    )
    return HomeFeedResponse(
        trending=feed.trending,
        popular=feed.popular,
        top_rated=feed.top_rated,
        new_notifications=[n.to_record() for n in feed.new_notifications],
        unread_count=feed.unread_count,
    )


@router.get("/catalog/search", response_model=List[SearchRowResponse])
async def search(
    q: str = Query("", description="Free text; language/genre/year hints switch to discover"),
    mode: Literal["all", "bhutan"] = Query("all"),
    service: CatalogService = Depends(get_catalog_service),
) -> List[SearchRowResponse]:
    return [_row(r) for r in await service.search(q, mode=mode)]


@router.get("/catalog/movies/{movie_id}")
async def movie_details(
    movie_id: int,
    service: CatalogService = Depends(get_catalog_service),
) -> Dict[str, Any]:
    details = await service.movie_details(movie_id)
    if details is None:
        raise HTTPException(status_code=404, detail="movie not found")
    return details


@router.get("/catalog/movies/{movie_id}/trailers")
async def movie_trailers(
    movie_id: int,
    service: CatalogService = Depends(get_catalog_service),
) -> List[Dict[str, Any]]:
    return await service.trailers(movie_id)
