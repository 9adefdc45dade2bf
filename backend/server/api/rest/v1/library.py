from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from application.library import LibraryService
from domain.library.entities import LibraryEntry
from server.api.rest.dependencies import get_library_service, get_path_user_id
from server.api.rest.errors import bad_request
from server.models.schemas import MovieRequest

router = APIRouter(prefix="/api/v1", tags=["library-v1"])


def _records(entries: List[LibraryEntry] | None) -> List[Dict[str, Any]]:
    if entries is None:
        # Storage failed; the stored list was left as it was.
        raise HTTPException(status_code=503, detail="library storage unavailable")
    return [e.to_record() for e in entries]


# ----- favorites -----


@router.get("/library/{user_id}/favorites")
async def list_favorites(
    user_id: str = Depends(get_path_user_id),
    service: LibraryService = Depends(get_library_service),
) -> List[Dict[str, Any]]:
    return _records(await service.get_favorites(user_id=user_id))


@router.post("/library/{user_id}/favorites")
async def add_favorite(
    request: MovieRequest,
    user_id: str = Depends(get_path_user_id),
    service: LibraryService = Depends(get_library_service),
) -> List[Dict[str, Any]]:
    try:
        entries = await service.add_favorite(user_id=user_id, movie=request.movie)
    except ValueError as e:
        raise bad_request(e) from e
    return _records(entries)


@router.delete("/library/{user_id}/favorites/{movie_id}")
async def remove_favorite(
    movie_id: str,
    user_id: str = Depends(get_path_user_id),
    service: LibraryService = Depends(get_library_service),
) -> List[Dict[str, Any]]:
    return _records(await service.remove_favorite(user_id=user_id, movie_id=movie_id))


@router.delete("/library/{user_id}/favorites", status_code=204, response_class=Response)
async def clear_favorites(
    user_id: str = Depends(get_path_user_id),
    service: LibraryService = Depends(get_library_service),
) -> Response:
    await service.clear_favorites(user_id=user_id)
    return Response(status_code=204)


# ----- downloads -----


@router.get("/library/{user_id}/downloads")
async def list_downloads(
    user_id: str = Depends(get_path_user_id),
    service: LibraryService = Depends(get_library_service),
) -> List[Dict[str, Any]]:
    return _records(await service.get_downloads(user_id=user_id))


@router.post("/library/{user_id}/downloads")
async def add_download(
    request: MovieRequest,
    user_id: str = Depends(get_path_user_id),
    service: LibraryService = Depends(get_library_service),
) -> List[Dict[str, Any]]:
    try:
        entries = await service.add_download(user_id=user_id, entry=request.movie)
    except ValueError as e:
        raise bad_request(e) from e
    return _records(entries)


@router.delete("/library/{user_id}/downloads/{movie_id}")
async def remove_download(
    movie_id: str,
    user_id: str = Depends(get_path_user_id),
    service: LibraryService = Depends(get_library_service),
) -> List[Dict[str, Any]]:
    return _records(await service.remove_download(user_id=user_id, movie_id=movie_id))


@router.delete("/library/{user_id}/downloads", status_code=204, response_class=Response)
async def clear_downloads(
    user_id: str = Depends(get_path_user_id),
    service: LibraryService = Depends(get_library_service),
) -> Response:
    await service.clear_downloads(user_id=user_id)
    return Response(status_code=204)


# ----- watch history -----


@router.get("/library/{user_id}/history")
async def list_history(
    user_id: str = Depends(get_path_user_id),
    service: LibraryService = Depends(get_library_service),
) -> List[Dict[str, Any]]:
    return _records(await service.get_history(user_id=user_id))


@router.post("/library/{user_id}/history")
async def add_history(
    request: MovieRequest,
    user_id: str = Depends(get_path_user_id),
    service: LibraryService = Depends(get_library_service),
) -> List[Dict[str, Any]]:
    try:
        entries = await service.add_history(user_id=user_id, entry=request.movie)
    except ValueError as e:
        raise bad_request(e) from e
    return _records(entries)


@router.delete("/library/{user_id}/history", status_code=204, response_class=Response)
async def clear_history(
    user_id: str = Depends(get_path_user_id),
    service: LibraryService = Depends(get_library_service),
) -> Response:
    await service.clear_history(user_id=user_id)
    return Response(status_code=204)
