from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from application.library import SessionService, UserMovieService
from domain.library.entities import UserMovieDraft
from domain.library.errors import AuthError
from server.api.rest.dependencies import get_path_user_id, get_session_service, get_user_movie_service
from server.api.rest.errors import auth_http_error, bad_request
from server.models.schemas import UserMovieRequest

router = APIRouter(prefix="/api/v1", tags=["user-movies-v1"])


@router.get("/user-movies")
async def list_all_user_movies(
    service: UserMovieService = Depends(get_user_movie_service),
) -> List[Dict[str, Any]]:
    """Shared feed of uploads from every user, newest first."""
    return [m.to_record() for m in await service.list_all_user_movies()]


@router.get("/user-movies/search")
async def search_user_movies(
    q: str = Query("", description="Matches title, description, genre, year or actors"),
    service: UserMovieService = Depends(get_user_movie_service),
) -> List[Dict[str, Any]]:
    return [m.to_record() for m in await service.search_user_movies(q)]


@router.post("/user-movies")
async def add_user_movie(
    request: UserMovieRequest,
    service: UserMovieService = Depends(get_user_movie_service),
    session: SessionService = Depends(get_session_service),
) -> Dict[str, Any]:
    try:
        user_id = await session.require_user_id()
    except AuthError as e:
        raise auth_http_error(e) from e

    draft = UserMovieDraft(
        title=request.title,
        description=request.description,
        poster_uri=request.poster_uri,
        trailer_url=request.trailer_url,
        genre=request.genre,
        year=str(request.year) if request.year is not None else None,
        actors=UserMovieDraft.split_actors(request.actors),
    )
    try:
        movie = await service.add_user_movie(user_id=user_id, draft=draft)
    except ValueError as e:
        raise bad_request(e) from e
    return movie.to_record()


@router.get("/user-movies/{user_id}")
async def list_user_movies(
    user_id: str = Depends(get_path_user_id),
    service: UserMovieService = Depends(get_user_movie_service),
) -> List[Dict[str, Any]]:
    return [m.to_record() for m in await service.list_user_movies(user_id=user_id)]


@router.delete("/user-movies/{user_id}/{movie_id}")
async def remove_user_movie(
    movie_id: str,
    user_id: str = Depends(get_path_user_id),
    service: UserMovieService = Depends(get_user_movie_service),
) -> List[Dict[str, Any]]:
    remaining = await service.remove_user_movie(user_id=user_id, movie_id=movie_id)
    return [m.to_record() for m in remaining]


@router.delete("/user-movies/{user_id}", status_code=204, response_class=Response)
async def clear_user_movies(
    user_id: str = Depends(get_path_user_id),
    service: UserMovieService = Depends(get_user_movie_service),
) -> Response:
    await service.clear_user_movies(user_id=user_id)
    return Response(status_code=204)
