from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Sign in with an email; the password is optional for legacy accounts."""
    email: str
    password: Optional[str] = None


class SignupRequest(BaseModel):
    name: str = ""
    email: str
    password: str = ""


class SessionResponse(BaseModel):
    authenticated: bool
    user: Optional[Dict[str, Any]] = None


class MovieRequest(BaseModel):
    """A catalog movie (or download/history entry) as the client holds it."""
    movie: Dict[str, Any] = Field(..., description="Must carry an `id`")


class UserMovieRequest(BaseModel):
    title: str = ""
    description: str = ""
    poster_uri: Optional[str] = None
    trailer_url: Optional[str] = None
    genre: Optional[str] = None
    year: Optional[Union[str, int]] = None
    actors: Optional[Union[str, List[str]]] = Field(
        default=None,
        description="Comma-separated names or a list",
    )


class NotificationSyncRequest(BaseModel):
    movies: List[Dict[str, Any]] = Field(default_factory=list)


class NotificationSyncResponse(BaseModel):
    created: List[Dict[str, Any]]
    unread_count: int


class WatchlistRequest(BaseModel):
    """Legacy watchlist ids are numeric; a digit string is accepted as the same id."""
    movie_id: int


class WatchlistToggleResponse(BaseModel):
    movie_id: int
    saved: bool


class SearchRowResponse(BaseModel):
    kind: str
    movie: Dict[str, Any]


class HomeFeedResponse(BaseModel):
    trending: List[Dict[str, Any]]
    popular: List[Dict[str, Any]]
    top_rated: List[Dict[str, Any]]
    new_notifications: List[Dict[str, Any]]
    unread_count: int
