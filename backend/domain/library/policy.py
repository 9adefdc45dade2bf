from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable, Optional, TypeVar

from domain.library.entities import UserMovie

T = TypeVar("T")


@dataclass(frozen=True)
class LibraryPolicy:
    """Bounds and windows for the personal-library feeds.

    - notification_window_days: only movies released within this trailing
      window (or later) produce a notification.
    - notification_feed_limit: notifications kept, newest first.
    - user_movies_global_limit: uploads kept in the shared feed, newest first.
    """

    notification_window_days: int = 14
    notification_feed_limit: int = 40
    user_movies_global_limit: int = 80


def bounded(items: Iterable[T], limit: int) -> list[T]:
    """Keep the first ``limit`` items (lists are newest-first, so oldest drop)."""
    return list(items)[: max(0, int(limit))]


def parse_release_date(value: Any) -> Optional[datetime]:
    """Parse a catalog release date (``YYYY-MM-DD`` or ISO datetime) as UTC."""
    if not isinstance(value, str) or not value.strip():
        return None
    raw = value.strip().replace("Z", "+00:00")
    try:
        dt = datetime.fromisoformat(raw)
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def is_recent_release(release: datetime, *, now: datetime, window_days: int) -> bool:
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return release >= now - timedelta(days=int(window_days))


def user_movie_haystack(movie: UserMovie) -> str:
    parts = [movie.title, movie.description, movie.genre, movie.year, *movie.actors]
    return " ".join(p for p in parts if p).lower()


def matches_user_movie(movie: UserMovie, term: str) -> bool:
    """Case-insensitive substring match over title/description/genre/year/actors."""
    query = (term or "").strip().lower()
    if not query:
        return True
    return query in user_movie_haystack(movie)
