from __future__ import annotations

# Flat key layout shared by every store. Values are JSON documents.

USER_KEY = "user"

FAVORITES_BASE = "favorites"
DOWNLOADS_BASE = "downloads"
HISTORY_BASE = "watchHistory"

USER_MOVIES_BASE = "userMovies"
USER_MOVIES_ALL_KEY = "userMovies:all"

NOTIFICATIONS_KEY = "notifications:list"
NOTIFIED_IDS_KEY = "notifications:seenMovieIds"

# Legacy watchlist: not namespaced per user.
WATCHLIST_KEY = "BHUTAN_MOVIE_WATCHLIST"


def namespace(base: str, user_id: str) -> str:
    """Per-user storage key, e.g. ``favorites:alice@example.com``."""
    return f"{base}:{user_id}"
