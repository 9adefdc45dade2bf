from .catalog_service import CatalogService, HomeFeed, SearchRow
from .json_records import JsonRecordStore, RecordStoreError
from .library_service import LibraryService
from .notification_service import NotificationService
from .session_service import SessionService
from .user_movie_service import UserMovieService
from .watchlist_service import WatchlistService

__all__ = [
    "CatalogService",
    "HomeFeed",
    "JsonRecordStore",
    "LibraryService",
    "NotificationService",
    "RecordStoreError",
    "SearchRow",
    "SessionService",
    "UserMovieService",
    "WatchlistService",
]
