from .query_rules import (
    CATEGORY_GENRE_MAP,
    build_discover_params,
    dedupe_by_id,
    filter_by_category,
    title_contains,
)
from .trailers import extract_youtube_id, youtube_trailers

__all__ = [
    "CATEGORY_GENRE_MAP",
    "build_discover_params",
    "dedupe_by_id",
    "extract_youtube_id",
    "filter_by_category",
    "title_contains",
    "youtube_trailers",
]
