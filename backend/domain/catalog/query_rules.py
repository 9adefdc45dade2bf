from __future__ import annotations

import re
from typing import Any, Iterable, Optional

# Free-text hints that switch a search over to TMDB /discover/movie.
LANGUAGE_RULES: list[tuple[re.Pattern[str], dict[str, str]]] = [
    (re.compile(r"(bhutan|bhutanese)"), {"with_origin_country": "BT"}),
    (re.compile(r"(hindhi|hindi|bollywood)"), {"with_original_language": "hi"}),
    (re.compile(r"(chinese|mandarin)"), {"with_original_language": "zh"}),
    (re.compile(r"(kdrama|k-drama|korean)"), {"with_original_language": "ko"}),
    (re.compile(r"(japanese|anime)"), {"with_original_language": "ja"}),
]

# TMDB genre ids. Later keywords win when several match.
GENRE_KEYWORDS: dict[str, str] = {
    "action": "28",
    "adventure": "12",
    "comedy": "35",
    "horror": "27",
    "thriller": "53",
    "drama": "18",
    "romance": "10749",
    "animation": "16",
    "fantasy": "14",
    "documentary": "99",
    "scifi": "878",
    "sci-fi": "878",
    "science fiction": "878",
    "crime": "80",
    "mystery": "9648",
}

YEAR_PATTERN = re.compile(r"(19|20)\d{2}")

# Home screen category chips.
CATEGORY_GENRE_MAP: dict[str, int] = {
    "Fantasy": 14,
    "SCI-FI": 878,
    "Action": 28,
    "Drama": 18,
    "Comedy": 35,
    "Horror": 27,
    "Animation": 16,
    "Thriller": 53,
}

BHUTAN_DISCOVER_PARAMS: dict[str, str] = {
    "with_origin_country": "BT",
    "sort_by": "popularity.desc",
}


def build_discover_params(raw: str) -> tuple[bool, dict[str, str]]:
    """Turn a free-text query into TMDB discover filters.

    Returns (use_discover, params). When no rule fires the caller should fall
    back to a plain title search.
    """
    normalized = (raw or "").lower()
    params: dict[str, str] = {"sort_by": "popularity.desc"}
    use_discover = False

    for pattern, rule_params in LANGUAGE_RULES:
        if pattern.search(normalized):
            params.update(rule_params)
            use_discover = True

    for keyword, genre_id in GENRE_KEYWORDS.items():
        if keyword in normalized:
            params["with_genres"] = genre_id
            use_discover = True

    m = YEAR_PATTERN.search(normalized)
    if m:
        params["primary_release_year"] = m.group(0)
        use_discover = True

    return use_discover, params


def dedupe_by_id(movies: Iterable[Any]) -> list[dict[str, Any]]:
    """First occurrence wins; entries without an id are dropped."""
    seen: set[Any] = set()
    out: list[dict[str, Any]] = []
    for movie in movies:
        if not isinstance(movie, dict):
            continue
        mid = movie.get("id")
        if not mid or mid in seen:
            continue
        seen.add(mid)
        out.append(movie)
    return out


def filter_by_category(movies: Iterable[dict[str, Any]], category: Optional[str]) -> list[dict[str, Any]]:
    items = list(movies)
    if not category or category == "All":
        return items
    genre_id = CATEGORY_GENRE_MAP.get(category)
    if not genre_id:
        return items
    return [m for m in items if isinstance(m.get("genre_ids"), list) and genre_id in m["genre_ids"]]


def title_contains(movie: dict[str, Any], query: str) -> bool:
    q = (query or "").strip().lower()
    if not q:
        return True
    return q in str(movie.get("title") or "").lower()
