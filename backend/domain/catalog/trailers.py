from __future__ import annotations

import re
from typing import Any, Optional

_BARE_ID_RE = re.compile(r"^[A-Za-z0-9_-]{11}$")
_URL_ID_RE = re.compile(r"(?:v=|youtu\.be/|embed/|shorts/)([A-Za-z0-9_-]{11})")


def extract_youtube_id(url: Optional[str]) -> Optional[str]:
    """Video id from a bare id or a watch/short/embed/youtu.be URL."""
    if not url:
        return None
    trimmed = url.strip()
    if _BARE_ID_RE.match(trimmed):
        return trimmed
    m = _URL_ID_RE.search(trimmed)
    return m.group(1) if m else None


def youtube_trailers(details: Optional[dict[str, Any]]) -> list[dict[str, Any]]:
    """YouTube entries from a details payload fetched with ``append_to_response=videos``."""
    if not isinstance(details, dict):
        return []
    videos = details.get("videos")
    results = videos.get("results") if isinstance(videos, dict) else None
    if not isinstance(results, list):
        return []
    return [v for v in results if isinstance(v, dict) and v.get("site") == "YouTube" and v.get("key")]
