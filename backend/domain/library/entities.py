from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional


def normalize_email(value: str) -> str:
    return (value or "").strip().lower()


def epoch_ms(dt: datetime) -> int:
    """Millisecond timestamps, the unit every persisted record uses."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp() * 1000)


def _clean(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text


@dataclass(frozen=True)
class Identity:
    """The signed-in user. ``user_id`` is the namespace for every per-user key."""

    email: str
    id: Any = None
    name: Optional[str] = None

    @property
    def user_id(self) -> str:
        return normalize_email(self.email)

    @classmethod
    def from_record(cls, raw: Any) -> Optional["Identity"]:
        if not isinstance(raw, dict):
            return None
        email = normalize_email(str(raw.get("email") or ""))
        if not email:
            return None
        name = raw.get("name")
        return cls(email=email, id=raw.get("id"), name=str(name) if name else None)

    def to_record(self) -> dict[str, Any]:
        record: dict[str, Any] = {"email": self.email}
        if self.id is not None:
            record["id"] = self.id
        if self.name:
            record["name"] = self.name
        return record


@dataclass(frozen=True)
class Session:
    """Explicit session context handed to callers instead of ambient identity reads."""

    identity: Optional[Identity] = None

    @property
    def is_authenticated(self) -> bool:
        return self.identity is not None

    @property
    def user_id(self) -> Optional[str]:
        return self.identity.user_id if self.identity else None


@dataclass(frozen=True)
class LibraryEntry:
    """A favorite, download or history item.

    ``data`` is the full persisted record (caller fields plus any timestamp the
    collection adds). Older favorites were stored as bare numeric ids; those
    are read back as ``{"id": n}``.
    """

    id: Any
    data: dict[str, Any] = field(default_factory=dict)

    @property
    def key(self) -> str:
        return str(self.id)

    @property
    def title(self) -> Optional[str]:
        return self.data.get("title")

    @property
    def poster_path(self) -> Optional[str]:
        return self.data.get("poster_path")

    @classmethod
    def from_record(cls, raw: Any) -> Optional["LibraryEntry"]:
        if isinstance(raw, bool):
            return None
        if isinstance(raw, (int, float, str)):
            return cls(id=raw, data={"id": raw})
        if isinstance(raw, dict):
            return cls(id=raw.get("id"), data=dict(raw))
        return None

    def to_record(self) -> dict[str, Any]:
        return dict(self.data)


@dataclass(frozen=True)
class UserMovieDraft:
    """Submission form input for a user-uploaded movie."""

    title: str
    description: str
    poster_uri: Optional[str] = None
    trailer_url: Optional[str] = None
    genre: Optional[str] = None
    year: Optional[str] = None
    actors: tuple[str, ...] = ()

    @staticmethod
    def split_actors(raw: Any) -> tuple[str, ...]:
        """Accept a list or a comma-separated string; drop empty names."""
        if raw is None:
            return ()
        if isinstance(raw, str):
            parts = raw.split(",")
        else:
            parts = [str(a) for a in raw if a is not None]
        return tuple(p.strip() for p in parts if p and p.strip())


@dataclass(frozen=True)
class UserMovie:
    id: str
    owner_id: str
    title: str
    description: str
    created_at: int
    poster_uri: Optional[str] = None
    trailer_url: Optional[str] = None
    genre: Optional[str] = None
    year: Optional[str] = None
    actors: tuple[str, ...] = ()

    @classmethod
    def from_record(cls, raw: Any) -> Optional["UserMovie"]:
        if not isinstance(raw, dict) or not raw.get("id"):
            return None
        actors = raw.get("actors") or []
        if not isinstance(actors, list):
            actors = []
        try:
            created_at = int(raw.get("createdAt") or 0)
        except (TypeError, ValueError):
            created_at = 0
        return cls(
            id=str(raw["id"]),
            owner_id=str(raw.get("ownerId") or ""),
            title=str(raw.get("title") or ""),
            description=str(raw.get("description") or ""),
            created_at=created_at,
            poster_uri=raw.get("posterUri") or None,
            trailer_url=_clean(raw.get("trailerUrl")),
            genre=_clean(raw.get("genre")),
            year=_clean(raw.get("year")),
            actors=tuple(str(a) for a in actors if a),
        )

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "ownerId": self.owner_id,
            "title": self.title,
            "description": self.description,
            "posterUri": self.poster_uri,
            "trailerUrl": self.trailer_url,
            "genre": self.genre,
            "year": self.year,
            "actors": list(self.actors),
            "createdAt": self.created_at,
        }


@dataclass(frozen=True)
class AppNotification:
    """Locally synthesized in-app notification (never user-authored)."""

    id: str
    title: str
    message: str
    created_at: int
    read: bool = False
    movie_id: Any = None
    poster_path: Optional[str] = None

    @classmethod
    def from_record(cls, raw: Any) -> Optional["AppNotification"]:
        if not isinstance(raw, dict) or not raw.get("id"):
            return None
        try:
            created_at = int(raw.get("createdAt") or 0)
        except (TypeError, ValueError):
            created_at = 0
        return cls(
            id=str(raw["id"]),
            title=str(raw.get("title") or ""),
            message=str(raw.get("message") or ""),
            created_at=created_at,
            read=bool(raw.get("read")),
            movie_id=raw.get("movieId"),
            poster_path=raw.get("poster_path") or None,
        )

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "movieId": self.movie_id,
            "title": self.title,
            "message": self.message,
            "poster_path": self.poster_path,
            "createdAt": self.created_at,
            "read": self.read,
        }
