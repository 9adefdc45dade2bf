from .entities import (
    AppNotification,
    Identity,
    LibraryEntry,
    Session,
    UserMovie,
    UserMovieDraft,
    epoch_ms,
    normalize_email,
)
from .errors import AuthError
from .keys import namespace
from .policy import LibraryPolicy

__all__ = [
    "AppNotification",
    "AuthError",
    "Identity",
    "LibraryEntry",
    "LibraryPolicy",
    "Session",
    "UserMovie",
    "UserMovieDraft",
    "epoch_ms",
    "namespace",
    "normalize_email",
]
