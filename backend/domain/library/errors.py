from __future__ import annotations

from typing import Optional

ACCOUNT_EXISTS = "ACCOUNT_EXISTS"
ACCOUNT_NOT_FOUND = "ACCOUNT_NOT_FOUND"
INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
PASSWORD_REQUIRED = "PASSWORD_REQUIRED"
SIGN_IN_REQUIRED = "SIGN_IN_REQUIRED"
LOGIN_FAILED = "LOGIN_FAILED"
SIGNUP_FAILED = "SIGNUP_FAILED"

KNOWN_REASONS = frozenset(
    {
        ACCOUNT_EXISTS,
        ACCOUNT_NOT_FOUND,
        INVALID_CREDENTIALS,
        PASSWORD_REQUIRED,
        SIGN_IN_REQUIRED,
        LOGIN_FAILED,
        SIGNUP_FAILED,
    }
)

_MESSAGES = {
    ACCOUNT_EXISTS: "An account with that email already exists.",
    ACCOUNT_NOT_FOUND: "No account found for that email.",
    INVALID_CREDENTIALS: "Incorrect email and password combination.",
    PASSWORD_REQUIRED: "Enter your password to continue.",
    SIGN_IN_REQUIRED: "Please sign in to continue.",
    LOGIN_FAILED: "We could not sign you in.",
    SIGNUP_FAILED: "Could not create your account.",
}


class AuthError(Exception):
    """Identity failure surfaced to callers as a typed reason string."""

    def __init__(self, reason: str, message: Optional[str] = None) -> None:
        self.reason = reason
        self.message = message or _MESSAGES.get(reason, reason)
        super().__init__(self.message)

    @classmethod
    def from_remote(cls, reason: Optional[str], *, fallback: str) -> "AuthError":
        """Keep a reason reported by the identity service, else use ``fallback``."""
        r = (reason or "").strip().upper()
        if r in KNOWN_REASONS:
            return cls(r)
        return cls(fallback)
