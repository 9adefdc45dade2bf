from __future__ import annotations

from fastapi import HTTPException

from domain.library import errors
from domain.library.errors import AuthError

_STATUS_BY_REASON = {
    errors.ACCOUNT_EXISTS: 409,
    errors.ACCOUNT_NOT_FOUND: 404,
    errors.INVALID_CREDENTIALS: 401,
    errors.SIGN_IN_REQUIRED: 401,
    errors.LOGIN_FAILED: 401,
    errors.PASSWORD_REQUIRED: 400,
    errors.SIGNUP_FAILED: 400,
}


def auth_http_error(exc: AuthError) -> HTTPException:
    """Translate an ``AuthError`` into the JSON error body clients switch on."""
    return HTTPException(
        status_code=_STATUS_BY_REASON.get(exc.reason, 400),
        detail={"reason": exc.reason, "message": exc.message},
    )


def bad_request(exc: ValueError) -> HTTPException:
    return HTTPException(status_code=400, detail=str(exc))
