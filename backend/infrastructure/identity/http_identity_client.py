from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional
from urllib.parse import urljoin

import aiohttp

from application.ports.identity_service_port import IdentityServicePort
from domain.library import errors
from domain.library.errors import AuthError
from infrastructure.config.settings import (
    IDENTITY_BASE_URL,
    IDENTITY_LOGIN_PATH,
    IDENTITY_REGISTER_PATH,
    IDENTITY_TIMEOUT_S,
)

logger = logging.getLogger(__name__)


def _join(base: str, path: str) -> str:
    base = (base or "").rstrip("/") + "/"
    path = (path or "").lstrip("/")
    return urljoin(base, path)


def _error_reason(payload: Any) -> Optional[str]:
    # Error bodies look like {"message": "ACCOUNT_EXISTS"}; some deployments use "reason".
    if not isinstance(payload, dict):
        return None
    for key in ("message", "reason", "error"):
        value = payload.get(key)
        if isinstance(value, str) and value.strip():
            return value
    return None


class HttpIdentityClient(IdentityServicePort):
    """JSON-over-HTTP client for the remote account service.

    Non-2xx responses become ``AuthError`` carrying the reported reason when it
    is a known one; transport failures propagate to ``SessionService``, which
    maps them to the generic LOGIN_FAILED / SIGNUP_FAILED reasons.
    """

    def __init__(
        self,
        *,
        base_url: str = IDENTITY_BASE_URL,
        timeout_s: float = IDENTITY_TIMEOUT_S,
        login_path: str = IDENTITY_LOGIN_PATH,
        register_path: str = IDENTITY_REGISTER_PATH,
    ) -> None:
        self._base_url = (base_url or "").strip()
        self._timeout_s = float(timeout_s or 10.0)
        self._login_url = _join(self._base_url, login_path)
        self._register_url = _join(self._base_url, register_path)
        self._session: aiohttp.ClientSession | None = None
        self._lock = asyncio.Lock()

    def _headers(self) -> dict[str, str]:
        return {"content-type": "application/json", "accept": "application/json"}

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is not None and not self._session.closed:
            return self._session

        async with self._lock:
            if self._session is not None and not self._session.closed:
                return self._session

            timeout = aiohttp.ClientTimeout(total=self._timeout_s)
            self._session = aiohttp.ClientSession(timeout=timeout)
            return self._session

    async def _post(self, url: str, body: dict[str, Any], *, fallback: str) -> dict[str, Any]:
        if not self._base_url:
            raise RuntimeError("IDENTITY_BASE_URL is not configured")

        session = await self._get_session()
        async with session.post(url, json=body, headers=self._headers()) as resp:
            try:
                payload = await resp.json(content_type=None)
            except (aiohttp.ContentTypeError, ValueError):
                payload = None
            if resp.status >= 400:
                reason = _error_reason(payload)
                logger.info("identity request rejected url=%s status=%s reason=%s", url, resp.status, reason)
                raise AuthError.from_remote(reason, fallback=fallback)

        return payload if isinstance(payload, dict) else {}

    async def login(self, *, email: str, password: Optional[str]) -> dict[str, Any]:
        body: dict[str, Any] = {"email": email}
        if password:
            body["password"] = password
        return await self._post(self._login_url, body, fallback=errors.LOGIN_FAILED)

    async def register(self, *, email: str, name: Optional[str], password: str) -> dict[str, Any]:
        body: dict[str, Any] = {"email": email, "password": password}
        if name:
            body["name"] = name
        return await self._post(self._register_url, body, fallback=errors.SIGNUP_FAILED)

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None
