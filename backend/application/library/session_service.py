from __future__ import annotations

import json
import logging
from typing import Optional

from application.library.json_records import JsonRecordStore
from application.ports.identity_service_port import IdentityServicePort
from application.ports.kv_store_port import KeyValueStorePort
from domain.library import errors
from domain.library.entities import Identity, Session, normalize_email
from domain.library.errors import AuthError
from domain.library.keys import USER_KEY

logger = logging.getLogger(__name__)


class SessionService:
    """Holds the signed-in identity under the ``user`` key.

    Credentials are only ever checked by the remote identity service; this
    class persists the returned user record and nothing else.
    """

    def __init__(self, *, kv: KeyValueStorePort, identity: IdentityServicePort) -> None:
        self._kv = kv
        self._records = JsonRecordStore(kv)
        self._identity = identity

    async def login(self, *, email: str, password: Optional[str] = None) -> Identity:
        normalized = normalize_email(email)
        if not normalized:
            raise AuthError(errors.ACCOUNT_NOT_FOUND)

        try:
            payload = await self._identity.login(email=normalized, password=password or None)
        except AuthError:
            raise
        except Exception as e:
            logger.warning("login failed email=%s: %s", normalized, e)
            raise AuthError(errors.LOGIN_FAILED) from e

        user = payload.get("user") if isinstance(payload, dict) else None
        identity = Identity.from_record(user) if isinstance(user, dict) else None
        if identity is None:
            logger.error("login response missing user object email=%s", normalized)
            raise AuthError(errors.ACCOUNT_NOT_FOUND)

        # Storing the identity is part of a successful login.
        try:
            await self._kv.set(USER_KEY, json.dumps(identity.to_record(), ensure_ascii=False))
        except Exception as e:
            logger.warning("persisting signed-in user failed: %s", e)
            raise AuthError(errors.LOGIN_FAILED) from e
        logger.info("user signed in email=%s", identity.email)
        return identity

    async def signup(self, *, name: str, email: str, password: str) -> Identity:
        normalized = normalize_email(email)
        if not password:
            raise AuthError(errors.PASSWORD_REQUIRED)
        try:
            await self._identity.register(
                email=normalized,
                name=(name or "").strip() or None,
                password=password,
            )
        except AuthError:
            raise
        except Exception as e:
            logger.warning("signup failed email=%s: %s", normalized, e)
            raise AuthError(errors.SIGNUP_FAILED) from e
        return await self.login(email=normalized, password=password)

    async def logout(self) -> None:
        # Adapter errors propagate to the caller.
        await self._kv.remove(USER_KEY)

    async def get_user(self) -> Optional[Identity]:
        return Identity.from_record(await self._records.read(USER_KEY, {}))

    async def is_logged_in(self) -> bool:
        return (await self.get_user()) is not None

    async def current_session(self) -> Session:
        return Session(identity=await self.get_user())

    async def require_user_id(self) -> str:
        user = await self.get_user()
        if user is None:
            raise AuthError(errors.SIGN_IN_REQUIRED)
        return user.user_id
