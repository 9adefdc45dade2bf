from __future__ import annotations

from typing import Any, Optional, Protocol


class IdentityServicePort(Protocol):
    """Remote account service. Credentials are never checked locally.

    Implementations raise ``domain.library.errors.AuthError`` with the
    service-reported reason (ACCOUNT_EXISTS, INVALID_CREDENTIALS, ...).
    """

    async def login(self, *, email: str, password: Optional[str]) -> dict[str, Any]:
        """Return the response payload; a successful one carries ``user``."""
        ...

    async def register(self, *, email: str, name: Optional[str], password: str) -> dict[str, Any]:
        ...

    async def close(self) -> None:
        ...
