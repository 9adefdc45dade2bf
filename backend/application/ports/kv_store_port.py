from __future__ import annotations

from typing import Optional, Protocol


class KeyValueStorePort(Protocol):
    """Durable string key -> string value storage.

    Every call may raise on I/O failure; callers degrade instead of propagating.
    There is no transaction across keys.
    """

    async def get(self, key: str) -> Optional[str]:
        ...

    async def set(self, key: str, value: str) -> None:
        ...

    async def remove(self, key: str) -> None:
        ...

    async def close(self) -> None:
        ...
