from __future__ import annotations

import json
import logging
from typing import Any

from application.ports.kv_store_port import KeyValueStorePort

logger = logging.getLogger(__name__)


class RecordStoreError(Exception):
    """The underlying key-value adapter failed while loading a record."""


class JsonRecordStore:
    """JSON documents on top of a key-value port.

    - read: absent key, malformed JSON, a value of the wrong type and adapter
      errors all yield ``default``.
    - read_for_update: same, except adapter errors raise RecordStoreError so a
      read-modify-write never overwrites data it could not load.
    - write/remove: return False when the adapter fails.
    """

    def __init__(self, kv: KeyValueStorePort) -> None:
        self._kv = kv

    @property
    def kv(self) -> KeyValueStorePort:
        return self._kv

    async def read(self, key: str, default: Any) -> Any:
        try:
            return await self.read_for_update(key, default)
        except RecordStoreError as e:
            logger.warning("kv read failed key=%s: %s", key, e)
            return default

    async def read_for_update(self, key: str, default: Any) -> Any:
        try:
            raw = await self._kv.get(key)
        except Exception as e:
            raise RecordStoreError(str(e) or type(e).__name__) from e
        if raw is None or raw == "":
            return default
        try:
            value = json.loads(raw)
        except (TypeError, ValueError):
            logger.warning("kv value is not valid JSON key=%s; treating as absent", key)
            return default
        if default is not None and not isinstance(value, type(default)):
            logger.warning("kv value has unexpected type key=%s type=%s", key, type(value).__name__)
            return default
        return value

    async def read_list(self, key: str) -> list[Any]:
        return await self.read(key, [])

    async def write(self, key: str, value: Any) -> bool:
        try:
            payload = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            logger.warning("kv value not serializable key=%s: %s", key, e)
            return False
        try:
            await self._kv.set(key, payload)
        except Exception as e:
            logger.warning("kv write failed key=%s: %s", key, e)
            return False
        return True

    async def remove(self, key: str) -> bool:
        try:
            await self._kv.remove(key)
        except Exception as e:
            logger.warning("kv remove failed key=%s: %s", key, e)
            return False
        return True
