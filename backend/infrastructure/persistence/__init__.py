from __future__ import annotations

from infrastructure.persistence.factory import KeyValueStoreFactory, create_kv_store

__all__ = ["KeyValueStoreFactory", "create_kv_store"]
