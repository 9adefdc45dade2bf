import sys
import unittest
from pathlib import Path
from unittest.mock import patch

_BACKEND_ROOT = Path(__file__).resolve().parents[1] / "backend"
if str(_BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(_BACKEND_ROOT))

from infrastructure.persistence.factory import KeyValueStoreFactory, create_kv_store
from infrastructure.persistence.postgres.kv_store import (
    InMemoryKeyValueStore,
    PostgresKeyValueStore,
)


class TestInMemoryKeyValueStore(unittest.IsolatedAsyncioTestCase):
    async def test_get_set_remove(self):
        kv = InMemoryKeyValueStore()
        self.assertIsNone(await kv.get("favorites:a@x.com"))

        await kv.set("favorites:a@x.com", "[]")
        self.assertEqual(await kv.get("favorites:a@x.com"), "[]")

        await kv.set("favorites:a@x.com", '[{"id": 1}]')
        self.assertEqual(await kv.get("favorites:a@x.com"), '[{"id": 1}]')

        await kv.remove("favorites:a@x.com")
        self.assertIsNone(await kv.get("favorites:a@x.com"))

    async def test_remove_missing_key_is_noop(self):
        kv = InMemoryKeyValueStore({"user": "{}"})
        await kv.remove("nope")
        self.assertEqual(kv.keys(), ["user"])


class TestKeyValueStoreFactory(unittest.TestCase):
    def test_memory_and_empty_provider(self):
        self.assertIsInstance(KeyValueStoreFactory.create("memory"), InMemoryKeyValueStore)
        self.assertIsInstance(KeyValueStoreFactory.create(""), InMemoryKeyValueStore)
        self.assertIsInstance(create_kv_store(" Memory "), InMemoryKeyValueStore)

    def test_postgres_without_dsn_falls_back_to_memory(self):
        with patch("infrastructure.persistence.factory.get_postgres_dsn", return_value=None):
            store = KeyValueStoreFactory.create("postgres")
        self.assertIsInstance(store, InMemoryKeyValueStore)

    def test_postgres_with_dsn(self):
        with patch(
            "infrastructure.persistence.factory.get_postgres_dsn",
            return_value="postgresql://u:p@localhost:5432/movie_club",
        ):
            store = KeyValueStoreFactory.create("postgres")
        self.assertIsInstance(store, PostgresKeyValueStore)

    def test_redis_without_url_falls_back_to_memory(self):
        with patch("infrastructure.persistence.factory.get_redis_url", return_value=None):
            store = KeyValueStoreFactory.create("redis")
        self.assertIsInstance(store, InMemoryKeyValueStore)

    def test_unknown_provider_raises(self):
        with self.assertRaises(ValueError):
            KeyValueStoreFactory.create("sqlite")  # type: ignore[arg-type]


class TestPostgresKeyValueStoreConfig(unittest.TestCase):
    def test_rejects_unsafe_table_name(self):
        with self.assertRaises(ValueError):
            PostgresKeyValueStore(dsn="postgresql://localhost/db", table="kv; DROP TABLE x")


if __name__ == "__main__":
    unittest.main()
