import json
import sys
import unittest
from datetime import datetime, timezone
from pathlib import Path

_BACKEND_ROOT = Path(__file__).resolve().parents[1] / "backend"
if str(_BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(_BACKEND_ROOT))

from application.library import LibraryService
from infrastructure.persistence.postgres.kv_store import InMemoryKeyValueStore

_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
_NOW_MS = int(_NOW.timestamp() * 1000)


class _FailingKeyValueStore:
    async def get(self, key: str):
        raise OSError("storage offline")

    async def set(self, key: str, value: str) -> None:
        raise OSError("storage offline")

    async def remove(self, key: str) -> None:
        raise OSError("storage offline")

    async def close(self) -> None:
        return None


class _WriteFailingKeyValueStore(InMemoryKeyValueStore):
    async def set(self, key: str, value: str) -> None:
        raise OSError("read-only")


class TestFavorites(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self.kv = InMemoryKeyValueStore()
        self.service = LibraryService(kv=self.kv, clock=lambda: _NOW)

    async def test_add_then_remove(self):
        added = await self.service.add_favorite(user_id="u1", movie={"id": 42, "title": "X"})
        self.assertEqual([e.to_record() for e in added], [{"id": 42, "title": "X"}])

        favorites = await self.service.get_favorites(user_id="u1")
        self.assertEqual([e.to_record() for e in favorites], [{"id": 42, "title": "X"}])
        self.assertTrue(await self.service.is_favorite(user_id="u1", movie_id=42))

        remaining = await self.service.remove_favorite(user_id="u1", movie_id=42)
        self.assertEqual(remaining, [])
        self.assertEqual(await self.service.get_favorites(user_id="u1"), [])

    async def test_no_duplicate_ids(self):
        await self.service.add_favorite(user_id="u1", movie={"id": 7, "title": "A"})
        await self.service.add_favorite(user_id="u1", movie={"id": 7, "title": "A again"})
        await self.service.add_favorite(user_id="u1", movie={"id": "7", "title": "A as text"})
        await self.service.add_favorite(user_id="u1", movie={"id": 8, "title": "B"})
        await self.service.remove_favorite(user_id="u1", movie_id="8")
        await self.service.add_favorite(user_id="u1", movie={"id": 8, "title": "B"})

        keys = [e.key for e in await self.service.get_favorites(user_id="u1")]
        self.assertEqual(keys, ["7", "8"])
        self.assertEqual(len(keys), len(set(keys)))

    async def test_legacy_bare_ids_are_readable_and_deduplicated(self):
        await self.kv.set("favorites:u1", json.dumps([42, {"id": 5, "title": "Five"}]))

        favorites = await self.service.get_favorites(user_id="u1")
        self.assertEqual([e.to_record() for e in favorites], [{"id": 42}, {"id": 5, "title": "Five"}])

        # A bare entry blocks re-adding the same id.
        await self.service.add_favorite(user_id="u1", movie={"id": 42, "title": "X"})
        self.assertEqual(len(await self.service.get_favorites(user_id="u1")), 2)

        await self.service.remove_favorite(user_id="u1", movie_id="42")
        stored = json.loads(await self.kv.get("favorites:u1"))
        self.assertEqual(stored, [{"id": 5, "title": "Five"}])

    async def test_users_do_not_share_favorites(self):
        await self.service.add_favorite(user_id="a@x.com", movie={"id": 1})
        self.assertEqual(await self.service.get_favorites(user_id="b@x.com"), [])
        self.assertIsNotNone(await self.kv.get("favorites:a@x.com"))

    async def test_movie_without_id_is_rejected(self):
        with self.assertRaises(ValueError):
            await self.service.add_favorite(user_id="u1", movie={"title": "No id"})

    async def test_clear_favorites(self):
        await self.service.add_favorite(user_id="u1", movie={"id": 1})
        self.assertTrue(await self.service.clear_favorites(user_id="u1"))
        self.assertIsNone(await self.kv.get("favorites:u1"))


class TestDownloads(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self.kv = InMemoryKeyValueStore()
        self.service = LibraryService(kv=self.kv, clock=lambda: _NOW)

    async def test_add_stamps_downloaded_at_and_skips_duplicates(self):
        await self.service.add_download(user_id="u1", entry={"id": 3, "title": "Three"})
        await self.service.add_download(user_id="u1", entry={"id": 3, "title": "Three"})

        downloads = await self.service.get_downloads(user_id="u1")
        self.assertEqual(len(downloads), 1)
        self.assertEqual(downloads[0].data["downloadedAt"], _NOW_MS)
        self.assertTrue(await self.service.is_downloaded(user_id="u1", movie_id="3"))

    async def test_bare_entries_are_ignored(self):
        await self.kv.set("downloads:u1", json.dumps([9, {"id": 4}]))
        downloads = await self.service.get_downloads(user_id="u1")
        self.assertEqual([e.key for e in downloads], ["4"])

    async def test_remove_and_clear(self):
        await self.service.add_download(user_id="u1", entry={"id": 1})
        await self.service.add_download(user_id="u1", entry={"id": 2})
        remaining = await self.service.remove_download(user_id="u1", movie_id=1)
        self.assertEqual([e.key for e in remaining], ["2"])

        await self.service.clear_downloads(user_id="u1")
        self.assertEqual(await self.service.get_downloads(user_id="u1"), [])


class TestHistory(unittest.IsolatedAsyncioTestCase):
    async def test_prepends_without_dedup(self):
        ticks = iter(
            [
                datetime(2024, 5, 1, tzinfo=timezone.utc),
                datetime(2024, 5, 2, tzinfo=timezone.utc),
                datetime(2024, 5, 3, tzinfo=timezone.utc),
            ]
        )
        service = LibraryService(kv=InMemoryKeyValueStore(), clock=lambda: next(ticks))

        await service.add_history(user_id="u1", entry={"id": 1})
        await service.add_history(user_id="u1", entry={"id": 2})
        await service.add_history(user_id="u1", entry={"id": 1})

        history = await service.get_history(user_id="u1")
        self.assertEqual([e.key for e in history], ["1", "2", "1"])
        watched = [e.data["watchedAt"] for e in history]
        self.assertEqual(watched, sorted(watched, reverse=True))

    async def test_clear_history(self):
        service = LibraryService(kv=InMemoryKeyValueStore(), clock=lambda: _NOW)
        await service.add_history(user_id="u1", entry={"id": 1})
        await service.clear_history(user_id="u1")
        self.assertEqual(await service.get_history(user_id="u1"), [])


class TestStorageFailures(unittest.IsolatedAsyncioTestCase):
    async def test_failing_adapter_degrades(self):
        service = LibraryService(kv=_FailingKeyValueStore())
        self.assertIsNone(await service.add_favorite(user_id="u1", movie={"id": 1}))
        self.assertIsNone(await service.remove_download(user_id="u1", movie_id=1))
        self.assertIsNone(await service.add_history(user_id="u1", entry={"id": 1}))
        self.assertEqual(await service.get_favorites(user_id="u1"), [])
        self.assertEqual(await service.get_history(user_id="u1"), [])
        self.assertFalse(await service.clear_history(user_id="u1"))

    async def test_write_failure_returns_none(self):
        service = LibraryService(kv=_WriteFailingKeyValueStore())
        self.assertIsNone(await service.add_favorite(user_id="u1", movie={"id": 1}))

    async def test_corrupt_list_is_treated_as_empty(self):
        kv = InMemoryKeyValueStore({"favorites:u1": "[{oops"})
        service = LibraryService(kv=kv)
        self.assertEqual(await service.get_favorites(user_id="u1"), [])
        added = await service.add_favorite(user_id="u1", movie={"id": 1})
        self.assertEqual([e.key for e in added], ["1"])


if __name__ == "__main__":
    unittest.main()
