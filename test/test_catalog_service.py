import sys
import unittest
from datetime import datetime, timedelta, timezone
from pathlib import Path

_BACKEND_ROOT = Path(__file__).resolve().parents[1] / "backend"
if str(_BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(_BACKEND_ROOT))

from application.library import CatalogService, NotificationService, UserMovieService
from domain.catalog import build_discover_params, dedupe_by_id, extract_youtube_id, filter_by_category
from domain.catalog.trailers import youtube_trailers
from domain.library import UserMovieDraft
from infrastructure.persistence.postgres.kv_store import InMemoryKeyValueStore

_NOW = datetime(2024, 6, 15, tzinfo=timezone.utc)
_RECENT = (_NOW - timedelta(days=2)).date().isoformat()
_OLD = "1999-03-31"


class _StubCatalog:
    def __init__(self) -> None:
        self.calls: list[tuple[str, dict]] = []
        self.trending_items = [
            {"id": 1, "title": "Recent Action", "release_date": _RECENT, "genre_ids": [28]},
            {"id": 2, "title": "Old Drama", "release_date": _OLD, "genre_ids": [18]},
        ]
        self.popular_items = [
            {"id": 1, "title": "Recent Action", "release_date": _RECENT, "genre_ids": [28]},
            {"id": 3, "title": "Recent Comedy", "release_date": _RECENT, "genre_ids": [35]},
        ]
        self.top_rated_items = [{"id": 4, "title": "The Matrix", "release_date": _OLD, "genre_ids": [28, 878]}]
        self.remote_results = [{"id": 99, "title": "Remote Hit"}]
        self.details = {
            "id": 4,
            "title": "The Matrix",
            "videos": {
                "results": [
                    {"site": "YouTube", "key": "vKQi3bBA1y8", "type": "Trailer"},
                    {"site": "Vimeo", "key": "123"},
                ]
            },
        }

    async def trending(self, *, window: str = "week"):
        self.calls.append(("trending", {"window": window}))
        return list(self.trending_items)

    async def popular(self, *, page: int = 1):
        self.calls.append(("popular", {"page": page}))
        return list(self.popular_items)

    async def top_rated(self, *, page: int = 1):
        self.calls.append(("top_rated", {"page": page}))
        return list(self.top_rated_items)

    async def discover(self, *, params, page: int = 1):
        self.calls.append(("discover", dict(params)))
        return list(self.remote_results)

    async def search(self, *, query: str, page: int = 1):
        self.calls.append(("search", {"query": query}))
        return list(self.remote_results)

    async def movie_details(self, movie_id: int):
        return self.details if movie_id == 4 else None

    async def close(self) -> None:
        return None


class _BrokenPopularCatalog(_StubCatalog):
    async def popular(self, *, page: int = 1):
        raise RuntimeError("tmdb down")


class TestCatalogService(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self.kv = InMemoryKeyValueStore()
        self.catalog = _StubCatalog()
        self.notifications = NotificationService(kv=self.kv, clock=lambda: _NOW)
        self.user_movies = UserMovieService(kv=self.kv, clock=lambda: _NOW)
        self.service = CatalogService(
            catalog=self.catalog,
            notifications=self.notifications,
            user_movies=self.user_movies,
        )

    async def test_home_feed_syncs_notifications_once(self):
        feed = await self.service.home_feed()
        self.assertEqual([m["id"] for m in feed.trending], [1, 2])
        self.assertEqual(sorted(n.movie_id for n in feed.new_notifications), [1, 3])
        self.assertEqual(feed.unread_count, 2)

        again = await self.service.home_feed()
        self.assertEqual(again.new_notifications, [])
        self.assertEqual(again.unread_count, 2)

    async def test_home_feed_category_filter(self):
        feed = await self.service.home_feed(category="Action")
        self.assertEqual([m["id"] for m in feed.trending], [1])
        self.assertEqual([m["id"] for m in feed.popular], [1])
        self.assertEqual([m["id"] for m in feed.top_rated], [4])

        unfiltered = await self.service.home_feed(category="All")
        self.assertEqual(len(unfiltered.trending), 2)

    async def test_home_feed_without_sync(self):
        feed = await self.service.home_feed(sync_notifications=False)
        self.assertEqual(feed.new_notifications, [])
        self.assertEqual(await self.notifications.get_notifications(), [])

    async def test_home_feed_survives_remote_failure(self):
        service = CatalogService(
            catalog=_BrokenPopularCatalog(),
            notifications=self.notifications,
            user_movies=self.user_movies,
        )
        feed = await service.home_feed()
        self.assertEqual(feed.popular, [])
        self.assertEqual(len(feed.trending), 2)

    async def test_search_puts_uploads_first(self):
        upload = await self.user_movies.add_user_movie(
            user_id="u",
            draft=UserMovieDraft(title="Remote Valley", description="An upload"),
        )
        rows = await self.service.search("remote")
        self.assertEqual([r.kind for r in rows], ["custom", "tmdb"])
        self.assertEqual(rows[0].movie.id, upload.id)
        self.assertEqual(self.catalog.calls[-1], ("search", {"query": "remote"}))

    async def test_search_with_hints_uses_discover(self):
        await self.service.search("korean thriller 2019")
        name, params = self.catalog.calls[-1]
        self.assertEqual(name, "discover")
        self.assertEqual(params["with_original_language"], "ko")
        self.assertEqual(params["with_genres"], "53")
        self.assertEqual(params["primary_release_year"], "2019")

    async def test_empty_search_returns_nothing(self):
        self.assertEqual(await self.service.search("   "), [])
        self.assertEqual(self.catalog.calls, [])

    async def test_bhutan_mode_filters_by_title(self):
        self.catalog.remote_results = [{"id": 7, "title": "Hema Hema"}, {"id": 8, "title": "Lunana"}]
        await self.user_movies.add_user_movie(user_id="u", draft=UserMovieDraft(title="Hema Home", description="d"))
        await self.user_movies.add_user_movie(user_id="u", draft=UserMovieDraft(title="Other", description="d"))

        rows = await self.service.search("hema", mode="bhutan")
        self.assertEqual([(r.kind, r.movie.title if r.kind == "custom" else r.movie["title"]) for r in rows],
                         [("custom", "Hema Home"), ("tmdb", "Hema Hema")])
        self.assertEqual(self.catalog.calls[-1][1]["with_origin_country"], "BT")

        everything = await self.service.search("", mode="bhutan")
        self.assertEqual(len(everything), 4)

    async def test_trailers(self):
        trailers = await self.service.trailers(4)
        self.assertEqual([t["key"] for t in trailers], ["vKQi3bBA1y8"])
        self.assertEqual(await self.service.trailers(5), [])


class TestQueryRules(unittest.TestCase):
    def test_plain_title_falls_back_to_search(self):
        use_discover, params = build_discover_params("Inception")
        self.assertFalse(use_discover)
        self.assertEqual(params, {"sort_by": "popularity.desc"})

    def test_language_and_genre_rules(self):
        use_discover, params = build_discover_params("Bollywood comedy")
        self.assertTrue(use_discover)
        self.assertEqual(params["with_original_language"], "hi")
        self.assertEqual(params["with_genres"], "35")

        _, params = build_discover_params("bhutanese films")
        self.assertEqual(params["with_origin_country"], "BT")

        _, params = build_discover_params("sci-fi")
        self.assertEqual(params["with_genres"], "878")

    def test_dedupe_keeps_first(self):
        movies = [{"id": 1, "title": "a"}, {"id": 1, "title": "b"}, {"title": "no id"}, {"id": 2}]
        self.assertEqual(dedupe_by_id(movies), [{"id": 1, "title": "a"}, {"id": 2}])

    def test_unknown_category_is_unfiltered(self):
        movies = [{"id": 1, "genre_ids": [18]}, {"id": 2}]
        self.assertEqual(filter_by_category(movies, "Western"), movies)
        self.assertEqual(filter_by_category(movies, "Drama"), [{"id": 1, "genre_ids": [18]}])


class TestYoutubeIds(unittest.TestCase):
    def test_extract(self):
        self.assertEqual(extract_youtube_id("dQw4w9WgXcQ"), "dQw4w9WgXcQ")
        self.assertEqual(extract_youtube_id("https://www.youtube.com/watch?v=dQw4w9WgXcQ&t=1"), "dQw4w9WgXcQ")
        self.assertEqual(extract_youtube_id("https://youtu.be/dQw4w9WgXcQ"), "dQw4w9WgXcQ")
        self.assertEqual(extract_youtube_id("https://www.youtube.com/embed/dQw4w9WgXcQ"), "dQw4w9WgXcQ")
        self.assertEqual(extract_youtube_id("https://youtube.com/shorts/dQw4w9WgXcQ"), "dQw4w9WgXcQ")
        self.assertIsNone(extract_youtube_id("https://vimeo.com/12345"))
        self.assertIsNone(extract_youtube_id(None))

    def test_youtube_trailers_tolerates_missing_videos(self):
        self.assertEqual(youtube_trailers({"id": 1}), [])
        self.assertEqual(youtube_trailers(None), [])


if __name__ == "__main__":
    unittest.main()
