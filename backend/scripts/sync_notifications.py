#!/usr/bin/env python3
"""
Run one notification sync against the configured key-value store.

Fetches the trending/popular/top-rated lists from TMDB, feeds the deduplicated
batch to the synchronizer and prints the notifications it created. Running it
twice in a row creates nothing the second time.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

_BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(_BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(_BACKEND_ROOT))

from application.library import CatalogService, NotificationService, UserMovieService
from config.settings import (
    NOTIFICATION_FEED_LIMIT,
    NOTIFICATION_WINDOW_DAYS,
    USER_MOVIES_GLOBAL_LIMIT,
)
from domain.library.policy import LibraryPolicy
from infrastructure.catalog import TMDBClient
from infrastructure.persistence.factory import KeyValueStoreFactory

logger = logging.getLogger("sync_notifications")


async def _run(args: argparse.Namespace) -> int:
    policy = LibraryPolicy(
        notification_window_days=int(args.window_days),
        notification_feed_limit=int(NOTIFICATION_FEED_LIMIT),
        user_movies_global_limit=int(USER_MOVIES_GLOBAL_LIMIT),
    )
    kv = KeyValueStoreFactory.create(args.provider)
    catalog = TMDBClient()
    notifications = NotificationService(kv=kv, policy=policy)
    service = CatalogService(
        catalog=catalog,
        notifications=notifications,
        user_movies=UserMovieService(kv=kv, policy=policy),
    )
    try:
        feed = await service.home_feed()
        logger.info(
            "sync done created=%s unread=%s",
            len(feed.new_notifications),
            feed.unread_count,
        )
        if args.json:
            print(json.dumps([n.to_record() for n in feed.new_notifications], ensure_ascii=False, indent=2))
        else:
            for n in feed.new_notifications:
                print(f"- {n.title} (movie {n.movie_id})")
        return 0
    finally:
        await catalog.close()
        await kv.close()


def main(argv: list[str]) -> int:
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument(
        "--provider",
        default=None,
        help="Override KV_STORE_PROVIDER (memory/postgres/redis).",
    )
    parser.add_argument(
        "--window-days",
        type=int,
        default=NOTIFICATION_WINDOW_DAYS,
        help="Only notify movies released within this many days.",
    )
    parser.add_argument("--json", action="store_true", help="Print created notifications as JSON.")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)
    if args.window_days <= 0:
        parser.error("--window-days must be positive")
    return asyncio.run(_run(args))


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
