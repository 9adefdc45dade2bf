from __future__ import annotations

from fastapi import APIRouter

import server.api.rest.v1.catalog as catalog_v1
import server.api.rest.v1.library as library_v1
import server.api.rest.v1.notifications as notifications_v1
import server.api.rest.v1.session as session_v1
import server.api.rest.v1.user_movies as user_movies_v1
import server.api.rest.v1.watchlist as watchlist_v1

# Canonical API router aggregator (v1 only).
api_router = APIRouter()
api_router.include_router(session_v1.router)
api_router.include_router(library_v1.router)
api_router.include_router(user_movies_v1.router)
api_router.include_router(notifications_v1.router)
api_router.include_router(watchlist_v1.router)
api_router.include_router(catalog_v1.router)

__all__ = ["api_router"]
