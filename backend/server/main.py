import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from config.settings import UVICORN_CONFIG
from server.api.rest.dependencies import shutdown_dependencies
from server.api_router import api_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # Release store pools and HTTP sessions.
    await shutdown_dependencies()
    logger.info("library adapters closed")


app = FastAPI(
    title="Movie Club library",
    description="Personal library, uploads, notifications and catalog browsing",
    lifespan=lifespan,
)

app.include_router(api_router)


if __name__ == "__main__":
    uvicorn.run("server.main:app", **UVICORN_CONFIG)
