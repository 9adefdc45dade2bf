from __future__ import annotations

from setuptools import find_packages, setup

setup(
    name="movie-club-library",
    version="0.1.0",
    # Repo convention: backend code lives under `backend/` and is imported as
    # top-level packages (`import domain`, `import application`, ...).
    package_dir={"": "backend"},
    packages=find_packages(
        where="backend",
        include=[
            "domain",
            "domain.*",
            "application",
            "application.*",
            "infrastructure",
            "infrastructure.*",
            "server",
            "server.*",
            "config",
        ],
    ),
    python_requires=">=3.10",
    install_requires=[
        # Core: domain/application layers plus the HTTP adapters.
        "pydantic>=2.10.6",
        "python-dotenv>=1.0.1",
        "aiohttp>=3.9",
    ],
    extras_require={
        # REST API (FastAPI app under `server/`).
        "server": [
            "fastapi>=0.115",
            "uvicorn>=0.30",
        ],
        # KV_STORE_PROVIDER=postgres
        "postgres": ["asyncpg>=0.29"],
        # KV_STORE_PROVIDER=redis
        "redis": ["redis>=5.0.1"],
        # Test runner + FastAPI TestClient transport.
        "test": [
            "pytest>=8.0",
            "httpx>=0.27",
            "fastapi>=0.115",
            "uvicorn>=0.30",
        ],
        # Convenience: all optional deps.
        "full": [
            "fastapi>=0.115",
            "uvicorn>=0.30",
            "asyncpg>=0.29",
            "redis>=5.0.1",
            "pytest>=8.0",
            "httpx>=0.27",
        ],
    },
)
