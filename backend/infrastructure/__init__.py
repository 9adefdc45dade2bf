from __future__ import annotations

"""
Infrastructure layer: concrete adapters behind the application ports.

- persistence: key-value stores (memory / postgres / redis)
- catalog: TMDB HTTP client
- identity: remote account service client
- config: env-driven settings for the adapters above
"""

__all__ = [
    "catalog",
    "config",
    "identity",
    "persistence",
]
