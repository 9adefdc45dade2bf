from __future__ import annotations

from infrastructure.identity.http_identity_client import HttpIdentityClient

__all__ = ["HttpIdentityClient"]
