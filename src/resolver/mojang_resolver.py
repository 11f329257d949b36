# src/resolver/mojang_resolver.py — v1
"""Resolver backed by the public Mojang profile API (httpx).

Name lookup:     GET {api_url}/users/profiles/minecraft/{name}
Identity lookup: GET {session_url}/session/minecraft/profile/{uuid hex}

Both answer ``{"id": "<32 hex chars>", "name": "..."}`` on success and
204/404 when the player does not exist.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote
from uuid import UUID

import httpx
from pydantic import ValidationError

from playerbook.core.models import Profile
from playerbook.resolver.base_resolver import BaseResolver, ResolveResult

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.mojang.com"
DEFAULT_SESSION_URL = "https://sessionserver.mojang.com"

# Response fields that are not carried into profile metadata
_DROPPED_FIELDS = {"id", "name", "properties"}


class MojangResolver(BaseResolver):
    """HTTP lookup of player profiles."""

    def __init__(
        self,
        api_url: str = DEFAULT_API_URL,
        session_url: str = DEFAULT_SESSION_URL,
        timeout_s: float = 10.0,
        client: httpx.Client | None = None,
    ) -> None:
        self._api_url = api_url.rstrip("/")
        self._session_url = session_url.rstrip("/")
        self._client = client or httpx.Client(timeout=timeout_s)
        self._owns_client = client is None

    @property
    def backend_name(self) -> str:
        return "mojang"

    def resolve_by_identity(self, identity: UUID) -> ResolveResult:
        url = f"{self._session_url}/session/minecraft/profile/{identity.hex}"
        return self._fetch(url, key=str(identity))

    def resolve_by_name(self, name: str) -> ResolveResult:
        url = f"{self._api_url}/users/profiles/minecraft/{quote(name, safe='')}"
        return self._fetch(url, key=name)

    def close(self) -> None:
        """Close the underlying HTTP client if this resolver created it."""
        if self._owns_client:
            self._client.close()

    def _fetch(self, url: str, key: str) -> ResolveResult:
        try:
            response = self._client.get(url)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.debug("Lookup of %r failed: %s", key, e)
            return ResolveResult.io_error(key, str(e))

        if response.status_code in (204, 404):
            return ResolveResult.not_found(key)
        if response.status_code != 200:
            return ResolveResult.io_error(key, f"HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            return ResolveResult.io_error(key, f"malformed response: {e}")
        if not isinstance(data, dict):
            return ResolveResult.io_error(key, "malformed response: not an object")

        try:
            return ResolveResult.ok(_parse_profile(data))
        except (ValueError, KeyError, TypeError, ValidationError) as e:
            logger.debug("Malformed profile for %r: %s", key, e)
            return ResolveResult.io_error(key, f"malformed response: {e}")


def _parse_profile(data: dict[str, Any]) -> Profile:
    """Build a Profile from a Mojang profile document."""
    extra = {k: v for k, v in data.items() if k not in _DROPPED_FIELDS}
    return Profile(uuid=UUID(hex=data["id"]), name=data["name"], **extra)
