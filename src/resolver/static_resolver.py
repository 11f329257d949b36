# src/resolver/static_resolver.py — v1
"""In-memory resolver backed by a fixed registry of known players.

Used offline and in tests. Every lookup returns a fresh copy so the
caller owns the profile it receives.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable
from uuid import UUID

from pydantic import ValidationError

from playerbook.core.models import Profile
from playerbook.resolver.base_resolver import BaseResolver, ResolveResult

logger = logging.getLogger(__name__)


class StaticResolver(BaseResolver):
    """Resolve players from a registry loaded up front."""

    def __init__(self, profiles: Iterable[Profile] = ()) -> None:
        self._by_uuid: dict[UUID, Profile] = {}
        self._by_name: dict[str, Profile] = {}
        for profile in profiles:
            self.register(profile)

    @classmethod
    def from_file(cls, path: str | Path) -> StaticResolver:
        """Build a registry from a JSON list of profile objects.

        Raises:
            OSError: If the file cannot be read.
            ValueError: If the content is not a list of valid profiles.
        """
        raw: Any = json.loads(Path(path).expanduser().read_text(encoding="utf-8"))
        if not isinstance(raw, list):
            raise ValueError(f"Expected a JSON list of profiles in {path}")
        try:
            profiles = [Profile.model_validate(item) for item in raw]
        except ValidationError as e:
            raise ValueError(f"Invalid profile in {path}: {e}") from e
        logger.info("Loaded %d static profiles from %s", len(profiles), path)
        return cls(profiles)

    @property
    def backend_name(self) -> str:
        return "static"

    def register(self, profile: Profile) -> None:
        """Add or replace a known player."""
        self._by_uuid[profile.uuid] = profile
        if profile.name:
            self._by_name[profile.name.lower()] = profile

    def resolve_by_identity(self, identity: UUID) -> ResolveResult:
        profile = self._by_uuid.get(identity)
        if profile is None:
            return ResolveResult.not_found(str(identity))
        return ResolveResult.ok(profile.model_copy(deep=True))

    def resolve_by_name(self, name: str) -> ResolveResult:
        profile = self._by_name.get(name.lower())
        if profile is None:
            return ResolveResult.not_found(name)
        return ResolveResult.ok(profile.model_copy(deep=True))
