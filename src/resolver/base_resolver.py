# src/resolver/base_resolver.py — v1
"""Abstract resolver interface and its explicit result type.

A resolver turns a player's UUID or name into a Profile. Implementations
never raise for lookup failures; they return ``ResolveResult.failed(...)``
so callers match on the result instead of catching exceptions.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from uuid import UUID

from playerbook.core.models import Profile, ResolutionFailure


@dataclass(frozen=True)
class ResolveResult:
    """Either a resolved profile or the failure that prevented it."""

    profile: Profile | None = None
    failure: ResolutionFailure | None = None

    @classmethod
    def ok(cls, profile: Profile) -> ResolveResult:
        return cls(profile=profile)

    @classmethod
    def failed(cls, failure: ResolutionFailure) -> ResolveResult:
        return cls(failure=failure)

    @classmethod
    def not_found(cls, key: str, message: str = "") -> ResolveResult:
        return cls(failure=ResolutionFailure(kind="not_found", key=key, message=message))

    @classmethod
    def io_error(cls, key: str, message: str = "") -> ResolveResult:
        return cls(failure=ResolutionFailure(kind="io_error", key=key, message=message))

    @property
    def is_ok(self) -> bool:
        return self.profile is not None


class BaseResolver(ABC):
    """Unified interface for profile lookup backends."""

    @abstractmethod
    def resolve_by_identity(self, identity: UUID) -> ResolveResult:
        """Look up a player by UUID."""

    @abstractmethod
    def resolve_by_name(self, name: str) -> ResolveResult:
        """Look up a player by in-game name."""

    @property
    @abstractmethod
    def backend_name(self) -> str:
        """Short backend identifier (for logs)."""

    def close(self) -> None:
        """Release resources held by the backend. No-op by default."""
