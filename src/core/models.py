# src/core/models.py — v2
"""Shared Pydantic domain models: Affinity, Profile, ResolutionFailure, ImportResult.

No module redefines these types — all imports come from core.models.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


# === AFFINITY ===


class Affinity(str, Enum):
    """Relationship the local user declared toward a player."""

    FRIEND = "FRIEND"
    ENEMY = "ENEMY"
    NEUTRAL = "NEUTRAL"

    @property
    def weight(self) -> int:
        """Position in the total order ENEMY < NEUTRAL < FRIEND."""
        return _WEIGHTS[self]

    @property
    def is_classified(self) -> bool:
        return self is not Affinity.NEUTRAL

    def is_neutral_or_weaker(self) -> bool:
        """True for everything short of FRIEND."""
        return self.weight <= Affinity.NEUTRAL.weight


_WEIGHTS: dict[Affinity, int] = {
    Affinity.ENEMY: 0,
    Affinity.NEUTRAL: 1,
    Affinity.FRIEND: 2,
}


# === PROFILE ===


class Profile(BaseModel):
    """A player's identity, declared affinity and resolver-supplied metadata.

    Extra fields returned by a resolver are kept as-is and written back to
    the friends file untouched.
    """

    model_config = ConfigDict(extra="allow", validate_assignment=True)

    uuid: UUID = Field(frozen=True)
    name: str = ""
    affinity: Affinity = Affinity.NEUTRAL

    @classmethod
    def placeholder(cls, uuid: UUID) -> Profile:
        """Neutral stand-in used when a player cannot be resolved."""
        return cls(uuid=uuid)

    @property
    def metadata(self) -> dict[str, Any]:
        """Resolver-supplied fields: the name plus any extra fields."""
        meta: dict[str, Any] = {"name": self.name}
        meta.update(self.model_extra or {})
        return meta

    @property
    def is_friend(self) -> bool:
        return self.affinity is Affinity.FRIEND

    @property
    def is_enemy(self) -> bool:
        return self.affinity is Affinity.ENEMY


# === RESOLUTION / BULK IMPORT ===


class ResolutionFailure(BaseModel):
    """Why a resolver could not produce a profile for a name or identity."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["not_found", "io_error", "invalid"]
    key: str
    message: str = ""

    def __str__(self) -> str:
        text = f"{self.kind} for {self.key!r}"
        return f"{text}: {self.message}" if self.message else text


class ImportResult(BaseModel):
    """Outcome of importing a single name or identity."""

    key: str
    status: Literal["imported", "failed"]
    profile: Profile | None = None
    failure: ResolutionFailure | None = None

    @property
    def ok(self) -> bool:
        return self.status == "imported"
