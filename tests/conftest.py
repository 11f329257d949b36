# tests/conftest.py — v2
"""Shared test fixtures for all unit and integration tests.

Provides sample profiles, an in-memory resolver, a call-counting resolver
and a store bound to a temp friends file. No network access.
"""

from __future__ import annotations

import threading
from pathlib import Path
from uuid import UUID

import pytest

from playerbook.core.models import Affinity, Profile
from playerbook.resolver.base_resolver import BaseResolver, ResolveResult
from playerbook.resolver.static_resolver import StaticResolver
from playerbook.store.persistence import ProfileFile
from playerbook.store.relationship_store import RelationshipStore

NOTCH = UUID("069a79f4-44e9-4726-a5be-fca90e38aaf5")
JEB = UUID("853c80ef-3c37-49fd-aa49-938b674adae6")
DINNERBONE = UUID("61699b2e-d327-4a01-9f1e-0ea8c3f06bc6")
UNKNOWN = UUID("00000000-0000-0000-0000-00000000002a")


class CountingResolver(BaseResolver):
    """Wraps another resolver and counts identity lookups.

    ``gate`` (if set) blocks every identity lookup until released, which
    lets tests pile up concurrent callers behind one resolution.
    """

    def __init__(self, inner: BaseResolver, gate: threading.Event | None = None) -> None:
        self.inner = inner
        self.gate = gate
        self.identity_calls: list[UUID] = []
        self.name_calls: list[str] = []
        self._lock = threading.Lock()

    @property
    def backend_name(self) -> str:
        return "counting"

    def resolve_by_identity(self, identity: UUID) -> ResolveResult:
        with self._lock:
            self.identity_calls.append(identity)
        if self.gate is not None:
            self.gate.wait(timeout=5)
        return self.inner.resolve_by_identity(identity)

    def resolve_by_name(self, name: str) -> ResolveResult:
        with self._lock:
            self.name_calls.append(name)
        return self.inner.resolve_by_name(name)


# === FIXTURES: Sample data ===


@pytest.fixture
def notch_profile() -> Profile:
    return Profile(uuid=NOTCH, name="Notch", skin="classic")


@pytest.fixture
def known_profiles() -> list[Profile]:
    return [
        Profile(uuid=NOTCH, name="Notch", skin="classic"),
        Profile(uuid=JEB, name="jeb_", skin="slim"),
        Profile(uuid=DINNERBONE, name="Dinnerbone"),
    ]


# === FIXTURES: Resolvers ===


@pytest.fixture
def static_resolver(known_profiles: list[Profile]) -> StaticResolver:
    return StaticResolver(known_profiles)


@pytest.fixture
def counting_resolver(static_resolver: StaticResolver) -> CountingResolver:
    return CountingResolver(static_resolver)


# === FIXTURES: Store ===


@pytest.fixture
def friends_file(tmp_path: Path) -> Path:
    return tmp_path / ".friends.json"


@pytest.fixture
def profile_file(friends_file: Path) -> ProfileFile:
    return ProfileFile(friends_file)


@pytest.fixture
def store(counting_resolver: CountingResolver, profile_file: ProfileFile) -> RelationshipStore:
    return RelationshipStore(counting_resolver, profile_file)


@pytest.fixture
def friend(notch_profile: Profile) -> Profile:
    return notch_profile.model_copy(update={"affinity": Affinity.FRIEND})


@pytest.fixture
def gate() -> threading.Event:
    return threading.Event()


@pytest.fixture
def gated_resolver(static_resolver: StaticResolver, gate: threading.Event) -> CountingResolver:
    """Counting resolver whose identity lookups wait for ``gate``."""
    return CountingResolver(static_resolver, gate=gate)
