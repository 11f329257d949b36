# src/store/relationship_store.py — v1
"""Relationship store: declared affinities plus an on-demand resolution cache.

Two maps are kept:

- ``durable``: players the user explicitly classified as FRIEND or ENEMY.
  Written to the friends file by ``save()``.
- ``volatile``: players looked up through the resolver but never
  classified. Always NEUTRAL, never persisted, empty at start.

A player is in at most one of the two maps. Moves between them happen
under one short store-wide lock, so no reader sees a player in both or in
neither. The resolver is never called with that lock held; concurrent
lookups of the same unknown player share a single resolver call through a
per-player lock.
"""

from __future__ import annotations

import logging
import threading
from types import MappingProxyType
from typing import Iterable, Mapping
from uuid import UUID

from playerbook.core.models import Affinity, ImportResult, Profile
from playerbook.logging.context import operation_context
from playerbook.resolver.base_resolver import BaseResolver, ResolveResult
from playerbook.store.concurrency import KeyedLock
from playerbook.store.persistence import PersistenceFailure, ProfileFile

logger = logging.getLogger(__name__)


class RelationshipStore:
    """Thread-safe store of the local user's relationships to other players."""

    def __init__(self, resolver: BaseResolver, profile_file: ProfileFile) -> None:
        self._resolver = resolver
        self._file = profile_file
        self._lock = threading.Lock()
        self._resolving = KeyedLock()
        self._durable: dict[UUID, Profile] = {}
        self._volatile: dict[UUID, Profile] = {}
        self._closed = False

    # --- Lifecycle ---

    def open(self) -> RelationshipStore:
        """Load the friends file. Returns self for chaining."""
        self.load()
        self._closed = False
        return self

    def close(self) -> None:
        """Flush the durable map. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self.save()

    def __enter__(self) -> RelationshipStore:
        return self.open()

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # --- Persistence ---

    def load(self) -> bool:
        """Merge the friends file into the durable map.

        A missing file is created empty first. Failures are logged and the
        durable map is left untouched.
        """
        with operation_context("load"):
            if not self._file.exists():
                logger.info("No friends file at %s, creating one", self._file.path)
                self.save()
            try:
                loaded = self._file.read()
            except PersistenceFailure:
                logger.critical("Failed to load %s!", self._file.path, exc_info=True)
                return False

            with self._lock:
                for identity, profile in loaded.items():
                    self._volatile.pop(identity, None)
                    self._durable[identity] = profile
            logger.info("Loaded %d profiles from %s", len(loaded), self._file.path)
            return True

    def save(self) -> bool:
        """Write a snapshot of the durable map. Failures are logged, not raised."""
        with operation_context("save"):
            snapshot = self._copy_durable()
            try:
                self._file.write(snapshot)
            except PersistenceFailure:
                logger.critical("Failed to save %s!", self._file.path, exc_info=True)
                return False
            logger.debug("Saved %d profiles to %s", len(snapshot), self._file.path)
            return True

    # --- Lookup ---

    def query(self, identity: UUID, refresh: bool = False) -> Profile:
        """Return the profile for ``identity``; never fails.

        Classified players come from the durable map. Anyone else is
        resolved once and cached as NEUTRAL; if resolution fails a neutral
        placeholder is cached instead. ``refresh=True`` discards a cached
        resolution first (classified players are never re-resolved).
        """
        if refresh:
            self.forget(identity)
        with self._lock:
            profile = self._lookup(identity)
        if profile is not None:
            return profile
        return self._resolve_if_absent(identity)

    def forget(self, identity: UUID) -> bool:
        """Drop a cached resolution. Returns True if one was dropped."""
        with self._lock:
            return self._volatile.pop(identity, None) is not None

    def _lookup(self, identity: UUID) -> Profile | None:
        # Caller holds self._lock
        profile = self._durable.get(identity)
        if profile is None:
            profile = self._volatile.get(identity)
        return profile

    def _resolve_if_absent(self, identity: UUID) -> Profile:
        """Compute-if-absent on the volatile cache, one resolver call per player."""
        with self._resolving.hold(identity):
            with self._lock:
                existing = self._lookup(identity)
            if existing is not None:
                return existing

            profile = self._profile_from(self._resolver.resolve_by_identity(identity), identity)

            with self._lock:
                # Classified while we were resolving: that entry wins
                existing = self._lookup(identity)
                if existing is not None:
                    return existing
                self._volatile[identity] = profile
            return profile

    @staticmethod
    def _profile_from(result: ResolveResult, identity: UUID) -> Profile:
        if result.profile is not None:
            profile = result.profile
            if profile.uuid == identity:
                profile.affinity = Affinity.NEUTRAL
                return profile
            logger.warning(
                "Resolver returned %s when asked for %s", profile.uuid, identity,
                extra={"player": identity},
            )
        else:
            logger.debug(
                "Could not resolve %s: %s", identity, result.failure, extra={"player": identity}
            )
        return Profile.placeholder(identity)

    # --- Classification ---

    def classify(self, profile: Profile) -> Profile:
        """Store ``profile`` as the player's declared relationship.

        Last writer wins; any cached resolution for the player is dropped.
        A NEUTRAL profile is not a classification: it replaces whatever the
        store holds for that player in the volatile cache instead.
        """
        identity = profile.uuid
        with self._lock:
            if profile.affinity is Affinity.NEUTRAL:
                self._durable.pop(identity, None)
                self._volatile[identity] = profile
            else:
                self._durable[identity] = profile
                self._volatile.pop(identity, None)
        logger.debug(
            "Classified %s as %s", profile.name or identity, profile.affinity.value,
            extra={"player": identity},
        )
        return profile

    def declassify(self, identity: UUID) -> Profile | None:
        """Move a classified player back to the cache as NEUTRAL.

        The same profile object is kept, so its metadata survives. Returns
        None if the player was not classified.
        """
        with self._lock:
            profile = self._durable.pop(identity, None)
            if profile is None:
                return None
            profile.affinity = Affinity.NEUTRAL
            self._volatile[identity] = profile
        logger.debug("Declassified %s", profile.name or identity, extra={"player": identity})
        return profile

    # --- Derived reads ---

    def affinity_of(self, identity: UUID) -> Affinity:
        return self.query(identity).affinity

    def is_friend(self, identity: UUID) -> bool:
        return self.affinity_of(identity) is Affinity.FRIEND

    def is_enemy(self, identity: UUID) -> bool:
        return self.affinity_of(identity) is Affinity.ENEMY

    def is_neutral_or_unknown(self, identity: UUID) -> bool:
        return self.affinity_of(identity).is_neutral_or_weaker()

    def is_classified(self, identity: UUID) -> bool:
        """True if the player is in the durable map. Never resolves."""
        with self._lock:
            return identity in self._durable

    def snapshot_durable(self) -> Mapping[UUID, Profile]:
        """Read-only copy of the durable map at call time."""
        return MappingProxyType(self._copy_durable())

    def all_classified(self, only_friends: bool = False) -> list[Profile]:
        """All classified profiles, or just the friends."""
        profiles = self._copy_durable().values()
        if only_friends:
            return [p for p in profiles if p.affinity is Affinity.FRIEND]
        return list(profiles)

    def only_friends(self) -> list[Profile]:
        return self.all_classified(only_friends=True)

    def only_enemies(self) -> list[Profile]:
        return [p for p in self.all_classified() if p.affinity is Affinity.ENEMY]

    def cached_count(self) -> int:
        """Number of resolved-but-unclassified players held in memory."""
        with self._lock:
            return len(self._volatile)

    def __len__(self) -> int:
        with self._lock:
            return len(self._durable)

    def __contains__(self, identity: object) -> bool:
        with self._lock:
            return identity in self._durable

    def _copy_durable(self) -> dict[UUID, Profile]:
        """Detached copies, so later declassify() calls cannot reach them."""
        with self._lock:
            return {k: p.model_copy(deep=True) for k, p in self._durable.items()}

    # --- Bulk import ---

    def import_by_name(
        self, names: Iterable[str], affinity: Affinity = Affinity.FRIEND
    ) -> list[ImportResult]:
        """Resolve each name and classify it. Failures are skipped, not rolled back."""
        with operation_context("import_by_name", batch=True):
            return [
                self._import_one(name, self._resolver.resolve_by_name(name), affinity)
                for name in names
            ]

    def import_by_identity(
        self, identities: Iterable[UUID], affinity: Affinity = Affinity.FRIEND
    ) -> list[ImportResult]:
        """Resolve each UUID and classify it. Failures are skipped, not rolled back."""
        with operation_context("import_by_identity", batch=True):
            return [
                self._import_one(
                    str(identity), self._resolver.resolve_by_identity(identity), affinity
                )
                for identity in identities
            ]

    def _import_one(
        self, key: str, result: ResolveResult, affinity: Affinity
    ) -> ImportResult:
        if result.profile is None:
            logger.warning("Skipping %r: %s", key, result.failure, extra={"player": key})
            return ImportResult(key=key, status="failed", failure=result.failure)

        profile = result.profile
        profile.affinity = affinity
        stored = self.classify(profile)
        logger.info("Imported %r as %s", key, affinity.value, extra={"player": stored.uuid})
        return ImportResult(key=key, status="imported", profile=stored)
