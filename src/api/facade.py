# src/api/facade.py — v2
"""Public API facade — build, open and flush a relationship store.

Usage:
    from playerbook.api.facade import open_store
    with open_store() as store:
        store.is_friend(uuid)

The store is flushed to the friends file when the block exits, whether it
exits normally or through an exception.
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Iterator

from playerbook.config.settings import Settings
from playerbook.resolver.base_resolver import BaseResolver
from playerbook.resolver.resolver_factory import create_resolver
from playerbook.store.persistence import ProfileFile
from playerbook.store.relationship_store import RelationshipStore
from playerbook.version import __version__

logger = logging.getLogger(__name__)


def build_store(
    settings: Settings | None = None,
    resolver: BaseResolver | None = None,
) -> RelationshipStore:
    """Construct an unopened store from settings.

    Args:
        settings: Global settings. Loaded from .env if None.
        resolver: Resolver to use. Built from settings if None.
    """
    settings = settings or Settings()
    resolver = resolver or create_resolver(settings)
    profile_file = ProfileFile(settings.friends_path, atomic=settings.atomic_save)
    return RelationshipStore(resolver, profile_file)


@contextmanager
def open_store(
    settings: Settings | None = None,
    resolver: BaseResolver | None = None,
) -> Iterator[RelationshipStore]:
    """Open a store for the duration of the block, saving it on exit.

    A resolver built here from settings is closed with the store; a
    resolver passed in belongs to the caller and is left open.
    """
    t0 = time.monotonic()
    logger.info("Using playerbook %s", __version__)
    settings = settings or Settings()
    owned = resolver is None
    if resolver is None:
        resolver = create_resolver(settings)
    try:
        store = build_store(settings, resolver)
        store.open()
        logger.info(
            "Store opened in %dms (%d classified)",
            int((time.monotonic() - t0) * 1000), len(store),
        )
        try:
            yield store
        finally:
            store.close()
    finally:
        if owned:
            resolver.close()
