# tests/integration/store/test_int_store_lifecycle.py — v1
"""Integration: several sessions against one friends file, with threads.

Exercises facade -> store -> persistence end to end with a static resolver.
"""

from __future__ import annotations

import json
import threading
from uuid import UUID

import pytest

from playerbook.api.facade import open_store
from playerbook.config.settings import Settings
from playerbook.core.models import Affinity, Profile
from playerbook.resolver.static_resolver import StaticResolver

PLAYERS = [UUID(int=i) for i in range(1, 41)]


@pytest.fixture
def resolver() -> StaticResolver:
    return StaticResolver(
        Profile(uuid=u, name=f"player{i}", server="eu-1") for i, u in enumerate(PLAYERS)
    )


@pytest.mark.parametrize("atomic", [True, False])
def test_sessions_round_trip(friends_file, resolver, atomic):
    settings = Settings(_env_file=None, friends_file=friends_file, atomic_save=atomic)
    friends, enemies = PLAYERS[:10], PLAYERS[10:15]

    with open_store(settings, resolver) as store:
        store.import_by_identity(friends)
        store.import_by_identity(enemies, affinity=Affinity.ENEMY)
        store.declassify(friends[0])

    data = json.loads(friends_file.read_text(encoding="utf-8"))
    assert len(data) == 14
    assert data[str(enemies[0])]["affinity"] == "ENEMY"
    assert data[str(enemies[0])]["server"] == "eu-1"

    with open_store(settings, resolver) as store:
        assert len(store.only_friends()) == 9
        assert len(store.only_enemies()) == 5
        neutral = store.query(friends[0])
        assert neutral.affinity is Affinity.NEUTRAL
        assert neutral.name == "player0"


def test_concurrent_session(friends_file, resolver):
    settings = Settings(_env_file=None, friends_file=friends_file)
    errors: list[BaseException] = []

    with open_store(settings, resolver) as store:
        barrier = threading.Barrier(8)

        def worker(offset: int):
            try:
                barrier.wait()
                for i, identity in enumerate(PLAYERS):
                    store.query(identity)
                    if (i + offset) % 4 == 0:
                        store.classify(
                            Profile(uuid=identity, name=f"player{i}", affinity=Affinity.FRIEND)
                        )
                    if (i + offset) % 8 == 1:
                        store.save()
            except BaseException as e:  # noqa: BLE001 - collected for the main thread
                errors.append(e)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=30)

        assert errors == []
        classified = set(store.snapshot_durable())
        assert classified == set(PLAYERS)
        assert store.cached_count() == 0

    with open_store(settings, resolver) as store:
        assert set(store.snapshot_durable()) == set(PLAYERS)
