"""Unit tests for scripts.health.liveness predicates — no network needed."""

from __future__ import annotations

import pytest

from scripts.health.liveness import (
    count_healthy_replicas,
    count_sentinels,
    replica_is_healthy,
    sentinel_is_healthy,
)
from scripts.health.records import PeerSentinelRecord, ReplicaRecord


def _replica(**overrides) -> ReplicaRecord:
    base = {"flags": "slave", "priority": 100, "last_ok_ping_reply_ms": 200}
    base.update(overrides)
    return ReplicaRecord(**base)


def _peer(**overrides) -> PeerSentinelRecord:
    base = {"ip": "10.0.0.21", "port": 26379, "flags": "sentinel"}
    base.update(overrides)
    return PeerSentinelRecord(**base)


# ---------------------------------------------------------------------------
# Replicas
# ---------------------------------------------------------------------------


def test_replica_healthy_baseline():
    assert replica_is_healthy(_replica())


@pytest.mark.parametrize("flag", ["o_down", "s_down", "disconnected"])
def test_replica_unhealthy_flag(flag):
    assert not replica_is_healthy(_replica(flags=f"slave,{flag}"))


@pytest.mark.parametrize(
    "flags, ping",
    [("slave", 0), ("slave", 4999), ("slave,promoted", 100)],
)
def test_replica_priority_zero_always_unhealthy(flags, ping):
    assert not replica_is_healthy(_replica(flags=flags, priority=0, last_ok_ping_reply_ms=ping))


def test_replica_negative_priority_unhealthy():
    assert not replica_is_healthy(_replica(priority=-1))


def test_replica_ping_boundary():
    assert replica_is_healthy(_replica(last_ok_ping_reply_ms=4999))
    assert not replica_is_healthy(_replica(last_ok_ping_reply_ms=5000))


def test_count_healthy_replicas():
    replicas = [
        _replica(),
        _replica(priority=0),
        _replica(flags="slave,s_down"),
        _replica(last_ok_ping_reply_ms=12000),
        _replica(),
    ]
    assert count_healthy_replicas(replicas) == 2


# ---------------------------------------------------------------------------
# Sentinels
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("flag", ["o_down", "s_down", "disconnected"])
def test_sentinel_unhealthy_flag(flag):
    assert not sentinel_is_healthy(_peer(flags=f"sentinel,{flag}"))


def test_sentinel_healthy_baseline():
    assert sentinel_is_healthy(_peer())


def test_local_sentinel_counted_once_with_no_peers():
    assert count_sentinels([], "127.0.0.1", 26379) == (1, 1)


def test_local_sentinel_added_to_healthy_and_known():
    peers = [_peer(ip="10.0.0.21"), _peer(ip="10.0.0.22", flags="sentinel,s_down")]
    assert count_sentinels(peers, "10.0.0.20", 26379) == (2, 3)


def test_local_sentinel_in_peer_list_not_duplicated():
    peers = [_peer(ip="10.0.0.20", port=26379), _peer(ip="10.0.0.21")]
    assert count_sentinels(peers, "10.0.0.20", 26379) == (2, 2)
