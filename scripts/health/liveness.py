"""
scripts/health/liveness.py — The same per-instance health tests sentinel
applies when choosing a failover candidate.

Sentinel peers only carry flags, so their test is narrower than the replica
test (no priority, no ping recency).
"""

from __future__ import annotations

from collections.abc import Iterable

from scripts.health.records import (
    DISCONNECTED,
    O_DOWN,
    S_DOWN,
    PeerSentinelRecord,
    ReplicaRecord,
)

MAX_PING_REPLY_AGE_MS = 5000
UNHEALTHY_FLAGS = frozenset({O_DOWN, S_DOWN, DISCONNECTED})


def replica_is_healthy(replica: ReplicaRecord) -> bool:
    return (
        not (replica.flags & UNHEALTHY_FLAGS)
        and replica.priority > 0
        and replica.last_ok_ping_reply_ms < MAX_PING_REPLY_AGE_MS
    )


def sentinel_is_healthy(peer: PeerSentinelRecord) -> bool:
    return not (peer.flags & UNHEALTHY_FLAGS)


def count_healthy_replicas(replicas: Iterable[ReplicaRecord]) -> int:
    return sum(1 for r in replicas if replica_is_healthy(r))


def count_sentinels(
    peers: Iterable[PeerSentinelRecord],
    local_host: str,
    local_port: int,
) -> tuple[int, int]:
    """Return (healthy, known) sentinel counts including the local instance.

    The answering sentinel never appears in its own SENTINELS reply; it is
    added exactly once. A peer entry at the local address is skipped so it
    cannot be counted twice.
    """
    healthy = known = 1
    for peer in peers:
        if peer.is_at(local_host, local_port):
            continue
        known += 1
        if sentinel_is_healthy(peer):
            healthy += 1
    return healthy, known
