"""
scripts/health/master_health.py — Full health evaluation for one monitored master.

Asks the sentinel about the master, its replicas and its peer sentinels, then
applies the same liveness tests sentinel uses for failover eligibility:

  1. master flags       (o_down / s_down -> CRITICAL)
  2. replica counts     (known and healthy vs. warning/critical thresholds)
  3. sentinel counts    (known and healthy vs. warning/critical thresholds)
  4. quorum             (unset, unreachable, or not enough healthy sentinels)

Connecting and looking the master up are fatal on failure. Everything after
that runs as one all-or-nothing region: a command error anywhere in it
discards that region's findings and reports the error alone.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from redis.exceptions import RedisError, ResponseError

from scripts.health import CheckHalted, Severity, StatusAccumulator
from scripts.health import client
from scripts.health.liveness import count_healthy_replicas, count_sentinels
from scripts.health.records import (
    O_DOWN,
    S_DOWN,
    MasterRecord,
    ReplyShapeError,
    ThresholdPair,
    parse_master,
    parse_peer_sentinels,
    parse_replicas,
)

if TYPE_CHECKING:
    import redis

logger = logging.getLogger(__name__)


def run_check(
    host: str,
    port: int,
    timeout: float,
    master: str,
    warning: ThresholdPair,
    critical: ThresholdPair,
    password: str | None = None,
) -> StatusAccumulator:
    acc = StatusAccumulator()
    try:
        _evaluate(acc, host, port, timeout, master, warning, critical, password)
    except CheckHalted:
        pass
    return acc.finish()


def _evaluate(
    acc: StatusAccumulator,
    host: str,
    port: int,
    timeout: float,
    master: str,
    warning: ThresholdPair,
    critical: ThresholdPair,
    password: str | None,
) -> None:
    try:
        conn = client.connect(host, port, timeout, password)
    except RedisError as e:
        acc.halt(Severity.CRITICAL, f"could not connect to sentinel at {host}:{port}: {e}")

    try:
        record = _lookup_master(acc, conn, master)

        findings = StatusAccumulator()
        try:
            _evaluate_master(findings, conn, record, host, port, warning, critical)
        except (RedisError, ReplyShapeError) as e:
            acc.halt(Severity.CRITICAL, f"error checking master {master}: {e}")
        acc.merge(findings)
    finally:
        conn.close()


def _lookup_master(acc: StatusAccumulator, conn: redis.Redis, master: str) -> MasterRecord:
    try:
        record = parse_master(client.run_admin_command(conn, "master", master))
        return record if record.name else record.model_copy(update={"name": master})
    except ResponseError as e:
        acc.halt(Severity.CRITICAL, f"master {master} not recognized by sentinel: {e}")
    except ReplyShapeError:
        acc.halt(Severity.CRITICAL, f"master {master} not recognized by sentinel")
    except RedisError as e:
        acc.halt(Severity.CRITICAL, f"could not establish status of master {master}: {e}")


def _evaluate_master(
    acc: StatusAccumulator,
    conn: redis.Redis,
    record: MasterRecord,
    host: str,
    port: int,
    warning: ThresholdPair,
    critical: ThresholdPair,
) -> None:
    if O_DOWN in record.flags:
        acc.record(Severity.CRITICAL, f"master {record.name} is OBJECTIVELY DOWN")
    elif S_DOWN in record.flags:
        acc.record(Severity.CRITICAL, f"master {record.name} is SUBJECTIVELY DOWN")

    replicas = parse_replicas(client.run_admin_command(conn, "slaves", record.name))
    peers = parse_peer_sentinels(client.run_admin_command(conn, "sentinels", record.name))

    healthy_replicas = count_healthy_replicas(replicas)
    healthy_sentinels, known_sentinels = count_sentinels(peers, host, port)
    logger.debug(
        "master %s: %d/%d replicas healthy, %d/%d sentinels healthy, quorum %d",
        record.name,
        healthy_replicas,
        record.num_slaves,
        healthy_sentinels,
        known_sentinels,
        record.quorum,
    )

    check_counts(
        acc,
        "slaves",
        known=record.num_slaves,
        healthy=healthy_replicas,
        warn_threshold=warning.replicas,
        crit_threshold=critical.replicas,
    )
    check_counts(
        acc,
        "sentinels",
        known=known_sentinels,
        healthy=healthy_sentinels,
        warn_threshold=warning.sentinels,
        crit_threshold=critical.sentinels,
    )
    check_quorum(acc, record, healthy_sentinels)


def _breaches(count: int, threshold: int | None) -> bool:
    return threshold is not None and count <= threshold


def _threshold_gate(
    acc: StatusAccumulator,
    count: int,
    warn_threshold: int | None,
    crit_threshold: int | None,
    describe: str,
) -> bool:
    """Record CRITICAL or WARNING if ``count`` is at or below a threshold."""
    if _breaches(count, crit_threshold):
        acc.record(Severity.CRITICAL, f"{describe}, expected at least {crit_threshold + 1}")
        return True
    if _breaches(count, warn_threshold):
        acc.record(Severity.WARNING, f"{describe}, expected at least {warn_threshold + 1}")
        return True
    return False


def check_counts(
    acc: StatusAccumulator,
    noun: str,
    known: int,
    healthy: int,
    warn_threshold: int | None,
    crit_threshold: int | None,
) -> None:
    """Known-count gate then healthy-count gate; both can fire."""
    known_breached = _threshold_gate(
        acc, known, warn_threshold, crit_threshold, f"{known} {noun} known"
    )
    if not known_breached:
        acc.record(Severity.OK, f"{healthy}/{known} {noun} healthy")
    _threshold_gate(acc, healthy, warn_threshold, crit_threshold, f"{healthy} {noun} healthy")


def check_quorum(acc: StatusAccumulator, record: MasterRecord, healthy_sentinels: int) -> None:
    if record.quorum == 0:
        acc.record(Severity.CRITICAL, f"no quorum set for master {record.name}")
    elif record.num_sentinels < record.quorum:
        acc.record(
            Severity.CRITICAL,
            f"quorum not met, {record.num_sentinels} sentinels known for quorum {record.quorum}",
        )
    elif healthy_sentinels < record.quorum:
        acc.record(
            Severity.CRITICAL,
            f"not enough healthy sentinels for quorum, {healthy_sentinels} healthy "
            f"for quorum {record.quorum}",
        )
