"""
scripts/health/master_reachability.py — Is the master sentinel points at alive?

Resolves the master's address through the sentinel, connects to it directly
and checks it still reports role:master. Every failure is fatal.
"""

from __future__ import annotations

from redis.exceptions import RedisError

from scripts.health import CheckHalted, Severity, StatusAccumulator
from scripts.health import client
from scripts.health.records import ReplyShapeError, parse_master_address


def run_check(
    host: str,
    port: int,
    timeout: float,
    master: str,
    password: str | None = None,
) -> StatusAccumulator:
    acc = StatusAccumulator()
    try:
        _probe(acc, host, port, timeout, master, password)
    except CheckHalted:
        pass
    return acc.finish()


def _resolve(
    acc: StatusAccumulator,
    host: str,
    port: int,
    timeout: float,
    master: str,
    password: str | None,
) -> tuple[str, int]:
    try:
        conn = client.connect(host, port, timeout, password)
    except RedisError as e:
        acc.halt(Severity.CRITICAL, f"could not connect to sentinel at {host}:{port}: {e}")

    try:
        address = parse_master_address(
            client.run_admin_command(conn, "get-master-addr-by-name", master)
        )
    except (RedisError, ReplyShapeError) as e:
        acc.halt(Severity.CRITICAL, f"could not resolve master {master}: {e}")
    finally:
        conn.close()

    if address is None:
        acc.halt(Severity.CRITICAL, f"sentinel returned no address for master {master}")
    return address


def _probe(
    acc: StatusAccumulator,
    host: str,
    port: int,
    timeout: float,
    master: str,
    password: str | None,
) -> None:
    master_host, master_port = _resolve(acc, host, port, timeout, master, password)

    # the sentinel password does not apply to data nodes
    try:
        conn = client.connect(master_host, master_port, timeout)
    except RedisError as e:
        acc.halt(
            Severity.CRITICAL,
            f"could not connect to master {master} at {master_host}:{master_port}: {e}",
        )

    try:
        role = client.query_info(conn, "replication").get("role")
    except RedisError as e:
        acc.halt(Severity.CRITICAL, f"could not query master {master} role: {e}")
    finally:
        conn.close()

    if role != "master":
        acc.record(
            Severity.CRITICAL,
            f"{master_host}:{master_port} reports role {role or 'unknown'}, expected master",
        )
    else:
        acc.record(Severity.OK, f"master {master} reachable at {master_host}:{master_port}")
