"""
scripts/health/sentinel_liveness.py — Is the sentinel itself up and trustworthy?

Reads the sentinel section of INFO:
  sentinel_masters  absent -> not running in sentinel mode
  sentinel_tilt     any value other than "0" -> TILT mode, judgments unreliable
  sentinel_masters  "0"    -> monitoring nothing
"""

from __future__ import annotations

from redis.exceptions import RedisError

from scripts.health import CheckHalted, Severity, StatusAccumulator
from scripts.health import client


def run_check(
    host: str,
    port: int,
    timeout: float,
    password: str | None = None,
) -> StatusAccumulator:
    acc = StatusAccumulator()
    try:
        _probe(acc, host, port, timeout, password)
    except CheckHalted:
        pass
    return acc.finish()


def _probe(
    acc: StatusAccumulator,
    host: str,
    port: int,
    timeout: float,
    password: str | None,
) -> None:
    try:
        conn = client.connect(host, port, timeout, password)
    except RedisError as e:
        acc.halt(Severity.CRITICAL, f"could not connect to sentinel at {host}:{port}: {e}")

    try:
        info = client.query_info(conn)
    except RedisError as e:
        acc.halt(Severity.CRITICAL, f"could not query sentinel at {host}:{port}: {e}")
    finally:
        conn.close()

    evaluate_info(acc, info, f"{host}:{port}")


def evaluate_info(acc: StatusAccumulator, info: dict[str, str], where: str) -> None:
    masters = info.get("sentinel_masters")
    if masters is None:
        acc.halt(Severity.CRITICAL, f"{where} is not running in sentinel mode")

    tilt = info.get("sentinel_tilt")
    if tilt is not None and tilt != "0":
        acc.record(Severity.CRITICAL, f"sentinel at {where} entered TILT mode")

    if masters == "0":
        acc.record(Severity.CRITICAL, f"sentinel at {where} is monitoring no masters")
    else:
        acc.record(Severity.OK, f"sentinel at {where} is monitoring {masters} masters")
