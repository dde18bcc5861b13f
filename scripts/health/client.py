"""
scripts/health/client.py — Thin redis-py binding for talking to a sentinel.

Three operations, nothing else:
  connect(host, port, timeout)           -> redis.Redis (PING'd, so it is live)
  run_admin_command(conn, sub, *args)    -> raw SENTINEL reply
  query_info(conn, section=None)         -> INFO as a flat dict of strings

SENTINEL commands go through execute_command() with "SENTINEL" as a separate
argument so redis-py applies no response callback and the raw RESP reply
(flat token list, list of token lists, or None) reaches scripts.health.records.
"""

from __future__ import annotations

import logging
from typing import Any

import redis

logger = logging.getLogger(__name__)


def connect(
    host: str,
    port: int,
    timeout: float,
    password: str | None = None,
) -> redis.Redis:
    """Open a connection and PING it.

    Raises:
        redis.exceptions.ConnectionError: endpoint refused or unreachable.
        redis.exceptions.TimeoutError: no answer within ``timeout`` seconds.
        redis.exceptions.AuthenticationError: bad or missing password.
    """
    logger.debug("connecting to %s:%s (timeout %ss)", host, port, timeout)
    conn = redis.Redis(
        host=host,
        port=port,
        password=password,
        socket_timeout=timeout,
        socket_connect_timeout=timeout,
        decode_responses=True,
    )
    conn.ping()
    return conn


def run_admin_command(conn: redis.Redis, subcommand: str, *args: Any) -> Any:
    logger.debug("SENTINEL %s %s", subcommand, " ".join(str(a) for a in args))
    return conn.execute_command("SENTINEL", subcommand, *args)


def query_info(conn: redis.Redis, section: str | None = None) -> dict[str, str]:
    # redis-py parses numeric INFO values into int/float; callers compare strings
    raw = conn.info(section) if section else conn.info()
    return {key: str(value) for key, value in raw.items()}
