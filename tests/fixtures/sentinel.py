"""In-memory stand-in for sentinel and data nodes, patched over redis.Redis.

Each FakeNode answers PING, SENTINEL <sub> <args...> and INFO from canned
replies, so scripts.health.client runs unchanged against it. Any address
with no registered node refuses connections the way redis-py reports it.

Reply builders produce the flat alternating key/value token lists sentinel
actually sends (RESP2, decode_responses=True).
"""

from __future__ import annotations

from typing import Any

from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import ResponseError


def _flat(fields: dict[str, Any]) -> list[str]:
    out: list[str] = []
    for key, value in fields.items():
        out.extend([key, str(value)])
    return out


def master_reply(
    name: str = "mymaster",
    quorum: Any = 2,
    num_slaves: Any = 2,
    num_other_sentinels: Any = 2,
    flags: str = "master",
) -> list[str]:
    return _flat(
        {
            "name": name,
            "ip": "10.0.0.10",
            "port": 6379,
            "runid": "a" * 40,
            "flags": flags,
            "num-slaves": num_slaves,
            "num-other-sentinels": num_other_sentinels,
            "quorum": quorum,
        }
    )


def replica_reply(
    ip: str = "10.0.0.11",
    port: int = 6379,
    flags: str = "slave",
    priority: Any = 100,
    last_ok_ping_reply: Any = 250,
) -> list[str]:
    return _flat(
        {
            "name": f"{ip}:{port}",
            "ip": ip,
            "port": port,
            "flags": flags,
            "last-ok-ping-reply": last_ok_ping_reply,
            "master-link-status": "ok",
            "slave-priority": priority,
        }
    )


def peer_reply(
    ip: str = "10.0.0.21",
    port: int = 26379,
    flags: str = "sentinel",
    runid: str = "b" * 40,
) -> list[str]:
    return _flat(
        {
            "name": runid,
            "ip": ip,
            "port": port,
            "runid": runid,
            "flags": flags,
            "last-ok-ping-reply": 300,
        }
    )


class FakeNode:
    def __init__(
        self,
        commands: dict[tuple[str, ...], Any] | None = None,
        info: dict[str, Any] | Exception | None = None,
        ping_error: Exception | None = None,
    ) -> None:
        self.commands = {tuple(a.lower() for a in k): v for k, v in (commands or {}).items()}
        self.info_data = info if info is not None else {}
        self.ping_error = ping_error
        self.calls: list[tuple[str, ...]] = []
        self.closed = False
        self.password: str | None = None

    def ping(self) -> bool:
        if self.ping_error is not None:
            raise self.ping_error
        return True

    def execute_command(self, *args: Any) -> Any:
        call = tuple(str(a) for a in args)
        self.calls.append(call)
        key = tuple(a.lower() for a in call[1:])
        if key not in self.commands:
            # sentinel's own answer for an unknown master name
            raise ResponseError("No such master with that name")
        reply = self.commands[key]
        if isinstance(reply, Exception):
            raise reply
        return reply

    def info(self, section: str | None = None) -> dict[str, Any]:
        self.calls.append(("INFO",) + ((section,) if section else ()))
        if isinstance(self.info_data, Exception):
            raise self.info_data
        return dict(self.info_data)

    def close(self) -> None:
        self.closed = True


class FakeNetwork:
    """Registry of FakeNodes by address; the callable replaces redis.Redis."""

    def __init__(self) -> None:
        self.nodes: dict[tuple[str, int], FakeNode] = {}
        self.connect_kwargs: list[dict[str, Any]] = []

    def add(self, host: str, port: int, node: FakeNode) -> FakeNode:
        self.nodes[(host, port)] = node
        return node

    def __call__(self, host: str = "localhost", port: int = 6379, **kwargs: Any) -> FakeNode:
        self.connect_kwargs.append({"host": host, "port": port, **kwargs})
        node = self.nodes.get((host, port))
        if node is None:
            node = FakeNode(
                ping_error=RedisConnectionError(
                    f"Error 111 connecting to {host}:{port}. Connection refused."
                )
            )
        node.password = kwargs.get("password")
        return node


def healthy_sentinel(master: str = "mymaster", **master_overrides: Any) -> FakeNode:
    """A sentinel watching ``master`` with 2 healthy replicas and 2 healthy peers."""
    return FakeNode(
        commands={
            ("master", master): master_reply(name=master, **master_overrides),
            ("slaves", master): [
                replica_reply(ip="10.0.0.11"),
                replica_reply(ip="10.0.0.12"),
            ],
            ("sentinels", master): [
                peer_reply(ip="10.0.0.21", runid="b" * 40),
                peer_reply(ip="10.0.0.22", runid="c" * 40),
            ],
        }
    )
