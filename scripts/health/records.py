"""
scripts/health/records.py — Typed records decoded from raw SENTINEL replies.

Sentinel answers SENTINEL MASTER / SLAVES / SENTINELS with flat alternating
key/value token lists (or a list of them). Decoding is split in two tiers:

  - shape errors (nil reply, odd token count, non-list entry) raise
    ReplyShapeError; callers decide how to classify them.
  - value errors (a numeric field that is present but not an integer)
    degrade to 0 so a malformed field never crashes the check.

Threshold pairs ("<replicas>,<sentinels>") live here too since they are the
other typed input the evaluator consumes.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

logger = logging.getLogger(__name__)

O_DOWN = "o_down"
S_DOWN = "s_down"
DISCONNECTED = "disconnected"


class ReplyShapeError(ValueError):
    """The reply is not a key/value token list (or a list of them)."""


def _to_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.debug("non-integer field value %r, using 0", value)
        return 0


def _to_flags(value: Any) -> frozenset[str]:
    if value is None:
        return frozenset()
    if isinstance(value, (set, frozenset, list, tuple)):
        return frozenset(str(v).strip() for v in value if str(v).strip())
    return frozenset(token.strip() for token in str(value).split(",") if token.strip())


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class MasterRecord(_Record):
    name: str = ""
    quorum: int = 0
    num_slaves: int = 0
    num_other_sentinels: int = 0
    flags: frozenset[str] = frozenset()

    @field_validator("quorum", "num_slaves", "num_other_sentinels", mode="before")
    @classmethod
    def lenient_int(cls, v: Any) -> int:
        return _to_int(v)

    @field_validator("flags", mode="before")
    @classmethod
    def split_flags(cls, v: Any) -> frozenset[str]:
        return _to_flags(v)

    @property
    def num_sentinels(self) -> int:
        """Sentinels watching this master, including the one that answered."""
        return self.num_other_sentinels + 1


class ReplicaRecord(_Record):
    ip: str = ""
    port: int = 0
    flags: frozenset[str] = frozenset()
    priority: int = 0
    last_ok_ping_reply_ms: int = 0

    @field_validator("port", "priority", "last_ok_ping_reply_ms", mode="before")
    @classmethod
    def lenient_int(cls, v: Any) -> int:
        return _to_int(v)

    @field_validator("flags", mode="before")
    @classmethod
    def split_flags(cls, v: Any) -> frozenset[str]:
        return _to_flags(v)


class PeerSentinelRecord(_Record):
    ip: str = ""
    port: int = 0
    runid: str = ""
    flags: frozenset[str] = frozenset()

    @field_validator("port", mode="before")
    @classmethod
    def lenient_int(cls, v: Any) -> int:
        return _to_int(v)

    @field_validator("flags", mode="before")
    @classmethod
    def split_flags(cls, v: Any) -> frozenset[str]:
        return _to_flags(v)

    def is_at(self, host: str, port: int) -> bool:
        return self.ip == host and self.port == port


# -----------------------------------------------------------------------------
# Reply decoding
# -----------------------------------------------------------------------------

# sentinel reply key -> record field
_MASTER_FIELDS = {
    "name": "name",
    "quorum": "quorum",
    "num-slaves": "num_slaves",
    "num-other-sentinels": "num_other_sentinels",
    "flags": "flags",
}
_REPLICA_FIELDS = {
    "ip": "ip",
    "port": "port",
    "flags": "flags",
    "slave-priority": "priority",
    "replica-priority": "priority",
    "last-ok-ping-reply": "last_ok_ping_reply_ms",
}
_PEER_FIELDS = {
    "ip": "ip",
    "port": "port",
    "runid": "runid",
    "flags": "flags",
}


def pairs_to_dict(reply: Any) -> dict[str, str]:
    """Fold a flat [k1, v1, k2, v2, ...] reply into a dict."""
    if not reply:
        raise ReplyShapeError("empty reply")
    if isinstance(reply, dict):
        return {str(k): v for k, v in reply.items()}
    if isinstance(reply, (str, bytes)) or not isinstance(reply, Sequence):
        raise ReplyShapeError(f"expected a key/value list, got {type(reply).__name__}")
    if len(reply) % 2:
        raise ReplyShapeError(f"odd number of tokens ({len(reply)}) in key/value reply")
    keys = reply[0::2]
    values = reply[1::2]
    return {str(k): v for k, v in zip(keys, values)}


def _select(fields: dict[str, str], raw: dict[str, str]) -> dict[str, Any]:
    return {attr: raw[key] for key, attr in fields.items() if key in raw}


def _decode_many(reply: Any) -> list[dict[str, str]]:
    if reply is None:
        raise ReplyShapeError("nil reply")
    if isinstance(reply, (str, bytes)) or not isinstance(reply, Sequence):
        raise ReplyShapeError(f"expected a list of records, got {type(reply).__name__}")
    return [pairs_to_dict(entry) for entry in reply]


def parse_master(reply: Any) -> MasterRecord:
    return MasterRecord(**_select(_MASTER_FIELDS, pairs_to_dict(reply)))


def parse_replicas(reply: Any) -> list[ReplicaRecord]:
    return [ReplicaRecord(**_select(_REPLICA_FIELDS, raw)) for raw in _decode_many(reply)]


def parse_peer_sentinels(reply: Any) -> list[PeerSentinelRecord]:
    return [PeerSentinelRecord(**_select(_PEER_FIELDS, raw)) for raw in _decode_many(reply)]


def parse_master_address(reply: Any) -> tuple[str, int] | None:
    """Decode SENTINEL GET-MASTER-ADDR-BY-NAME: [ip, port] or nil."""
    if not reply:
        return None
    if isinstance(reply, (str, bytes)) or not isinstance(reply, Sequence) or len(reply) != 2:
        raise ReplyShapeError(f"expected [ip, port], got {reply!r}")
    ip, port = reply
    return str(ip), _to_int(port)


# -----------------------------------------------------------------------------
# Thresholds
# -----------------------------------------------------------------------------


class ThresholdPair(BaseModel):
    """Per-category count thresholds; None disables that category.

    A count is unhealthy when it is <= the threshold, so a threshold of N
    demands at least N+1.
    """

    model_config = ConfigDict(frozen=True)

    replicas: int | None = None
    sentinels: int | None = None

    @field_validator("replicas", "sentinels")
    @classmethod
    def non_negative(cls, v: int | None) -> int | None:
        if v is not None and v < 0:
            raise ValueError("threshold must be >= 0")
        return v

    @classmethod
    def parse(cls, raw: str) -> ThresholdPair:
        """Parse "<replicas>,<sentinels>"; either side may be left empty."""
        parts = raw.split(",")
        if len(parts) != 2:
            raise ValueError(f"threshold must be '<replicas>,<sentinels>', got '{raw}'")
        values: list[int | None] = []
        for part in parts:
            part = part.strip()
            if not part:
                values.append(None)
                continue
            try:
                values.append(int(part))
            except ValueError as exc:
                raise ValueError(f"threshold values must be integers, got '{raw}'") from exc
        return cls(replicas=values[0], sentinels=values[1])
