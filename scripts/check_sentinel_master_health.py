#!/usr/bin/env python3
"""
scripts/check_sentinel_master_health.py — Failover readiness of one master.

Evaluates master flags, replica and sentinel counts against --warning /
--critical thresholds, and the quorum. Thresholds are "<replicas>,<sentinels>";
a count at or below a threshold fires, so "1,1" demands at least 2 of each.

Usage:
    python3 scripts/check_sentinel_master_health.py --master mymaster
    check-sentinel-master-health --master mymaster --warning 2,2 --critical 0,1
    check-sentinel-master-health --master mymaster --warning ,2   # no replica warning
"""

from __future__ import annotations

import pathlib
import sys

# Add project root to path so config and health modules are importable
_ROOT = pathlib.Path(__file__).parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from scripts.cli_common import (  # noqa: E402
    build_parser,
    configure_logging,
    emit,
    settings_from_args,
)
from scripts.health import master_health  # noqa: E402


def main(argv: list[str] | None = None) -> int:
    parser = build_parser(
        "Check replica, sentinel and quorum health of a sentinel-monitored master.",
        with_master=True,
        with_thresholds=True,
    )
    args = parser.parse_args(argv)
    configure_logging(args.verbose)
    cfg = settings_from_args(parser, args, require_master=True)

    acc = master_health.run_check(
        cfg.SENTINEL_HOST,
        cfg.SENTINEL_PORT,
        cfg.SENTINEL_TIMEOUT_SECONDS,
        cfg.SENTINEL_MASTER,
        warning=cfg.warning,
        critical=cfg.critical,
        password=cfg.SENTINEL_PASSWORD,
    )
    return emit(acc)


if __name__ == "__main__":
    sys.exit(main())
