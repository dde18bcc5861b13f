#!/usr/bin/env python3
"""
scripts/check_sentinel_master.py — Is the master that sentinel reports reachable?

Resolves --master through the sentinel, connects to the returned address and
checks the instance reports role:master.

Usage:
    python3 scripts/check_sentinel_master.py --master mymaster
    check-sentinel-master --host 10.0.0.5 --master mymaster
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
from scripts.health import master_reachability  # noqa: E402


def main(argv: list[str] | None = None) -> int:
    parser = build_parser(
        "Check that the master resolved through sentinel is reachable and is a master.",
        with_master=True,
    )
    args = parser.parse_args(argv)
    configure_logging(args.verbose)
    cfg = settings_from_args(parser, args, require_master=True)

    acc = master_reachability.run_check(
        cfg.SENTINEL_HOST,
        cfg.SENTINEL_PORT,
        cfg.SENTINEL_TIMEOUT_SECONDS,
        cfg.SENTINEL_MASTER,
        password=cfg.SENTINEL_PASSWORD,
    )
    return emit(acc)


if __name__ == "__main__":
    sys.exit(main())
