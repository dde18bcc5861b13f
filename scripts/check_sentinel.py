#!/usr/bin/env python3
"""
scripts/check_sentinel.py — Is the sentinel process itself healthy?

CRITICAL when the sentinel is unreachable, is not running in sentinel mode,
is in TILT mode, or monitors no masters.

Usage:
    python3 scripts/check_sentinel.py --host 10.0.0.5 --port 26379
    check-sentinel --timeout 5            # installed console script
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
from scripts.health import sentinel_liveness  # noqa: E402


def main(argv: list[str] | None = None) -> int:
    parser = build_parser("Check that a sentinel is up, out of TILT mode and monitoring masters.")
    args = parser.parse_args(argv)
    configure_logging(args.verbose)
    cfg = settings_from_args(parser, args)

    acc = sentinel_liveness.run_check(
        cfg.SENTINEL_HOST,
        cfg.SENTINEL_PORT,
        cfg.SENTINEL_TIMEOUT_SECONDS,
        password=cfg.SENTINEL_PASSWORD,
    )
    return emit(acc)


if __name__ == "__main__":
    sys.exit(main())
