"""
scripts/cli_common.py — Option plumbing shared by the three sentinel checks.

Every flag defaults to None so that an unset flag falls through to the
environment / env file and then to the ProbeSettings defaults.

Output contract (monitoring-plugin convention):
    stdout   one line, "<SEVERITY> - <finding>. <finding>..."
    exit     0 OK, 1 WARNING, 2 CRITICAL, 3 UNKNOWN
Invalid invocations (bad flags, invalid config) report UNKNOWN.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import NoReturn

from pydantic import ValidationError

from config.settings import ProbeSettings, load_settings
from scripts.health import Severity, StatusAccumulator


class ProbeArgumentParser(argparse.ArgumentParser):
    """Usage errors exit UNKNOWN (3) instead of argparse's 2."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        print(f"{Severity.UNKNOWN.name} - {message}")
        sys.exit(int(Severity.UNKNOWN))


def build_parser(
    description: str,
    with_master: bool = False,
    with_thresholds: bool = False,
) -> ProbeArgumentParser:
    parser = ProbeArgumentParser(description=description)
    parser.add_argument("--host", help="sentinel host (default 127.0.0.1)")
    parser.add_argument("--port", type=int, help="sentinel port (default 26379)")
    parser.add_argument(
        "--timeout", type=float, help="connect/read timeout in seconds (default 2)"
    )
    parser.add_argument("--password", help="sentinel password (env: SENTINEL_PASSWORD)")
    if with_master:
        parser.add_argument("--master", help="name of the monitored master")
    if with_thresholds:
        parser.add_argument(
            "--warning",
            metavar="REPLICAS,SENTINELS",
            help="warn when a count is <= threshold; empty side disables (default 1,1)",
        )
        parser.add_argument(
            "--critical",
            metavar="REPLICAS,SENTINELS",
            help="critical when a count is <= threshold; empty side disables (default 1,1)",
        )
    parser.add_argument(
        "--env-file", default=".env", help="KEY=VALUE file read before os.environ"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug log to stderr")
    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _describe_validation_error(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
    )


def settings_from_args(
    parser: ProbeArgumentParser,
    args: argparse.Namespace,
    require_master: bool = False,
) -> ProbeSettings:
    try:
        cfg = load_settings(
            args.env_file,
            SENTINEL_HOST=args.host,
            SENTINEL_PORT=args.port,
            SENTINEL_TIMEOUT_SECONDS=args.timeout,
            SENTINEL_PASSWORD=args.password,
            SENTINEL_MASTER=getattr(args, "master", None),
            SENTINEL_WARNING=getattr(args, "warning", None),
            SENTINEL_CRITICAL=getattr(args, "critical", None),
        )
    except ValidationError as exc:
        parser.error(_describe_validation_error(exc))
    if require_master and not cfg.SENTINEL_MASTER:
        parser.error("--master is required (or set SENTINEL_MASTER)")
    return cfg


def emit(acc: StatusAccumulator) -> int:
    print(acc.summary())
    return int(acc.severity)
