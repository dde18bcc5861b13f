"""
scripts/health — Composable sentinel health check modules.

Each check module exposes a run_check(...) function that takes a fresh
StatusAccumulator, records its findings into it, and returns it. The entry
points in scripts/ print acc.summary() and exit with acc.severity.

Usage:
    from scripts.health import Severity, StatusAccumulator
    from scripts.health.master_health import run_check as master_health_check
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import NoReturn


class Severity(IntEnum):
    """Four-state monitoring severity. Values double as process exit codes."""

    OK = 0
    WARNING = 1
    CRITICAL = 2
    UNKNOWN = 3


@dataclass(frozen=True)
class Finding:
    severity: Severity
    message: str


class CheckHalted(Exception):
    """Raised by StatusAccumulator.halt(); nothing after it is evaluated."""

    def __init__(self, accumulator: StatusAccumulator) -> None:
        super().__init__(accumulator.summary())
        self.accumulator = accumulator


@dataclass
class StatusAccumulator:
    """Worst-severity-wins result builder for a single check run.

    Severity only ever rises. Every message is kept in emission order, so the
    final line lists all findings, not only the worst one.
    """

    severity: Severity = Severity.OK
    findings: list[Finding] = field(default_factory=list)

    def record(self, severity: Severity, message: str) -> None:
        self.findings.append(Finding(severity, message))
        if severity > self.severity:
            self.severity = severity

    def halt(self, severity: Severity, message: str) -> NoReturn:
        """Record a fatal finding and stop the check."""
        self.record(severity, message)
        raise CheckHalted(self)

    def merge(self, other: StatusAccumulator) -> None:
        for finding in other.findings:
            self.record(finding.severity, finding.message)

    @property
    def messages(self) -> list[str]:
        return [f.message for f in self.findings]

    def summary(self) -> str:
        if not self.findings:
            return self.severity.name
        return f"{self.severity.name} - {'. '.join(self.messages)}"

    def finish(self) -> StatusAccumulator:
        """Natural end of a check; returns self for the caller to emit."""
        return self
