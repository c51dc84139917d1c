"""
Verification reports.

The reporter buffers human readable lines while a run progresses and flushes
them to every configured outputter once the run ends, successful or not.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Protocol

from rich.markup import escape

from pactverifier.cli.ux import console

if TYPE_CHECKING:
    from pactverifier.logging import RunLog

INDENT = "  "


class ReportOutputter(Protocol):
    """Destination for a rendered verification report."""

    def write(self, report: str, run_log: Optional["RunLog"]) -> None:
        ...


class ConsoleReportOutputter:
    """Prints the report through the shared rich console."""

    def write(self, report: str, run_log: Optional["RunLog"]) -> None:
        console.print(escape(report))


class FileReportOutputter:
    """Appends the report to the run log file."""

    def write(self, report: str, run_log: Optional["RunLog"]) -> None:
        if run_log is None or run_log.closed:
            return
        run_log.write(report + "\n")


class Reporter:
    def __init__(self, outputters: List[ReportOutputter]) -> None:
        self._outputters = list(outputters)
        self._lines: List[str] = []
        self._indent = 0

    @property
    def lines(self) -> List[str]:
        return list(self._lines)

    def indent(self) -> None:
        self._indent += 1

    def reset_indent(self) -> None:
        self._indent = 0

    def report_info(self, message: str) -> None:
        self._add(message)

    def report_summary(self, passed: bool) -> None:
        self._add("Verification passed" if passed else "Verification failed")

    def report_failure_reason(self, reason: str) -> None:
        self._add(f"Failure: {reason}")

    def flush(self, run_log: Optional["RunLog"] = None) -> None:
        """Write buffered lines to every outputter and clear the buffer."""
        if not self._lines:
            return
        report = "\n".join(self._lines)
        self._lines = []
        for outputter in self._outputters:
            outputter.write(report, run_log)

    def _add(self, message: str) -> None:
        self._lines.append(f"{INDENT * self._indent}{message}")
