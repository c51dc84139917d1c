"""Tests for verification reports."""

from pactverifier.logging import RunLog
from pactverifier.reporting import ConsoleReportOutputter, FileReportOutputter, Reporter


class CollectingOutputter:
    def __init__(self):
        self.reports = []

    def write(self, report, run_log):
        self.reports.append(report)


class TestReporter:
    """Tests for Reporter."""

    def test_indents_lines(self):
        reporter = Reporter([])
        reporter.report_info("Verifying a pact between Billing and OrderService")
        reporter.indent()
        reporter.report_info("Given A")
        reporter.indent()
        reporter.report_failure_reason("$.id: missing")
        reporter.reset_indent()
        reporter.report_summary(passed=False)

        assert reporter.lines == [
            "Verifying a pact between Billing and OrderService",
            "  Given A",
            "    Failure: $.id: missing",
            "Verification failed",
        ]

    def test_flush_writes_once_to_every_outputter(self):
        first, second = CollectingOutputter(), CollectingOutputter()
        reporter = Reporter([first, second])
        reporter.report_summary(passed=True)

        reporter.flush()
        reporter.flush()

        assert first.reports == ["Verification passed"]
        assert second.reports == ["Verification passed"]
        assert reporter.lines == []


class TestOutputters:
    """Tests for the built-in outputters."""

    def test_file_outputter_appends_to_run_log(self, tmp_path):
        with RunLog(tmp_path, "OrderService") as run_log:
            FileReportOutputter().write("Verification passed", run_log)

        assert run_log.path.read_text() == "Verification passed\n"

    def test_file_outputter_ignores_missing_run_log(self):
        FileReportOutputter().write("Verification passed", None)

    def test_console_outputter_prints(self, capsys):
        ConsoleReportOutputter().write("Given [A]", None)

        assert "Given [A]" in capsys.readouterr().out
