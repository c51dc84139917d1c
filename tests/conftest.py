"""Root test configuration."""

import json
import logging

import pytest
import structlog
from pactverifier.config import PactVerifierConfig
from pactverifier.logging import RunLog
from pactverifier.models import MatchResult
from pactverifier.reporting import FileReportOutputter

PUBLISH_URL = (
    "https://broker.example.com/pacts/provider/OrderService/consumer/Billing"
    "/pact-version/abc123/verification-results"
)


def pytest_configure(config):
    """Configure structlog for tests to suppress debug/info output."""
    logging.basicConfig(level=logging.WARNING, force=True)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


@pytest.fixture
def pact_data():
    """A two-message pact as fetched from a broker."""
    return {
        "consumer": {"name": "Billing"},
        "provider": {"name": "OrderService"},
        "messages": [
            {
                "description": "an order placed event",
                "providerState": "A",
                "contents": {"orderId": 1, "status": "placed"},
                "metaData": {"contentType": "application/json"},
            },
            {
                "description": "an order cancelled event",
                "providerState": "B",
                "contents": {"orderId": 2, "status": "cancelled"},
            },
        ],
        "_links": {
            "pb:publish-verification-results": {
                "title": "Publish verification results",
                "href": PUBLISH_URL,
            }
        },
    }


@pytest.fixture
def pact_file(tmp_path, pact_data):
    """Write the pact to disk and return its path."""
    path = tmp_path / "billing-order_service.json"
    path.write_text(json.dumps(pact_data))
    return str(path)


@pytest.fixture
def verifier_config(tmp_path):
    """Config writing reports only to the run log."""
    return PactVerifierConfig(
        log_dir=str(tmp_path / "logs"),
        report_outputters=[FileReportOutputter()],
        provider_version="1.2.3",
    )


class SpyRunLog(RunLog):
    """RunLog that counts how often it is released."""

    def __init__(self, log_dir, provider_name):
        super().__init__(log_dir, provider_name)
        self.close_calls = 0

    def close(self):
        self.close_calls += 1
        super().close()


@pytest.fixture
def run_logs():
    """Run logs opened during a test, in order."""
    return []


@pytest.fixture
def run_log_factory(run_logs):
    def factory(log_dir, provider_name):
        run_log = SpyRunLog(log_dir, provider_name)
        run_logs.append(run_log)
        return run_log

    return factory


class RecordingMatcher:
    """Matcher that records submissions and accepts or rejects all of them."""

    def __init__(self, accept=True):
        self.accept = accept
        self.calls = []

    def match(self, expected, actual):
        self.calls.append((expected, actual))
        if self.accept:
            return MatchResult.ok()
        return MatchResult.failed([f"$.orderId: rejected {expected.description}"])


@pytest.fixture
def accepting_matcher():
    return RecordingMatcher(accept=True)


@pytest.fixture
def rejecting_matcher():
    return RecordingMatcher(accept=False)
