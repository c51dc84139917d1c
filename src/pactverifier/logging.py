from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import structlog

from pactverifier.core.naming import to_lower_snake_case

RUN_LOG_FILE_TEMPLATE = "{0}_verifier.log"


def configure_logging(level: int | str = logging.INFO) -> None:
    """Configure structlog/standard logging bridge."""

    timestamper = structlog.processors.TimeStamper(fmt="iso", utc=True)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            timestamper,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(level=level, format="%(message)s")


def bind_context(**kwargs: Any) -> structlog.stdlib.BoundLogger:
    """Bind contextual fields for downstream logs."""

    logger = structlog.get_logger()
    return logger.bind(**kwargs)


class RunLog:
    """
    Log channel scoped to a single verification run.

    The underlying stdlib logger is created directly rather than through
    ``logging.getLogger`` so it never lands in the global logger registry;
    closing the run log releases its file handler and nothing leaks into the
    next run for the same provider.
    """

    def __init__(self, log_dir: str | Path, provider_name: str | None) -> None:
        self.name = to_lower_snake_case(provider_name or "")
        self.path = Path(log_dir) / RUN_LOG_FILE_TEMPLATE.format(self.name)
        self.path.parent.mkdir(parents=True, exist_ok=True)

        self._handler = logging.FileHandler(self.path, encoding="utf-8")
        self._handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))

        self._logger = logging.Logger(f"pactverifier.run.{self.name}", logging.DEBUG)
        self._logger.addHandler(self._handler)
        self._closed = False

        self.logger: structlog.stdlib.BoundLogger = structlog.wrap_logger(
            self._logger,
            processors=[
                structlog.processors.add_log_level,
                structlog.processors.format_exc_info,
                structlog.processors.KeyValueRenderer(key_order=["event"]),
            ],
            wrapper_class=structlog.stdlib.BoundLogger,
        ).bind(provider=provider_name)

    @property
    def closed(self) -> bool:
        return self._closed

    def write(self, text: str) -> None:
        """Append raw text (e.g. a rendered report) to the run log file."""
        if self._closed:
            raise RuntimeError(f"Run log {self.path} is already closed")
        self._handler.acquire()
        try:
            self._handler.stream.write(text)
            self._handler.flush()
        finally:
            self._handler.release()

    def close(self) -> None:
        """Release the file handler. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self._logger.removeHandler(self._handler)
        self._handler.close()

    def __enter__(self) -> "RunLog":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


def open_run_log(log_dir: str | Path, provider_name: str | None) -> RunLog:
    """Open the run log for ``provider_name`` under ``log_dir``."""
    return RunLog(log_dir, provider_name)
