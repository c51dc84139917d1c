"""
Unified error handling for pactverifier.

This module provides the error taxonomy raised by a verification run and
the exit codes the CLI maps them to.

Exit Codes:
- 0: Success
- 1: Verification failure (a produced message did not match the pact)
- 10: Configuration error
- 11: Retrieval error (pact file could not be fetched or parsed)
- 12: Publication error (result could not be delivered to the broker)
- 127: Unknown/internal error
"""

from __future__ import annotations

import functools
import sys
import traceback
from enum import IntEnum
from typing import Any, Callable, TypeVar

import structlog

logger = structlog.get_logger()


class ExitCode(IntEnum):
    """Standardized exit codes for CLI commands."""

    SUCCESS = 0
    VERIFICATION_FAILED = 1
    CONFIG_ERROR = 10
    RETRIEVAL_ERROR = 11
    PUBLICATION_ERROR = 12
    UNKNOWN_ERROR = 127


class PactVerifierError(Exception):
    """Base exception for pactverifier errors with exit code support."""

    exit_code: ExitCode = ExitCode.UNKNOWN_ERROR
    show_traceback: bool = False

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(PactVerifierError):
    """Raised for invalid or missing caller input."""

    exit_code = ExitCode.CONFIG_ERROR


class RetrievalError(PactVerifierError):
    """Raised when a pact file cannot be fetched or deserialized."""

    exit_code = ExitCode.RETRIEVAL_ERROR

    def __init__(self, location: str, details: dict[str, Any] | None = None):
        super().__init__(
            f"Json pact file could not be retrieved using uri '{location}'",
            {"location": location, **(details or {})},
        )
        self.location = location


class VerificationFailure(PactVerifierError):
    """Raised when a produced message is rejected or cannot be produced."""

    exit_code = ExitCode.VERIFICATION_FAILED

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        *,
        match_result: Any = None,
    ):
        super().__init__(message, details)
        # Matcher output for rejected messages; None when an exception is chained instead
        self.match_result = match_result


class PublicationError(PactVerifierError):
    """Raised when verification results cannot be delivered to the broker."""

    exit_code = ExitCode.PUBLICATION_ERROR


# Type variable for decorated functions
F = TypeVar("F", bound=Callable[..., int])


def main_with_error_handling(
    *,
    show_traceback: bool = False,
    log_errors: bool = True,
) -> Callable[[F], F]:
    """
    Decorator for CLI main functions that provides unified error handling.

    Catches exceptions and converts them to appropriate exit codes with
    consistent error reporting.

    Args:
        show_traceback: If True, show full traceback for unexpected errors
        log_errors: If True, log errors to structlog

    Exit codes:
        - PactVerifierError subclasses: Uses the error's exit_code
        - KeyboardInterrupt: Returns 130 (standard for SIGINT)
        - Other exceptions: Returns 127 (unknown error)
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> int:
            try:
                return func(*args, **kwargs)
            except PactVerifierError as e:
                if log_errors:
                    logger.error(
                        "command_error",
                        error_type=type(e).__name__,
                        message=e.message,
                        exit_code=e.exit_code,
                        **e.details,
                    )
                if e.show_traceback or show_traceback:
                    traceback.print_exc(file=sys.stderr)
                return e.exit_code
            except KeyboardInterrupt:
                if log_errors:
                    logger.info("command_interrupted")
                return 130
            except Exception as e:
                if log_errors:
                    logger.error(
                        "unexpected_error",
                        error_type=type(e).__name__,
                        message=str(e),
                        exit_code=ExitCode.UNKNOWN_ERROR,
                    )
                if show_traceback:
                    traceback.print_exc(file=sys.stderr)
                return ExitCode.UNKNOWN_ERROR

        return wrapper  # type: ignore[return-value]

    return decorator


def format_error_message(error: PactVerifierError) -> str:
    """Format an error message for display to users."""
    msg = error.message
    if error.details:
        detail_str = ", ".join(f"{k}={v}" for k, v in error.details.items())
        msg = f"{msg} ({detail_str})"
    return msg
