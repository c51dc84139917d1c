"""Core modules for pactverifier - centralized definitions and utilities."""

from pactverifier.core.errors import (
    ConfigurationError,
    ExitCode,
    PactVerifierError,
    PublicationError,
    RetrievalError,
    VerificationFailure,
    format_error_message,
    main_with_error_handling,
)
from pactverifier.core.naming import to_lower_snake_case

__all__ = [
    # Errors
    "ExitCode",
    "PactVerifierError",
    "ConfigurationError",
    "RetrievalError",
    "VerificationFailure",
    "PublicationError",
    "main_with_error_handling",
    "format_error_message",
    # Naming
    "to_lower_snake_case",
]
