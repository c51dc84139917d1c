"""
pactverifier - provider-side verification of message pacts.

Drives the provider's message-producing code through registered provider
states, matches every produced message against the consumer's pact and
optionally publishes the outcome to a pact broker.
"""

from pactverifier.core.errors import (
    ConfigurationError,
    PactVerifierError,
    PublicationError,
    RetrievalError,
    VerificationFailure,
)
from pactverifier.matching import ContentMatcher, MessageMatcher
from pactverifier.models import (
    MatchResult,
    Message,
    MessagePact,
    PactUriOptions,
    ProviderState,
    VerificationResult,
)
from pactverifier.verifier import PactVerifier, PactVerifierBuilder, VerifierSettings

__version__ = "0.1.0"

__all__ = [
    "PactVerifier",
    "PactVerifierBuilder",
    "VerifierSettings",
    "Message",
    "MessagePact",
    "PactUriOptions",
    "ProviderState",
    "VerificationResult",
    "MatchResult",
    "MessageMatcher",
    "ContentMatcher",
    "PactVerifierError",
    "ConfigurationError",
    "RetrievalError",
    "VerificationFailure",
    "PublicationError",
]
