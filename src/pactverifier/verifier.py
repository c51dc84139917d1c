"""
Message pact verifier.

Verifies that a message provider honours the pacts of its consumers:

    verifier = (
        PactVerifierBuilder(setup=start_fixtures, teardown=stop_fixtures)
        .message_provider("OrderService")
        .honours_pact_with("Billing")
        .pact_uri("pacts/billing-order_service.json")
        .provider_state("an order was placed", setup=produce_order_placed)
        .build()
    )
    with verifier:
        verifier.verify()

Each run loads the pact once, optionally narrows it to one description and/or
provider state, verifies the messages in pact order inside a run-scoped log
and, when enabled, publishes the outcome to the pact broker.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Tuple

import httpx
import structlog

from pactverifier.config.verifier import PactVerifierConfig
from pactverifier.core.errors import ConfigurationError, VerificationFailure
from pactverifier.logging import RunLog, open_run_log
from pactverifier.matching import ContentMatcher, MessageMatcher
from pactverifier.models import (
    MessageFactory,
    MessagePact,
    PactUriOptions,
    ProviderState,
    TearDown,
    VerificationResult,
)
from pactverifier.provider_states import Hook, ProviderStates, RegistrationResult
from pactverifier.publisher import ResultPublisher
from pactverifier.reporting import Reporter
from pactverifier.retriever import load_pact
from pactverifier.validator import MessageProviderValidator

logger = structlog.get_logger()

RunLogFactory = Callable[[str, Optional[str]], RunLog]


@dataclass(frozen=True)
class VerifierSettings:
    """Who is verified against which pact. Assembled by PactVerifierBuilder."""

    provider_name: Optional[str] = None
    consumer_name: Optional[str] = None
    pact_uri: Optional[str] = None
    pact_uri_options: Optional[PactUriOptions] = None


class PactVerifier:
    """Runs verifications for one provider/consumer pact."""

    def __init__(
        self,
        settings: VerifierSettings,
        provider_states: ProviderStates,
        config: Optional[PactVerifierConfig] = None,
        *,
        matcher: Optional[MessageMatcher] = None,
        client: Optional[httpx.Client] = None,
        run_log_factory: RunLogFactory = open_run_log,
    ):
        self.settings = settings
        self.provider_states = provider_states
        self.config = config or PactVerifierConfig.from_settings()
        self._matcher = matcher or ContentMatcher()
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=self.config.http_timeout)
        self._run_log_factory = run_log_factory

    def verify(
        self,
        description: Optional[str] = None,
        provider_state: Optional[str] = None,
    ) -> VerificationResult:
        """
        Verify the pact, optionally restricted to matching interactions.

        Args:
            description: Only verify messages with exactly this description
            provider_state: Only verify messages with exactly this provider state

        Returns:
            The successful VerificationResult (failures raise)

        Raises:
            ConfigurationError: Missing pact location, filters matching nothing,
                unregistered provider states or a missing publish link.
            RetrievalError: The pact could not be loaded.
            VerificationFailure: A message did not match or could not be produced.
            PublicationError: The result could not be published.
        """
        if not self.settings.pact_uri:
            raise ConfigurationError(
                "Pact uri has not been set, please supply a uri using pact_uri()"
            )

        log = logger.bind(
            provider=self.settings.provider_name,
            consumer=self.settings.consumer_name,
            pact_uri=self.settings.pact_uri,
        )

        pact = load_pact(
            self.settings.pact_uri,
            self.settings.pact_uri_options,
            client=self._client,
        )
        pact = filter_messages(pact, description, provider_state)

        if (
            self.config.publish_verification_results
            and pact.publish_verification_results_link is None
        ):
            raise ConfigurationError(
                "Publishing verification results was requested but the pact has no "
                "'pb:publish-verification-results' link",
                {"pact_uri": self.settings.pact_uri},
            )

        result = VerificationResult(provider_application_version=self.config.provider_version)
        reporter = Reporter(self.config.report_outputters)
        validator = MessageProviderValidator(reporter, self._matcher)

        log.info("verification_run_started", messages=len(pact.messages))
        with self._run_log_factory(self.config.log_dir, self.settings.provider_name) as run_log:
            try:
                validator.validate(pact, self.provider_states, run_log)
                result.success = True
                reporter.report_summary(passed=True)
            except VerificationFailure as e:
                reporter.report_summary(passed=False)
                log.warning("verification_run_failed", reason=e.message, **e.details)
                raise
            finally:
                reporter.flush(run_log)

            log.info("verification_run_passed", messages=len(pact.messages))

            if self.config.publish_verification_results:
                publisher = ResultPublisher(
                    self._client,
                    self.settings.pact_uri_options,
                    log=run_log.logger,
                )
                publisher.publish(pact, result)

        return result

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> PactVerifier:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


def filter_messages(
    pact: MessagePact,
    description: Optional[str] = None,
    provider_state: Optional[str] = None,
) -> MessagePact:
    """
    Keep only the messages matching the given filters.

    Raises:
        ConfigurationError: A filter was given and nothing matched.
    """
    if description is None and provider_state is None:
        return pact

    messages = pact.messages
    if description is not None:
        messages = [m for m in messages if m.description == description]
    if provider_state is not None:
        messages = [m for m in messages if m.provider_state == provider_state]

    if not messages:
        raise ConfigurationError(
            "The specified description and/or provider state filter yielded no interactions",
            {"description": description, "provider_state": provider_state},
        )
    return pact.with_messages(messages)


class PactVerifierBuilder:
    """
    Fluent configuration for a PactVerifier.

    Provider name, consumer name and pact location may each be supplied once;
    supplying one twice is reported by build().
    """

    def __init__(
        self,
        setup: Optional[Hook] = None,
        teardown: Optional[Hook] = None,
        config: Optional[PactVerifierConfig] = None,
        *,
        matcher: Optional[MessageMatcher] = None,
        client: Optional[httpx.Client] = None,
        run_log_factory: RunLogFactory = open_run_log,
    ):
        """
        Args:
            setup: Run once before the first interaction of every run
            teardown: Run once after the last interaction of every run,
                whether or not verification passed
            config: Run-level configuration (defaults to environment settings)
            matcher: Message matcher (defaults to ContentMatcher)
            client: HTTP client for pact retrieval and publishing
            run_log_factory: Opens the run-scoped log
        """
        self._provider_names: List[str] = []
        self._consumer_names: List[str] = []
        self._pact_uris: List[Tuple[str, Optional[PactUriOptions]]] = []
        self._provider_states = ProviderStates(setup, teardown)
        self._config = config
        self._matcher = matcher
        self._client = client
        self._run_log_factory = run_log_factory

    def message_provider(self, provider_name: str) -> PactVerifierBuilder:
        _require("provider_name", provider_name)
        self._provider_names.append(provider_name)
        return self

    def honours_pact_with(self, consumer_name: str) -> PactVerifierBuilder:
        _require("consumer_name", consumer_name)
        self._consumer_names.append(consumer_name)
        return self

    def pact_uri(
        self, location: str, options: Optional[PactUriOptions] = None
    ) -> PactVerifierBuilder:
        _require("pact uri", location)
        self._pact_uris.append((location, options))
        return self

    def provider_state(
        self,
        name: str,
        setup: MessageFactory,
        teardown: Optional[TearDown] = None,
    ) -> PactVerifierBuilder:
        """
        Register the setup producing the message for provider state ``name``.

        ``teardown`` runs after the interaction is verified, pass or fail.
        """
        _require("provider state", name)
        outcome = self._provider_states.add(ProviderState(name, setup, teardown))
        if outcome is RegistrationResult.ALREADY_REGISTERED:
            raise ConfigurationError(
                f"Provider state '{name}' has already been registered",
                {"provider_state": name},
            )
        return self

    def build(self) -> PactVerifier:
        settings = VerifierSettings(
            provider_name=_once("Provider name", self._provider_names),
            consumer_name=_once("Consumer name", self._consumer_names),
            pact_uri=_once("Pact uri", [uri for uri, _ in self._pact_uris]),
            pact_uri_options=self._pact_uris[0][1] if self._pact_uris else None,
        )
        return PactVerifier(
            settings,
            self._provider_states,
            self._config,
            matcher=self._matcher,
            client=self._client,
            run_log_factory=self._run_log_factory,
        )

    def verify(
        self,
        description: Optional[str] = None,
        provider_state: Optional[str] = None,
    ) -> VerificationResult:
        """Build a verifier, run it once and release it."""
        with self.build() as verifier:
            return verifier.verify(description=description, provider_state=provider_state)


def _require(field_name: str, value: Optional[str]) -> None:
    if value is None or not value.strip():
        raise ConfigurationError(f"Please supply a non null or empty {field_name}")


def _once(label: str, values: List[str]) -> Optional[str]:
    if len(values) > 1:
        raise ConfigurationError(
            f"{label} has already been supplied, please create a new verifier to verify "
            "a different provider, consumer or pact",
            {"values": ", ".join(values)},
        )
    return values[0] if values else None
