"""
Message provider validator.

Runs every interaction of a (filtered) pact against the provider states
registered by the provider, one at a time and in pact order:

    global setup
      for each message: state setup -> produce -> match -> state teardown
    global teardown

The first failure aborts the remaining interactions.
"""

from __future__ import annotations

from typing import Any

import structlog

from pactverifier.core.errors import ConfigurationError, VerificationFailure
from pactverifier.logging import RunLog
from pactverifier.matching import MessageMatcher
from pactverifier.models import MatchResult, Message, MessagePact, ProviderState
from pactverifier.provider_states import ProviderStates
from pactverifier.reporting import Reporter


class MessageProviderValidator:
    def __init__(self, reporter: Reporter, matcher: MessageMatcher) -> None:
        self._reporter = reporter
        self._matcher = matcher

    def validate(self, pact: MessagePact, provider_states: ProviderStates, run_log: RunLog) -> None:
        """
        Verify every message in ``pact``.

        Every message's provider state is resolved before the global setup
        runs, so an unregistered state aborts the run before any provider
        code or the matcher is called.

        Raises:
            ConfigurationError: A message references an unregistered state.
            VerificationFailure: A message was rejected or could not be produced.
        """
        log = run_log.logger
        consumer = pact.consumer.name if pact.consumer else ""
        provider = pact.provider.name if pact.provider else ""
        self._reporter.report_info(f"Verifying a pact between {consumer} and {provider}")
        log.info("verification_started", consumer=consumer, messages=len(pact.messages))

        interactions = [
            (message, _resolve_state(message, provider_states)) for message in pact.messages
        ]

        try:
            _call_hook(provider_states.run_setup, "Global setup failed")
            for message, state in interactions:
                self._validate_message(message, state, log)
        except BaseException:
            self._reporter.reset_indent()
            _teardown_after_failure(provider_states.run_teardown, log, "global_teardown_failed")
            raise

        self._reporter.reset_indent()
        _call_hook(provider_states.run_teardown, "Global teardown failed")

        log.info("verification_passed", consumer=consumer)

    def _validate_message(
        self,
        message: Message,
        state: ProviderState,
        log: structlog.stdlib.BoundLogger,
    ) -> None:
        self._reporter.reset_indent()
        self._reporter.indent()
        self._reporter.report_info(f"Given {state.name}")
        self._reporter.indent()
        self._reporter.report_info(message.description)
        log.info(
            "verifying_message",
            description=message.description,
            provider_state=state.name,
        )

        try:
            produced = _produce(state, message)
            result = self._match(message, produced)
            if not result.matched:
                self._reject(message, state, result, log)
        except BaseException:
            if state.teardown is not None:
                _teardown_after_failure(
                    state.teardown, log, "state_teardown_failed", provider_state=state.name
                )
            raise

        if state.teardown is not None:
            _call_hook(
                state.teardown,
                "Provider state teardown failed",
                provider_state=state.name,
            )

        log.info("message_verified", description=message.description)

    def _reject(
        self,
        message: Message,
        state: ProviderState,
        result: MatchResult,
        log: structlog.stdlib.BoundLogger,
    ) -> None:
        self._reporter.indent()
        for mismatch in result.mismatches:
            self._reporter.report_failure_reason(mismatch)
        log.warning(
            "message_mismatch",
            description=message.description,
            mismatches=result.mismatches,
        )
        raise VerificationFailure(
            f"Message '{message.description}' did not match the pact",
            {"description": message.description, "provider_state": state.name},
            match_result=result,
        )

    def _match(self, message: Message, produced: Any) -> MatchResult:
        try:
            return self._matcher.match(message, produced)
        except Exception as e:
            raise VerificationFailure(
                f"Matcher raised while verifying message '{message.description}'",
                {"description": message.description},
            ) from e


def _resolve_state(message: Message, provider_states: ProviderStates) -> ProviderState:
    if not message.provider_state:
        raise ConfigurationError(
            f"Message '{message.description}' has no provider state; "
            "a provider state setup is required to produce it",
            {"description": message.description},
        )

    state = provider_states.find(message.provider_state)
    if state is None:
        raise ConfigurationError(
            f"Provider state '{message.provider_state}' is not registered",
            {
                "description": message.description,
                "registered": ", ".join(provider_states.names()) or "<none>",
            },
        )
    return state


def _produce(state: ProviderState, message: Message) -> Any:
    try:
        return state.setup()
    except Exception as e:
        raise VerificationFailure(
            f"Provider state '{state.name}' failed to produce message '{message.description}'",
            {"provider_state": state.name, "description": message.description},
        ) from e


def _call_hook(hook: Any, failure_message: str, **details: Any) -> None:
    try:
        hook()
    except Exception as e:
        raise VerificationFailure(failure_message, details) from e


def _teardown_after_failure(
    hook: Any, log: structlog.stdlib.BoundLogger, event: str, **details: Any
) -> None:
    # The in-flight error wins; a failing teardown is only logged.
    try:
        hook()
    except Exception as e:
        log.error(event, error_type=type(e).__name__, error=str(e), **details)
