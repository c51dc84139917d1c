"""
CLI command for message pact verification.

Verifies that the provider's message-producing code honours a consumer pact.
Provider states are registered by a Python callable named on the command
line (``module:function``) which receives the verifier builder.
"""

from __future__ import annotations

import argparse
import importlib
import os
import sys
from typing import Callable, Optional

from rich.markup import escape

from pactverifier.cli.ux import console, error, header, print_key_value, success
from pactverifier.config import load_config
from pactverifier.config.settings import get_settings
from pactverifier.core.errors import (
    ConfigurationError,
    ExitCode,
    PactVerifierError,
    VerificationFailure,
    format_error_message,
    main_with_error_handling,
)
from pactverifier.models import PactUriOptions
from pactverifier.verifier import PactVerifierBuilder

StatesRegistrar = Callable[[PactVerifierBuilder], None]


def load_states_registrar(target: str) -> StatesRegistrar:
    """
    Import the callable that registers provider states.

    The working directory is importable, as with ``python -m``, so a states
    module in the project being verified needs no installation.

    Args:
        target: "package.module:function"

    Raises:
        ConfigurationError: The target is malformed or cannot be imported.
    """
    module_name, _, attr = target.partition(":")
    if not module_name or not attr:
        raise ConfigurationError(
            "Provider states must be given as 'module:function'",
            {"states": target},
        )

    cwd = os.getcwd()
    if cwd not in sys.path:
        sys.path.insert(0, cwd)

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigurationError(
            f"Cannot import provider states module '{module_name}'",
            {"states": target},
        ) from e

    registrar = getattr(module, attr, None)
    if not callable(registrar):
        raise ConfigurationError(
            f"'{attr}' in module '{module_name}' is not callable",
            {"states": target},
        )
    return registrar


def _uri_options(
    auth_scheme: Optional[str],
    auth_value: Optional[str],
) -> Optional[PactUriOptions]:
    if auth_scheme and auth_value:
        return PactUriOptions(auth_scheme, auth_value)
    if auth_scheme or auth_value:
        raise ConfigurationError("--auth-scheme and --auth-value must be given together")

    token = get_settings().broker_token
    if token:
        return PactUriOptions.bearer(token)
    return None


@main_with_error_handling()
def verify_command(
    pact: str,
    states: str,
    provider: Optional[str] = None,
    consumer: Optional[str] = None,
    description: Optional[str] = None,
    provider_state: Optional[str] = None,
    publish: bool = False,
    provider_version: Optional[str] = None,
    log_dir: Optional[str] = None,
    auth_scheme: Optional[str] = None,
    auth_value: Optional[str] = None,
    config_path: Optional[str] = None,
) -> int:
    """
    Verify a message pact.

    Exit codes:
        0 = Pact verified
        1 = Verification failed
        10 = Configuration error
        11 = Pact could not be retrieved
        12 = Results could not be published

    Returns:
        Exit code
    """
    config = load_config(config_path)
    if publish:
        config.publish_verification_results = True
    if provider_version:
        config.provider_version = provider_version
    if log_dir:
        config.log_dir = log_dir

    builder = PactVerifierBuilder(config=config)
    if provider:
        builder.message_provider(provider)
    if consumer:
        builder.honours_pact_with(consumer)
    builder.pact_uri(pact, _uri_options(auth_scheme, auth_value))

    registrar = load_states_registrar(states)
    registrar(builder)

    header(f"Message Pact Verification: {provider or 'provider'}")
    print_key_value(
        {
            "Pact": pact,
            "Consumer": consumer or "-",
            "Publish results": "yes" if config.publish_verification_results else "no",
        }
    )
    console.print()

    try:
        result = builder.verify(description=description, provider_state=provider_state)
    except VerificationFailure as e:
        error(format_error_message(e))
        if e.match_result is not None:
            for mismatch in e.match_result.mismatches:
                console.print(f"  [muted]•[/muted] {escape(mismatch)}", highlight=False)
        raise
    except PactVerifierError as e:
        error(format_error_message(e))
        raise

    success("Pact verified")
    if config.publish_verification_results:
        console.print(
            f"[muted]Results published for version {result.provider_application_version}[/muted]"
        )
    return ExitCode.SUCCESS


def register_verify_parser(subparsers: argparse._SubParsersAction) -> None:
    """Register verify subcommand parser."""
    parser = subparsers.add_parser(
        "verify",
        help="Verify that the provider's messages honour a consumer pact",
    )

    parser.add_argument("pact", help="Path or http(s) URI of the pact file")
    parser.add_argument(
        "--states",
        "-s",
        required=True,
        help="Callable registering provider states, as module:function",
    )
    parser.add_argument("--provider", help="Provider name")
    parser.add_argument("--consumer", help="Consumer name")
    parser.add_argument("--description", help="Only verify messages with this description")
    parser.add_argument(
        "--provider-state",
        help="Only verify messages with this provider state",
    )
    parser.add_argument(
        "--publish",
        action="store_true",
        help="Publish verification results to the pact broker on success",
    )
    parser.add_argument("--provider-version", help="Provider application version")
    parser.add_argument("--log-dir", help="Directory for run logs")
    parser.add_argument("--auth-scheme", help="Authorization scheme, e.g. Bearer or Basic")
    parser.add_argument("--auth-value", help="Authorization credential value")
    parser.add_argument(
        "--config",
        dest="config_path",
        help="YAML config file (default: .pactverifier.yaml if present)",
    )


def handle_verify_command(args: argparse.Namespace) -> int:
    """Handle verify subcommand."""
    return verify_command(
        pact=args.pact,
        states=args.states,
        provider=getattr(args, "provider", None),
        consumer=getattr(args, "consumer", None),
        description=getattr(args, "description", None),
        provider_state=getattr(args, "provider_state", None),
        publish=getattr(args, "publish", False),
        provider_version=getattr(args, "provider_version", None),
        log_dir=getattr(args, "log_dir", None),
        auth_scheme=getattr(args, "auth_scheme", None),
        auth_value=getattr(args, "auth_value", None),
        config_path=getattr(args, "config_path", None),
    )
