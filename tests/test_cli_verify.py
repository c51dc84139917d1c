"""Tests for CLI verify command.

Tests for pactverifier verify including provider state loading, exit codes
and argument parsing.
"""

import argparse
import os
import sys
import textwrap

import pytest
from pactverifier.cli.main import build_parser, main
from pactverifier.cli.verify import (
    handle_verify_command,
    load_states_registrar,
    register_verify_parser,
    verify_command,
)
from pactverifier.core.errors import ConfigurationError, ExitCode

STATES_MODULE = textwrap.dedent(
    """
    def register(builder):
        builder.provider_state(
            "A", lambda: {"contents": {"orderId": 1, "status": "placed"}}
        )
        builder.provider_state(
            "B", lambda: {"contents": {"orderId": 2, "status": "{status_b}"}}
        )
    """
)


@pytest.fixture
def states_module(tmp_path, monkeypatch, request):
    """Create an importable provider states module; returns a factory."""
    monkeypatch.syspath_prepend(str(tmp_path))

    def make(status_b="cancelled"):
        name = f"states_{request.node.name.replace('[', '_').replace(']', '_')}"
        (tmp_path / f"{name}.py").write_text(STATES_MODULE.replace("{status_b}", status_b))
        return f"{name}:register"

    return make


class TestLoadStatesRegistrar:
    """Tests for resolving module:function targets."""

    @pytest.mark.parametrize("target", ["no_colon", ":register", "module:"])
    def test_malformed_target(self, target):
        with pytest.raises(ConfigurationError):
            load_states_registrar(target)

    def test_unknown_module(self):
        with pytest.raises(ConfigurationError, match="Cannot import"):
            load_states_registrar("definitely_not_a_module_xyz:register")

    def test_not_callable(self):
        with pytest.raises(ConfigurationError, match="not callable"):
            load_states_registrar("textwrap:__doc__")

    def test_resolves_callable(self, states_module):
        registrar = load_states_registrar(states_module())
        assert callable(registrar)

    def test_imports_from_working_directory(self, tmp_path, monkeypatch):
        package = tmp_path / "orders_app"
        package.mkdir()
        (package / "__init__.py").write_text("")
        (package / "pact_states.py").write_text(STATES_MODULE.replace("{status_b}", "cancelled"))
        monkeypatch.chdir(tmp_path)
        cwd = os.getcwd()
        monkeypatch.setattr(sys, "path", [p for p in sys.path if p not in ("", cwd)])

        registrar = load_states_registrar("orders_app.pact_states:register")

        assert callable(registrar)
        assert sys.path[0] == cwd


class TestVerifyCommand:
    """Tests for verify_command exit codes."""

    def test_passing_pact(self, pact_file, states_module, tmp_path):
        code = verify_command(
            pact=pact_file,
            states=states_module(),
            provider="OrderService",
            consumer="Billing",
            log_dir=str(tmp_path / "logs"),
        )

        assert code == ExitCode.SUCCESS
        assert (tmp_path / "logs" / "order_service_verifier.log").exists()

    def test_mismatch_exit_code(self, pact_file, states_module, tmp_path):
        code = verify_command(
            pact=pact_file,
            states=states_module(status_b="shipped"),
            provider="OrderService",
            log_dir=str(tmp_path / "logs"),
        )

        assert code == ExitCode.VERIFICATION_FAILED

    def test_filter_skips_failing_message(self, pact_file, states_module, tmp_path):
        code = verify_command(
            pact=pact_file,
            states=states_module(status_b="shipped"),
            provider="OrderService",
            provider_state="A",
            log_dir=str(tmp_path / "logs"),
        )

        assert code == ExitCode.SUCCESS

    def test_missing_pact_exit_code(self, tmp_path, states_module):
        code = verify_command(
            pact=str(tmp_path / "missing.json"),
            states=states_module(),
            provider="OrderService",
            log_dir=str(tmp_path / "logs"),
        )

        assert code == ExitCode.RETRIEVAL_ERROR

    def test_half_authorization_is_config_error(self, pact_file, states_module, tmp_path):
        code = verify_command(
            pact=pact_file,
            states=states_module(),
            auth_scheme="Bearer",
            log_dir=str(tmp_path / "logs"),
        )

        assert code == ExitCode.CONFIG_ERROR


class TestParser:
    """Tests for argument parsing."""

    def test_register_verify_parser(self):
        parser = argparse.ArgumentParser()
        subparsers = parser.add_subparsers(dest="command")
        register_verify_parser(subparsers)

        args = parser.parse_args(
            [
                "verify",
                "pact.json",
                "--states",
                "app.states:register",
                "--provider-state",
                "A",
                "--publish",
                "--provider-version",
                "1.0.0",
            ]
        )

        assert args.pact == "pact.json"
        assert args.states == "app.states:register"
        assert args.provider_state == "A"
        assert args.publish is True
        assert args.provider_version == "1.0.0"
        assert args.config_path is None

    def test_states_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["verify", "pact.json"])

    def test_handle_verify_command(self, pact_file, states_module, tmp_path):
        args = build_parser().parse_args(
            [
                "verify",
                pact_file,
                "--states",
                states_module(),
                "--provider",
                "OrderService",
                "--log-dir",
                str(tmp_path / "logs"),
            ]
        )

        assert handle_verify_command(args) == ExitCode.SUCCESS

    def test_main_without_command_exits(self, monkeypatch):
        monkeypatch.setattr("pactverifier.cli.main.configure_logging", lambda level: None)

        with pytest.raises(SystemExit) as exc_info:
            main([])

        assert exc_info.value.code == 2
