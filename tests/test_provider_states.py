"""Tests for the provider state registry."""

from pactverifier.models import ProviderState
from pactverifier.provider_states import ProviderStates, RegistrationResult


class TestProviderStates:
    """Tests for ProviderStates."""

    def test_add_and_find(self):
        states = ProviderStates()
        state = ProviderState("an order exists", lambda: {"orderId": 1})

        assert states.add(state) is RegistrationResult.REGISTERED
        assert states.find("an order exists") is state
        assert "an order exists" in states
        assert len(states) == 1

    def test_add_duplicate_reports_already_registered(self):
        states = ProviderStates()
        first = ProviderState("A", lambda: 1)
        second = ProviderState("A", lambda: 2)

        states.add(first)

        assert states.add(second) is RegistrationResult.ALREADY_REGISTERED
        assert states.find("A") is first

    def test_find_unknown_returns_none(self):
        assert ProviderStates().find("missing") is None

    def test_names_keep_registration_order(self):
        states = ProviderStates()
        for name in ["C", "A", "B"]:
            states.add(ProviderState(name, lambda: None))

        assert states.names() == ["C", "A", "B"]
        assert [s.name for s in states] == ["C", "A", "B"]

    def test_global_hooks(self):
        calls = []
        states = ProviderStates(
            setup=lambda: calls.append("setup"),
            teardown=lambda: calls.append("teardown"),
        )

        states.run_setup()
        states.run_teardown()

        assert calls == ["setup", "teardown"]

    def test_global_hooks_are_optional(self):
        states = ProviderStates()
        states.run_setup()
        states.run_teardown()
