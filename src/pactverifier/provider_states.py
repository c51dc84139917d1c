from __future__ import annotations

from enum import Enum
from typing import Callable, Dict, Iterator, List, Optional

from pactverifier.models import ProviderState

Hook = Callable[[], None]


class RegistrationResult(Enum):
    """Outcome of adding a provider state to the registry."""

    REGISTERED = "registered"
    ALREADY_REGISTERED = "already_registered"


class ProviderStates:
    """
    In-memory registry of provider states for one verifier.

    Also carries the global setup/teardown pair that brackets a whole
    verification run, as opposed to the per-state hooks that bracket each
    interaction.
    """

    def __init__(self, setup: Optional[Hook] = None, teardown: Optional[Hook] = None) -> None:
        self._setup = setup
        self._teardown = teardown
        self._states: Dict[str, ProviderState] = {}

    def add(self, state: ProviderState) -> RegistrationResult:
        if state.name in self._states:
            return RegistrationResult.ALREADY_REGISTERED
        self._states[state.name] = state
        return RegistrationResult.REGISTERED

    def find(self, name: str) -> Optional[ProviderState]:
        return self._states.get(name)

    def names(self) -> List[str]:
        return list(self._states)

    def run_setup(self) -> None:
        if self._setup is not None:
            self._setup()

    def run_teardown(self) -> None:
        if self._teardown is not None:
            self._teardown()

    def __contains__(self, name: object) -> bool:
        return name in self._states

    def __iter__(self) -> Iterator[ProviderState]:
        return iter(self._states.values())

    def __len__(self) -> int:
        return len(self._states)
