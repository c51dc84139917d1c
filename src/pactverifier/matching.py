"""
Message matching.

The verifier only depends on the MessageMatcher protocol. ContentMatcher is
the default: plain structural equality of the message contents, reporting
every differing path. Pact matching rules (type matchers, regexes...) are
left to matchers supplied by the caller.
"""

from __future__ import annotations

from typing import Any, List, Protocol

from pactverifier.models import MatchResult, Message


class MessageMatcher(Protocol):
    """Decides whether a produced message satisfies an interaction."""

    def match(self, expected: Message, actual: Any) -> MatchResult:
        ...


def produced_contents(actual: Any) -> Any:
    """
    Extract the payload from whatever a provider state setup returned.

    Setups may return a Message, a dict shaped like a pact message (with a
    "contents" key) or the bare payload.
    """
    if isinstance(actual, Message):
        return actual.contents
    if isinstance(actual, dict) and "contents" in actual:
        return actual["contents"]
    return actual


class ContentMatcher:
    """Structural equality matcher for message contents."""

    def match(self, expected: Message, actual: Any) -> MatchResult:
        mismatches: List[str] = []
        _compare(expected.contents, produced_contents(actual), "$", mismatches)
        if mismatches:
            return MatchResult.failed(mismatches)
        return MatchResult.ok()


def _compare(expected: Any, actual: Any, path: str, mismatches: List[str]) -> None:
    if isinstance(expected, dict):
        if not isinstance(actual, dict):
            mismatches.append(f"{path}: expected an object but got {_describe(actual)}")
            return
        for key, value in expected.items():
            if key not in actual:
                mismatches.append(f"{path}.{key}: missing")
                continue
            _compare(value, actual[key], f"{path}.{key}", mismatches)
        for key in actual:
            if key not in expected:
                mismatches.append(f"{path}.{key}: unexpected key")
        return

    if isinstance(expected, list):
        if not isinstance(actual, list):
            mismatches.append(f"{path}: expected an array but got {_describe(actual)}")
            return
        if len(expected) != len(actual):
            mismatches.append(
                f"{path}: expected {len(expected)} items but got {len(actual)}"
            )
            return
        for index, (exp_item, act_item) in enumerate(zip(expected, actual)):
            _compare(exp_item, act_item, f"{path}[{index}]", mismatches)
        return

    # bool is an int subclass; True must not equal 1 here
    if type(expected) is bool or type(actual) is bool:
        if expected is not actual:
            mismatches.append(f"{path}: expected {expected!r} but got {actual!r}")
        return

    if expected != actual:
        mismatches.append(f"{path}: expected {expected!r} but got {actual!r}")


def _describe(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, list):
        return "an array"
    if isinstance(value, dict):
        return "an object"
    return repr(value)
