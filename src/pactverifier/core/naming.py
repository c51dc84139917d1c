"""
Name normalization for pact files and run logs.

Pact participants are usually named in PascalCase ("OrderService") or with
spaces ("Order Service"); file names derived from them are lower snake case.
"""

from __future__ import annotations

import re

# Boundaries where an underscore is inserted (applied in order)
_WORD_BOUNDARIES = [
    re.compile(r"(?<=[a-z0-9])(?=[A-Z])"),  # orderService -> order_Service
    re.compile(r"(?<=[A-Z])(?=[A-Z][a-z])"),  # HTTPServer -> HTTP_Server
]
_SEPARATORS = re.compile(r"[\s_]+")


def to_lower_snake_case(value: str) -> str:
    """
    Convert a name to lower snake case.

    Hyphens and dots are preserved so that composite names such as
    "Consumer-Provider.json" keep their separators.

    Examples:
        >>> to_lower_snake_case("OrderService")
        'order_service'
        >>> to_lower_snake_case("-OrderService.json")
        '-order_service.json'
        >>> to_lower_snake_case("Event API Consumer")
        'event_api_consumer'
    """
    if not value:
        return ""

    result = value.strip()
    for boundary in _WORD_BOUNDARIES:
        result = boundary.sub("_", result)
    result = _SEPARATORS.sub("_", result)
    return result.lower()
