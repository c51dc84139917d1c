"""
Pact file retrieval.

Loads a message pact from a local file or from a pact broker over HTTP.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import httpx
import structlog
from pydantic import ValidationError

from pactverifier.core.errors import RetrievalError
from pactverifier.models import MessagePact, PactUriOptions

logger = structlog.get_logger()


def is_web_uri(location: str) -> bool:
    """True for http:// and https:// locations (case-insensitive)."""
    lowered = location.lower()
    return lowered.startswith("http://") or lowered.startswith("https://")


def load_pact(
    location: str,
    options: Optional[PactUriOptions] = None,
    *,
    client: httpx.Client,
) -> MessagePact:
    """
    Load and parse a message pact.

    Args:
        location: Filesystem path or http(s) URI of the pact file
        options: Authorization to send with an HTTP request
        client: HTTP client used for remote pacts

    Returns:
        The parsed MessagePact

    Raises:
        RetrievalError: The pact could not be read, fetched or parsed. The
            underlying exception is chained as ``__cause__``.
    """
    try:
        if is_web_uri(location):
            raw = _http_get_pact(location, options, client)
        else:
            raw = Path(location).read_text(encoding="utf-8")

        pact = MessagePact.model_validate_json(raw)
    except (httpx.HTTPError, httpx.InvalidURL, OSError, ValidationError, ValueError) as e:
        logger.warning(
            "pact_retrieval_failed",
            location=location,
            error_type=type(e).__name__,
            error=str(e),
        )
        raise RetrievalError(location, {"cause": type(e).__name__}) from e

    logger.debug("pact_loaded", location=location, messages=len(pact.messages))
    return pact


def _http_get_pact(
    location: str,
    options: Optional[PactUriOptions],
    client: httpx.Client,
) -> str:
    headers = options.headers() if options else {}
    response = client.get(location, headers=headers)
    response.raise_for_status()
    return response.text
