"""
Verification result publishing.

POSTs the outcome of a run to the pact broker link embedded in the pact.
"""

from __future__ import annotations

from typing import Optional

import httpx
import structlog

from pactverifier.core.errors import ConfigurationError, PublicationError
from pactverifier.models import MessagePact, PactUriOptions, VerificationResult

logger = structlog.get_logger()


class ResultPublisher:
    """
    Publishes verification results to a pact broker.

    A single blocking POST per call; failures are not retried.
    """

    def __init__(
        self,
        client: httpx.Client,
        options: Optional[PactUriOptions] = None,
        log: Optional[structlog.stdlib.BoundLogger] = None,
    ):
        self._client = client
        self._options = options
        self._log = log or logger

    def publish(self, pact: MessagePact, result: VerificationResult) -> None:
        """
        Publish ``result`` to the pact's publish-verification-results link.

        Raises:
            ConfigurationError: The pact carries no publish link.
            PublicationError: The broker could not be reached or rejected the result.
        """
        link = pact.publish_verification_results_link
        if link is None or not link.href:
            raise ConfigurationError(
                "Publishing verification results was requested but the pact has no "
                "'pb:publish-verification-results' link",
                {"pact": pact.generate_pact_file_name()},
            )

        headers = self._options.headers() if self._options else {}
        try:
            response = self._client.post(link.href, json=result.to_dict(), headers=headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            self._log.error(
                "verification_results_rejected",
                url=link.href,
                status=e.response.status_code,
            )
            raise PublicationError(
                f"Broker rejected verification results with HTTP {e.response.status_code}",
                {"url": link.href, "status": e.response.status_code},
            ) from e
        except httpx.HTTPError as e:
            self._log.error("verification_results_unreachable", url=link.href, error=str(e))
            raise PublicationError(
                "Verification results could not be delivered to the broker",
                {"url": link.href},
            ) from e
        except httpx.InvalidURL as e:
            self._log.error("verification_results_invalid_url", url=link.href, error=str(e))
            raise PublicationError(
                "The broker's verification results link is not a valid url",
                {"url": link.href},
            ) from e

        self._log.info(
            "verification_results_published",
            url=link.href,
            success=result.success,
            provider_version=result.provider_application_version,
        )
