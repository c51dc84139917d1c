"""
Run-level configuration for a pact verifier.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError

from pactverifier.config.settings import DEFAULT_LOG_DIR, Settings, get_settings
from pactverifier.core.errors import ConfigurationError
from pactverifier.reporting import (
    ConsoleReportOutputter,
    FileReportOutputter,
    ReportOutputter,
)


def default_report_outputters() -> list[ReportOutputter]:
    return [ConsoleReportOutputter(), FileReportOutputter()]


class ConfigFileValues(BaseModel):
    """Values a config file may set, coerced like the matching Settings fields."""

    model_config = ConfigDict(extra="forbid")

    log_dir: str | None = None
    publish_verification_results: bool | None = None
    provider_version: str | None = None
    http_timeout: float | None = None


@dataclass
class PactVerifierConfig:
    """Settings that apply to every run of a verifier."""

    log_dir: str = DEFAULT_LOG_DIR
    report_outputters: list[ReportOutputter] = field(default_factory=default_report_outputters)
    publish_verification_results: bool = False
    provider_version: str | None = None
    http_timeout: float = 30.0

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> PactVerifierConfig:
        settings = settings or get_settings()
        return cls(
            log_dir=settings.log_dir,
            publish_verification_results=settings.publish_verification_results,
            provider_version=settings.provider_version,
            http_timeout=settings.http_timeout,
        )

    def merged(self, data: dict[str, Any]) -> PactVerifierConfig:
        """
        Return a copy with the values from a config file applied.

        Values are type-checked first, so a quoted ``"false"`` is false and a
        non-numeric timeout is rejected. Keys set to null are ignored.

        Raises:
            ConfigurationError: Unknown keys or values of the wrong type.
        """
        unknown = sorted(set(data) - set(ConfigFileValues.model_fields))
        if unknown:
            raise ConfigurationError(
                "Unknown verifier configuration keys",
                {"keys": ", ".join(unknown)},
            )

        try:
            values = ConfigFileValues.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(
                "Invalid verifier configuration values",
                {"errors": "; ".join(_describe(error) for error in e.errors())},
            ) from e
        return replace(self, **values.model_dump(exclude_none=True))


def _describe(error: dict[str, Any]) -> str:
    location = ".".join(str(part) for part in error["loc"])
    return f"{location}: {error['msg']}"
