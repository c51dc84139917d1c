"""
Models for message pact verification.

Pact file models are pydantic models validated straight from the pact JSON;
values created during a run are plain dataclasses.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from pactverifier.core.naming import to_lower_snake_case

MessageFactory = Callable[[], Any]
TearDown = Callable[[], None]


class Pacticipant(BaseModel):
    """A consumer or provider named in a pact."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Participant name")


class Link(BaseModel):
    """A HAL link supplied by the pact broker."""

    model_config = ConfigDict(frozen=True)

    title: Optional[str] = Field(None, description="Human readable link title")
    href: str = Field(..., description="Link target")


class Links(BaseModel):
    """Broker links embedded in a pact fetched from a broker."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")

    publish_verification_results: Optional[Link] = Field(
        None,
        alias="pb:publish-verification-results",
        description="Where verification results for this pact are POSTed",
    )


class Message(BaseModel):
    """
    A single message interaction.

    Only the description and provider state drive verification; the rest of
    the interaction (contents, metadata, matching rules...) is handed to the
    matcher untouched.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")

    description: str = Field(..., description="Interaction description")
    provider_state: Optional[str] = Field(
        None, alias="providerState", description="Provider state label"
    )
    contents: Any = Field(None, description="Expected message payload")
    metadata: Dict[str, Any] = Field(
        default_factory=dict, alias="metaData", description="Expected message metadata"
    )


class MessagePact(BaseModel):
    """A message pact between one consumer and one provider."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")

    consumer: Optional[Pacticipant] = None
    provider: Optional[Pacticipant] = None
    messages: List[Message] = Field(default_factory=list)
    links: Optional[Links] = Field(None, alias="_links")

    @property
    def publish_verification_results_link(self) -> Optional[Link]:
        """Broker link for publishing results, if the pact carries one."""
        if self.links is None:
            return None
        return self.links.publish_verification_results

    def generate_pact_file_name(self) -> str:
        """
        File name conventionally used for this pact.

        Missing participants leave their segment empty, e.g. a pact without a
        consumer for provider "OrderService" gives "-order_service.json".
        """
        consumer = self.consumer.name if self.consumer else ""
        provider = self.provider.name if self.provider else ""
        return to_lower_snake_case(f"{consumer}-{provider}.json")

    def with_messages(self, messages: List[Message]) -> "MessagePact":
        """Return a copy of this pact holding only the given messages."""
        return self.model_copy(update={"messages": list(messages)})


@dataclass(frozen=True)
class PactUriOptions:
    """Authorization applied to pact retrieval and result publication."""

    authorization_scheme: str
    authorization_value: str

    @classmethod
    def basic(cls, username: str, password: str) -> "PactUriOptions":
        token = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
        return cls("Basic", token)

    @classmethod
    def bearer(cls, token: str) -> "PactUriOptions":
        return cls("Bearer", token)

    @property
    def authorization_header(self) -> str:
        return f"{self.authorization_scheme} {self.authorization_value}"

    def headers(self) -> dict[str, str]:
        return {"Authorization": self.authorization_header}


@dataclass(frozen=True)
class ProviderState:
    """
    A provider state registered by the provider under test.

    ``setup`` puts the provider into the named state and returns the message
    the provider produces in it. ``teardown`` undoes any side effects.
    """

    name: str
    setup: MessageFactory
    teardown: Optional[TearDown] = None


@dataclass
class VerificationResult:
    """Outcome of a whole verification run."""

    provider_application_version: Optional[str]
    success: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Wire representation published to the broker."""
        return {
            "providerApplicationVersion": self.provider_application_version,
            "success": self.success,
        }


@dataclass
class MatchResult:
    """Result of matching one produced message against its interaction."""

    matched: bool
    mismatches: List[str] = field(default_factory=list)

    @classmethod
    def ok(cls) -> "MatchResult":
        return cls(matched=True)

    @classmethod
    def failed(cls, mismatches: List[str]) -> "MatchResult":
        return cls(matched=False, mismatches=list(mismatches))
