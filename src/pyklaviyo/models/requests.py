"""Pydantic request models for client entrypoints.

These models provide a consistent "validate → build → send" flow.
They are used internally by :class:`pyklaviyo.client.KlaviyoClient` and by
the batch operations to reject malformed items before any request is sent.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import ConfigDict, Field, field_validator, model_validator

from pyklaviyo.models._base import KlaviyoRequestModel, non_empty

PROFILE_IDENTIFIER_FIELDS: tuple[str, ...] = ("email", "phone_number", "external_id")


class TrackEventRequest(KlaviyoRequestModel):
    """A single event to track against a profile email."""

    email: str
    event_name: str
    properties: dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime | str | None = None

    @field_validator("email")
    @classmethod
    def _email_non_empty(cls, value: str) -> str:
        return non_empty(value, "email")

    @field_validator("event_name")
    @classmethod
    def _event_name_non_empty(cls, value: str) -> str:
        return non_empty(value, "event_name")

    @field_validator("properties", mode="before")
    @classmethod
    def _properties_default(cls, value: Any) -> Any:
        return {} if value is None else value


class ProfileAttributes(KlaviyoRequestModel):
    """Free-form profile attributes with at least one identifier.

    Any attribute besides the identifiers (``first_name``, ``location``,
    ``properties`` ...) is passed through unchanged.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="allow",
        alias_generator=None,
        str_strip_whitespace=True,
    )

    email: str | None = None
    phone_number: str | None = None
    external_id: str | None = None

    @model_validator(mode="after")
    def _require_identifier(self) -> ProfileAttributes:
        if not self.identifier:
            raise ValueError("Missing required identifier (email, phone_number, or external_id)")
        return self

    @property
    def identifier(self) -> str | None:
        """First non-empty identifier, in email → phone → external id order."""
        for name in PROFILE_IDENTIFIER_FIELDS:
            value = getattr(self, name)
            if value:
                return str(value)
        return None

    def to_attributes(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class SubscriptionRequest(KlaviyoRequestModel):
    """One or more emails to subscribe to a list."""

    emails: list[str] = Field(min_length=1)
    list_id: str
    custom_source: str

    @field_validator("emails")
    @classmethod
    def _emails_non_empty(cls, value: list[str]) -> list[str]:
        return [non_empty(email, "email") for email in value]

    @field_validator("list_id")
    @classmethod
    def _list_id_non_empty(cls, value: str) -> str:
        return non_empty(value, "list_id")


class WebhookRegistrationRequest(KlaviyoRequestModel):
    """Endpoint URL and event types for a webhook registration."""

    url: str
    events: list[str] = Field(default_factory=list)

    @field_validator("url")
    @classmethod
    def _url_is_http(cls, value: str) -> str:
        url = non_empty(value, "url")
        if not url.startswith(("http://", "https://")):
            raise ValueError("url must be an http(s) URL")
        return url
