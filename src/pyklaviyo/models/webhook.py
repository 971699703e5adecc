"""Normalized inbound webhook payload."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

UNKNOWN_WEBHOOK_TYPE = "unknown"


class WebhookEnvelope(BaseModel):
    """The parts of a webhook document handlers care about.

    ``raw`` keeps the whole decoded document for anything the envelope
    does not extract.
    """

    model_config = ConfigDict(frozen=True)

    type: str = UNKNOWN_WEBHOOK_TYPE
    id: str | None = None
    attributes: dict[str, Any] = Field(default_factory=dict)
    raw: Any = None

    @classmethod
    def from_payload(cls, payload: Any) -> WebhookEnvelope:
        """Extract ``data.type``, ``data.id`` and ``data.attributes`` from *payload*."""
        data = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(data, dict):
            return cls(raw=payload)

        event_type = data.get("type")
        event_id = data.get("id")
        attributes = data.get("attributes")
        return cls(
            type=str(event_type) if event_type is not None else UNKNOWN_WEBHOOK_TYPE,
            id=str(event_id) if event_id is not None else None,
            attributes=attributes if isinstance(attributes, dict) else {},
            raw=payload,
        )
