"""Event tracking.

Endpoint:
  - POST /api/events/
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from pyklaviyo._api._common import post_document, resource_document
from pyklaviyo._transport import Transport

_ENDPOINT = "/api/events/"


def iso_timestamp(value: datetime | str | None = None, *, now: datetime | None = None) -> str:
    """Return *value* as an ISO-8601 string, defaulting to the current UTC time."""
    if isinstance(value, str) and value:
        return value
    if isinstance(value, datetime):
        moment = value if value.tzinfo is not None else value.replace(tzinfo=UTC)
        return moment.isoformat(timespec="seconds")
    moment = now if now is not None else datetime.now(UTC)
    return moment.isoformat(timespec="seconds")


def build_event_request(
    email: str,
    event_name: str,
    properties: Mapping[str, Any] | None = None,
    timestamp: datetime | str | None = None,
    *,
    now: datetime | None = None,
) -> dict[str, Any]:
    """Build the create-event document for *event_name* on the profile *email*."""
    return resource_document(
        "event",
        {
            "profile": {"email": email},
            "metric": {"name": event_name},
            "properties": dict(properties or {}),
            "time": iso_timestamp(timestamp, now=now),
        },
    )


async def create_event(transport: Transport, document: Mapping[str, Any]) -> dict[str, Any]:
    """Send a create-event document.  The API answers 202 with an empty body."""
    return await post_document(transport, _ENDPOINT, document)
