"""Webhook registration.

Endpoint:
  - POST /api/webhooks/
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from pyklaviyo._api._common import post_document, resource_document
from pyklaviyo._transport import Transport

_ENDPOINT = "/api/webhooks/"


def build_webhook_registration(url: str, events: Sequence[str] = ()) -> dict[str, Any]:
    """Build the document registering *url* for the *events* types."""
    return resource_document("webhook", {"url": url, "events": list(events)})


async def create_webhook(transport: Transport, document: Mapping[str, Any]) -> dict[str, Any]:
    return await post_document(transport, _ENDPOINT, document)
