"""Lists and list subscriptions.

Endpoints:
  - POST /api/profile-subscription-bulk-create-jobs/
  - GET /api/lists/
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from pyklaviyo._api._common import post_document, relationship, resource_document
from pyklaviyo._transport import Transport

_SUBSCRIBE_ENDPOINT = "/api/profile-subscription-bulk-create-jobs/"
_LISTS_ENDPOINT = "/api/lists/"


def build_subscription_request(emails: Sequence[str], list_id: str, custom_source: str) -> dict[str, Any]:
    """Build the subscription document adding every email in *emails* to *list_id*."""
    return resource_document(
        "subscription",
        {
            "custom_source": custom_source,
            "profiles": [{"email": email} for email in emails],
        },
        relationships={"list": relationship("list", list_id)},
    )


async def create_subscription(transport: Transport, document: Mapping[str, Any]) -> dict[str, Any]:
    return await post_document(transport, _SUBSCRIBE_ENDPOINT, document)


async def fetch_lists(transport: Transport) -> dict[str, Any]:
    return await transport.request("GET", _LISTS_ENDPOINT)
