"""Shared helpers for Klaviyo API endpoint modules.

This module centralizes the repeated patterns:
- building a ``{"data": {"type", "attributes", "relationships"}}`` resource document
- posting a resource document
- pulling the primary ``data`` member out of a response

It is internal to pyklaviyo and may change at any time.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pyklaviyo._transport import Transport


def resource_document(
    resource_type: str,
    attributes: Mapping[str, Any],
    *,
    relationships: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Build the JSON:API request document for one resource."""
    data: dict[str, Any] = {
        "type": resource_type,
        "attributes": dict(attributes),
    }
    if relationships:
        data["relationships"] = dict(relationships)
    return {"data": data}


def relationship(resource_type: str, resource_id: str) -> dict[str, Any]:
    """Build a to-one relationship linkage ``{"data": {"type", "id"}}``."""
    return {"data": {"type": resource_type, "id": resource_id}}


def response_data(response: Mapping[str, Any]) -> list[Any]:
    """Return the primary ``data`` member of a collection response as a list."""
    data = response.get("data")
    if isinstance(data, list):
        return data
    if data is None:
        return []
    return [data]


async def post_document(transport: Transport, path: str, document: Mapping[str, Any]) -> dict[str, Any]:
    return await transport.request("POST", path, json_body=document)
