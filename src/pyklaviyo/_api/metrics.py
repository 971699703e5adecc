"""Metrics endpoint.

Endpoint:
  - GET /api/metrics/
"""

from __future__ import annotations

from typing import Any

from pyklaviyo._transport import Transport

_ENDPOINT = "/api/metrics/"


async def fetch_metrics(transport: Transport) -> dict[str, Any]:
    return await transport.request("GET", _ENDPOINT)
