"""Profile upsert and query.

Endpoints:
  - POST /api/profile-import/
  - GET /api/profiles/
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pyklaviyo._api._common import post_document, resource_document
from pyklaviyo._transport import Transport

_logger = logging.getLogger(__name__)

_IMPORT_ENDPOINT = "/api/profile-import/"
_PROFILES_ENDPOINT = "/api/profiles/"


def build_profile_request(attributes: Mapping[str, Any]) -> dict[str, Any]:
    """Build the profile upsert document from profile attributes."""
    return resource_document("profile", attributes)


async def upsert_profile(transport: Transport, document: Mapping[str, Any]) -> dict[str, Any]:
    return await post_document(transport, _IMPORT_ENDPOINT, document)


async def query_profiles(transport: Transport, filter_expression: str) -> dict[str, Any]:
    """Fetch profiles matching *filter_expression* (one page)."""
    _logger.debug("Profile query filter=%s", filter_expression)
    return await transport.request("GET", _PROFILES_ENDPOINT, params={"filter": filter_expression})
