"""Internal read operations for :class:`pyklaviyo.client.KlaviyoClient`.

Reads consult the file cache first and only hit the API (through the rate
limiter) on a miss.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import TYPE_CHECKING, Any

from pyklaviyo._api._common import response_data
from pyklaviyo._api.filters import build_filter_expression, filter_cache_key
from pyklaviyo._api.lists import fetch_lists
from pyklaviyo._api.metrics import fetch_metrics
from pyklaviyo._api.profiles import query_profiles
from pyklaviyo._constants import LISTS_CACHE_KEY, METRICS_CACHE_KEY
from pyklaviyo._transport import Transport
from pyklaviyo.exceptions import KlaviyoUpstreamError, KlaviyoValidationError
from pyklaviyo.models.filters import FilterClause, FilterOperator, LogicalOperator

if TYPE_CHECKING:
    from pyklaviyo.client import KlaviyoClient

_logger = logging.getLogger(__name__)


async def get_profiles_with_filters(
    client: KlaviyoClient,
    filters: Sequence[FilterClause | Mapping[str, Any]],
    operator: LogicalOperator | str = LogicalOperator.AND,
) -> list[dict[str, Any]] | None:
    try:
        expression = build_filter_expression(filters, operator)
    except KlaviyoValidationError as exc:
        _logger.error("%s", exc)
        return None
    _logger.info("Querying profiles with filter: %s", expression)

    cache_key = filter_cache_key(expression)
    cached = client.cache.get(cache_key)
    if cached is not None:
        _logger.info("Retrieved profiles from cache for filter: %s", expression)
        return cached

    try:
        response = await client._gated(lambda transport: query_profiles(transport, expression))
    except KlaviyoUpstreamError as exc:
        _logger.error("Failed to query profiles: %s", exc)
        return None

    profiles = response_data(response)
    if profiles:
        client.cache.put(cache_key, profiles)
        _logger.info("Found %d profiles matching filter", len(profiles))
    else:
        _logger.info("No profiles found matching filter")
    return profiles


async def get_profile(client: KlaviyoClient, identifier_type: str, value: str) -> dict[str, Any] | None:
    clause = {"field": identifier_type, "operator": FilterOperator.EQUALS, "value": value}
    profiles = await get_profiles_with_filters(client, [clause])
    return profiles[0] if profiles else None


async def _cached_collection(
    client: KlaviyoClient,
    *,
    cache_key: str,
    label: str,
    fetch: Callable[[Transport], Awaitable[dict[str, Any]]],
    refresh_cache: bool,
) -> list[dict[str, Any]]:
    _logger.info("Retrieving all %s", label)
    if not refresh_cache:
        cached = client.cache.get(cache_key)
        if cached is not None:
            _logger.info("Retrieved %s from cache", label)
            return cached

    try:
        response = await client._gated(fetch)
    except KlaviyoUpstreamError as exc:
        _logger.error("Failed to get %s: %s", label, exc)
        return []

    items = response_data(response)
    _logger.info("Retrieved %d %s", len(items), label)
    client.cache.put(cache_key, items)
    return items


async def get_metrics(client: KlaviyoClient, *, refresh_cache: bool = False) -> list[dict[str, Any]]:
    return await _cached_collection(
        client,
        cache_key=METRICS_CACHE_KEY,
        label="metrics",
        fetch=fetch_metrics,
        refresh_cache=refresh_cache,
    )


async def get_lists(client: KlaviyoClient, *, refresh_cache: bool = False) -> list[dict[str, Any]]:
    return await _cached_collection(
        client,
        cache_key=LISTS_CACHE_KEY,
        label="lists",
        fetch=fetch_lists,
        refresh_cache=refresh_cache,
    )
