"""Internal write operations for :class:`pyklaviyo.client.KlaviyoClient`.

These functions keep `client.py` small without changing the public API.
Each ``send_*`` helper builds and sends one request and lets upstream
errors propagate; the public operations around them log those errors and
return ``None``/``False`` instead.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import TYPE_CHECKING, Any

from pyklaviyo._api.events import build_event_request, create_event
from pyklaviyo._api.lists import build_subscription_request, create_subscription
from pyklaviyo._api.profiles import build_profile_request
from pyklaviyo._api.profiles import upsert_profile as upsert_profile_api
from pyklaviyo._api.webhooks import build_webhook_registration, create_webhook
from pyklaviyo._batch import run_batch
from pyklaviyo._constants import BATCH_SUBSCRIPTION_SOURCE, SINGLE_SUBSCRIPTION_SOURCE
from pyklaviyo.exceptions import KlaviyoUpstreamError, KlaviyoValidationError
from pyklaviyo.models._base import parse_request
from pyklaviyo.models.batch import BatchResult
from pyklaviyo.models.requests import (
    ProfileAttributes,
    SubscriptionRequest,
    TrackEventRequest,
    WebhookRegistrationRequest,
)

if TYPE_CHECKING:
    from pyklaviyo.client import KlaviyoClient

_logger = logging.getLogger(__name__)


def _parse_event(item: Any) -> TrackEventRequest:
    return parse_request(TrackEventRequest, item, label="event")


def _parse_profile(item: Any) -> ProfileAttributes:
    return parse_request(ProfileAttributes, item, label="profile")


async def send_event(client: KlaviyoClient, request: TrackEventRequest) -> dict[str, Any]:
    document = build_event_request(
        request.email,
        request.event_name,
        request.properties,
        request.timestamp,
    )
    return await client._gated(lambda transport: create_event(transport, document))


async def send_profile(client: KlaviyoClient, profile: ProfileAttributes) -> dict[str, Any]:
    document = build_profile_request(profile.to_attributes())
    return await client._gated(lambda transport: upsert_profile_api(transport, document))


async def send_subscription(client: KlaviyoClient, request: SubscriptionRequest) -> dict[str, Any]:
    document = build_subscription_request(request.emails, request.list_id, request.custom_source)
    return await client._gated(lambda transport: create_subscription(transport, document))


async def track_event(
    client: KlaviyoClient,
    email: str,
    event_name: str,
    properties: Mapping[str, Any] | None = None,
    timestamp: datetime | str | None = None,
) -> dict[str, Any] | None:
    _logger.info("Tracking event: %s for %s", event_name, email)
    try:
        request = _parse_event(
            {
                "email": email,
                "event_name": event_name,
                "properties": properties,
                "timestamp": timestamp,
            }
        )
    except KlaviyoValidationError as exc:
        _logger.error("%s", exc)
        return None

    try:
        response = await send_event(client, request)
    except KlaviyoUpstreamError as exc:
        _logger.error("Failed to track event: %s", exc)
        return None
    _logger.info("Event tracked successfully: %s", request.event_name)
    return response


async def batch_track_events(client: KlaviyoClient, events: Sequence[Mapping[str, Any]]) -> BatchResult:
    return await run_batch(
        events,
        _parse_event,
        lambda request: send_event(client, request),
        label="events",
    )


async def upsert_profile(client: KlaviyoClient, profile_data: Mapping[str, Any]) -> dict[str, Any] | None:
    try:
        profile = _parse_profile(profile_data)
    except KlaviyoValidationError as exc:
        _logger.error("%s", exc)
        return None

    _logger.info("Upserting profile for: %s", profile.identifier)
    try:
        response = await send_profile(client, profile)
    except KlaviyoUpstreamError as exc:
        _logger.error("Failed to upsert profile: %s", exc)
        return None
    _logger.info("Profile upserted successfully: %s", profile.identifier)
    return response


async def batch_upsert_profiles(client: KlaviyoClient, profiles: Sequence[Mapping[str, Any]]) -> BatchResult:
    return await run_batch(
        profiles,
        _parse_profile,
        lambda profile: send_profile(client, profile),
        label="profiles",
    )


async def subscribe_to_list(client: KlaviyoClient, email: str, list_id: str) -> dict[str, Any] | None:
    _logger.info("Subscribing %s to list: %s", email, list_id)
    try:
        request = parse_request(
            SubscriptionRequest,
            {"emails": [email], "list_id": list_id, "custom_source": SINGLE_SUBSCRIPTION_SOURCE},
            label="subscription",
        )
    except KlaviyoValidationError as exc:
        _logger.error("%s", exc)
        return None

    try:
        response = await send_subscription(client, request)
    except KlaviyoUpstreamError as exc:
        _logger.error("Failed to subscribe to list: %s", exc)
        return None
    _logger.info("Subscription successful for %s to list %s", email, list_id)
    return response


async def batch_subscribe_to_list(client: KlaviyoClient, emails: Sequence[str], list_id: str) -> bool:
    if not emails:
        _logger.error("No emails provided for batch subscription")
        return False

    _logger.info("Batch subscribing %d profiles to list: %s", len(emails), list_id)
    try:
        request = parse_request(
            SubscriptionRequest,
            {"emails": list(emails), "list_id": list_id, "custom_source": BATCH_SUBSCRIPTION_SOURCE},
            label="subscription",
        )
    except KlaviyoValidationError as exc:
        _logger.error("%s", exc)
        return False

    try:
        await send_subscription(client, request)
    except KlaviyoUpstreamError as exc:
        _logger.error("Failed to batch subscribe to list: %s", exc)
        return False
    _logger.info("Batch subscription successful for %d profiles to list %s", len(emails), list_id)
    return True


async def register_webhook(
    client: KlaviyoClient,
    url: str,
    events: Sequence[str] | None = None,
) -> dict[str, Any] | None:
    _logger.info("Registering webhook endpoint: %s", url)
    try:
        request = parse_request(
            WebhookRegistrationRequest,
            {"url": url, "events": list(events or [])},
            label="webhook registration",
        )
    except KlaviyoValidationError as exc:
        _logger.error("%s", exc)
        return None

    document = build_webhook_registration(request.url, request.events)
    try:
        response = await client._gated(lambda transport: create_webhook(transport, document))
    except KlaviyoUpstreamError as exc:
        _logger.error("Failed to register webhook: %s", exc)
        return None
    _logger.info("Webhook registered successfully")
    return response
