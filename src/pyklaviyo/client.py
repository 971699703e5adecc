"""High-level async client for the Klaviyo API."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping, Sequence
from datetime import datetime
from typing import Any, TypeVar

import aiohttp

from pyklaviyo._cache import FileCache
from pyklaviyo._client import reads as _reads
from pyklaviyo._client import writes as _writes
from pyklaviyo._logging import configure_logging, remove_handlers
from pyklaviyo._rate_limit import RateLimiter
from pyklaviyo._transport import HttpTransport, Transport
from pyklaviyo._webhook import WebhookHandler, WebhookProcessor
from pyklaviyo.config import KlaviyoConfig
from pyklaviyo.exceptions import KlaviyoError
from pyklaviyo.models.batch import BatchResult
from pyklaviyo.models.filters import FilterClause, LogicalOperator

_logger = logging.getLogger(__name__)

T = TypeVar("T")


class KlaviyoClient:
    """Async helper around the Klaviyo API.

    Every request is paced by one :class:`RateLimiter`, list/metric/profile
    reads go through a :class:`FileCache`, and API failures are logged and
    turned into ``None``/``False``/``[]`` return values instead of raised.

    Usage::

        async with KlaviyoClient(KlaviyoConfig(api_key="pk_...")) as client:
            await client.track_event("ada@example.com", "Viewed Product", {"ProductID": "123"})
            metrics = await client.get_metrics()
    """

    def __init__(
        self,
        config: KlaviyoConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
        cache: FileCache | None = None,
        rate_limiter: RateLimiter | None = None,
    ) -> None:
        self._config = config
        self._log_handlers = configure_logging(config)
        self._external_session = session is not None
        self._http_session = session
        self._external_transport = transport is not None
        self._transport = transport
        self.cache = cache or FileCache(
            config.cache_dir,
            default_ttl=config.cache_ttl,
            enabled=config.cache_enabled,
        )
        self.rate_limiter = rate_limiter or RateLimiter(config.rate_limit)
        self._webhooks = WebhookProcessor()
        _logger.info("Klaviyo client initialized (rate limit %s req/s)", config.rate_limit)

    @property
    def config(self) -> KlaviyoConfig:
        return self._config

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> KlaviyoClient:
        if self._transport is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._transport = HttpTransport(self._config, self._http_session)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Release the HTTP session (unless injected) and the debug log handlers."""
        if not self._external_transport:
            self._transport = None
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        remove_handlers(self._log_handlers)
        self._log_handlers = []

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise KlaviyoError("Client not initialized. Use 'async with KlaviyoClient(...) as client:'")
        return self._transport

    async def _gated(self, call: Callable[[Transport], Awaitable[T]]) -> T:
        """Run one API call inside the rate limiter."""
        transport = self._require_transport()
        async with self.rate_limiter.throttle():
            return await call(transport)

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    async def track_event(
        self,
        email: str,
        event_name: str,
        properties: Mapping[str, Any] | None = None,
        timestamp: datetime | str | None = None,
    ) -> dict[str, Any] | None:
        """Track *event_name* for the profile *email*.

        Returns the API response (``{}`` for the usual empty 202 reply),
        or ``None`` on failure.
        """
        return await _writes.track_event(self, email, event_name, properties, timestamp)

    async def batch_track_events(self, events: Sequence[Mapping[str, Any]]) -> BatchResult:
        """Track each event of *events* (``email``, ``event_name``/``eventName``,
        optional ``properties`` and ``timestamp``) one by one."""
        return await _writes.batch_track_events(self, events)

    # ------------------------------------------------------------------
    # Profiles
    # ------------------------------------------------------------------

    async def upsert_profile(self, profile_data: Mapping[str, Any]) -> dict[str, Any] | None:
        """Create or update a profile identified by email, phone number or external id."""
        return await _writes.upsert_profile(self, profile_data)

    async def batch_upsert_profiles(self, profiles: Sequence[Mapping[str, Any]]) -> BatchResult:
        return await _writes.batch_upsert_profiles(self, profiles)

    async def get_profiles_with_filters(
        self,
        filters: Sequence[FilterClause | Mapping[str, Any]],
        operator: LogicalOperator | str = LogicalOperator.AND,
    ) -> list[dict[str, Any]] | None:
        """Query profiles matching every (``and``) or any (``or``) clause.

        Returns the matching profiles (possibly empty), or ``None`` when the
        filters are invalid or the request failed.
        """
        return await _reads.get_profiles_with_filters(self, filters, operator)

    async def get_profile(self, identifier_type: str, value: str) -> dict[str, Any] | None:
        """Return the first profile whose *identifier_type* equals *value*."""
        return await _reads.get_profile(self, identifier_type, value)

    # ------------------------------------------------------------------
    # Lists & metrics
    # ------------------------------------------------------------------

    async def subscribe_to_list(self, email: str, list_id: str) -> dict[str, Any] | None:
        return await _writes.subscribe_to_list(self, email, list_id)

    async def batch_subscribe_to_list(self, emails: Sequence[str], list_id: str) -> bool:
        """Subscribe all *emails* to *list_id* in a single request."""
        return await _writes.batch_subscribe_to_list(self, emails, list_id)

    async def get_metrics(self, refresh_cache: bool = False) -> list[dict[str, Any]]:
        return await _reads.get_metrics(self, refresh_cache=refresh_cache)

    async def get_lists(self, refresh_cache: bool = False) -> list[dict[str, Any]]:
        return await _reads.get_lists(self, refresh_cache=refresh_cache)

    # ------------------------------------------------------------------
    # Webhooks
    # ------------------------------------------------------------------

    async def register_webhook(self, url: str, events: Sequence[str] | None = None) -> dict[str, Any] | None:
        return await _writes.register_webhook(self, url, events)

    def process_webhook(
        self,
        raw: bytes | bytearray | str,
        handler: WebhookHandler,
        verify_signature: bool = False,
        signature_key: str | None = None,
    ) -> bool:
        """Decode an inbound webhook body and pass its envelope to *handler*.

        See :meth:`pyklaviyo._webhook.WebhookProcessor.process`.
        """
        return self._webhooks.process(
            raw,
            handler,
            verify_signature=verify_signature,
            signature_key=signature_key,
        )

    # ------------------------------------------------------------------
    # Cache
    # ------------------------------------------------------------------

    def clear_cache(self, key: str) -> bool:
        """Remove one cache entry (``metrics``, ``lists``, ``profiles_<md5>``)."""
        return self.cache.clear(key)

    def clear_all_cache(self) -> bool:
        return self.cache.clear_all()
