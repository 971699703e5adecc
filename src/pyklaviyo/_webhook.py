"""Inbound webhook processing.

``raw body → JSON decode → WebhookEnvelope → handler``.  The processor
reports every failure as a ``False`` result instead of raising, so a web
endpoint can always answer the delivery.
"""

from __future__ import annotations

import inspect
import json
import logging
from collections.abc import Callable
from typing import Any

from pyklaviyo.exceptions import KlaviyoDecodeError, KlaviyoSignatureNotImplementedError
from pyklaviyo.models.webhook import WebhookEnvelope

_logger = logging.getLogger(__name__)

WebhookHandler = Callable[[WebhookEnvelope], Any]


def decode_payload(raw: bytes | bytearray | str) -> Any:
    """Decode a webhook body, raising :class:`KlaviyoDecodeError` on bad JSON."""
    try:
        return json.loads(raw)
    except (ValueError, TypeError) as exc:
        raise KlaviyoDecodeError(f"Failed to decode webhook payload: {exc}") from exc


def check_signature(raw: bytes | bytearray | str, signature_key: str | None) -> None:
    """Verify a webhook signature.

    Not available: always raises so an unverified payload is never mistaken
    for a verified one.
    """
    raise KlaviyoSignatureNotImplementedError("Webhook signature verification is not implemented")


class WebhookProcessor:
    """Decode, normalize and hand inbound webhooks to a caller-supplied handler."""

    def process(
        self,
        raw: bytes | bytearray | str,
        handler: WebhookHandler,
        *,
        verify_signature: bool = False,
        signature_key: str | None = None,
    ) -> bool:
        """Process one webhook delivery.

        Returns ``True`` once the handler ran without raising.  Returns
        ``False``, without calling the handler, when the body is not JSON or
        signature verification was requested; and ``False`` when the handler
        raised.  Handlers must be synchronous: a coroutine function, or a
        handler returning an awaitable, is reported as a failure.
        """
        _logger.info("Processing incoming webhook")

        if inspect.iscoroutinefunction(handler):
            _logger.error("Webhook handler %r is a coroutine function; handlers must be synchronous", handler)
            return False

        try:
            payload = decode_payload(raw)
        except KlaviyoDecodeError as exc:
            _logger.error("%s", exc)
            return False

        if verify_signature:
            try:
                check_signature(raw, signature_key)
            except KlaviyoSignatureNotImplementedError as exc:
                _logger.warning("%s; rejecting webhook", exc)
                return False

        envelope = WebhookEnvelope.from_payload(payload)
        try:
            result = handler(envelope)
        except Exception as exc:  # noqa: BLE001
            _logger.error("Failed to process webhook %s: %r", envelope.type, exc)
            return False

        if inspect.isawaitable(result):
            if inspect.iscoroutine(result):
                result.close()
            _logger.error("Webhook handler for %s returned an awaitable; handlers must be synchronous", envelope.type)
            return False

        _logger.info("Webhook processed successfully: %s", envelope.type)
        return True


class WebhookRouter:
    """Dispatch envelopes to handlers registered per webhook type.

    The router knows no event types of its own; callers register the ones
    they handle.  Usable directly as the processor's handler::

        router = WebhookRouter()
        router.register("unsubscribed", on_unsubscribe)
        client.process_webhook(body, router)
    """

    def __init__(self, default: WebhookHandler | None = None) -> None:
        self._handlers: dict[str, WebhookHandler] = {}
        self._default = default

    def register(self, event_type: str, handler: WebhookHandler) -> None:
        self._handlers[event_type] = handler

    def on(self, event_type: str) -> Callable[[WebhookHandler], WebhookHandler]:
        """Decorator form of :meth:`register`."""

        def decorator(handler: WebhookHandler) -> WebhookHandler:
            self.register(event_type, handler)
            return handler

        return decorator

    @property
    def event_types(self) -> frozenset[str]:
        return frozenset(self._handlers)

    def __call__(self, envelope: WebhookEnvelope) -> Any:
        handler = self._handlers.get(envelope.type, self._default)
        if handler is None:
            _logger.debug("No webhook handler for type %s", envelope.type)
            return None
        return handler(envelope)
