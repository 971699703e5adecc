"""Custom exception hierarchy for pyklaviyo."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any


class KlaviyoError(Exception):
    """Base exception for all pyklaviyo errors."""


class KlaviyoConfigError(KlaviyoError):
    """Invalid or missing configuration."""


class KlaviyoValidationError(KlaviyoError):
    """Caller input is missing required fields or is malformed.

    Detected locally before any request is sent, and never retried.
    """

    def __init__(self, message: str, *, fields: Sequence[str] = ()) -> None:
        self.fields = tuple(fields)
        super().__init__(message)


class KlaviyoUpstreamError(KlaviyoError):
    """Any failure signalled while talking to the Klaviyo API."""


class KlaviyoTransportError(KlaviyoUpstreamError):
    """HTTP-level failure (network, timeout, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class KlaviyoApiError(KlaviyoUpstreamError):
    """API rejected the request with a 4xx/5xx status."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        endpoint: str = "",
        errors: Sequence[dict[str, Any]] = (),
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        self.errors = list(errors)
        super().__init__(message)


class KlaviyoAuthenticationError(KlaviyoApiError):
    """API key missing, invalid, or lacking the required scope (401/403)."""


class KlaviyoRateLimitError(KlaviyoApiError):
    """Server-side throttling (429) still in effect after all transport retries."""


class KlaviyoDecodeError(KlaviyoError):
    """Inbound webhook body is not valid JSON."""


class KlaviyoCacheError(KlaviyoError):
    """Cache key is unusable or the cache directory could not be accessed."""


class KlaviyoSignatureNotImplementedError(KlaviyoError, NotImplementedError):
    """Webhook signature verification was requested but is not available.

    Raised instead of silently accepting an unverified payload.
    """
