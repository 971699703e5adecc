"""HTTP transport for the Klaviyo JSON:API endpoints."""

from __future__ import annotations

import asyncio
import json
import logging
import math
from collections.abc import Awaitable, Callable, Mapping
from typing import Any, Protocol

import aiohttp

from pyklaviyo._constants import (
    JSON_API_CONTENT_TYPE,
    RETRY_BASE_DELAY,
    RETRY_MAX_DELAY,
    RETRYABLE_STATUS_CODES,
    USER_AGENT,
)
from pyklaviyo._redact import redact_for_log
from pyklaviyo.config import KlaviyoConfig
from pyklaviyo.exceptions import (
    KlaviyoApiError,
    KlaviyoAuthenticationError,
    KlaviyoRateLimitError,
    KlaviyoTransportError,
    KlaviyoUpstreamError,
)

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`HttpTransport`) concrete.
    """

    async def request(
        self,
        method: str,
        path: str,
        *,
        json_body: Mapping[str, Any] | None = None,
        params: Mapping[str, str] | None = None,
    ) -> dict[str, Any]:
        ...


def _error_details(body: Any) -> list[dict[str, Any]]:
    if isinstance(body, dict) and isinstance(body.get("errors"), list):
        return [err for err in body["errors"] if isinstance(err, dict)]
    return []


def _api_error(status: int, path: str, text: str) -> KlaviyoApiError:
    try:
        body = json.loads(text) if text else {}
    except json.JSONDecodeError:
        body = {}
    errors = _error_details(body)
    detail = errors[0].get("detail") if errors else text[:200]
    message = f"HTTP {status} from {path}: {detail}"
    if status in (401, 403):
        return KlaviyoAuthenticationError(message, status_code=status, endpoint=path, errors=errors)
    if status == 429:
        return KlaviyoRateLimitError(message, status_code=status, endpoint=path, errors=errors)
    return KlaviyoApiError(message, status_code=status, endpoint=path, errors=errors)


def _retry_delay(attempt: int, retry_after: str | None) -> float:
    if retry_after:
        try:
            seconds = float(retry_after)
        except ValueError:
            seconds = math.nan
        if math.isfinite(seconds):
            return min(max(seconds, 0.0), RETRY_MAX_DELAY)
    return min(RETRY_BASE_DELAY * (2 ** (attempt - 1)), RETRY_MAX_DELAY)


class HttpTransport:
    """aiohttp transport that authenticates requests and retries transient failures.

    Network errors, timeouts, 429 and 5xx responses are retried up to
    ``config.num_retries`` times.  Anything still failing afterwards is raised
    as a :class:`KlaviyoUpstreamError` subclass for the caller to handle.
    """

    def __init__(
        self,
        config: KlaviyoConfig,
        http_session: aiohttp.ClientSession,
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._config = config
        self._http = http_session
        self._sleep = sleep
        self._headers: dict[str, str] = {
            "accept": JSON_API_CONTENT_TYPE,
            "authorization": f"Klaviyo-API-Key {config.api_key}",
            "revision": config.revision,
            "user-agent": f"{USER_AGENT} {config.user_agent_suffix}".strip(),
        }
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    async def request(
        self,
        method: str,
        path: str,
        *,
        json_body: Mapping[str, Any] | None = None,
        params: Mapping[str, str] | None = None,
    ) -> dict[str, Any]:
        """Send one API request, retrying transient failures.

        Returns the decoded JSON body, or ``{}`` for empty (202/204) replies.
        """
        attempts = self._config.num_retries + 1
        for attempt in range(1, attempts + 1):
            try:
                return await self._send_once(method, path, json_body=json_body, params=params)
            except _RetryableError as exc:
                if attempt >= attempts:
                    raise exc.cause from exc.__cause__
                delay = _retry_delay(attempt, exc.retry_after)
                _logger.info(
                    "%s %s failed (attempt %d/%d): %s, retrying in %.1fs",
                    method,
                    path,
                    attempt,
                    attempts,
                    exc.cause,
                    delay,
                )
                await self._sleep(delay)
        raise KlaviyoTransportError(f"No attempt made for {path}", endpoint=path)

    async def _send_once(
        self,
        method: str,
        path: str,
        *,
        json_body: Mapping[str, Any] | None,
        params: Mapping[str, str] | None,
    ) -> dict[str, Any]:
        headers = dict(self._headers)
        data: str | None = None
        if json_body is not None:
            headers["content-type"] = JSON_API_CONTENT_TYPE
            data = json.dumps(json_body, separators=(",", ":"))

        url = f"{self._config.base_url}{path}"
        _logger.debug(
            "%s %s params=%s headers=%s body=%s",
            method,
            url,
            params,
            redact_for_log(headers),
            redact_for_log(json_body),
        )

        try:
            async with self._http.request(
                method,
                url,
                data=data,
                params=params,
                headers=headers,
                timeout=self._timeout,
            ) as resp:
                text = await resp.text()
                status = resp.status
                retry_after = resp.headers.get("Retry-After")
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise _RetryableError(
                KlaviyoTransportError(f"Request to {path} failed: {exc!r}", endpoint=path),
            ) from exc

        if status >= 400:
            error = _api_error(status, path, text)
            if status in RETRYABLE_STATUS_CODES:
                raise _RetryableError(error, retry_after=retry_after)
            raise error

        if not text.strip():
            return {}
        try:
            body = json.loads(text)
        except json.JSONDecodeError as exc:
            raise KlaviyoTransportError(
                f"Invalid JSON from {path}: {text[:200]}",
                status_code=status,
                endpoint=path,
            ) from exc
        if not isinstance(body, dict):
            raise KlaviyoTransportError(
                f"Unexpected JSON document from {path}: {type(body).__name__}",
                status_code=status,
                endpoint=path,
            )
        return body


class _RetryableError(Exception):
    """Internal marker wrapping an upstream error that may be retried."""

    def __init__(self, cause: KlaviyoUpstreamError, *, retry_after: str | None = None) -> None:
        self.cause = cause
        self.retry_after = retry_after
        super().__init__(str(cause))
