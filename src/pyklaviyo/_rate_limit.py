"""Request pacing gate.

A :class:`RateLimiter` enforces a minimum spacing between successive API
requests issued by one client.  It is deliberate backpressure: the calling
coroutine sleeps until its turn instead of queueing work.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import math
import time
from collections.abc import AsyncIterator, Awaitable, Callable

from pyklaviyo.exceptions import KlaviyoConfigError

_logger = logging.getLogger(__name__)


class RateLimiter:
    """Minimum-interval gate shared by every request of a client.

    Parameters
    ----------
    requests_per_second : float
        Allowed request rate.  The minimum interval between two gated
        requests is ``ceil(1000 / requests_per_second)`` milliseconds.
    clock : callable
        Monotonic clock returning seconds.  Injected by tests.
    sleep : callable
        Coroutine function used to wait.  Injected by tests.
    """

    def __init__(
        self,
        requests_per_second: float,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if requests_per_second <= 0:
            raise KlaviyoConfigError(f"requests_per_second must be positive, got {requests_per_second}")
        self._requests_per_second = requests_per_second
        self._min_interval_ms = math.ceil(1000 / requests_per_second)
        self._last_request_at_ms: float | None = None
        self._clock = clock
        self._sleep = sleep
        self._lock = asyncio.Lock()

    @property
    def requests_per_second(self) -> float:
        return self._requests_per_second

    @property
    def min_interval_ms(self) -> int:
        return self._min_interval_ms

    @property
    def last_request_at_ms(self) -> float | None:
        """Baseline of the last gate, or ``None`` before the first one."""
        return self._last_request_at_ms

    def _now_ms(self) -> float:
        return self._clock() * 1000.0

    async def _wait_turn(self) -> float:
        delay = 0.0
        if self._last_request_at_ms is not None:
            elapsed_ms = self._now_ms() - self._last_request_at_ms
            if elapsed_ms < self._min_interval_ms:
                delay = (self._min_interval_ms - elapsed_ms) / 1000.0
                _logger.debug("Rate limiting: sleeping for %.3f seconds", delay)
                # A cancelled sleep leaves the previous baseline in place.
                await self._sleep(delay)
        self._last_request_at_ms = self._now_ms()
        return delay

    async def gate(self) -> float:
        """Wait until the next request may start, then record it.

        Returns the number of seconds spent waiting (``0.0`` when no wait
        was needed, which is always the case for the first gate).
        """
        async with self._lock:
            return await self._wait_turn()

    @contextlib.asynccontextmanager
    async def throttle(self) -> AsyncIterator[float]:
        """Gate a request and keep other coroutines out until it finishes.

        Usage::

            async with limiter.throttle():
                await transport.request(...)
        """
        async with self._lock:
            yield await self._wait_turn()

    def reset(self) -> None:
        """Forget the last request so the next gate does not wait."""
        self._last_request_at_ms = None
