"""Batch orchestration over single-item operations.

Items are validated and sent one at a time, in input order, so every item
still goes through the client's rate limiter.  A failing item never stops
the batch and nothing is rolled back: the result holds one entry per input
item and partial success is the normal outcome.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Any, TypeVar

from pyklaviyo.exceptions import KlaviyoUpstreamError, KlaviyoValidationError
from pyklaviyo.models.batch import BatchFailureKind, BatchItemResult, BatchResult

_logger = logging.getLogger(__name__)

T = TypeVar("T")


async def run_batch(
    items: Sequence[Any],
    parse: Callable[[Any], T],
    operation: Callable[[T], Awaitable[Any]],
    *,
    label: str = "items",
) -> BatchResult:
    """Validate and send each item, collecting per-index outcomes.

    Parameters
    ----------
    items : sequence
        Raw caller items.
    parse : callable
        Validates one raw item, raising :class:`KlaviyoValidationError` when
        it is structurally invalid.  Invalid items are never sent.
    operation : callable
        Coroutine function sending one parsed item.  Its return value becomes
        the item's ``response``; raising marks the item failed.
    label : str
        Item kind used in log lines (``"events"``, ``"profiles"``).

    Returns
    -------
    BatchResult
        One result per input item, in input order.
    """
    _logger.info("Batch processing %d %s", len(items), label)
    results: list[BatchItemResult] = []

    for index, item in enumerate(items):
        try:
            parsed = parse(item)
        except KlaviyoValidationError as exc:
            _logger.error("Item #%d of %s rejected: %s", index, label, exc)
            results.append(
                BatchItemResult(
                    index=index,
                    success=False,
                    error=str(exc),
                    failure_kind=BatchFailureKind.VALIDATION,
                )
            )
            continue

        try:
            response = await operation(parsed)
        except KlaviyoUpstreamError as exc:
            _logger.error("Item #%d of %s failed upstream: %s", index, label, exc)
            results.append(
                BatchItemResult(
                    index=index,
                    success=False,
                    error=str(exc),
                    failure_kind=BatchFailureKind.UPSTREAM,
                )
            )
            continue
        except Exception as exc:  # noqa: BLE001
            _logger.error("Item #%d of %s failed: %r", index, label, exc)
            results.append(
                BatchItemResult(
                    index=index,
                    success=False,
                    error=repr(exc),
                    failure_kind=BatchFailureKind.PROCESSING,
                )
            )
            continue

        results.append(BatchItemResult(index=index, success=True, response=response))

    result = BatchResult(results)
    _logger.info(
        "Batch %s completed: %d succeeded, %d failed",
        label,
        result.succeeded,
        result.failed,
    )
    return result
