"""Batch operation results."""

from __future__ import annotations

from collections.abc import Iterator
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, RootModel


class BatchFailureKind(StrEnum):
    VALIDATION = "validation"
    UPSTREAM = "upstream"
    PROCESSING = "processing"


class BatchItemResult(BaseModel):
    """Outcome of one batch item, at the item's input index."""

    model_config = ConfigDict(frozen=True)

    index: int
    success: bool
    response: Any = None
    error: str | None = None
    failure_kind: BatchFailureKind | None = None


class BatchResult(RootModel[list[BatchItemResult]]):
    """Per-item outcomes of a batch run, in input order.

    Always holds exactly one result per input item; partial success is a
    normal outcome.
    """

    model_config = ConfigDict(frozen=True)

    def __len__(self) -> int:
        return len(self.root)

    def __iter__(self) -> Iterator[BatchItemResult]:  # type: ignore[override]
        return iter(self.root)

    def __getitem__(self, index: int) -> BatchItemResult:
        return self.root[index]

    @property
    def items(self) -> list[BatchItemResult]:
        return list(self.root)

    @property
    def succeeded(self) -> int:
        return sum(1 for item in self.root if item.success)

    @property
    def failed(self) -> int:
        return sum(1 for item in self.root if not item.success)

    @property
    def all_succeeded(self) -> bool:
        return all(item.success for item in self.root)

    def failures(self, kind: BatchFailureKind | None = None) -> list[BatchItemResult]:
        """Failed items, optionally restricted to one failure kind."""
        return [
            item
            for item in self.root
            if not item.success and (kind is None or item.failure_kind == kind)
        ]
