"""Cache entry model."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CacheEntry(BaseModel):
    """One cached payload and its absolute expiry.

    Serialized on disk as ``{"expires": <epoch seconds>, "data": <payload>}``.
    """

    model_config = ConfigDict(frozen=True)

    key: str
    payload: Any = None
    expires_at: float = Field(description="Expiry as seconds since the epoch")

    def is_expired(self, now: float) -> bool:
        return self.expires_at < now

    def to_document(self) -> dict[str, Any]:
        return {"expires": self.expires_at, "data": self.payload}

    @classmethod
    def from_document(cls, key: str, document: Any) -> CacheEntry | None:
        """Parse an on-disk document; ``None`` when it lacks a numeric expiry."""
        if not isinstance(document, dict):
            return None
        expires = document.get("expires")
        if isinstance(expires, bool) or not isinstance(expires, (int, float)):
            return None
        return cls(key=key, payload=document.get("data"), expires_at=float(expires))
