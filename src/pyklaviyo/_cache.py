"""Filesystem cache for read-only API results.

One JSON file per key under the cache directory.  Expiry is only checked
when an entry is read; the read that finds an expired entry deletes it.
Every failure degrades to a cache miss or a ``False`` result, so caching
never breaks the API call it wraps.
"""

from __future__ import annotations

import json
import logging
import os
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

from pyklaviyo._constants import CACHE_SUFFIX, DEFAULT_CACHE_TTL
from pyklaviyo.exceptions import KlaviyoCacheError
from pyklaviyo.models.cache import CacheEntry

_logger = logging.getLogger(__name__)


class FileCache:
    """Key/value store backed by ``<cache_dir>/<key>.cache`` files.

    Parameters
    ----------
    cache_dir : str or Path
        Directory holding the cache files.  Created on construction when
        the cache is enabled.
    default_ttl : float
        Time-to-live used by :meth:`put` when no explicit ttl is given.
    enabled : bool
        When false every read misses and every write/clear reports failure.
    clock : callable
        Wall clock returning epoch seconds.  Injected by tests.
    """

    def __init__(
        self,
        cache_dir: str | Path,
        *,
        default_ttl: float = DEFAULT_CACHE_TTL,
        enabled: bool = True,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._dir = Path(cache_dir)
        self._default_ttl = default_ttl
        self._enabled = enabled
        self._clock = clock
        if enabled:
            try:
                self._dir.mkdir(mode=0o755, parents=True, exist_ok=True)
            except OSError as exc:
                _logger.error("Failed to create cache directory %s: %s", self._dir, exc)

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def directory(self) -> Path:
        return self._dir

    def path_for(self, key: str) -> Path:
        """Return the file path of *key*, rejecting keys that are not a plain file name."""
        if not key or key in {".", ".."} or any(sep in key for sep in ("/", "\\", os.sep, "\x00")):
            raise KlaviyoCacheError(f"Invalid cache key: {key!r}")
        return self._dir / f"{key}{CACHE_SUFFIX}"

    def __contains__(self, key: object) -> bool:
        """Whether a file exists for *key*, regardless of expiry."""
        if not isinstance(key, str):
            return False
        try:
            return self.path_for(key).is_file()
        except KlaviyoCacheError:
            return False

    def get_entry(self, key: str) -> CacheEntry | None:
        """Read the entry for *key*, purging it if expired or unreadable."""
        if not self._enabled:
            return None
        try:
            path = self.path_for(key)
        except KlaviyoCacheError as exc:
            _logger.error("%s", exc)
            return None

        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            _logger.warning("Failed to read cache file %s: %s", path, exc)
            return None

        try:
            document = json.loads(text)
        except json.JSONDecodeError:
            document = None

        entry = CacheEntry.from_document(key, document)
        if entry is None or entry.is_expired(self._clock()):
            _logger.debug("Cache entry %s expired or invalid, removing", key)
            self._unlink(path)
            return None
        return entry

    def get(self, key: str) -> Any | None:
        """Return the cached payload of *key*, or ``None`` on miss/expiry."""
        entry = self.get_entry(key)
        return entry.payload if entry is not None else None

    def put(self, key: str, value: Any, ttl: float | None = None) -> bool:
        """Store *value* under *key* for *ttl* seconds (default ttl when ``None``)."""
        if not self._enabled:
            return False
        try:
            path = self.path_for(key)
        except KlaviyoCacheError as exc:
            _logger.error("%s", exc)
            return False

        ttl = self._default_ttl if ttl is None else ttl
        entry = CacheEntry(key=key, payload=value, expires_at=self._clock() + ttl)
        try:
            encoded = json.dumps(entry.to_document())
        except (TypeError, ValueError) as exc:
            _logger.error("Cannot cache %s, value is not JSON-serializable: %s", key, exc)
            return False

        tmp_path = path.with_name(f"{path.name}.tmp")
        try:
            tmp_path.write_text(encoded, encoding="utf-8")
            os.replace(tmp_path, path)
        except OSError as exc:
            _logger.error("Failed to write cache file %s: %s", path, exc)
            self._unlink(tmp_path)
            return False
        return True

    def clear(self, key: str) -> bool:
        """Remove *key*.  A key that is already absent counts as success."""
        if not self._enabled:
            return False
        try:
            path = self.path_for(key)
        except KlaviyoCacheError as exc:
            _logger.error("%s", exc)
            return False
        return self._unlink(path)

    def clear_all(self) -> bool:
        """Remove every cache file; ``False`` if any could not be deleted."""
        if not self._enabled or not self._dir.is_dir():
            return False
        success = True
        for path in self._dir.glob(f"*{CACHE_SUFFIX}"):
            if not self._unlink(path):
                success = False
        return success

    @staticmethod
    def _unlink(path: Path) -> bool:
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            _logger.warning("Failed to delete cache file %s: %s", path, exc)
            return False
        return True
