from __future__ import annotations

import json
from pathlib import Path

from pyklaviyo._cache import FileCache


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def _cache(tmp_path: Path, clock: FakeClock, **kwargs: object) -> FileCache:
    return FileCache(tmp_path / "cache", clock=clock, **kwargs)  # type: ignore[arg-type]


def test_read_before_expiry_returns_original_value(tmp_path: Path) -> None:
    clock = FakeClock()
    cache = _cache(tmp_path, clock, default_ttl=60)
    value = [{"id": "M1", "attributes": {"name": "Placed Order"}}]

    assert cache.put("metrics", value) is True
    clock.now += 59

    assert cache.get("metrics") == value


def test_entry_is_still_valid_at_exact_expiry(tmp_path: Path) -> None:
    clock = FakeClock()
    cache = _cache(tmp_path, clock)

    cache.put("lists", ["a"], ttl=10)
    clock.now += 10

    assert cache.get("lists") == ["a"]


def test_read_after_expiry_returns_none_and_purges_file(tmp_path: Path) -> None:
    clock = FakeClock()
    cache = _cache(tmp_path, clock)

    cache.put("lists", ["a"], ttl=10)
    assert "lists" in cache
    clock.now += 11

    assert cache.get("lists") is None
    assert "lists" not in cache
    assert not (tmp_path / "cache" / "lists.cache").exists()


def test_file_layout_is_expires_and_data(tmp_path: Path) -> None:
    clock = FakeClock(1000.0)
    cache = _cache(tmp_path, clock, default_ttl=3600)

    cache.put("metrics", {"k": 1})

    document = json.loads((tmp_path / "cache" / "metrics.cache").read_text())
    assert document == {"expires": 4600.0, "data": {"k": 1}}


def test_get_entry_exposes_expiry(tmp_path: Path) -> None:
    clock = FakeClock(1000.0)
    cache = _cache(tmp_path, clock)

    cache.put("metrics", [1, 2], ttl=5)
    entry = cache.get_entry("metrics")

    assert entry is not None
    assert entry.key == "metrics"
    assert entry.payload == [1, 2]
    assert entry.expires_at == 1005.0


def test_disabled_cache_is_inert(tmp_path: Path) -> None:
    cache = FileCache(tmp_path / "disabled", enabled=False)

    assert not (tmp_path / "disabled").exists()
    assert cache.put("metrics", [1]) is False
    assert cache.get("metrics") is None
    assert cache.clear("metrics") is False
    assert cache.clear_all() is False


def test_clear_absent_key_reports_success(tmp_path: Path) -> None:
    cache = _cache(tmp_path, FakeClock())

    assert cache.clear("never-written") is True
    assert cache.clear("never-written") is True


def test_clear_removes_entry(tmp_path: Path) -> None:
    cache = _cache(tmp_path, FakeClock())
    cache.put("metrics", [1])

    assert cache.clear("metrics") is True
    assert cache.get("metrics") is None


def test_clear_all_removes_only_cache_files(tmp_path: Path) -> None:
    cache = _cache(tmp_path, FakeClock())
    cache.put("metrics", [1])
    cache.put("lists", [2])
    other = tmp_path / "cache" / "notes.txt"
    other.write_text("keep me")

    assert cache.clear_all() is True

    assert cache.get("metrics") is None
    assert cache.get("lists") is None
    assert other.exists()


def test_corrupt_file_is_a_miss_and_removed(tmp_path: Path) -> None:
    cache = _cache(tmp_path, FakeClock())
    path = tmp_path / "cache" / "metrics.cache"
    path.write_text("{not json")

    assert cache.get("metrics") is None
    assert not path.exists()


def test_document_without_expiry_is_a_miss_and_removed(tmp_path: Path) -> None:
    cache = _cache(tmp_path, FakeClock())
    path = tmp_path / "cache" / "lists.cache"
    path.write_text(json.dumps({"data": [1]}))

    assert cache.get("lists") is None
    assert not path.exists()


def test_keys_escaping_the_cache_dir_are_rejected(tmp_path: Path) -> None:
    cache = _cache(tmp_path, FakeClock())

    assert cache.put("../outside", [1]) is False
    assert cache.get("a/b") is None
    assert cache.clear("..") is False
    assert cache.get("a\x00b") is None
    assert cache.put("a\x00b", [1]) is False
    assert cache.clear("a\x00b") is False
    assert "a\x00b" not in cache
    assert not (tmp_path / "outside.cache").exists()


def test_unserializable_value_is_not_written(tmp_path: Path) -> None:
    cache = _cache(tmp_path, FakeClock())

    assert cache.put("metrics", {"when": object()}) is False
    assert "metrics" not in cache
    assert list((tmp_path / "cache").iterdir()) == []
