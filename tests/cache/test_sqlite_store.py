from __future__ import annotations

from typing import TYPE_CHECKING

from fantasy_tier_board.cache.sqlite_store import SqliteCacheStore
from tests.fakes.stores import FakeClock

if TYPE_CHECKING:
    from pathlib import Path


class TestSqliteCacheStore:
    def test_get_returns_none_on_miss(self, tmp_path: Path) -> None:
        store = SqliteCacheStore(tmp_path / "board.db")
        assert store.get("ns", "missing") is None

    def test_put_then_get(self, tmp_path: Path) -> None:
        store = SqliteCacheStore(tmp_path / "board.db")
        store.put("candidates", "sleeper", '{"1": {}}', ttl_seconds=300)
        assert store.get("candidates", "sleeper") == '{"1": {}}'

    def test_expired_entry_returns_none(self, tmp_path: Path) -> None:
        clock = FakeClock(now=1000.0)
        store = SqliteCacheStore(tmp_path / "board.db", clock=clock)
        store.put("ns", "k", "val", ttl_seconds=60)

        clock.now = 1059.0
        assert store.get("ns", "k") == "val"

        clock.now = 1061.0
        assert store.get("ns", "k") is None

        # Expired rows are removed on read
        clock.now = 1000.0
        assert store.get("ns", "k") is None

    def test_put_overwrites_existing(self, tmp_path: Path) -> None:
        store = SqliteCacheStore(tmp_path / "board.db")
        store.put("ns", "k", "old", ttl_seconds=300)
        store.put("ns", "k", "new", ttl_seconds=300)
        assert store.get("ns", "k") == "new"

    def test_invalidate_single_key(self, tmp_path: Path) -> None:
        store = SqliteCacheStore(tmp_path / "board.db")
        store.put("ns", "a", "1", ttl_seconds=300)
        store.put("ns", "b", "2", ttl_seconds=300)
        store.invalidate("ns", "a")
        assert store.get("ns", "a") is None
        assert store.get("ns", "b") == "2"

    def test_invalidate_namespace(self, tmp_path: Path) -> None:
        store = SqliteCacheStore(tmp_path / "board.db")
        store.put("ns1", "a", "1", ttl_seconds=300)
        store.put("ns1", "b", "2", ttl_seconds=300)
        store.put("ns2", "c", "3", ttl_seconds=300)
        store.invalidate("ns1")
        assert store.get("ns1", "a") is None
        assert store.get("ns1", "b") is None
        assert store.get("ns2", "c") == "3"

    def test_namespaces_are_isolated(self, tmp_path: Path) -> None:
        store = SqliteCacheStore(tmp_path / "board.db")
        store.put("ns1", "k", "val1", ttl_seconds=300)
        store.put("ns2", "k", "val2", ttl_seconds=300)
        assert store.get("ns1", "k") == "val1"
        assert store.get("ns2", "k") == "val2"

    def test_purge_expired(self, tmp_path: Path) -> None:
        clock = FakeClock(now=1000.0)
        store = SqliteCacheStore(tmp_path / "board.db", clock=clock)
        store.put("ns", "short", "1", ttl_seconds=10)
        store.put("ns", "long", "2", ttl_seconds=1000)
        clock.advance(20)
        assert store.purge_expired() == 1
        assert store.get("ns", "long") == "2"
