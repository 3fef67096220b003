from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from fantasy_tier_board.board import TierBoard
from fantasy_tier_board.cache.sources import CachedCandidateSource
from fantasy_tier_board.cache.sqlite_store import SqliteCacheStore
from fantasy_tier_board.candidates.sleeper_source import SleeperCandidateSource
from fantasy_tier_board.candidates.sources import CandidateSource
from fantasy_tier_board.config import BoardSettings
from fantasy_tier_board.db.pool import ConnectionPool
from fantasy_tier_board.persistence.gateway import PersistenceGateway
from fantasy_tier_board.persistence.store import SqliteKeyValueStore

# Module-level factory for dependency injection in tests
_source_factory: Callable[[BoardSettings], CandidateSource] | None = None


def set_source_factory(factory: Callable[[BoardSettings], CandidateSource] | None) -> None:
    global _source_factory
    _source_factory = factory


def _build_source(settings: BoardSettings) -> CandidateSource:
    if _source_factory is not None:
        return _source_factory(settings)
    return SleeperCandidateSource(url=settings.source_url, timeout=settings.source_timeout)


@dataclass(frozen=True)
class BoardContext:
    board: TierBoard
    source: CachedCandidateSource
    cache: SqliteCacheStore
    settings: BoardSettings


@contextmanager
def build_board_context(settings: BoardSettings, *, start: bool = True) -> Iterator[BoardContext]:
    """Composition-root context manager: opens storage, wires and starts the board, flushes on exit."""
    pool = ConnectionPool(settings.db_path)
    try:
        gateway = PersistenceGateway(SqliteKeyValueStore(settings.db_path, pool=pool), key=settings.storage_key)
        cache = SqliteCacheStore(settings.db_path, pool=pool)
        source = CachedCandidateSource(
            _build_source(settings),
            cache,
            cache_key="sleeper_nfl",
            ttl_seconds=settings.candidates_ttl,
        )
        board = TierBoard(
            gateway,
            save_delay=settings.save_debounce_seconds,
            filter_delay=settings.filter_debounce_seconds,
            initial_chunk=settings.initial_chunk,
            load_more_chunk=settings.load_more_chunk,
        )
        if start:
            asyncio.run(board.fetch_and_start(source))
        yield BoardContext(board=board, source=source, cache=cache, settings=settings)
        board.flush()
    finally:
        pool.close_all()
