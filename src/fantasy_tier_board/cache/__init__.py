from fantasy_tier_board.cache.protocol import CacheStore
from fantasy_tier_board.cache.sqlite_store import SqliteCacheStore

__all__ = ["CacheStore", "SqliteCacheStore"]
