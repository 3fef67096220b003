from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from fantasy_tier_board.cache.protocol import CacheStore
    from fantasy_tier_board.candidates.sources import CandidateSource

logger = logging.getLogger(__name__)

CANDIDATES_NAMESPACE = "candidates"


class CachedCandidateSource:
    """Serve raw candidate records from the cache, falling back to the delegate on a miss.

    Empty results are never cached so a failed fetch is retried on the next start.
    """

    def __init__(self, delegate: CandidateSource, cache: CacheStore, cache_key: str, ttl_seconds: int) -> None:
        self._delegate = delegate
        self._cache = cache
        self._cache_key = cache_key
        self._ttl_seconds = ttl_seconds

    async def fetch_all(self) -> dict[str, dict[str, Any]]:
        cached = self._cache.get(CANDIDATES_NAMESPACE, self._cache_key)
        if cached is not None:
            try:
                records = json.loads(cached)
            except json.JSONDecodeError:
                logger.warning("Discarding unreadable cached candidates [key=%s]", self._cache_key)
                self._cache.invalidate(CANDIDATES_NAMESPACE, self._cache_key)
            else:
                if isinstance(records, dict):
                    logger.debug("Cache hit for candidates [key=%s] (%d records)", self._cache_key, len(records))
                    return records
        logger.debug("Cache miss for candidates [key=%s], fetching from source", self._cache_key)
        records = await self._delegate.fetch_all()
        if records:
            self._cache.put(CANDIDATES_NAMESPACE, self._cache_key, json.dumps(records), self._ttl_seconds)
            logger.debug("Cached %d candidate records [key=%s, ttl=%ds]", len(records), self._cache_key, self._ttl_seconds)
        return records

    def invalidate(self) -> None:
        self._cache.invalidate(CANDIDATES_NAMESPACE, self._cache_key)
