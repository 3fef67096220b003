"""Save and restore tier membership to durable key-value storage.

The stored value is a JSON object mapping each tier key (ranked tiers and the
unassigned tier) to its ordered list of candidate ids:

    {"tier-1": ["4046", "6794"], "tier-2": [], "tier-unranked": ["421", ...]}

Neither failure mode is fatal: a failed write leaves the in-memory registry
authoritative, and a corrupt stored value restores as an empty registry.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from typing import TYPE_CHECKING

from fantasy_tier_board.domain.result import Err

if TYPE_CHECKING:
    from fantasy_tier_board.persistence.store import KeyValueStore
    from fantasy_tier_board.registry.tier_registry import TierRegistry

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "rankings"


class PersistenceGateway:
    def __init__(self, store: KeyValueStore, key: str = DEFAULT_STORAGE_KEY) -> None:
        self._store = store
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    def save(self, registry: TierRegistry) -> bool:
        payload = json.dumps(registry.snapshot())
        try:
            result = self._store.set(self._key, payload)
        except (sqlite3.Error, OSError) as e:
            logger.warning("Could not save rankings: %s", e)
            return False
        if isinstance(result, Err):
            logger.warning("Could not save rankings: %s", result.error.message)
            return False
        registry.mark_clean()
        logger.debug("Saved %d tiers under %r", len(registry.tier_keys), self._key)
        return True

    def load(self) -> dict[str, list[str]]:
        try:
            raw = self._store.get(self._key)
        except (sqlite3.Error, OSError) as e:
            logger.warning("Could not read saved rankings: %s", e)
            return {}
        if raw is None:
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("Saved rankings are not valid JSON, starting empty: %s", e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Saved rankings have unexpected shape %s, starting empty", type(data).__name__)
            return {}

        tiers: dict[str, list[str]] = {}
        for tier_key, candidate_ids in data.items():
            if not isinstance(candidate_ids, list):
                logger.warning("Ignoring saved tier %r: expected a list of ids", tier_key)
                continue
            tiers[str(tier_key)] = [str(cid) for cid in candidate_ids if isinstance(cid, str | int)]
        return tiers

    def clear(self) -> bool:
        try:
            self._store.delete(self._key)
        except (sqlite3.Error, OSError) as e:
            logger.warning("Could not clear saved rankings: %s", e)
            return False
        logger.info("Cleared saved rankings under %r", self._key)
        return True
