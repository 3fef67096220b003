"""Canonical tier membership and ordering.

The registry is the single source of truth for which tier every candidate sits in
and in what order. Rendering layers project it; they never feed order back into it.

Usage:
    registry = TierRegistry()
    registry.populate(["1", "2", "3"])
    tier_key = registry.create_tier()
    registry.move_candidate("2", UNASSIGNED_TIER_KEY, tier_key, 0)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fantasy_tier_board.domain.tier import (
    UNASSIGNED_TIER_KEY,
    ReconcileReport,
    tier_key_for,
    tier_number,
)
from fantasy_tier_board.exceptions import CandidateNotInTierError, InvalidStateError, UnknownTierError

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

logger = logging.getLogger(__name__)


class TierRegistry:
    def __init__(self) -> None:
        self._ranked: dict[int, list[str]] = {}
        self._unassigned: list[str] = []
        self._locations: dict[str, str] = {}
        self._initialized = False
        self._dirty = False
        self._skipped_duplicates: list[str] = []

    # -- queries ---------------------------------------------------------------

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def dirty(self) -> bool:
        return self._dirty

    def mark_clean(self) -> None:
        self._dirty = False

    @property
    def ranked_tier_keys(self) -> list[str]:
        return [tier_key_for(n) for n in sorted(self._ranked)]

    @property
    def tier_keys(self) -> list[str]:
        """All tier keys in display order; the unassigned tier is always last."""
        return [*self.ranked_tier_keys, UNASSIGNED_TIER_KEY]

    def order(self, tier_key: str) -> list[str]:
        return list(self._tier(tier_key))

    def tier_of(self, candidate_id: str) -> str | None:
        return self._locations.get(candidate_id)

    def index_of(self, candidate_id: str) -> int | None:
        tier_key = self._locations.get(candidate_id)
        if tier_key is None:
            return None
        return self._tier(tier_key).index(candidate_id)

    def is_ranked(self, candidate_id: str) -> bool:
        tier_key = self._locations.get(candidate_id)
        return tier_key is not None and tier_key != UNASSIGNED_TIER_KEY

    def snapshot(self) -> dict[str, list[str]]:
        return {tier_key: self.order(tier_key) for tier_key in self.tier_keys}

    def __contains__(self, candidate_id: object) -> bool:
        return candidate_id in self._locations

    def __len__(self) -> int:
        return len(self._locations)

    # -- mutations -------------------------------------------------------------

    def populate(self, candidate_ids: Iterable[str]) -> None:
        """Place every id not already in a tier at the end of the unassigned tier."""
        for candidate_id in candidate_ids:
            if candidate_id in self._locations:
                continue
            self._unassigned.append(candidate_id)
            self._locations[candidate_id] = UNASSIGNED_TIER_KEY
        self._initialized = True

    def create_tier(self, position: int | None = None) -> str:
        if not self._initialized:
            raise InvalidStateError("Cannot create a tier before the registry is initialized")
        number = position if position is not None else max(self._ranked, default=0) + 1
        if number < 1:
            raise InvalidStateError(f"Tier number must be >= 1, got {number}")
        if number in self._ranked:
            raise InvalidStateError(f"Tier {number} already exists")
        self._ranked[number] = []
        self._dirty = True
        tier_key = tier_key_for(number)
        logger.debug("Created %s", tier_key)
        return tier_key

    def move_candidate(self, candidate_id: str, from_tier_key: str, to_tier_key: str, to_index: int) -> bool:
        """Move *candidate_id* into *to_tier_key* at *to_index*.

        The index is clamped to the destination's bounds after the candidate has been
        removed from its source. Returns False when the move would not change anything.
        """
        source = self._tier(from_tier_key)
        destination = self._tier(to_tier_key)
        if self._locations.get(candidate_id) != from_tier_key:
            raise CandidateNotInTierError(candidate_id, from_tier_key)

        current_index = source.index(candidate_id)
        source.pop(current_index)
        clamped = max(0, min(to_index, len(destination)))
        if from_tier_key == to_tier_key and clamped == current_index:
            source.insert(current_index, candidate_id)
            return False

        destination.insert(clamped, candidate_id)
        self._locations[candidate_id] = to_tier_key
        self._dirty = True
        logger.debug("Moved %s from %s to %s[%d]", candidate_id, from_tier_key, to_tier_key, clamped)
        return True

    def restore(self, serialized: Mapping[str, Sequence[str]]) -> None:
        """Rebuild tier membership from a persisted mapping of tier key to ids.

        Ids are placed as given; call ``reconcile`` afterwards to drop ids the current
        pool no longer knows about and to place new ones. An id listed more than once
        keeps its first placement; ``reconcile`` reports the others as duplicates.
        """
        self._ranked = {}
        self._unassigned = []
        self._locations = {}
        self._skipped_duplicates = []
        for tier_key, candidate_ids in serialized.items():
            if tier_key == UNASSIGNED_TIER_KEY:
                target = self._unassigned
            else:
                number = tier_number(tier_key)
                if number is None:
                    logger.warning("Skipping persisted tier with unrecognized key %r", tier_key)
                    continue
                target = self._ranked.setdefault(number, [])
            for candidate_id in candidate_ids:
                if candidate_id in self._locations:
                    self._skipped_duplicates.append(candidate_id)
                    continue
                target.append(candidate_id)
                self._locations[candidate_id] = tier_key
        self._initialized = True
        self._dirty = False

    def reconcile(self, candidate_ids: Sequence[str]) -> ReconcileReport:
        """Align tier membership with the current candidate pool.

        Ids that the pool no longer contains are dropped with a warning, and pool ids
        absent from every tier are appended to the unassigned tier in pool order.
        """
        known = set(candidate_ids)
        dropped: list[str] = []
        duplicates = self._skipped_duplicates
        self._skipped_duplicates = []
        for tier_key in self.tier_keys:
            tier = self._tier(tier_key)
            kept: list[str] = []
            for candidate_id in tier:
                if candidate_id not in known:
                    logger.warning("Candidate %s missing from candidate pool, dropping from %s", candidate_id, tier_key)
                    dropped.append(candidate_id)
                    continue
                kept.append(candidate_id)
            tier[:] = kept

        self._locations = {cid: key for key in self.tier_keys for cid in self._tier(key)}
        appended: list[str] = []
        for candidate_id in candidate_ids:
            if candidate_id in self._locations:
                continue
            self._unassigned.append(candidate_id)
            self._locations[candidate_id] = UNASSIGNED_TIER_KEY
            appended.append(candidate_id)

        self._initialized = True
        if dropped or duplicates:
            self._dirty = True
        if dropped:
            logger.warning("Dropped %d persisted candidates not present in the pool", len(dropped))
        if duplicates:
            logger.warning("Ignored %d repeated placements in persisted tiers", len(duplicates))
        return ReconcileReport(dropped=tuple(dropped), duplicates=tuple(duplicates), appended=tuple(appended))

    # -- internals -------------------------------------------------------------

    def _tier(self, tier_key: str) -> list[str]:
        if tier_key == UNASSIGNED_TIER_KEY:
            return self._unassigned
        number = tier_number(tier_key)
        if number is None or number not in self._ranked:
            raise UnknownTierError(tier_key)
        return self._ranked[number]
