from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fantasy_tier_board.registry.tier_registry import TierRegistry


def compute_ranks(registry: TierRegistry) -> dict[str, int]:
    """Map every candidate in a ranked tier to its 1-based position in that tier.

    Candidates in the unassigned tier have no rank and are absent from the result.
    """
    ranks: dict[str, int] = {}
    for tier_key in registry.ranked_tier_keys:
        for i, candidate_id in enumerate(registry.order(tier_key), start=1):
            ranks[candidate_id] = i
    return ranks


class RankSynchronizer:
    """Holds the rank view computed from the latest registry state."""

    def __init__(self) -> None:
        self._ranks: dict[str, int] = {}

    def sync(self, registry: TierRegistry) -> dict[str, int]:
        self._ranks = compute_ranks(registry)
        return dict(self._ranks)

    def rank_of(self, candidate_id: str) -> int | None:
        return self._ranks.get(candidate_id)

    @property
    def ranks(self) -> dict[str, int]:
        return dict(self._ranks)
