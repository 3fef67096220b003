from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from fantasy_tier_board.domain.tier import UNASSIGNED_TIER_KEY

if TYPE_CHECKING:
    from fantasy_tier_board.registry.tier_registry import TierRegistry

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def parse_rank(raw: object) -> int:
    """Coerce user input to a rank, falling back to 1 for anything non-numeric or below 1."""
    match = _LEADING_INT.match(str(raw))
    if match is None:
        return 1
    return max(1, int(match.group(1)))


def set_manual_rank(registry: TierRegistry, candidate_id: str, requested_rank: object) -> bool:
    """Move *candidate_id* to *requested_rank* within its current tier.

    The rank is clamped to ``[1, tier size]``. Returns True if the tier order changed;
    False when the candidate is unassigned, unknown, or already at that rank.
    """
    tier_key = registry.tier_of(candidate_id)
    if tier_key is None or tier_key == UNASSIGNED_TIER_KEY:
        logger.debug("Ignoring manual rank for %s: not in a ranked tier", candidate_id)
        return False

    size = len(registry.order(tier_key))
    rank = min(parse_rank(requested_rank), size)
    current_index = registry.index_of(candidate_id)
    if current_index == rank - 1:
        return False
    return registry.move_candidate(candidate_id, tier_key, tier_key, rank - 1)
