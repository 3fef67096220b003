from fantasy_tier_board.registry.manual_rank import set_manual_rank
from fantasy_tier_board.registry.ranks import RankSynchronizer, compute_ranks
from fantasy_tier_board.registry.tier_registry import TierRegistry

__all__ = ["RankSynchronizer", "TierRegistry", "compute_ranks", "set_manual_rank"]
