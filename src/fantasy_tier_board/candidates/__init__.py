from fantasy_tier_board.candidates.sleeper_source import SleeperCandidateSource
from fantasy_tier_board.candidates.sources import CandidateSource
from fantasy_tier_board.candidates.store import CandidateStore, normalize_candidates

__all__ = ["CandidateSource", "CandidateStore", "SleeperCandidateSource", "normalize_candidates"]
