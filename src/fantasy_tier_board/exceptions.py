class TierBoardException(Exception):
    """Base exception for tier board errors."""


class InvalidStateError(TierBoardException):
    """Raised when an operation is invoked in a state that does not allow it."""


class UnknownTierError(TierBoardException):
    def __init__(self, tier_key: str) -> None:
        self.tier_key = tier_key
        super().__init__(f"Unknown tier: {tier_key!r}")


class CandidateNotInTierError(TierBoardException):
    def __init__(self, candidate_id: str, tier_key: str) -> None:
        self.candidate_id = candidate_id
        self.tier_key = tier_key
        super().__init__(f"Candidate {candidate_id!r} is not in tier {tier_key!r}")
