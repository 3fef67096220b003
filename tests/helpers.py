from typing import Any

from fantasy_tier_board.domain.candidate import Candidate, Category


def make_candidate(
    candidate_id: str,
    first_name: str = "Test",
    last_name: str = "Player",
    category: str = "QB",
    team: str | None = "KC",
) -> Candidate:
    return Candidate(
        id=candidate_id,
        first_name=first_name,
        last_name=last_name,
        category=Category(category),
        team=team,
    )


def make_record(
    first_name: str = "Test",
    last_name: str = "Player",
    position: str | None = "QB",
    team: str | None = "KC",
    **extra: Any,
) -> dict[str, Any]:
    """Build a raw player record shaped like the Sleeper players payload."""
    return {"first_name": first_name, "last_name": last_name, "position": position, "team": team, **extra}
