from __future__ import annotations

from typing import TYPE_CHECKING

from fantasy_tier_board.domain.candidate import Category, FilterState

if TYPE_CHECKING:
    from collections.abc import Iterable

    from fantasy_tier_board.domain.candidate import Candidate


def compute_visibility(candidate: Candidate, filter_state: FilterState) -> bool:
    """A candidate is visible when it matches both the name query and the category filter."""
    query = filter_state.name_query.lower()
    matches_name = not query or query in candidate.search_name
    matches_category = filter_state.category is None or candidate.category == filter_state.category
    return matches_name and matches_category


def visibility_map(candidates: Iterable[Candidate], filter_state: FilterState) -> dict[str, bool]:
    return {c.id: compute_visibility(c, filter_state) for c in candidates}


def parse_category(raw: str | None) -> Category | None:
    """Parse a category selector; empty, None, and "ALL" clear the filter."""
    if raw is None:
        return None
    normalized = raw.strip().upper()
    if normalized in ("", "ALL"):
        return None
    try:
        return Category(normalized)
    except ValueError:
        raise ValueError(f"Unknown category {raw!r}; expected one of {', '.join(Category)}") from None
