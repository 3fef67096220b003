from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from fantasy_tier_board.domain.candidate import Candidate, Category

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

logger = logging.getLogger(__name__)

_CATEGORIES = frozenset(c.value for c in Category)


def _text(record: Mapping[str, Any], field: str) -> str:
    value = record.get(field)
    return str(value) if value is not None else ""


def normalize_candidates(records: Mapping[str, Mapping[str, Any]]) -> list[Candidate]:
    """Turn raw source records into candidates sorted by last name, then first name.

    Records whose position is not a tracked category are dropped.
    """
    candidates: list[Candidate] = []
    for candidate_id, record in records.items():
        if not isinstance(record, dict):
            continue
        position = _text(record, "position").upper()
        if position not in _CATEGORIES:
            continue
        team = record.get("team")
        candidates.append(
            Candidate(
                id=str(candidate_id),
                first_name=_text(record, "first_name"),
                last_name=_text(record, "last_name"),
                category=Category(position),
                team=str(team) if team else None,
            )
        )
    candidates.sort(key=lambda c: (c.last_name.lower(), c.first_name.lower()))
    logger.debug("Normalized %d of %d records", len(candidates), len(records))
    return candidates


class CandidateStore:
    """Read-only, sorted candidate pool with id lookup."""

    def __init__(self, candidates: list[Candidate]) -> None:
        self._candidates = tuple(candidates)
        self._by_id = {c.id: c for c in self._candidates}

    @classmethod
    def from_records(cls, records: Mapping[str, Mapping[str, Any]]) -> CandidateStore:
        return cls(normalize_candidates(records))

    @property
    def candidates(self) -> tuple[Candidate, ...]:
        return self._candidates

    @property
    def ids(self) -> list[str]:
        return [c.id for c in self._candidates]

    def get(self, candidate_id: str) -> Candidate | None:
        return self._by_id.get(candidate_id)

    def __getitem__(self, candidate_id: str) -> Candidate:
        return self._by_id[candidate_id]

    def __contains__(self, candidate_id: object) -> bool:
        return candidate_id in self._by_id

    def __iter__(self) -> Iterator[Candidate]:
        return iter(self._candidates)

    def __len__(self) -> int:
        return len(self._candidates)
