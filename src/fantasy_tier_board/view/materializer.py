"""Bounded, growable view over a long candidate sequence.

Only a prefix of the source sequence is ever handed to the rendering layer. The
prefix grows when the caller signals that there is room for more (a scroll
threshold, a pagination request, a timer); the materializer does not care which.
"""

from __future__ import annotations

import logging
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from fantasy_tier_board.domain.candidate import Candidate

logger = logging.getLogger(__name__)

INITIAL_CHUNK = 100
LOAD_MORE_CHUNK = 50


class MaterializerState(StrEnum):
    IDLE = "idle"
    REVEALING = "revealing"
    EXHAUSTED = "exhausted"


class IncrementalMaterializer:
    def __init__(self, is_placed: Callable[[str], bool] | None = None) -> None:
        self._is_placed = is_placed or (lambda _candidate_id: False)
        self._source: Sequence[Candidate] | None = None
        self._revealed_count = 0
        self._rendered: list[Candidate] = []
        self._rendered_ids: set[str] = set()

    @property
    def state(self) -> MaterializerState:
        if self._source is None:
            return MaterializerState.IDLE
        if self._revealed_count >= len(self._source):
            return MaterializerState.EXHAUSTED
        return MaterializerState.REVEALING

    @property
    def exhausted(self) -> bool:
        return self.state is MaterializerState.EXHAUSTED

    @property
    def revealed_count(self) -> int:
        return self._revealed_count

    @property
    def total(self) -> int:
        return len(self._source) if self._source is not None else 0

    @property
    def rendered(self) -> list[Candidate]:
        return list(self._rendered)

    def set_sequence(self, sequence: Sequence[Candidate]) -> None:
        """Point the cursor at *sequence*; a different sequence object resets it."""
        if sequence is self._source:
            return
        self._source = sequence
        self._revealed_count = 0
        self._rendered = []
        self._rendered_ids = set()
        logger.debug("Materializer reset over %d candidates", len(sequence))

    def reveal_more(self, n: int = LOAD_MORE_CHUNK) -> list[Candidate]:
        """Render up to *n* more items from the source and return the ones added.

        Items already rendered, or already placed in a ranked tier, are skipped but
        still count against their slot, so the cursor always advances by the size
        of the slice it consumed.
        """
        if self._source is None or n <= 0:
            return []
        start = self._revealed_count
        chunk = self._source[start : start + n]
        added: list[Candidate] = []
        for candidate in chunk:
            if candidate.id in self._rendered_ids or self._is_placed(candidate.id):
                continue
            self._rendered.append(candidate)
            self._rendered_ids.add(candidate.id)
            added.append(candidate)
        self._revealed_count = start + len(chunk)
        if chunk:
            logger.debug("Revealed %d of %d candidates", self._revealed_count, len(self._source))
        return added
