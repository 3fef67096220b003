"""Tier board engine: one explicit application state for a ranking session.

A ``TierBoard`` owns the tier registry, the rank view, the filter state, the
incremental materializer for the unassigned pool and the debounced save. The
caller feeds it user commands and move events and calls ``tick`` from its event
loop so deferred work (saves, typed name filters) can run.

Usage:
    board = TierBoard(PersistenceGateway(store))
    await board.fetch_and_start(SleeperCandidateSource())
    tier_key = board.add_tier()
    board.handle_move(MoveEvent("4046", UNASSIGNED_TIER_KEY, tier_key, 0))
    board.tick()
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Protocol

from fantasy_tier_board.candidates.store import CandidateStore
from fantasy_tier_board.domain.candidate import FilterState
from fantasy_tier_board.domain.tier import UNASSIGNED_TIER_KEY, TierView, tier_number
from fantasy_tier_board.persistence.debounce import Debouncer
from fantasy_tier_board.registry.manual_rank import set_manual_rank
from fantasy_tier_board.registry.ranks import RankSynchronizer
from fantasy_tier_board.registry.tier_registry import TierRegistry
from fantasy_tier_board.view.filters import visibility_map
from fantasy_tier_board.view.materializer import INITIAL_CHUNK, LOAD_MORE_CHUNK, IncrementalMaterializer

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from fantasy_tier_board.candidates.sources import CandidateSource
    from fantasy_tier_board.domain.candidate import Candidate, Category
    from fantasy_tier_board.domain.tier import MoveEvent
    from fantasy_tier_board.persistence.gateway import PersistenceGateway

logger = logging.getLogger(__name__)

SAVE_DELAY_SECONDS = 1.5
FILTER_DELAY_SECONDS = 0.15


class ReorderNotifier(Protocol):
    """Surrogate for the drag-and-drop layer; rebuilt whenever list structure changes."""

    def rebind(self, tier_keys: Sequence[str]) -> None: ...


class TierBoard:
    def __init__(
        self,
        gateway: PersistenceGateway,
        *,
        notifier: ReorderNotifier | None = None,
        clock: Callable[[], float] = time.monotonic,
        save_delay: float = SAVE_DELAY_SECONDS,
        filter_delay: float = FILTER_DELAY_SECONDS,
        initial_chunk: int = INITIAL_CHUNK,
        load_more_chunk: int = LOAD_MORE_CHUNK,
    ) -> None:
        self._gateway = gateway
        self._notifier = notifier
        self._initial_chunk = initial_chunk
        self._load_more_chunk = load_more_chunk
        self._candidates = CandidateStore([])
        self._registry = TierRegistry()
        self._ranks = RankSynchronizer()
        self._materializer = IncrementalMaterializer(is_placed=lambda cid: self._registry.is_ranked(cid))
        self._moved: set[str] = set()
        self._filter_state = FilterState()
        self._pending_name_query: str | None = None
        self._save_debouncer = Debouncer(save_delay, self.save_now, clock)
        self._filter_debouncer = Debouncer(filter_delay, self._apply_pending_name_filter, clock)

    # -- lifecycle -------------------------------------------------------------

    async def fetch_and_start(self, source: CandidateSource) -> None:
        """Fetch the candidate pool once and start the board over it."""
        records = await source.fetch_all()
        self.start(CandidateStore.from_records(records))

    def start(self, candidates: CandidateStore) -> None:
        """Restore saved tiers over *candidates* and reveal the first chunk of the pool."""
        self._begin(candidates, self._gateway.load())

    def _begin(self, candidates: CandidateStore, persisted: dict[str, list[str]]) -> None:
        self._candidates = candidates
        self._registry = TierRegistry()
        self._moved = set()

        if persisted:
            self._registry.restore(persisted)
            report = self._registry.reconcile(candidates.ids)
            logger.debug(
                "Restored %d tiers (%d dropped, %d new)",
                len(self._registry.ranked_tier_keys),
                len(report.dropped),
                len(report.appended),
            )
        else:
            self._registry.populate(candidates.ids)

        self._ranks.sync(self._registry)
        self._materializer.set_sequence(candidates.candidates)
        self._materializer.reveal_more(self._initial_chunk)
        self._rebind()
        logger.info("Loaded %d candidates into %d tiers", len(candidates), len(self._registry.ranked_tier_keys))

    def tick(self) -> None:
        """Run any deferred work whose delay has elapsed."""
        self._filter_debouncer.poll()
        self._save_debouncer.poll()

    def flush(self) -> None:
        """Run all deferred work immediately."""
        self._filter_debouncer.flush()
        self._save_debouncer.flush()

    # -- user commands ---------------------------------------------------------

    def handle_move(self, event: MoveEvent) -> bool:
        changed = self._registry.move_candidate(
            event.candidate_id,
            event.source_tier_key,
            event.destination_tier_key,
            event.destination_index,
        )
        self._ranks.sync(self._registry)
        if changed:
            self._moved.add(event.candidate_id)
            self._save_debouncer.schedule()
        return changed

    def add_tier(self) -> str:
        tier_key = self._registry.create_tier()
        self._rebind()
        self._save_debouncer.schedule()
        return tier_key

    def edit_rank(self, candidate_id: str, new_rank: object) -> bool:
        changed = set_manual_rank(self._registry, candidate_id, new_rank)
        self._ranks.sync(self._registry)
        if changed:
            self._save_debouncer.schedule()
        return changed

    def save_now(self) -> bool:
        self._save_debouncer.cancel()
        return self._gateway.save(self._registry)

    def reset_all(self) -> None:
        """Forget saved tiers and rebuild the initial state from the current pool.

        If the stored value cannot be removed, a save of the fresh state is scheduled
        so the old tiers are overwritten once storage is writable again.
        """
        self._save_debouncer.cancel()
        cleared = self._gateway.clear()
        self._materializer = IncrementalMaterializer(is_placed=lambda cid: self._registry.is_ranked(cid))
        self._begin(self._candidates, {})
        if not cleared:
            self._save_debouncer.schedule()

    def set_name_filter(self, text: str) -> None:
        self._pending_name_query = text
        self._filter_debouncer.schedule()

    def set_category_filter(self, category: Category | None) -> dict[str, bool]:
        self._filter_debouncer.cancel()
        name_query = self._pending_name_query if self._pending_name_query is not None else self._filter_state.name_query
        self._pending_name_query = None
        self._filter_state = FilterState(name_query=name_query, category=category)
        return self.visibility()

    def reveal_more(self, n: int | None = None) -> list[Candidate]:
        added = self._materializer.reveal_more(n if n is not None else self._load_more_chunk)
        if added:
            self._rebind()
        return added

    # -- views -----------------------------------------------------------------

    @property
    def registry(self) -> TierRegistry:
        return self._registry

    @property
    def candidates(self) -> CandidateStore:
        return self._candidates

    @property
    def materializer(self) -> IncrementalMaterializer:
        return self._materializer

    @property
    def filter_state(self) -> FilterState:
        return self._filter_state

    @property
    def save_pending(self) -> bool:
        return self._save_debouncer.pending

    def rank_of(self, candidate_id: str) -> int | None:
        return self._ranks.rank_of(candidate_id)

    def ranks(self) -> dict[str, int]:
        return self._ranks.ranks

    def tiers(self) -> list[TierView]:
        views: list[TierView] = []
        for tier_key in self._registry.ranked_tier_keys:
            views.append(
                TierView(
                    tier_key=tier_key,
                    title=f"Tier {tier_number(tier_key)}",
                    candidate_ids=tuple(self._registry.order(tier_key)),
                    ranked=True,
                )
            )
        views.append(
            TierView(
                tier_key=UNASSIGNED_TIER_KEY,
                title="Unranked",
                candidate_ids=tuple(c.id for c in self.unassigned_view()),
                ranked=False,
            )
        )
        return views

    def unassigned_view(self) -> list[Candidate]:
        """Unassigned candidates that have been materialized, in tier order."""
        materialized = {c.id for c in self._materializer.rendered} | self._moved
        return [
            self._candidates[cid]
            for cid in self._registry.order(UNASSIGNED_TIER_KEY)
            if cid in materialized and cid in self._candidates
        ]

    def rendered_candidates(self) -> list[Candidate]:
        ranked = [
            self._candidates[cid]
            for tier_key in self._registry.ranked_tier_keys
            for cid in self._registry.order(tier_key)
            if cid in self._candidates
        ]
        return ranked + self.unassigned_view()

    def visibility(self) -> dict[str, bool]:
        return visibility_map(self.rendered_candidates(), self._filter_state)

    # -- internals -------------------------------------------------------------

    def _apply_pending_name_filter(self) -> None:
        if self._pending_name_query is None:
            return
        self._filter_state = FilterState(name_query=self._pending_name_query, category=self._filter_state.category)
        self._pending_name_query = None
        logger.debug("Applied name filter %r", self._filter_state.name_query)

    def _rebind(self) -> None:
        if self._notifier is not None:
            self._notifier.rebind(self._registry.tier_keys)
