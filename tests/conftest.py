"""Shared pytest fixtures for test modules."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest

from fantasy_tier_board.board import TierBoard
from fantasy_tier_board.candidates.store import CandidateStore
from fantasy_tier_board.persistence.gateway import PersistenceGateway
from tests.fakes.stores import FakeClock, InMemoryKeyValueStore, RecordingNotifier
from tests.helpers import make_candidate

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture(autouse=True)
def _isolate_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Point storage at a temporary directory and drop TIERBOARD__ vars leaking from the shell."""
    for key in list(os.environ):
        if key.startswith("TIERBOARD__"):
            monkeypatch.delenv(key)
    monkeypatch.setenv("TIERBOARD__STORAGE__DB_PATH", str(tmp_path / "board.db"))


@pytest.fixture
def kv_store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def small_pool() -> CandidateStore:
    """Pool of three players, already in natural (last name) order: A, B, C."""
    return CandidateStore(
        [
            make_candidate("A", "Alpha", "Adams", "QB"),
            make_candidate("B", "Bravo", "Brown", "RB"),
            make_candidate("C", "Charlie", "Cook", "WR"),
        ]
    )


@pytest.fixture
def board(kv_store: InMemoryKeyValueStore, clock: FakeClock, notifier: RecordingNotifier) -> TierBoard:
    return TierBoard(PersistenceGateway(kv_store), notifier=notifier, clock=clock, initial_chunk=2, load_more_chunk=2)
