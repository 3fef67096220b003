import json
import logging
import sqlite3
from collections.abc import Iterator
from pathlib import Path

import pytest
from typer.testing import CliRunner

from fantasy_tier_board.cache.sqlite_store import SqliteCacheStore
from fantasy_tier_board.cli.app import app
from fantasy_tier_board.cli.factory import set_source_factory
from fantasy_tier_board.persistence.store import SqliteKeyValueStore
from tests.fakes.stores import FakeCandidateSource
from tests.helpers import make_record

runner = CliRunner()

_RECORDS = {
    "4046": make_record("Patrick", "Mahomes", "QB", "KC"),
    "1466": make_record("Travis", "Kelce", "TE", "KC"),
    "6794": make_record("Justin", "Jefferson", "WR", "MIN"),
    "17": make_record("Harrison", "Butker", "K", "KC"),
}


@pytest.fixture
def source() -> Iterator[FakeCandidateSource]:
    fake = FakeCandidateSource(_RECORDS)
    set_source_factory(lambda _settings: fake)
    yield fake
    set_source_factory(None)
    logging.getLogger().handlers.clear()


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "board.db"


def _saved(db_path: Path) -> dict[str, list[str]]:
    raw = SqliteKeyValueStore(db_path).get("rankings")
    assert raw is not None
    return json.loads(raw)


class TestShowCommand:
    def test_fresh_board_lists_pool(self, source: FakeCandidateSource, db_path: Path) -> None:
        result = runner.invoke(app, ["--db", str(db_path), "show"])
        assert result.exit_code == 0, result.output
        assert "Unranked" in result.output
        assert "Justin Jefferson (MIN)" in result.output
        assert "Butker" not in result.output

    def test_position_filter(self, source: FakeCandidateSource, db_path: Path) -> None:
        result = runner.invoke(app, ["--db", str(db_path), "show", "--position", "te"])
        assert result.exit_code == 0, result.output
        assert "Travis Kelce" in result.output
        assert "Patrick Mahomes" not in result.output

    def test_name_filter(self, source: FakeCandidateSource, db_path: Path) -> None:
        result = runner.invoke(app, ["--db", str(db_path), "show", "--name", "MAHOMES"])
        assert result.exit_code == 0, result.output
        assert "Patrick Mahomes" in result.output
        assert "Justin Jefferson" not in result.output

    def test_unknown_position_fails(self, source: FakeCandidateSource, db_path: Path) -> None:
        result = runner.invoke(app, ["--db", str(db_path), "show", "--position", "K"])
        assert result.exit_code == 1
        assert "Unknown category" in result.output


class TestTierCommands:
    def test_add_tier_and_move(self, source: FakeCandidateSource, db_path: Path) -> None:
        result = runner.invoke(app, ["--db", str(db_path), "add-tier"])
        assert result.exit_code == 0, result.output
        assert "tier-1" in result.output

        result = runner.invoke(app, ["--db", str(db_path), "move", "4046", "1"])
        assert result.exit_code == 0, result.output
        assert "Moved Patrick Mahomes (KC) to tier-1 at rank 1" in result.output

        saved = _saved(db_path)
        assert saved["tier-1"] == ["4046"]
        assert saved["tier-unranked"] == ["6794", "1466"]

    def test_show_lists_ranked_tiers(self, source: FakeCandidateSource, db_path: Path) -> None:
        runner.invoke(app, ["--db", str(db_path), "add-tier"])
        runner.invoke(app, ["--db", str(db_path), "move", "1466", "1"])

        result = runner.invoke(app, ["--db", str(db_path), "show"])

        assert result.exit_code == 0, result.output
        assert "Tier 1" in result.output
        assert "Travis Kelce (KC)" in result.output

    def test_move_to_missing_tier_fails(self, source: FakeCandidateSource, db_path: Path) -> None:
        result = runner.invoke(app, ["--db", str(db_path), "move", "4046", "5"])
        assert result.exit_code == 1
        assert "Unknown tier" in result.output

    def test_move_unknown_player_fails(self, source: FakeCandidateSource, db_path: Path) -> None:
        result = runner.invoke(app, ["--db", str(db_path), "move", "99", "unranked"])
        assert result.exit_code == 1
        assert "Unknown player" in result.output

    def test_rank_reorders_within_tier(self, source: FakeCandidateSource, db_path: Path) -> None:
        runner.invoke(app, ["--db", str(db_path), "add-tier"])
        runner.invoke(app, ["--db", str(db_path), "move", "4046", "1"])
        runner.invoke(app, ["--db", str(db_path), "move", "1466", "1"])

        result = runner.invoke(app, ["--db", str(db_path), "rank", "1466", "1"])

        assert result.exit_code == 0, result.output
        assert "Travis Kelce (KC) is now rank 1" in result.output
        assert _saved(db_path)["tier-1"] == ["1466", "4046"]

    def test_rank_on_unranked_player_warns(self, source: FakeCandidateSource, db_path: Path) -> None:
        result = runner.invoke(app, ["--db", str(db_path), "rank", "4046", "1"])
        assert result.exit_code == 0
        assert "move it into a tier first" in result.output


class TestStorageCommands:
    def test_save(self, source: FakeCandidateSource, db_path: Path) -> None:
        result = runner.invoke(app, ["--db", str(db_path), "save"])
        assert result.exit_code == 0, result.output
        assert "Saved" in result.output
        assert _saved(db_path) == {"tier-unranked": ["6794", "1466", "4046"]}

    def test_reset_clears_tiers(self, source: FakeCandidateSource, db_path: Path) -> None:
        runner.invoke(app, ["--db", str(db_path), "add-tier"])
        runner.invoke(app, ["--db", str(db_path), "move", "4046", "1"])

        result = runner.invoke(app, ["--db", str(db_path), "reset", "--yes"])
        assert result.exit_code == 0, result.output

        assert SqliteKeyValueStore(db_path).get("rankings") is None
        result = runner.invoke(app, ["--db", str(db_path), "show"])
        assert "Tier 1" not in result.output

    def test_reset_aborts_without_confirmation(self, source: FakeCandidateSource, db_path: Path) -> None:
        runner.invoke(app, ["--db", str(db_path), "add-tier"])
        result = runner.invoke(app, ["--db", str(db_path), "reset"], input="n\n")
        assert result.exit_code == 0
        assert "tier-1" in _saved(db_path)

    def test_player_pool_is_cached(self, source: FakeCandidateSource, db_path: Path) -> None:
        runner.invoke(app, ["--db", str(db_path), "show"])
        runner.invoke(app, ["--db", str(db_path), "show"])
        assert source.calls == 1

    def test_refresh_drops_cached_pool(self, source: FakeCandidateSource, db_path: Path) -> None:
        runner.invoke(app, ["--db", str(db_path), "show"])
        result = runner.invoke(app, ["--db", str(db_path), "refresh"])
        assert result.exit_code == 0, result.output
        runner.invoke(app, ["--db", str(db_path), "show"])
        assert source.calls == 2

    def test_refresh_purges_expired_cache_entries(self, source: FakeCandidateSource, db_path: Path) -> None:
        cache = SqliteCacheStore(db_path)
        cache.put("stale", "a", "1", ttl_seconds=-10)
        cache.put("stale", "b", "2", ttl_seconds=-10)
        cache.put("fresh", "c", "3", ttl_seconds=3600)

        result = runner.invoke(app, ["--db", str(db_path), "refresh"])

        assert result.exit_code == 0, result.output
        assert "2 expired cache entries removed" in result.output
        conn = sqlite3.connect(str(db_path))
        remaining = conn.execute("SELECT namespace, key FROM cache").fetchall()
        conn.close()
        assert remaining == [("fresh", "c")]


class TestPoolCommand:
    def test_search_by_name(self, source: FakeCandidateSource, db_path: Path) -> None:
        result = runner.invoke(app, ["--db", str(db_path), "pool", "--name", "kel"])
        assert result.exit_code == 0, result.output
        assert "Travis Kelce" in result.output
        assert "Justin Jefferson" not in result.output

    def test_no_matches(self, source: FakeCandidateSource, db_path: Path) -> None:
        result = runner.invoke(app, ["--db", str(db_path), "pool", "--name", "zzz"])
        assert result.exit_code == 0, result.output
        assert "No matching players." in result.output

    def test_ranked_players_are_excluded(self, source: FakeCandidateSource, db_path: Path) -> None:
        runner.invoke(app, ["--db", str(db_path), "add-tier"])
        runner.invoke(app, ["--db", str(db_path), "move", "1466", "1"])
        result = runner.invoke(app, ["--db", str(db_path), "pool", "--position", "TE"])
        assert "No matching players." in result.output
