import sqlite3
from pathlib import Path

from fantasy_tier_board.db.connection import create_connection, get_schema_version


def _tables(conn: sqlite3.Connection) -> set[str]:
    return {
        row[0]
        for row in conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%'"
        ).fetchall()
    }


class TestCreateConnection:
    def test_returns_connection(self, tmp_path: Path) -> None:
        conn = create_connection(tmp_path / "board.db")
        assert isinstance(conn, sqlite3.Connection)
        conn.close()

    def test_creates_parent_directories(self, tmp_path: Path) -> None:
        db_path = tmp_path / "deep" / "nested" / "board.db"
        conn = create_connection(db_path)
        assert db_path.exists()
        conn.close()

    def test_enables_wal_mode(self, tmp_path: Path) -> None:
        conn = create_connection(tmp_path / "board.db")
        assert conn.execute("PRAGMA journal_mode").fetchone()[0] == "wal"
        conn.close()

    def test_busy_timeout_set(self, tmp_path: Path) -> None:
        conn = create_connection(tmp_path / "board.db")
        assert conn.execute("PRAGMA busy_timeout").fetchone()[0] == 5000
        conn.close()

    def test_creates_tables(self, tmp_path: Path) -> None:
        conn = create_connection(tmp_path / "board.db")
        assert {"schema_version", "kv_store", "cache"} <= _tables(conn)
        conn.close()

    def test_in_memory_database(self) -> None:
        conn = create_connection(":memory:")
        assert "kv_store" in _tables(conn)
        conn.close()


class TestMigrations:
    def test_schema_version_after_migrations(self, tmp_path: Path) -> None:
        conn = create_connection(tmp_path / "board.db")
        assert get_schema_version(conn) == 1
        conn.close()

    def test_reopening_does_not_rerun_migrations(self, tmp_path: Path) -> None:
        db_path = tmp_path / "board.db"
        conn = create_connection(db_path)
        conn.execute("INSERT INTO kv_store (key, value) VALUES ('rankings', '{}')")
        conn.commit()
        conn.close()

        conn = create_connection(db_path)
        assert conn.execute("SELECT value FROM kv_store WHERE key = 'rankings'").fetchone()[0] == "{}"
        assert conn.execute("SELECT COUNT(*) FROM schema_version").fetchone()[0] == 1
        conn.close()

    def test_custom_migrations_dir(self, tmp_path: Path) -> None:
        migrations = tmp_path / "migrations"
        migrations.mkdir()
        (migrations / "001_first.sql").write_text("CREATE TABLE first (id INTEGER);")
        (migrations / "002_second.sql").write_text("CREATE TABLE second (id INTEGER);\nCREATE TABLE third (id INTEGER);")

        conn = create_connection(tmp_path / "custom.db", migrations_dir=migrations)

        assert {"first", "second", "third"} <= _tables(conn)
        assert get_schema_version(conn) == 2
        conn.close()

    def test_schema_version_zero_without_table(self) -> None:
        conn = sqlite3.connect(":memory:")
        assert get_schema_version(conn) == 0
        conn.close()
