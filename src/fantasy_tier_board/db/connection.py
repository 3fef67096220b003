import logging
import sqlite3
from collections.abc import Iterator
from pathlib import Path

logger = logging.getLogger(__name__)

_MIGRATIONS_DIR = Path(__file__).parent / "migrations"
_IN_MEMORY = ":memory:"


def create_connection(
    path: str | Path,
    *,
    check_same_thread: bool = True,
    migrations_dir: Path | None = None,
) -> sqlite3.Connection:
    """Open the board database, creating its directory and applying pending migrations.

    File databases run in WAL mode so the cache and key-value tables can be read
    while another connection writes.
    """
    on_disk = str(path) != _IN_MEMORY
    if on_disk:
        Path(path).parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(path), check_same_thread=check_same_thread)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA busy_timeout=5000")
    if on_disk:
        conn.execute("PRAGMA journal_mode=WAL")
    apply_migrations(conn, migrations_dir or _MIGRATIONS_DIR)
    return conn


def get_schema_version(conn: sqlite3.Connection) -> int:
    """Return the highest applied migration number, or 0 if none have run."""
    try:
        row = conn.execute("SELECT MAX(version) FROM schema_version").fetchone()
    except sqlite3.OperationalError:
        return 0
    return row[0] or 0


def _migration_files(migrations_dir: Path, after: int) -> Iterator[tuple[int, list[str]]]:
    """Yield ``(version, statements)`` for each ``NNN_name.sql`` file newer than *after*."""
    for sql_file in sorted(migrations_dir.glob("*.sql")):
        version = int(sql_file.stem.partition("_")[0])
        if version > after:
            yield version, [s.strip() for s in sql_file.read_text().split(";") if s.strip()]


def apply_migrations(conn: sqlite3.Connection, migrations_dir: Path) -> int:
    """Apply pending migrations, each in its own transaction. Returns the resulting version."""
    conn.execute(
        "CREATE TABLE IF NOT EXISTS schema_version ("
        "    version INTEGER PRIMARY KEY,"
        "    applied_at TEXT NOT NULL DEFAULT (datetime('now'))"
        ")"
    )
    conn.commit()
    version = get_schema_version(conn)

    # DDL only joins the transaction under manual control
    previous_isolation = conn.isolation_level
    conn.isolation_level = None
    try:
        for number, statements in _migration_files(migrations_dir, version):
            conn.execute("BEGIN")
            try:
                for statement in statements:
                    conn.execute(statement)
                conn.execute("INSERT INTO schema_version (version) VALUES (?)", (number,))
            except sqlite3.Error:
                conn.execute("ROLLBACK")
                raise
            conn.execute("COMMIT")
            version = number
            logger.debug("Applied migration %03d", number)
    finally:
        conn.isolation_level = previous_isolation
    return version
