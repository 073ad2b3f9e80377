from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
import sqlite3
from pathlib import Path

from moviegrid.db import repo
from moviegrid.errors import StoreError
from moviegrid.util.logging import get_logger

LOG = get_logger(__name__)


def ensure_db(path: str) -> None:
    db_path = Path(path)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    created = not db_path.exists()

    with open_store(path) as conn:
        schema_path = Path(__file__).parent / "schema.sql"
        conn.executescript(schema_path.read_text(encoding="utf-8"))
        _migrate_movies(conn)
        conn.commit()

    if created:
        LOG.info("Created database at %s", db_path)


@contextmanager
def open_store(path: str) -> Iterator[sqlite3.Connection]:
    """Open a connection for the duration of the block and always close it.

    ``sqlite3.Error`` raised while opening or inside the block surfaces as
    ``StoreError``.
    """
    try:
        conn = repo.connect(path)
    except sqlite3.Error as exc:
        raise StoreError(f"Cannot open store at {path}: {exc}") from exc
    try:
        yield conn
    except sqlite3.Error as exc:
        raise StoreError(f"Store query failed: {exc}") from exc
    finally:
        conn.close()


def _migrate_movies(conn: sqlite3.Connection) -> None:
    existing = {row[1] for row in conn.execute("PRAGMA table_info(movies)").fetchall()}
    columns = {
        "vote_average": "REAL",
        "backdrop_path": "TEXT",
        "fetched_at": "TEXT",
    }
    for name, col_type in columns.items():
        if name not in existing:
            conn.execute(f"ALTER TABLE movies ADD COLUMN {name} {col_type}")
