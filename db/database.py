import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Optional, Union

from config import CONFIG_DIR
from .bulk import seed_initial_data
from .fts import index_clear, index_rebuild
from .schema import FTS_SQL, INDEXES_SQL, LEGACY_TRIGGERS, SCHEMA_SQL, SCHEMA_VERSION
from .transactions import transaction

logger = logging.getLogger(__name__)

DB_PATH = CONFIG_DIR / "typingzone.db"

# Database files that passed init_db in this process
_READY_PATHS = set()


class StoreNotInitializedError(RuntimeError):
    """Raised when the store is used before init_db() succeeded."""


def configure(db_path: Union[Path, str]) -> None:
    """Point the store at a database file (from config)."""
    global DB_PATH
    DB_PATH = Path(db_path)


def is_ready() -> bool:
    return Path(DB_PATH) in _READY_PATHS


def init_db(seed_source: Optional[Union[Path, str, IO]] = None) -> bool:
    """Create schema, seed an empty store and repair a diverged search index.

    Runs on every start. Returns False on any storage failure; callers must not
    touch the store in that case.
    """
    try:
        Path(DB_PATH).parent.mkdir(parents=True, exist_ok=True)
        logger.info("Initializing database at: %s", DB_PATH)
        with get_conn() as conn:
            conn.executescript(SCHEMA_SQL)
            conn.executescript(INDEXES_SQL)
            drop_legacy_triggers(conn)
            ensure_standalone_fts(conn)
            ensure_schema_version(conn)
            conn.commit()

            content_count = count_rows(conn, "sentences")
            index_count = count_rows(conn, "sentences_fts")
            if content_count == 0:
                logger.info("Fresh install: sentence table is empty, seeding")
                if index_count:
                    with transaction(conn):
                        index_clear(conn)
                if seed_source is not None:
                    seed_initial_data(conn, seed_source)
                else:
                    logger.warning("No seed source configured, starting with an empty store")
            elif content_count != index_count:
                logger.warning(
                    "Search index out of sync (%d sentences vs %d indexed). Rebuilding index...",
                    content_count,
                    index_count,
                )
                with transaction(conn):
                    index_rebuild(conn)
                logger.info("Search index rebuilt")
    except (sqlite3.Error, OSError):
        logger.exception("Database initialization failed")
        _READY_PATHS.discard(Path(DB_PATH))
        return False
    _READY_PATHS.add(Path(DB_PATH))
    return True

def count_rows(conn: sqlite3.Connection, table: str) -> int:
    row = conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()
    return int(row[0] or 0)

def drop_legacy_triggers(conn: sqlite3.Connection) -> None:
    """Remove index-sync triggers left by older databases."""
    for name in LEGACY_TRIGGERS:
        conn.execute(f"DROP TRIGGER IF EXISTS {name}")

def ensure_standalone_fts(conn: sqlite3.Connection) -> None:
    """Ensure sentences_fts exists and stores its own text copy."""
    cursor = conn.cursor()
    cursor.execute("SELECT sql FROM sqlite_master WHERE type='table' AND name='sentences_fts'")
    row = cursor.fetchone()
    if row and "content=" in (row[0] or "").replace(" ", "").lower():
        logger.info("Replacing external-content search index with a standalone one")
        cursor.execute("DROP TABLE sentences_fts")
    cursor.execute(FTS_SQL)

def get_index_status(conn: sqlite3.Connection) -> dict:
    """Compare the content table and the search index by count and identity."""
    content_count = count_rows(conn, "sentences")
    index_exists = conn.execute(
        "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = 'sentences_fts'"
    ).fetchone()
    if index_exists is None:
        logger.warning("Search index table is missing")
        return {
            "content_count": content_count,
            "index_count": 0,
            "missing_from_index": content_count,
            "orphaned_in_index": 0,
            "in_sync": False,
        }
    index_count = count_rows(conn, "sentences_fts")
    missing = conn.execute(
        """
        SELECT COUNT(*) FROM sentences s
        WHERE NOT EXISTS (SELECT 1 FROM sentences_fts f WHERE f.rowid = s.id)
        """
    ).fetchone()[0]
    orphaned = conn.execute(
        """
        SELECT COUNT(*) FROM sentences_fts f
        WHERE NOT EXISTS (SELECT 1 FROM sentences s WHERE s.id = f.rowid)
        """
    ).fetchone()[0]
    return {
        "content_count": content_count,
        "index_count": index_count,
        "missing_from_index": int(missing or 0),
        "orphaned_in_index": int(orphaned or 0),
        "in_sync": content_count == index_count and not missing and not orphaned,
    }

def get_schema_version(conn: sqlite3.Connection) -> int:
    """Read the SQLite schema version from PRAGMA user_version."""
    cursor = conn.cursor()
    cursor.execute("PRAGMA user_version")
    row = cursor.fetchone()
    return int(row[0]) if row else 0

def set_schema_version(conn: sqlite3.Connection, version: int) -> None:
    """Set the SQLite schema version via PRAGMA user_version."""
    conn.execute(f"PRAGMA user_version = {int(version)}")

def ensure_schema_version(conn: sqlite3.Connection) -> None:
    """Ensure the current schema version is written to the database."""
    current = get_schema_version(conn)
    if current != SCHEMA_VERSION:
        logger.info("Schema version %d -> %d", current, SCHEMA_VERSION)
        set_schema_version(conn, SCHEMA_VERSION)

@contextmanager
def get_conn():
    """Context manager for SQLite connection, using row_factory for dict-like rows."""
    conn = sqlite3.connect(DB_PATH, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    try:
        yield conn
    finally:
        conn.close()

def get_db():
    """FastAPI dependency that yields a DB connection and closes it afterwards."""
    if not is_ready():
        raise StoreNotInitializedError("Sentence store is not initialized")
    with get_conn() as conn:
        yield conn
