"""Operator recovery and health checks for the search index."""
import logging
import sqlite3
import time
from typing import Optional

from .fts import index_add, index_recreate, index_remove
from .transactions import transaction
from utils.search import DIAGNOSTIC_REBUILD, DIAGNOSTIC_TEST

logger = logging.getLogger(__name__)

REBUILD_RESULT_ID = -1
SYNC_TEST_RESULT_ID = -2


def rebuild_search_index(conn: sqlite3.Connection) -> int:
    """Drop and recreate the search index from content; return the sentence count."""
    logger.warning("Destructive search index rebuild triggered")
    with transaction(conn):
        index_recreate(conn)
    count = conn.execute("SELECT COUNT(*) FROM sentences").fetchone()[0]
    logger.info("Rebuild complete. Total sentences: %d", count)
    return int(count)


def check_index_sync(conn: sqlite3.Connection) -> bool:
    """Insert a throw-away sentence and report whether the index sees it.

    The marker row is removed again before returning. A broken or missing
    index reports False and rolls the marker back.
    """
    marker_text = f"DIAGNOSTIC_TEST_{time.time_ns()}"
    try:
        with transaction(conn):
            cursor = conn.execute(
                "INSERT INTO sentences (text, difficulty, category, source) VALUES (?, 'easy', 'diagnostic', 'diagnostic')",
                (marker_text,),
            )
            marker_id = cursor.lastrowid
            index_add(conn, marker_id, marker_text)
            hits = conn.execute(
                "SELECT rowid FROM sentences_fts WHERE sentences_fts MATCH ?",
                (f'"{marker_text}"',),
            ).fetchall()
            found = any(row[0] == marker_id for row in hits)
            conn.execute("DELETE FROM sentences WHERE id = ?", (marker_id,))
            index_remove(conn, marker_id)
    except sqlite3.Error:
        logger.exception("Index sync test could not run")
        found = False
    logger.info("Index sync test: %s", "SUCCESS" if found else "FAILED")
    return found


def run_diagnostic_command(conn: sqlite3.Connection, command: str) -> Optional[list]:
    """Run a reserved search-box command and return its synthetic result row.

    Returns None when ``command`` is not a reserved literal.
    """
    if command == DIAGNOSTIC_REBUILD:
        count = rebuild_search_index(conn)
        return [{
            "id": REBUILD_RESULT_ID,
            "text": f"Search Index Reset! Found {count} sentences in total.",
            "difficulty": None,
            "category": "System Recovery",
        }]
    if command == DIAGNOSTIC_TEST:
        found = check_index_sync(conn)
        return [{
            "id": SYNC_TEST_RESULT_ID,
            "text": f"Sync Test: DB Insert OK. FTS Find: {'SUCCESS' if found else 'FAILED'}",
            "difficulty": None,
            "category": "System Diagnostics",
        }]
    return None
