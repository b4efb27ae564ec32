"""Write-path helpers that mirror content mutations into ``sentences_fts``.

Every function here runs on the caller's connection and inside the caller's
transaction; none of them commit. The content table is the source of truth,
the FTS table only ever holds ``(rowid=sentence id, text)`` projections of it.
"""
import sqlite3
from typing import Iterable, Tuple

from .schema import FTS_SQL


def index_add(conn: sqlite3.Connection, sentence_id: int, text: str) -> None:
    conn.execute(
        "INSERT INTO sentences_fts (rowid, text) VALUES (?, ?)",
        (sentence_id, text),
    )


def index_add_many(conn: sqlite3.Connection, rows: Iterable[Tuple[int, str]]) -> None:
    conn.executemany(
        "INSERT INTO sentences_fts (rowid, text) VALUES (?, ?)",
        rows,
    )


def index_remove(conn: sqlite3.Connection, sentence_id: int) -> None:
    conn.execute("DELETE FROM sentences_fts WHERE rowid = ?", (sentence_id,))


def index_replace(conn: sqlite3.Connection, sentence_id: int, text: str) -> None:
    index_remove(conn, sentence_id)
    index_add(conn, sentence_id, text)


def index_clear(conn: sqlite3.Connection) -> None:
    conn.execute("DELETE FROM sentences_fts")


def index_rebuild(conn: sqlite3.Connection) -> int:
    """Clear the index and repopulate it from content in one pass."""
    index_clear(conn)
    cursor = conn.execute(
        "INSERT INTO sentences_fts (rowid, text) SELECT id, text FROM sentences"
    )
    return cursor.rowcount


def index_recreate(conn: sqlite3.Connection) -> int:
    """Drop the FTS table entirely, recreate it and repopulate it from content."""
    conn.execute("DROP TABLE IF EXISTS sentences_fts")
    conn.execute(FTS_SQL)
    return index_rebuild(conn)
