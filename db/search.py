"""Two-tier sentence search.

Tier 1 is a ranked FTS5 prefix query. When it finds nothing, or the MATCH
query itself fails, tier 2 scans content with a ``LIKE '%token%'`` for every
token. Callers always get a list back.
"""
import logging
import sqlite3
from typing import List

from .diagnostics import run_diagnostic_command
from utils.search import (
    build_prefix_query,
    build_substring_filter,
    normalize_query,
    tokenize_query,
)

logger = logging.getLogger(__name__)


def search_sentences(
    conn: sqlite3.Connection,
    query: str,
    limit: int = 20,
    allow_diagnostics: bool = False,
) -> List[dict]:
    try:
        trimmed = normalize_query(query)
        if not trimmed or limit <= 0:
            return []
        logger.debug("Search request for: %r", trimmed)

        if allow_diagnostics:
            synthetic = run_diagnostic_command(conn, trimmed)
            if synthetic is not None:
                return synthetic

        tokens = tokenize_query(trimmed)
        if not tokens:
            return []

        results = _search_index(conn, tokens, limit)
        if results:
            return results

        logger.debug("Tier 1 returned 0 rows, using substring scan")
        return _search_substring(conn, tokens, limit)
    except Exception:
        logger.exception("Search failed for %r", query)
        return []


def _search_index(conn: sqlite3.Connection, tokens: List[str], limit: int) -> List[dict]:
    fts_query = build_prefix_query(tokens)
    try:
        rows = conn.execute(
            """
            SELECT s.id, s.text, s.difficulty, s.category
            FROM sentences_fts
            JOIN sentences s ON s.id = sentences_fts.rowid
            WHERE sentences_fts MATCH ?
            ORDER BY sentences_fts.rank
            LIMIT ?
            """,
            (fts_query, limit),
        ).fetchall()
    except sqlite3.Error as exc:
        logger.warning("FTS query %r failed: %s", fts_query, exc)
        return []
    return [dict(row) for row in rows]


def _search_substring(conn: sqlite3.Connection, tokens: List[str], limit: int) -> List[dict]:
    clause, params = build_substring_filter(tokens)
    rows = conn.execute(
        f"""
        SELECT id, text, difficulty, category
        FROM sentences
        WHERE {clause}
        ORDER BY id DESC
        LIMIT ?
        """,
        (*params, limit),
    ).fetchall()
    return [dict(row) for row in rows]
