"""Single-row operations on the sentence store.

Each mutation writes the content row and its search-index entry inside one
transaction. Validation failures and storage faults come back as ``None`` or
``False``; nothing is raised to the caller.
"""
import logging
import sqlite3
from typing import Dict, Optional, Tuple

from .fts import index_add, index_clear, index_remove, index_replace
from .schema import DEFAULT_CATEGORY, DEFAULT_DIFFICULTY, DIFFICULTIES, MAX_TEXT_LENGTH
from .transactions import transaction

logger = logging.getLogger(__name__)


def clean_sentence_fields(
    text: Optional[str],
    difficulty: Optional[str] = None,
    category: Optional[str] = None,
    enforce_length: bool = True,
) -> Optional[Tuple[str, str, str]]:
    """Return normalized ``(text, difficulty, category)`` or None if invalid."""
    if not isinstance(text, str) or not text.strip():
        return None
    for value in (difficulty, category):
        if value is not None and not isinstance(value, str):
            return None
    text = text.strip()
    difficulty = (difficulty or DEFAULT_DIFFICULTY).strip().lower()
    if difficulty not in DIFFICULTIES:
        return None
    category = (category or "").strip() or DEFAULT_CATEGORY
    if enforce_length and len(text) > MAX_TEXT_LENGTH.get(difficulty, len(text)):
        return None
    return text, difficulty, category


def add_sentence(
    conn: sqlite3.Connection,
    text: str,
    difficulty: str = DEFAULT_DIFFICULTY,
    category: str = DEFAULT_CATEGORY,
    source: Optional[str] = None,
) -> Optional[int]:
    """Insert one sentence and return its id, or None when rejected."""
    fields = clean_sentence_fields(text, difficulty, category)
    if fields is None:
        logger.warning("Rejected sentence (difficulty=%r, category=%r)", difficulty, category)
        return None
    text, difficulty, category = fields
    try:
        with transaction(conn):
            cursor = conn.execute(
                "INSERT INTO sentences (text, difficulty, category, source) VALUES (?, ?, ?, ?)",
                (text, difficulty, category, source),
            )
            sentence_id = cursor.lastrowid
            index_add(conn, sentence_id, text)
        return sentence_id
    except sqlite3.Error:
        logger.exception("Failed to add sentence")
        return None


def get_sentence(conn: sqlite3.Connection, sentence_id: int) -> Optional[dict]:
    try:
        row = conn.execute(
            """
            SELECT id, text, difficulty, category, source, created_at
            FROM sentences WHERE id = ?
            """,
            (sentence_id,),
        ).fetchone()
    except sqlite3.Error:
        logger.exception("Failed to read sentence %s", sentence_id)
        return None
    return dict(row) if row else None


def update_sentence(
    conn: sqlite3.Connection,
    sentence_id: int,
    text: str,
    difficulty: str,
    category: str,
) -> bool:
    """Replace text, difficulty and category of one sentence.

    The length cap only applies when the text changes, so long imported
    sentences can still be recategorized.
    """
    fields = clean_sentence_fields(text, difficulty, category, enforce_length=False)
    if fields is None:
        logger.warning("Rejected update for sentence %s", sentence_id)
        return False
    text, difficulty, category = fields
    try:
        with transaction(conn):
            row = conn.execute("SELECT text FROM sentences WHERE id = ?", (sentence_id,)).fetchone()
            if row is None:
                return False
            if row[0] != text and len(text) > MAX_TEXT_LENGTH[difficulty]:
                logger.warning("Rejected update for sentence %s: text too long", sentence_id)
                return False
            cursor = conn.execute(
                "UPDATE sentences SET text = ?, difficulty = ?, category = ? WHERE id = ?",
                (text, difficulty, category, sentence_id),
            )
            if cursor.rowcount == 0:
                return False
            index_replace(conn, sentence_id, text)
        return True
    except sqlite3.Error:
        logger.exception("Failed to update sentence %s", sentence_id)
        return False


def delete_sentence(conn: sqlite3.Connection, sentence_id: int) -> bool:
    """Delete one sentence; a missing id is "no row affected", not an error."""
    try:
        with transaction(conn):
            cursor = conn.execute("DELETE FROM sentences WHERE id = ?", (sentence_id,))
            if cursor.rowcount == 0:
                return False
            index_remove(conn, sentence_id)
        return True
    except sqlite3.Error:
        logger.exception("Failed to delete sentence %s", sentence_id)
        return False


def delete_all_sentences(conn: sqlite3.Connection) -> bool:
    """Wipe content and index together. Only for an explicit user request."""
    try:
        with transaction(conn):
            cursor = conn.execute("DELETE FROM sentences")
            index_clear(conn)
        logger.info("Deleted all sentences (%d rows)", cursor.rowcount)
        return True
    except sqlite3.Error:
        logger.exception("Failed to delete all sentences")
        return False


def count_sentences(conn: sqlite3.Connection, difficulty: Optional[str] = None) -> int:
    try:
        if difficulty is None:
            row = conn.execute("SELECT COUNT(*) FROM sentences").fetchone()
        else:
            row = conn.execute(
                "SELECT COUNT(*) FROM sentences WHERE difficulty = ?", (difficulty,)
            ).fetchone()
    except sqlite3.Error:
        logger.exception("Failed to count sentences")
        return 0
    return int(row[0] or 0)


def get_difficulty_counts(conn: sqlite3.Connection) -> Dict[str, int]:
    """Sentence totals per difficulty, every known difficulty included."""
    counts = {difficulty: 0 for difficulty in DIFFICULTIES}
    try:
        rows = conn.execute(
            "SELECT difficulty, COUNT(*) AS total FROM sentences GROUP BY difficulty"
        ).fetchall()
    except sqlite3.Error:
        logger.exception("Failed to count sentences by difficulty")
        return counts
    for row in rows:
        counts[row["difficulty"]] = int(row["total"])
    return counts
