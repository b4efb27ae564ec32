"""Random practice text without ``ORDER BY RANDOM()`` scans.

Single picks jump to a random point of the partition's id range and take the
next surviving row, so rows right after an id gap are picked a little more
often than others. That bias is accepted in exchange for an indexed lookup.
Batches are one random contiguous window of the partition, not independent
picks.
"""
import logging
import random
import sqlite3
from typing import List, Optional

from .schema import DEFAULT_DIFFICULTY

logger = logging.getLogger(__name__)


def get_random_sentence(
    conn: sqlite3.Connection,
    difficulty: str = DEFAULT_DIFFICULTY,
    rng: Optional[random.Random] = None,
) -> Optional[str]:
    rng = rng or random
    try:
        stats = conn.execute(
            """
            SELECT COUNT(*) AS count, MIN(id) AS min_id, MAX(id) AS max_id
            FROM sentences
            WHERE difficulty = ?
            """,
            (difficulty,),
        ).fetchone()
        if not stats or not stats["count"]:
            return None

        target_id = rng.randint(stats["min_id"], stats["max_id"])
        row = conn.execute(
            """
            SELECT text FROM sentences
            WHERE difficulty = ? AND id >= ?
            ORDER BY id ASC LIMIT 1
            """,
            (difficulty, target_id),
        ).fetchone()
        if row is None:
            # Target fell past the last surviving id
            row = conn.execute(
                "SELECT text FROM sentences WHERE difficulty = ? ORDER BY id ASC LIMIT 1",
                (difficulty,),
            ).fetchone()
        return row["text"] if row else None
    except sqlite3.Error:
        logger.exception("Failed to get random sentence")
        return None


def get_sentences(
    conn: sqlite3.Connection,
    difficulty: str = DEFAULT_DIFFICULTY,
    limit: int = 10,
    rng: Optional[random.Random] = None,
) -> List[str]:
    rng = rng or random
    if limit <= 0:
        return []
    try:
        row = conn.execute(
            "SELECT COUNT(*) FROM sentences WHERE difficulty = ?", (difficulty,)
        ).fetchone()
        count = int(row[0] or 0)
        if count == 0:
            return []

        offset = 0 if count <= limit else rng.randint(0, count - limit)
        rows = conn.execute(
            """
            SELECT text FROM sentences
            WHERE difficulty = ?
            ORDER BY id ASC
            LIMIT ? OFFSET ?
            """,
            (difficulty, limit, offset),
        ).fetchall()
        return [r["text"] for r in rows]
    except sqlite3.Error:
        logger.exception("Failed to get sentences")
        return []
