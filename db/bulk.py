"""Seeding, import, export and administrative listing.

Every multi-row mutation here is one transaction: a batch either lands
completely, content and search index together, or not at all.
"""
from __future__ import annotations

import json
import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import IO, Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from .fts import index_add_many
from .schema import DEFAULT_CATEGORY, DIFFICULTIES
from .sentences import clean_sentence_fields
from .transactions import transaction
from utils.search import build_substring_filter, tokenize_query

logger = logging.getLogger(__name__)

SEED_SOURCE = "seed"
SeedSource = Union[Path, str, IO]

Row = Tuple[str, str, str, Optional[str]]


def load_seed_data(source: SeedSource) -> Optional[Dict[str, Any]]:
    """Parse a seed document from a path or an open stream.

    A missing file or invalid JSON is logged and returns None.
    """
    try:
        if hasattr(source, "read"):
            raw = source.read()
        else:
            raw = Path(source).read_text(encoding="utf-8")
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        data = json.loads(raw)
    except FileNotFoundError:
        logger.warning("Seed file not found: %s", source)
        return None
    except (OSError, UnicodeDecodeError, ValueError) as exc:
        logger.error("Failed to parse seed data from %s: %s", source, exc)
        return None
    if not isinstance(data, dict):
        logger.error("Seed data must be a JSON object, got %s", type(data).__name__)
        return None
    return data


def seed_rows(data: Mapping[str, Any]) -> List[Row]:
    """Flatten ``{"sentences": {difficulty: [text, ...]}}`` into insertable rows."""
    buckets = data.get("sentences") or {}
    if not isinstance(buckets, Mapping):
        return []
    rows: List[Row] = []
    for difficulty in DIFFICULTIES:
        bucket = buckets.get(difficulty)
        if not isinstance(bucket, list):
            continue
        for text in bucket:
            if isinstance(text, str) and text.strip():
                rows.append((text.strip(), difficulty, DEFAULT_CATEGORY, SEED_SOURCE))
    return rows


def _insert_rows(conn: sqlite3.Connection, rows: Iterable[Row]) -> int:
    """Insert rows and their index entries on the caller's transaction."""
    indexed = []
    for text, difficulty, category, source in rows:
        cursor = conn.execute(
            "INSERT INTO sentences (text, difficulty, category, source) VALUES (?, ?, ?, ?)",
            (text, difficulty, category, source),
        )
        indexed.append((cursor.lastrowid, text))
    index_add_many(conn, indexed)
    return len(indexed)


def _text_exists(conn: sqlite3.Connection, text: str) -> bool:
    row = conn.execute("SELECT 1 FROM sentences WHERE text = ? LIMIT 1", (text,)).fetchone()
    return row is not None


def seed_initial_data(conn: sqlite3.Connection, source: SeedSource) -> int:
    """Load the seed into an empty store. Returns the number of sentences added."""
    if conn.execute("SELECT 1 FROM sentences LIMIT 1").fetchone():
        logger.info("Store already has content, skipping seed")
        return 0
    data = load_seed_data(source)
    if data is None:
        return 0
    rows = seed_rows(data)
    if not rows:
        logger.warning("Seed data contained no sentences")
        return 0
    with transaction(conn):
        inserted = _insert_rows(conn, rows)
    logger.info("Seeded %d sentences into database", inserted)
    return inserted


def reseed_from_json(conn: sqlite3.Connection, source: SeedSource) -> int:
    """Re-apply the seed to a store that may already hold content.

    Seed sentences that are already present are left alone.
    """
    data = load_seed_data(source)
    if data is None:
        return 0
    try:
        with transaction(conn):
            seen = set()
            rows = []
            for row in seed_rows(data):
                if row[0] in seen or _text_exists(conn, row[0]):
                    continue
                seen.add(row[0])
                rows.append(row)
            inserted = _insert_rows(conn, rows)
    except sqlite3.Error:
        logger.exception("Reseed failed")
        return 0
    logger.info("Reseed added %d sentences", inserted)
    return inserted


def _import_items(items: Any) -> List[Any]:
    if isinstance(items, Mapping):
        items = items.get("sentences") or []
    if isinstance(items, (str, bytes)) or not isinstance(items, Iterable):
        return []
    return list(items)


def bulk_import_sentences(
    conn: sqlite3.Connection,
    items: Any,
    skip_duplicates: bool = True,
) -> Dict[str, Any]:
    """Import a batch of sentences (plain strings or mappings) in one transaction."""
    result = {"success": False, "imported": 0, "skipped": 0, "invalid": 0, "error": None}
    rows: List[Row] = []
    seen = set()
    try:
        with transaction(conn):
            for item in _import_items(items):
                if isinstance(item, str):
                    item = {"text": item}
                if not isinstance(item, Mapping):
                    result["invalid"] += 1
                    continue
                fields = clean_sentence_fields(
                    item.get("text"),
                    item.get("difficulty"),
                    item.get("category"),
                    enforce_length=False,
                )
                if fields is None:
                    result["invalid"] += 1
                    continue
                text, difficulty, category = fields
                if skip_duplicates and (text in seen or _text_exists(conn, text)):
                    result["skipped"] += 1
                    continue
                seen.add(text)
                rows.append((text, difficulty, category, item.get("source") or "import"))
            result["imported"] = _insert_rows(conn, rows)
    except sqlite3.Error as exc:
        logger.exception("Bulk import failed, batch rolled back")
        result.update(imported=0, error=str(exc))
        return result
    result["success"] = True
    logger.info(
        "Imported %d sentences (%d duplicates skipped, %d invalid)",
        result["imported"],
        result["skipped"],
        result["invalid"],
    )
    return result


def export_sentences(conn: sqlite3.Connection) -> Dict[str, Any]:
    """Dump every sentence for backup or migration."""
    try:
        rows = conn.execute(
            """
            SELECT id, text, difficulty, category, source, created_at
            FROM sentences
            ORDER BY id
            """
        ).fetchall()
    except sqlite3.Error:
        logger.exception("Export failed")
        rows = []
    sentences = [dict(row) for row in rows]
    return {
        "exported_at": datetime.now(timezone.utc).isoformat(),
        "count": len(sentences),
        "sentences": sentences,
    }


def get_paginated_sentences(
    conn: sqlite3.Connection,
    page: int = 1,
    limit: int = 50,
    search_term: Optional[str] = None,
) -> Dict[str, Any]:
    """Newest-first listing for administration, optionally substring-filtered."""
    page = max(1, int(page or 1))
    limit = max(1, int(limit or 1))
    where_clause = ""
    params: List[object] = []
    tokens = tokenize_query(search_term)
    if tokens:
        clause, params = build_substring_filter(tokens)
        where_clause = f"WHERE {clause}"
    try:
        total = conn.execute(
            f"SELECT COUNT(*) FROM sentences {where_clause}", params
        ).fetchone()[0]
        rows = conn.execute(
            f"""
            SELECT id, text, difficulty, category, source, created_at
            FROM sentences
            {where_clause}
            ORDER BY id DESC
            LIMIT ? OFFSET ?
            """,
            (*params, limit, (page - 1) * limit),
        ).fetchall()
    except sqlite3.Error:
        logger.exception("Failed to list sentences")
        return {"data": [], "total": 0, "page": page, "limit": limit}
    return {"data": [dict(row) for row in rows], "total": int(total), "page": page, "limit": limit}
