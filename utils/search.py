from __future__ import annotations

from typing import List, Optional, Tuple

DIAGNOSTIC_REBUILD = "!!rebuild"
DIAGNOSTIC_TEST = "!!test"

LIKE_ESCAPE = "\\"


def normalize_query(raw: Optional[str]) -> str:
    """Strip surrounding whitespace; None becomes an empty string."""
    if raw is None:
        return ""
    return raw.strip()


def tokenize_query(raw: Optional[str]) -> List[str]:
    """Lower-case the query and split it on whitespace, dropping empty tokens."""
    cleaned = normalize_query(raw)
    if not cleaned:
        return []
    return [token for token in cleaned.lower().split() if token]


def build_prefix_query(tokens: List[str]) -> str:
    """Build an FTS5 MATCH query that OR-s a prefix search for every token.

    Each token is quoted so FTS5 operators inside user input are matched as
    text, e.g. ``["cat", "sa"]`` -> ``"cat"* OR "sa"*``.
    """
    quoted = ['"{}"*'.format(token.replace('"', '""')) for token in tokens]
    return " OR ".join(quoted)


def escape_like(token: str) -> str:
    return (
        token.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def build_substring_filter(tokens: List[str], column: str = "text") -> Tuple[str, List[str]]:
    """Build a conjunctive ``LIKE '%token%'`` clause and its parameters."""
    clause = " AND ".join(f"{column} LIKE ? ESCAPE '{LIKE_ESCAPE}'" for _ in tokens)
    params = [f"%{escape_like(token)}%" for token in tokens]
    return clause, params
