# SQL schema for the TypingZone sentence store

SCHEMA_VERSION = 2

DIFFICULTIES = ("easy", "medium", "hard")
DEFAULT_DIFFICULTY = "medium"
DEFAULT_CATEGORY = "general"

# Longest practice text accepted per difficulty when added by hand or imported
MAX_TEXT_LENGTH = {
    "easy": 100,
    "medium": 130,
    "hard": 150,
}

SCHEMA_SQL = """
-- Practice sentences
CREATE TABLE IF NOT EXISTS sentences (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    text TEXT NOT NULL CHECK(length(trim(text)) > 0),
    difficulty TEXT NOT NULL DEFAULT 'medium',
    category TEXT NOT NULL DEFAULT 'general',
    source TEXT,
    created_at TEXT NOT NULL DEFAULT (datetime('now'))
);
"""

# Standalone FTS5 table: it keeps its own copy of the text keyed by the
# sentence id, so its row set can drift from the content table and be checked.
FTS_SQL = """
CREATE VIRTUAL TABLE IF NOT EXISTS sentences_fts USING fts5(text);
"""

# Indexes for performance
INDEXES_SQL = """
CREATE INDEX IF NOT EXISTS idx_sentences_difficulty ON sentences (difficulty, id);
CREATE INDEX IF NOT EXISTS idx_sentences_text ON sentences (text);
"""

# Older databases kept the index in sync with triggers; the write path does it now.
LEGACY_TRIGGERS = ("sentences_ai", "sentences_ad", "sentences_au")
