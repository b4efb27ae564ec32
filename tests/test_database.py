import sqlite3

from db import database
from db.schema import SCHEMA_VERSION


def _counts(conn):
    content = conn.execute("SELECT COUNT(*) FROM sentences").fetchone()[0]
    index = conn.execute("SELECT COUNT(*) FROM sentences_fts").fetchone()[0]
    return content, index


def test_init_db_is_idempotent(db_path, make_seed):
    assert database.init_db(make_seed(easy=["cat sat"], medium=["a dog ran"]))
    assert database.init_db(make_seed(easy=["never seeded twice"]))
    assert database.is_ready()

    with database.get_conn() as conn:
        assert _counts(conn) == (2, 2)
        assert database.get_schema_version(conn) == SCHEMA_VERSION


def test_init_db_seeds_fresh_install(db_path, make_seed):
    assert database.init_db(make_seed(easy=["one", "two"], hard=["three"]))

    with database.get_conn() as conn:
        rows = conn.execute("SELECT text, difficulty, category, source FROM sentences ORDER BY id").fetchall()
    assert [tuple(row) for row in rows] == [
        ("one", "easy", "general", "seed"),
        ("two", "easy", "general", "seed"),
        ("three", "hard", "general", "seed"),
    ]


def test_init_db_missing_seed_file_is_not_fatal(db_path, tmp_path):
    assert database.init_db(tmp_path / "missing.json")
    with database.get_conn() as conn:
        assert _counts(conn) == (0, 0)


def test_init_db_repairs_diverged_index(db_path, make_seed):
    assert database.init_db(make_seed(easy=["cat sat", "dog ran"], medium=["bird flew"]))
    with database.get_conn() as conn:
        conn.execute("DELETE FROM sentences_fts WHERE rowid = 1")
        conn.commit()
        assert _counts(conn) == (3, 2)

    assert database.init_db()

    with database.get_conn() as conn:
        assert _counts(conn) == (3, 3)
        assert database.get_index_status(conn)["in_sync"]


def test_init_db_clears_orphaned_index_rows_on_empty_store(db_path):
    assert database.init_db()
    with database.get_conn() as conn:
        conn.execute("INSERT INTO sentences_fts (rowid, text) VALUES (42, 'ghost')")
        conn.commit()

    assert database.init_db()

    with database.get_conn() as conn:
        assert _counts(conn) == (0, 0)


def test_init_db_replaces_trigger_based_index(db_path):
    with sqlite3.connect(db_path) as conn:
        conn.executescript(
            """
            CREATE TABLE sentences (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                text TEXT NOT NULL,
                difficulty TEXT NOT NULL,
                category TEXT DEFAULT 'general',
                source TEXT,
                created_at DATETIME DEFAULT CURRENT_TIMESTAMP
            );
            CREATE VIRTUAL TABLE sentences_fts USING fts5(text, content='sentences', content_rowid='id');
            CREATE TRIGGER sentences_ai AFTER INSERT ON sentences BEGIN
              INSERT INTO sentences_fts(rowid, text) VALUES (new.id, new.text);
            END;
            INSERT INTO sentences (text, difficulty) VALUES ('legacy row', 'easy');
            """
        )
    conn.close()

    assert database.init_db()

    with database.get_conn() as conn:
        triggers = conn.execute("SELECT name FROM sqlite_master WHERE type = 'trigger'").fetchall()
        assert triggers == []
        fts_sql = conn.execute(
            "SELECT sql FROM sqlite_master WHERE name = 'sentences_fts'"
        ).fetchone()[0]
        assert "content=" not in fts_sql.replace(" ", "")
        assert database.get_index_status(conn)["in_sync"]
        hits = conn.execute(
            "SELECT rowid FROM sentences_fts WHERE sentences_fts MATCH 'legacy'"
        ).fetchall()
        assert [row[0] for row in hits] == [1]


def test_init_db_failure_returns_false(tmp_path, monkeypatch):
    # A directory cannot be opened as a database file
    monkeypatch.setattr(database, "DB_PATH", tmp_path)

    assert database.init_db() is False
    assert database.is_ready() is False


def test_index_status_reports_identity_divergence(conn):
    conn.execute("INSERT INTO sentences (text, difficulty) VALUES ('not indexed', 'easy')")
    conn.execute("INSERT INTO sentences_fts (rowid, text) VALUES (999, 'orphan')")
    conn.commit()

    status = database.get_index_status(conn)

    assert status["content_count"] == status["index_count"] == 1
    assert status["missing_from_index"] == 1
    assert status["orphaned_in_index"] == 1
    assert status["in_sync"] is False


def test_index_status_reports_missing_index_table(conn):
    conn.execute("INSERT INTO sentences (text, difficulty) VALUES ('orphaned content', 'easy')")
    conn.execute("DROP TABLE sentences_fts")
    conn.commit()

    status = database.get_index_status(conn)

    assert status == {
        "content_count": 1,
        "index_count": 0,
        "missing_from_index": 1,
        "orphaned_in_index": 0,
        "in_sync": False,
    }
