import io
import json

import pytest

from db import database


@pytest.fixture
def db_path(tmp_path, monkeypatch):
    path = tmp_path / "typingzone.db"
    monkeypatch.setattr(database, "DB_PATH", path)
    return path


@pytest.fixture
def conn(db_path):
    assert database.init_db()
    with database.get_conn() as conn:
        yield conn


@pytest.fixture
def make_seed():
    """Build an in-memory seed document stream."""
    def _make_seed(easy=(), medium=(), hard=()):
        payload = {"sentences": {"easy": list(easy), "medium": list(medium), "hard": list(hard)}}
        return io.BytesIO(json.dumps(payload).encode("utf-8"))
    return _make_seed
