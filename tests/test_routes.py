from pathlib import Path

import pytest
from fastapi.testclient import TestClient

import config
from db import database
from main import app


def _write_test_config(config_path: Path, seed_path: Path, diagnostics: bool = False) -> None:
    config_path.write_text(
        "\n".join(
            [
                "[seed]",
                f'path = "{seed_path.as_posix()}"',
                "",
                "[search]",
                "default_limit = 20",
                f"diagnostic_commands = {'true' if diagnostics else 'false'}",
            ]
        ),
        encoding="utf-8",
    )


@pytest.fixture
def client(tmp_path, monkeypatch):
    config_dir = tmp_path / ".typingzone"
    config_dir.mkdir()
    config_path = config_dir / "config.toml"
    seed_path = tmp_path / "words.json"
    seed_path.write_text(
        '{"sentences": {"easy": ["cat sat"], "medium": ["the dog ran home"], "hard": []}}',
        encoding="utf-8",
    )
    _write_test_config(config_path, seed_path)

    monkeypatch.setattr(config, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(config, "CONFIG_PATH", config_path)
    monkeypatch.setattr(config, "load_dotenv", lambda: False)
    monkeypatch.delenv("TYPINGZONE_SEARCH_DIAGNOSTICS", raising=False)
    monkeypatch.delenv("TYPINGZONE_SEED_PATH", raising=False)
    monkeypatch.setattr(database, "DB_PATH", config_dir / "typingzone.db")

    assert database.init_db(seed_path)
    return TestClient(app)


def test_random_and_batch(client):
    assert client.get("/sentences/random", params={"difficulty": "easy"}).json() == {"text": "cat sat"}
    assert client.get("/sentences/random", params={"difficulty": "hard"}).json() == {"text": None}
    assert client.get("/sentences/", params={"difficulty": "medium", "limit": 5}).json() == ["the dog ran home"]
    assert client.get("/sentences/random", params={"difficulty": "legendary"}).status_code == 422


def test_sentence_crud_cycle(client):
    response = client.post("/sentences/", json={"text": "new words", "difficulty": "easy", "category": "custom"})
    assert response.status_code == 201
    sentence_id = response.json()["id"]

    body = client.get(f"/sentences/{sentence_id}").json()
    assert body["text"] == "new words"
    assert body["category"] == "custom"

    search = client.get("/sentences/search", params={"q": "new words"}).json()
    assert any(row["id"] == sentence_id for row in search)

    response = client.put(
        f"/sentences/{sentence_id}",
        json={"text": "edited words", "difficulty": "hard", "category": "custom"},
    )
    assert response.json() == {"updated": True}
    assert client.get(f"/sentences/{sentence_id}").json()["difficulty"] == "hard"

    assert client.delete(f"/sentences/{sentence_id}").json() == {"deleted": True}
    assert client.delete(f"/sentences/{sentence_id}").status_code == 404
    assert client.get(f"/sentences/{sentence_id}").status_code == 404
    assert client.put(
        f"/sentences/{sentence_id}",
        json={"text": "ghost", "difficulty": "easy", "category": "general"},
    ).status_code == 404


def test_create_rejects_invalid_sentences(client):
    assert client.post("/sentences/", json={"text": "   "}).status_code == 422
    assert client.post("/sentences/", json={"text": "x" * 120, "difficulty": "easy"}).status_code == 400


def test_page_stats_import_export(client):
    page = client.get("/sentences/page", params={"page": 1, "limit": 1}).json()
    assert page["total"] == 2
    assert page["data"][0]["text"] == "the dog ran home"

    assert client.get("/sentences/stats").json() == {
        "total": 2,
        "by_difficulty": {"easy": 1, "medium": 1, "hard": 0},
    }

    exported = client.get("/sentences/export").json()
    assert exported["count"] == 2

    result = client.post(
        "/sentences/import",
        json={"sentences": exported["sentences"] + ["brand new"], "skip_duplicates": True},
    ).json()
    assert result["imported"] == 1
    assert result["skipped"] == 2


def test_delete_all_requires_confirmation(client):
    assert client.delete("/sentences/").status_code == 400
    assert client.delete("/sentences/", params={"confirm": "true"}).json() == {"deleted": True}
    assert client.get("/sentences/stats").json()["total"] == 0


def test_search_diagnostics_follow_config(client):
    assert client.get("/sentences/search", params={"q": "!!rebuild"}).json() == []

    _write_test_config(config.CONFIG_PATH, Path(config.CONFIG_DIR).parent / "words.json", diagnostics=True)
    results = client.get("/sentences/search", params={"q": "!!rebuild"}).json()
    assert results[0]["id"] == -1


def test_admin_operations(client):
    assert client.get("/admin/index-status").json()["in_sync"] is True

    rebuilt = client.post("/admin/rebuild-index").json()
    assert rebuilt["ok"] is True
    assert rebuilt["count"] == 2

    tested = client.post("/admin/test-index").json()
    assert tested["ok"] is True

    client.delete("/sentences/", params={"confirm": "true"})
    reseeded = client.post("/admin/reseed").json()
    assert reseeded["count"] == 2


def test_admin_reports_missing_index_without_erroring(client):
    with database.get_conn() as conn:
        conn.execute("DROP TABLE sentences_fts")
        conn.commit()

    status = client.get("/admin/index-status")
    assert status.status_code == 200
    assert status.json()["in_sync"] is False
    assert status.json()["index_count"] == 0

    tested = client.post("/admin/test-index")
    assert tested.status_code == 200
    assert tested.json()["ok"] is False

    assert client.post("/admin/rebuild-index").json()["count"] == 2
    assert client.get("/admin/index-status").json()["in_sync"] is True


def test_store_not_initialized_returns_503(tmp_path, monkeypatch):
    monkeypatch.setattr(database, "DB_PATH", tmp_path / "never-initialized.db")
    client = TestClient(app)

    response = client.get("/sentences/random")

    assert response.status_code == 503
    assert client.get("/health").json() == {"ready": False}
