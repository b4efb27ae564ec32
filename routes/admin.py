from fastapi import APIRouter, Depends

from config import get_config_value
from db.bulk import reseed_from_json
from db.database import get_db, get_index_status
from db.diagnostics import check_index_sync, rebuild_search_index
from models.sentence import DiagnosticResult, IndexStatus

router = APIRouter()

@router.get("/index-status", response_model=IndexStatus)
async def index_status(conn = Depends(get_db)):
    return get_index_status(conn)

@router.post("/rebuild-index", response_model=DiagnosticResult)
async def rebuild_index(conn = Depends(get_db)):
    """Drop and rebuild the search index from content."""
    count = rebuild_search_index(conn)
    return {"ok": True, "detail": f"Search index reset, {count} sentences in total", "count": count}

@router.post("/test-index", response_model=DiagnosticResult)
async def test_index(conn = Depends(get_db)):
    """Insert a throw-away sentence and check that the search index sees it."""
    found = check_index_sync(conn)
    return {"ok": found, "detail": "FTS find: SUCCESS" if found else "FTS find: FAILED"}

@router.post("/reseed", response_model=DiagnosticResult)
async def reseed(conn = Depends(get_db)):
    seed_path = get_config_value("seed", "path")
    inserted = reseed_from_json(conn, seed_path)
    return {"ok": True, "detail": f"Reseeded {inserted} sentences from {seed_path}", "count": inserted}
