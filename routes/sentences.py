from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import List, Optional
from db.database import get_db
from db.bulk import bulk_import_sentences, export_sentences, get_paginated_sentences
from db.sampling import get_random_sentence, get_sentences
from db.search import search_sentences
from db.sentences import (
    add_sentence,
    delete_all_sentences,
    delete_sentence,
    get_difficulty_counts,
    get_sentence,
    update_sentence,
)
from config import load_config
from models.sentence import (
    BulkImportRequest,
    BulkImportResult,
    Difficulty,
    SearchResult,
    Sentence,
    SentenceCreate,
    SentenceExport,
    SentencePage,
    SentenceUpdate,
)

router = APIRouter()

@router.get("/random")
async def random_sentence(difficulty: Difficulty = Difficulty.MEDIUM, conn = Depends(get_db)):
    """One random sentence from a difficulty; text is null for an empty partition."""
    return {"text": get_random_sentence(conn, difficulty.value)}

@router.get("/", response_model=List[str])
async def sentence_batch(
    difficulty: Difficulty = Difficulty.MEDIUM,
    limit: int = Query(10, ge=1, le=500),
    conn = Depends(get_db),
):
    return get_sentences(conn, difficulty.value, limit)

@router.get("/search", response_model=List[SearchResult])
async def search(q: str = "", limit: Optional[int] = Query(None, ge=1, le=500), conn = Depends(get_db)):
    search_cfg = load_config()["search"]
    return search_sentences(
        conn,
        q,
        limit or search_cfg["default_limit"],
        allow_diagnostics=search_cfg["diagnostic_commands"],
    )

@router.get("/page", response_model=SentencePage)
async def sentence_page(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=500),
    search: Optional[str] = None,
    conn = Depends(get_db),
):
    """Administrative listing, newest first."""
    return get_paginated_sentences(conn, page, limit, search)

@router.get("/stats")
async def sentence_stats(conn = Depends(get_db)):
    counts = get_difficulty_counts(conn)
    return {"total": sum(counts.values()), "by_difficulty": counts}

@router.get("/export", response_model=SentenceExport)
async def export_all(conn = Depends(get_db)):
    return export_sentences(conn)

@router.post("/import", response_model=BulkImportResult)
async def import_sentences(payload: BulkImportRequest, conn = Depends(get_db)):
    items = [item if isinstance(item, str) else item.model_dump() for item in payload.sentences]
    result = bulk_import_sentences(conn, items, payload.skip_duplicates)
    if not result["success"]:
        raise HTTPException(status_code=500, detail=result["error"] or "Import failed")
    return result

@router.get("/{sentence_id}", response_model=Sentence)
async def read_sentence(sentence_id: int, conn = Depends(get_db)):
    sentence = get_sentence(conn, sentence_id)
    if not sentence:
        raise HTTPException(status_code=404, detail="Sentence not found")
    return sentence

@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_sentence(payload: SentenceCreate, conn = Depends(get_db)):
    sentence_id = add_sentence(conn, payload.text, payload.difficulty.value, payload.category)
    if sentence_id is None:
        raise HTTPException(status_code=400, detail="Sentence rejected")
    return {"id": sentence_id}

@router.put("/{sentence_id}")
async def edit_sentence(sentence_id: int, payload: SentenceUpdate, conn = Depends(get_db)):
    if get_sentence(conn, sentence_id) is None:
        raise HTTPException(status_code=404, detail="Sentence not found")
    if not update_sentence(conn, sentence_id, payload.text, payload.difficulty.value, payload.category):
        raise HTTPException(status_code=400, detail="Sentence rejected")
    return {"updated": True}

@router.delete("/{sentence_id}")
async def remove_sentence(sentence_id: int, conn = Depends(get_db)):
    if not delete_sentence(conn, sentence_id):
        raise HTTPException(status_code=404, detail="Sentence not found")
    return {"deleted": True}

@router.delete("/")
async def remove_all_sentences(confirm: bool = False, conn = Depends(get_db)):
    """Wipe every sentence. Requires ?confirm=true."""
    if not confirm:
        raise HTTPException(status_code=400, detail="Pass confirm=true to delete all sentences")
    if not delete_all_sentences(conn):
        raise HTTPException(status_code=500, detail="Failed to delete sentences")
    return {"deleted": True}
