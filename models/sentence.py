from pydantic import BaseModel, Field, field_validator
from typing import List, Optional, Union
from enum import Enum

class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

class SentenceBase(BaseModel):
    text: str
    difficulty: Difficulty = Difficulty.MEDIUM
    category: str = "general"

    @field_validator('text')
    @classmethod
    def validate_text(cls, v):
        if not v or not v.strip():
            raise ValueError("Text must not be empty")
        return v.strip()

class SentenceCreate(SentenceBase):
    pass

class SentenceUpdate(SentenceBase):
    pass

class Sentence(SentenceBase):
    id: int
    source: Optional[str] = None
    created_at: str  # ISO datetime

    class Config:
        from_attributes = True

class SearchResult(BaseModel):
    id: int
    text: str
    difficulty: Optional[str] = None
    category: Optional[str] = None

class SentencePage(BaseModel):
    data: List[Sentence]
    total: int
    page: int
    limit: int

class ImportItem(BaseModel):
    text: str
    difficulty: Optional[str] = None
    category: Optional[str] = None
    source: Optional[str] = None

class BulkImportRequest(BaseModel):
    sentences: List[Union[str, ImportItem]] = Field(default_factory=list)
    skip_duplicates: bool = True

class BulkImportResult(BaseModel):
    success: bool
    imported: int
    skipped: int
    invalid: int = 0
    error: Optional[str] = None

class SentenceExport(BaseModel):
    exported_at: str
    count: int
    sentences: List[Sentence]

class IndexStatus(BaseModel):
    content_count: int
    index_count: int
    missing_from_index: int
    orphaned_in_index: int
    in_sync: bool

class DiagnosticResult(BaseModel):
    ok: bool
    detail: str
    count: Optional[int] = None
