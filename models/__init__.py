from .sentence import (
    Difficulty,
    Sentence,
    SentenceCreate,
    SentenceUpdate,
    SearchResult,
    SentencePage,
    BulkImportRequest,
    BulkImportResult,
    SentenceExport,
    IndexStatus,
    DiagnosticResult,
)

__all__ = ['Difficulty', 'Sentence', 'SentenceCreate', 'SentenceUpdate', 'SearchResult', 'SentencePage',
           'BulkImportRequest', 'BulkImportResult', 'SentenceExport', 'IndexStatus', 'DiagnosticResult']
