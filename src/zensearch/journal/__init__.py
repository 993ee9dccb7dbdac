"""Offline full-text search over journal entries.

Provides the entry and hit models, diacritic-aware normalization, an
incrementally synced inverted index with TF-IDF-like ranking, snippet
extraction, and a binder that follows a host's journal store.
"""

from .binder import JournalSearchBinder
from .config import SearchConfig
from .index import SearchIndex
from .models import EntryKind, IndexedDocument, JournalRecord, SearchHit, SearchOptions, SyncReport
from .normalize import normalize, term_frequencies, tokenize
from .snippets import build_snippet
from .store import EntrySource, FileEntrySource, ListEntrySource

__all__ = [
    "EntryKind",
    "EntrySource",
    "FileEntrySource",
    "IndexedDocument",
    "JournalRecord",
    "JournalSearchBinder",
    "ListEntrySource",
    "SearchConfig",
    "SearchHit",
    "SearchIndex",
    "SearchOptions",
    "SyncReport",
    "build_snippet",
    "normalize",
    "term_frequencies",
    "tokenize",
]
