"""In-memory full-text index over journal entries.

The index is rebuilt from the host's entry collection at startup and kept
current with ``sync_from`` (full diff) or ``upsert`` / ``remove_by_id``
(single mutations). It performs no I/O and holds no reference to the host's
objects; callers sharing one index across threads must serialize access.

Example::

    index = SearchIndex()
    index.sync_from(entries)
    hits = index.search("dankbar grenze", SearchOptions(limit=10))
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from datetime import datetime, tzinfo
from types import MappingProxyType
from typing import Any

from loguru import logger

from zensearch.core.exceptions import RecordError

from .config import SearchConfig
from .models import IndexedDocument, JournalRecord, SearchHit, SearchOptions, SyncReport
from .postings import AliasMap, PostingsStore
from .search import QueryEngine


class SearchIndex:
    """Documents plus postings, kept consistent under every mutation.

    A changed document is always removed completely and inserted again, so
    a document's terms and the postings that reference it never drift apart.
    """

    def __init__(
        self,
        config: SearchConfig | None = None,
        tz: tzinfo | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        """
        Args:
            config: Ranking and snippet settings.
            tz: Zone used for date filters and recency. None = system local time.
            clock: Returns "now" for the recency boost. Defaults to the wall clock.
        """
        self.config = config or SearchConfig()
        self._engine = QueryEngine(self.config, tz=tz)
        self._clock = clock
        self._docs: dict[str, IndexedDocument] = {}
        self._postings = PostingsStore()
        self._aliases = AliasMap()
        self._revision = 0

    @property
    def size(self) -> int:
        """Number of indexed documents."""
        return len(self._docs)

    @property
    def revision(self) -> int:
        """Counter bumped on every mutation that changes the index."""
        return self._revision

    @property
    def postings(self) -> PostingsStore:
        return self._postings

    @property
    def aliases(self) -> AliasMap:
        return self._aliases

    @property
    def documents(self) -> Mapping[str, IndexedDocument]:
        return MappingProxyType(self._docs)

    def get(self, doc_id: str) -> IndexedDocument | None:
        return self._docs.get(doc_id)

    def __len__(self) -> int:
        return len(self._docs)

    def __contains__(self, doc_id: object) -> bool:
        return doc_id in self._docs

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def sync_from(self, entries: Iterable[Any]) -> SyncReport:
        """Reconcile the index with the host's complete entry collection.

        Ids missing from *entries* are removed; new or changed entries are
        (re)inserted; unchanged ones are left alone. Malformed entries are
        skipped. If an id occurs twice, the later entry wins.
        """
        report = SyncReport()
        incoming: dict[str, JournalRecord] = {}
        for entry in entries:
            record = self._coerce(entry)
            if record is None:
                report.skipped += 1
                continue
            incoming[record.id] = record

        for doc_id in [doc_id for doc_id in self._docs if doc_id not in incoming]:
            self._remove(doc_id)
            report.removed += 1

        for record in incoming.values():
            outcome = self._upsert(record)
            if outcome == "added":
                report.added += 1
            elif outcome == "updated":
                report.updated += 1
            else:
                report.unchanged += 1

        logger.debug(
            f"Synced {len(incoming)} entries: +{report.added} ~{report.updated} "
            f"-{report.removed} ={report.unchanged} skipped={report.skipped} (size={self.size})"
        )
        return report

    def upsert(self, entry: Any) -> bool:
        """Insert or refresh one entry. Returns True if the index changed."""
        record = self._coerce(entry)
        if record is None:
            return False
        return self._upsert(record) is not None

    def remove_by_id(self, doc_id: str) -> bool:
        """Remove one document. Returns False if *doc_id* was not indexed."""
        return self._remove(doc_id)

    def clear(self) -> None:
        """Drop every document and postings list."""
        if self._docs or len(self._postings) or len(self._aliases):
            self._revision += 1
        self._docs.clear()
        self._postings.clear()
        self._aliases.clear()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def search(self, query: str, options: SearchOptions | None = None) -> list[SearchHit]:
        """Ranked hits for *query*; empty query or empty index yields ``[]``."""
        now = self._clock() if self._clock else None
        return self._engine.search(self._docs, self._postings, query, options, now=now, aliases=self._aliases)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _coerce(entry: Any) -> JournalRecord | None:
        try:
            return JournalRecord.from_any(entry)
        except RecordError as exc:
            logger.debug(f"Skipping malformed entry: {exc}")
            return None

    def _upsert(self, record: JournalRecord) -> str | None:
        """Returns "added", "updated", or None when the document is unchanged."""
        previous = self._docs.get(record.id)
        if previous is not None:
            if previous.matches_source(record):
                return None
            self._remove(record.id)

        document = IndexedDocument.from_record(record, umlaut_aliases=self.config.index_umlaut_aliases)
        self._docs[document.id] = document
        self._postings.add(document.id, document.term_frequencies)
        self._aliases.add(document.alias_pairs)
        self._revision += 1
        return "added" if previous is None else "updated"

    def _remove(self, doc_id: str) -> bool:
        document = self._docs.pop(doc_id, None)
        if document is None:
            return False
        self._postings.remove(doc_id, document.term_frequencies)
        self._aliases.remove(document.alias_pairs)
        self._revision += 1
        return True
