"""Query engine: TF-IDF-like scoring with prefix fallback, filters and boosts.

Scoring per matched (term, document) pair is ``sqrt(tf) * log(1 + N / (1 + df))``.
Documents lacking a query term fall back to indexed terms that start with
it (at most ``prefix_scan_cap`` terms, lexicographic order) and, when no
document has the term at all, to terms whose umlaut alias spelling starts
with it. Fallback matches are weighted by ``prefix_penalty``. Candidates
are then filtered by kind and local-time window, boosted for recency and
kind, and sorted by score with newer entries first on ties.
"""

from __future__ import annotations

import math
import time
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, tzinfo

from loguru import logger

from .config import SearchConfig
from .models import IndexedDocument, SearchHit, SearchOptions
from .normalize import query_terms
from .postings import AliasMap, PostingsStore
from .snippets import build_snippet


def tfidf_weight(tf: int, df: int, total_docs: int) -> float:
    """Relevance weight of one term in one document."""
    return math.sqrt(tf) * math.log(1 + total_docs / (1 + df))


def to_local(moment: datetime, tz: tzinfo | None = None) -> datetime:
    """Express *moment* in local time.

    With *tz* None the system zone is used; naive values are read as already local.
    """
    if tz is None:
        return moment.astimezone()
    if moment.tzinfo is None:
        return moment.replace(tzinfo=tz)
    return moment.astimezone(tz)


@dataclass
class _Candidate:
    document: IndexedDocument
    score: float
    matched_terms: tuple[str, ...]


class QueryEngine:
    """Ranks indexed documents for a query.

    Holds no index state of its own; ``SearchIndex`` passes its documents and
    postings in on every call.
    """

    def __init__(self, config: SearchConfig | None = None, tz: tzinfo | None = None):
        self.config = config or SearchConfig()
        self.tz = tz

    def accumulate(
        self,
        postings: PostingsStore,
        terms: list[str],
        total_docs: int,
        aliases: AliasMap | None = None,
    ) -> tuple[dict[str, float], dict[str, dict[str, None]]]:
        """Sum term weights per document.

        A query term without exact postings also reaches the terms behind
        matching umlaut aliases. Prefix and alias matches share the fallback
        penalty, and each indexed term is credited at most once per query term.

        Returns:
            ``(scores, matched)`` keyed by document id; ``matched`` holds the
            query terms that hit each document, in query order.
        """
        scores: dict[str, float] = {}
        matched: dict[str, dict[str, None]] = {}

        def add(indexed_term: str, query_term: str, weight: float, exclude: Mapping[str, int]) -> None:
            posting = postings.get(indexed_term) or {}
            df = len(posting)
            for doc_id, tf in posting.items():
                if doc_id in exclude:
                    continue
                scores[doc_id] = scores.get(doc_id, 0.0) + weight * tfidf_weight(tf, df, total_docs)
                matched.setdefault(doc_id, {})[query_term] = None

        for term in terms:
            exact = postings.get(term) or {}
            if exact:
                add(term, term, 1.0, {})
            # Fallback matches only score documents that lack the exact term.
            cap = self.config.prefix_scan_cap + (1 if exact else 0)
            fallback = dict.fromkeys(postings.prefix_terms(term, cap))
            if aliases is not None and not exact:
                fallback.update(dict.fromkeys(aliases.prefix_terms(term, self.config.prefix_scan_cap)))
            fallback.pop(term, None)
            for indexed_term in fallback:
                add(indexed_term, term, self.config.prefix_penalty, exact)

        return scores, matched

    def passes_filters(self, document: IndexedDocument, options: SearchOptions) -> bool:
        """Kind filter and half-open ``[from_local, to_local)`` window."""
        if options.kinds is not None and document.kind not in options.kinds:
            return False
        if options.from_local is None and options.to_local is None:
            return True
        local = to_local(document.created_at, self.tz)
        if options.from_local is not None and local < to_local(options.from_local, self.tz):
            return False
        if options.to_local is not None and local >= to_local(options.to_local, self.tz):
            return False
        return True

    def recency_factor(self, created_at: datetime, now: datetime) -> float:
        """``1 + max_boost * max(0, 1 - age_days / window)`` over local calendar days."""
        age_days = (to_local(now, self.tz).date() - to_local(created_at, self.tz).date()).days
        age_days = max(age_days, 0)
        recency = max(0.0, 1.0 - age_days / self.config.recency_window_days)
        return 1.0 + self.config.recency_boost_max * recency

    def search(
        self,
        documents: Mapping[str, IndexedDocument],
        postings: PostingsStore,
        query: str,
        options: SearchOptions | None = None,
        now: datetime | None = None,
        aliases: AliasMap | None = None,
    ) -> list[SearchHit]:
        """Run *query* against the given documents and postings.

        Args:
            documents: Indexed documents by id.
            postings: Postings built from exactly those documents.
            query: Free-text query.
            options: Limit and filters. Defaults to ``SearchOptions()``.
            now: Reference time for the recency boost. Defaults to the current time.
            aliases: Umlaut alias spellings of the indexed terms, if any.

        Returns:
            Hits sorted by score descending, then newest first.
        """
        if not documents or not query:
            return []
        terms = query_terms(query)
        if not terms:
            return []

        options = options or SearchOptions()
        if now is None:
            now = datetime.now(self.tz) if self.tz else datetime.now().astimezone()
        started = time.perf_counter()

        scores, matched = self.accumulate(postings, terms, len(documents), aliases)
        if not scores:
            return []

        candidates: list[_Candidate] = []
        for doc_id, raw_score in scores.items():
            document = documents.get(doc_id)
            if document is None or not self.passes_filters(document, options):
                continue
            score = raw_score * self.recency_factor(document.created_at, now)
            score *= self.config.kind_boost(document.kind)
            candidates.append(_Candidate(document, score, tuple(matched.get(doc_id, ()))))

        candidates.sort(key=lambda c: (c.score, c.document.created_at), reverse=True)
        limit = options.limit if options.limit > 0 else self.config.default_limit
        top = candidates[:limit]

        hits = [
            SearchHit(
                id=c.document.id,
                score=c.score,
                snippet=build_snippet(
                    c.document,
                    c.matched_terms,
                    max_length=self.config.snippet_max_length,
                    context=self.config.snippet_context,
                    min_cut=self.config.snippet_min_cut,
                ),
                kind=c.document.kind,
                created_at=c.document.created_at,
                matched_terms=c.matched_terms,
            )
            for c in top
        ]

        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.debug(
            f"Query {terms} matched {len(scores)} docs, {len(candidates)} after filters, "
            f"returned {len(hits)} in {elapsed_ms:.2f} ms"
        )
        return hits
