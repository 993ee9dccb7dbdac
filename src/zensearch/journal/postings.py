"""Inverted index storage: term -> {document id -> term frequency}.

Terms are additionally kept in a sorted list so prefix lookups walk them in
lexicographic order and stop as soon as the prefix no longer matches.
Plain-vowel umlaut spellings live in a separate ``AliasMap`` and never
appear as terms of their own.
"""

from __future__ import annotations

import bisect
from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType


def _prefix_scan(sorted_keys: list[str], prefix: str, limit: int) -> list[str]:
    matches: list[str] = []
    if not prefix or limit <= 0:
        return matches
    start = bisect.bisect_left(sorted_keys, prefix)
    for position in range(start, len(sorted_keys)):
        key = sorted_keys[position]
        if not key.startswith(prefix):
            break
        matches.append(key)
        if len(matches) >= limit:
            break
    return matches


def _drop_sorted(sorted_keys: list[str], key: str) -> None:
    position = bisect.bisect_left(sorted_keys, key)
    if position < len(sorted_keys) and sorted_keys[position] == key:
        del sorted_keys[position]


class PostingsStore:
    """Postings lists for every indexed term.

    No term ever maps to an empty postings list: removing the last document
    of a term drops the term.
    """

    def __init__(self) -> None:
        self._postings: dict[str, dict[str, int]] = {}
        self._sorted_terms: list[str] = []

    def __len__(self) -> int:
        return len(self._postings)

    def __contains__(self, term: object) -> bool:
        return term in self._postings

    def terms(self) -> Iterator[str]:
        """Indexed terms in lexicographic order."""
        return iter(self._sorted_terms)

    def add(self, doc_id: str, frequencies: Mapping[str, int]) -> None:
        """Record *doc_id* under every term of *frequencies*."""
        for term, count in frequencies.items():
            if count <= 0:
                continue
            posting = self._postings.get(term)
            if posting is None:
                posting = self._postings[term] = {}
                bisect.insort(self._sorted_terms, term)
            posting[doc_id] = count

    def remove(self, doc_id: str, terms: Iterable[str]) -> None:
        """Drop *doc_id* from the postings of *terms*, deleting lists that become empty."""
        for term in terms:
            posting = self._postings.get(term)
            if posting is None:
                continue
            posting.pop(doc_id, None)
            if not posting:
                del self._postings[term]
                _drop_sorted(self._sorted_terms, term)

    def get(self, term: str) -> Mapping[str, int] | None:
        """Read-only postings for *term*, or None if the term is not indexed."""
        posting = self._postings.get(term)
        return MappingProxyType(posting) if posting is not None else None

    def document_frequency(self, term: str) -> int:
        return len(self._postings.get(term, ()))

    def prefix_terms(self, prefix: str, limit: int) -> list[str]:
        """Up to *limit* indexed terms starting with *prefix*, in lexicographic order."""
        return _prefix_scan(self._sorted_terms, prefix, limit)

    def clear(self) -> None:
        self._postings.clear()
        self._sorted_terms.clear()

    def snapshot(self) -> dict[str, dict[str, int]]:
        """Deep copy of the postings, for diagnostics and tests."""
        return {term: dict(posting) for term, posting in self._postings.items()}


class AliasMap:
    """Alias spelling -> the indexed terms it stands for.

    Every ``(alias, term)`` pair is counted once per contributing document,
    so removing a document only retracts its own pairs.
    """

    def __init__(self) -> None:
        self._targets: dict[str, dict[str, int]] = {}
        self._sorted_aliases: list[str] = []

    def __len__(self) -> int:
        return len(self._targets)

    def __contains__(self, alias: object) -> bool:
        return alias in self._targets

    def add(self, pairs: Iterable[tuple[str, str]]) -> None:
        for alias, term in pairs:
            targets = self._targets.get(alias)
            if targets is None:
                targets = self._targets[alias] = {}
                bisect.insort(self._sorted_aliases, alias)
            targets[term] = targets.get(term, 0) + 1

    def remove(self, pairs: Iterable[tuple[str, str]]) -> None:
        for alias, term in pairs:
            targets = self._targets.get(alias)
            if targets is None or term not in targets:
                continue
            targets[term] -= 1
            if targets[term] <= 0:
                del targets[term]
            if not targets:
                del self._targets[alias]
                _drop_sorted(self._sorted_aliases, alias)

    def resolve(self, alias: str) -> list[str]:
        """Indexed terms spelled *alias*, sorted; empty if unknown."""
        return sorted(self._targets.get(alias, ()))

    def prefix_terms(self, prefix: str, limit: int) -> list[str]:
        """Indexed terms behind up to *limit* aliases starting with *prefix*.

        Aliases are scanned in lexicographic order; a term reached through
        several aliases is listed once.
        """
        terms: dict[str, None] = {}
        for alias in _prefix_scan(self._sorted_aliases, prefix, limit):
            terms.update(dict.fromkeys(self.resolve(alias)))
        return list(terms)

    def clear(self) -> None:
        self._targets.clear()
        self._sorted_aliases.clear()

    def snapshot(self) -> dict[str, dict[str, int]]:
        """Deep copy of alias -> {term -> document count}."""
        return {alias: dict(targets) for alias, targets in self._targets.items()}
