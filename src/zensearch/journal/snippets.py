"""Snippet extraction around the first match of a query term."""

from __future__ import annotations

from collections.abc import Sequence

from zensearch.core.utils.text import ellipsize

from .models import IndexedDocument
from .normalize import FOLD_MAP, SIMPLE_FOLD_MAP, fold_with_offsets

DEFAULT_MAX_LENGTH = 160
DEFAULT_CONTEXT = 50
DEFAULT_MIN_CUT = 40


def find_term(text: str, term: str) -> tuple[int, int] | None:
    """Locate *term* in *text*, case-insensitively.

    Tries plain lowercase first, then the umlaut fold (``ü→ue``) and finally
    the plain-vowel fold (``ü→u``). Positions always refer to *text* itself.

    Returns:
        ``(start, end)`` in *text*, or None if the term does not occur.
    """
    needle = term.lower()
    if not needle:
        return None

    tables = [{}] if text.isascii() else [{}, FOLD_MAP, SIMPLE_FOLD_MAP]
    for table in tables:
        folded, offsets = fold_with_offsets(text, table)
        position = folded.find(needle)
        if position >= 0:
            last = offsets[position + len(needle) - 1]
            # The match ends where the next source cluster begins.
            end = next((o for o in offsets[position + len(needle) :] if o > last), len(text))
            return offsets[position], end
    return None


def build_snippet(
    document: IndexedDocument,
    matched_terms: Sequence[str],
    max_length: int = DEFAULT_MAX_LENGTH,
    context: int = DEFAULT_CONTEXT,
    min_cut: int = DEFAULT_MIN_CUT,
) -> str:
    """Excerpt of the document's text around the first occurrence of a matched term.

    The longest matched term is tried first (ties keep matched order). Without
    text the question or mood label stands in; without any occurrence the
    text's beginning is used.
    """
    text = document.text
    if not text.strip():
        fallback = document.ai_question.strip() or document.mood_label.strip()
        return ellipsize(fallback, max_length, min_cut)

    for term in sorted(matched_terms, key=len, reverse=True):
        span = find_term(text, term)
        if span is None:
            continue
        start, end = span
        window = text[max(0, start - context) : min(len(text), end + context)]
        return ellipsize(window, max_length, min_cut)

    return ellipsize(text, max_length, min_cut)
