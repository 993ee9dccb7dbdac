"""Text normalization and tokenization for the journal index.

Everything the index stores and every query it answers passes through
``normalize`` and ``tokenize``, so indexing and querying always agree on the
fold that was applied.

Folding is German-centred: ``ä→ae``, ``ö→oe``, ``ü→ue``, ``ß→ss`` plus a
small table of common Latin accents, applied after NFC composition so
decomposed umlauts fold too. Characters outside the table survive folding
and act as token separators, since tokens are ASCII runs only. Plain-vowel
umlaut spellings (``ü→u``) are reported separately by ``umlaut_alias_pairs``
and never counted as terms.
"""

from __future__ import annotations

import re
import unicodedata
from collections import Counter
from collections.abc import Iterator, Mapping
from types import MappingProxyType

from zensearch.core.utils.text import collapse_whitespace

_TOKEN_RE = re.compile(r"[a-z0-9]+")

FOLD_MAP: Mapping[str, str] = MappingProxyType(
    {
        # German
        "ä": "ae",
        "ö": "oe",
        "ü": "ue",
        "ß": "ss",
        # Common accents
        "á": "a",
        "à": "a",
        "â": "a",
        "ã": "a",
        "å": "a",
        "ă": "a",
        "ā": "a",
        "ç": "c",
        "č": "c",
        "ć": "c",
        "ď": "d",
        "é": "e",
        "è": "e",
        "ê": "e",
        "ë": "e",
        "ě": "e",
        "ė": "e",
        "ē": "e",
        "í": "i",
        "ì": "i",
        "î": "i",
        "ï": "i",
        "ī": "i",
        "ł": "l",
        "ñ": "n",
        "ń": "n",
        "ō": "o",
        "ó": "o",
        "ò": "o",
        "ô": "o",
        "õ": "o",
        "ř": "r",
        "ś": "s",
        "š": "s",
        "ș": "s",
        "ť": "t",
        "ț": "t",
        "ú": "u",
        "ù": "u",
        "û": "u",
        "ū": "u",
        "ý": "y",
        "ÿ": "y",
        "ž": "z",
    }
)

# Alias spelling for umlauts, so "mudigkeit" also finds "Müdigkeit".
SIMPLE_FOLD_MAP: Mapping[str, str] = MappingProxyType({**FOLD_MAP, "ä": "a", "ö": "o", "ü": "u"})

_LOWERCASE_ONLY: Mapping[str, str] = MappingProxyType({})


def fold_diacritics(text: str, table: Mapping[str, str] = FOLD_MAP) -> str:
    """Replace characters found in *table*; pure-ASCII input is returned as is."""
    if text.isascii():
        return text
    return "".join(table.get(char, char) for char in text)


def fold_with_offsets(text: str, table: Mapping[str, str] = _LOWERCASE_ONLY) -> tuple[str, list[int]]:
    """Lowercase and fold *text*, remembering where each output char came from.

    A base character and the combining marks after it are composed (NFC)
    before folding, so ``"u\\u0308"`` folds like ``"ü"``.

    Returns:
        ``(folded, offsets)`` where ``offsets[i]`` is the index in *text* of the
        character (or start of the composed cluster) that produced ``folded[i]``.
    """
    pieces: list[str] = []
    offsets: list[int] = []
    index = 0
    while index < len(text):
        end = index + 1
        while end < len(text) and unicodedata.combining(text[end]):
            end += 1
        cluster = text[index:end].lower()
        if not cluster.isascii():
            cluster = unicodedata.normalize("NFC", cluster)
        replacement = "".join(table.get(c, c) for c in cluster)
        pieces.append(replacement)
        offsets.extend([index] * len(replacement))
        index = end
    return "".join(pieces), offsets


def normalize(text: str, table: Mapping[str, str] = FOLD_MAP) -> str:
    """Lowercase, compose (NFC), fold diacritics and collapse whitespace."""
    if not text:
        return ""
    lowered = text.lower()
    if not lowered.isascii():
        lowered = unicodedata.normalize("NFC", lowered)
    return collapse_whitespace(fold_diacritics(lowered, table))


def tokenize(normalized_text: str) -> Iterator[str]:
    """Yield ASCII letter/digit runs from already-normalized text.

    Each call returns a fresh iterator, so the sequence can be restarted by
    calling again.
    """
    for match in _TOKEN_RE.finditer(normalized_text):
        yield match.group(0)


def query_terms(query: str) -> list[str]:
    """Normalized, de-duplicated query terms in first-occurrence order."""
    return list(dict.fromkeys(tokenize(normalize(query))))


def term_frequencies(text: str) -> dict[str, int]:
    """Count normalized terms in *text*."""
    return dict(Counter(tokenize(normalize(text))))


def umlaut_alias_pairs(text: str) -> frozenset[tuple[str, str]]:
    """``(alias, term)`` pairs for every term whose source word contained an umlaut.

    The alias is the plain-vowel spelling ("mudigkeit" for "muedigkeit").
    Both folds map characters to ASCII letters only, so the two token
    streams line up one to one.
    """
    if text.isascii():
        return frozenset()
    primary = tokenize(normalize(text))
    simple = tokenize(normalize(text, SIMPLE_FOLD_MAP))
    return frozenset((alias, term) for term, alias in zip(primary, simple) if alias != term)
