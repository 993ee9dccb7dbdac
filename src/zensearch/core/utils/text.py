"""Text utilities: whitespace collapsing and word-safe ellipsizing."""

import re

_WHITESPACE_RE = re.compile(r"\s+")

ELLIPSIS = "…"


def collapse_whitespace(text: str) -> str:
    """Collapse newlines and runs of whitespace into single spaces, trimming ends."""
    if not text or not isinstance(text, str):
        return ""
    return _WHITESPACE_RE.sub(" ", text).strip()


def ellipsize(text: str, max_length: int = 160, min_cut: int = 40, marker: str = ELLIPSIS) -> str:
    """Shorten text to at most ``max_length`` characters, preferring a word boundary.

    Whitespace is collapsed first. When the text is too long it is cut so that
    the result including ``marker`` fits ``max_length``. The cut backs up to the
    last space only if more than ``min_cut`` characters survive; otherwise the
    cut falls mid-word.
    """
    collapsed = collapse_whitespace(text)
    if len(collapsed) <= max_length:
        return collapsed

    cut = collapsed[: max(max_length - len(marker), 0)]
    last_space = cut.rfind(" ")
    if last_space > min_cut:
        cut = cut[:last_space]
    return cut.strip() + marker
