"""Core data models for the journal search index.

``JournalRecord`` is what the host hands in, ``IndexedDocument`` is what the
index keeps, and ``SearchHit`` is what a query returns.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any

from zensearch.core.exceptions import RecordError

from .normalize import normalize, term_frequencies, umlaut_alias_pairs


class EntryKind(Enum):
    """Category of a journal entry."""

    REFLECTION = "reflection"
    JOURNAL = "journal"
    STORY = "story"

    @classmethod
    def lookup(cls, value: Any) -> EntryKind | None:
        """The kind *value* names (English and German spellings), or None."""
        if isinstance(value, cls):
            return value
        key = str(getattr(value, "value", value) or "").strip().lower()
        return _KIND_ALIASES.get(key)

    @classmethod
    def from_any(cls, value: Any) -> EntryKind:
        """Parse a kind leniently; unknown values map to JOURNAL."""
        return cls.lookup(value) or cls.JOURNAL


_KIND_ALIASES = {
    "reflection": EntryKind.REFLECTION,
    "reflexion": EntryKind.REFLECTION,
    "reflektion": EntryKind.REFLECTION,
    "reflection_entry": EntryKind.REFLECTION,
    "journal": EntryKind.JOURNAL,
    "gedanke": EntryKind.JOURNAL,
    "tagebuch": EntryKind.JOURNAL,
    "note": EntryKind.JOURNAL,
    "entry": EntryKind.JOURNAL,
    "story": EntryKind.STORY,
    "kurzgeschichte": EntryKind.STORY,
    "short_story": EntryKind.STORY,
}

_FIELD_ALIASES = {
    "id": ("id",),
    "kind": ("kind", "type"),
    "created_at": ("created_at", "createdAt", "ts"),
    "text": ("text", "thought_text", "thoughtText"),
    "mood_label": ("mood_label", "moodLabel"),
    "ai_question": ("ai_question", "aiQuestion"),
}


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bytes | bytearray):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)


def to_utc(value: Any) -> datetime:
    """Coerce a timestamp to an aware UTC datetime; naive values are taken as UTC.

    Accepts datetimes, dates, ISO-8601 strings and epoch seconds.

    Raises:
        RecordError: If the value cannot be interpreted as a timestamp.
    """
    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, date):
        moment = datetime(value.year, value.month, value.day)
    elif isinstance(value, int | float) and not isinstance(value, bool):
        try:
            moment = datetime.fromtimestamp(value, tz=timezone.utc)
        except (ValueError, OverflowError, OSError) as exc:
            raise RecordError(f"Epoch timestamp out of range: {value!r}") from exc
    elif isinstance(value, str) and value.strip():
        try:
            moment = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError as exc:
            raise RecordError(f"Unparseable timestamp: {value!r}") from exc
    else:
        raise RecordError(f"Missing or unsupported timestamp: {value!r}")

    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


@dataclass(frozen=True)
class JournalRecord:
    """A source entry as supplied by the host's journal store.

    Attributes:
        id: Stable unique identifier.
        kind: Entry category.
        created_at: Creation time (aware, UTC).
        text: Primary free text; the only field used for snippets.
        mood_label: Short label, e.g. a mood tag.
        ai_question: Optional guiding question the entry answers.
    """

    id: str
    kind: EntryKind
    created_at: datetime
    text: str = ""
    mood_label: str = ""
    ai_question: str = ""

    @classmethod
    def from_any(cls, source: Any) -> JournalRecord:
        """Build a record from another record, a mapping, or an attribute-bearing object.

        Missing text fields become empty strings and non-string values are
        coerced with ``str()``.

        Raises:
            RecordError: If the id is missing or the timestamp is unusable.
        """
        if isinstance(source, cls):
            return source

        def lookup(name: str) -> Any:
            for key in _FIELD_ALIASES[name]:
                if isinstance(source, Mapping):
                    value = source.get(key)
                else:
                    value = getattr(source, key, None)
                if value is not None:
                    return value
            return None

        raw_id = lookup("id")
        record_id = _as_text(raw_id).strip()
        if not record_id:
            raise RecordError(f"Record without id: {source!r}")

        return cls(
            id=record_id,
            kind=EntryKind.from_any(lookup("kind")),
            created_at=to_utc(lookup("created_at")),
            text=_as_text(lookup("text")),
            mood_label=_as_text(lookup("mood_label")),
            ai_question=_as_text(lookup("ai_question")),
        )


def concat_fields(text: str, mood_label: str, ai_question: str) -> str:
    """Join the indexable fields; the mood label is bracketed, empty parts are dropped."""
    parts = [text]
    if mood_label.strip():
        parts.append(f"[{mood_label.strip()}]")
    if ai_question.strip():
        parts.append(ai_question.strip())
    return " ".join(parts).strip()


@dataclass(frozen=True)
class IndexedDocument:
    """The index's private representation of one entry."""

    id: str
    kind: EntryKind
    created_at: datetime
    text: str
    mood_label: str
    ai_question: str
    full_text: str
    normalized_text: str
    term_frequencies: Mapping[str, int] = field(default_factory=dict)
    alias_pairs: frozenset[tuple[str, str]] = frozenset()

    @classmethod
    def from_record(cls, record: JournalRecord, umlaut_aliases: bool = True) -> IndexedDocument:
        full_text = concat_fields(record.text, record.mood_label, record.ai_question)
        return cls(
            id=record.id,
            kind=record.kind,
            created_at=record.created_at,
            text=record.text,
            mood_label=record.mood_label,
            ai_question=record.ai_question,
            full_text=full_text,
            normalized_text=normalize(full_text),
            term_frequencies=term_frequencies(full_text),
            alias_pairs=umlaut_alias_pairs(full_text) if umlaut_aliases else frozenset(),
        )

    def matches_source(self, record: JournalRecord) -> bool:
        """True if *record* carries exactly the fields this document was built from."""
        return (
            self.kind == record.kind
            and self.created_at == record.created_at
            and self.text == record.text
            and self.mood_label == record.mood_label
            and self.ai_question == record.ai_question
        )

    def __repr__(self) -> str:
        preview = self.text[:50] + "..." if len(self.text) > 50 else self.text
        return f"IndexedDocument(id='{self.id}', kind={self.kind.value}, text='{preview}')"


@dataclass(frozen=True)
class SearchOptions:
    """Result limit plus optional kind and local-time window filters.

    Attributes:
        limit: Maximum hits; zero or negative means the configured default (50).
        kinds: Allowed entry kinds, or None for all. Names that match no kind
            are dropped, so an unknown name alone filters out everything.
        from_local: Inclusive lower bound in local time (naive values are local).
        to_local: Exclusive upper bound in local time.
    """

    limit: int = 0
    kinds: frozenset[EntryKind] | None = None
    from_local: datetime | None = None
    to_local: datetime | None = None

    def __post_init__(self):
        if self.kinds is not None:
            kinds = (EntryKind.lookup(k) for k in self.kinds)
            object.__setattr__(self, "kinds", frozenset(k for k in kinds if k is not None))


@dataclass(frozen=True)
class SearchHit:
    """A ranked search result.

    Attributes:
        id: Document id.
        score: Final score after boosts (higher = more relevant).
        snippet: Display excerpt around the first match.
        kind: Entry kind.
        created_at: Creation time (UTC).
        matched_terms: Query terms that matched this document, in query order.
    """

    id: str
    score: float
    snippet: str
    kind: EntryKind
    created_at: datetime
    matched_terms: tuple[str, ...] = ()

    def __repr__(self) -> str:
        return f"SearchHit(id='{self.id}', score={self.score:.3f}, snippet='{self.snippet}')"


@dataclass
class SyncReport:
    """Counts of what a ``sync_from`` call did."""

    added: int = 0
    updated: int = 0
    removed: int = 0
    unchanged: int = 0
    skipped: int = 0

    @property
    def changed(self) -> bool:
        return bool(self.added or self.updated or self.removed)

    def as_dict(self) -> dict[str, int]:
        return asdict(self)
