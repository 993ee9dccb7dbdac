"""Tests for zensearch.journal.index (sync engine and index lifecycle)."""

import pytest

from zensearch.journal.config import SearchConfig
from zensearch.journal.index import SearchIndex
from zensearch.journal.models import EntryKind


def assert_postings_consistent(index: SearchIndex) -> None:
    """Every document term is posted with the same count, and nothing else is posted."""
    expected: dict[str, dict[str, int]] = {}
    for doc in index.documents.values():
        for term, count in doc.term_frequencies.items():
            expected.setdefault(term, {})[doc.id] = count
    snapshot = index.postings.snapshot()
    assert snapshot == expected
    assert all(snapshot.values())
    assert list(index.postings.terms()) == sorted(snapshot)

    expected_aliases: dict[str, dict[str, int]] = {}
    for doc in index.documents.values():
        for alias, term in doc.alias_pairs:
            assert term in doc.term_frequencies
            targets = expected_aliases.setdefault(alias, {})
            targets[term] = targets.get(term, 0) + 1
    assert index.aliases.snapshot() == expected_aliases


class TestSyncFrom:
    def test_initial_sync(self, index, journal_records):
        report = index.sync_from(journal_records)
        assert index.size == 5
        assert report.added == 5
        assert report.removed == report.updated == report.unchanged == report.skipped == 0
        assert_postings_consistent(index)

    def test_sync_is_idempotent(self, index, journal_records):
        index.sync_from(journal_records)
        revision = index.revision
        before = index.postings.snapshot()

        report = index.sync_from(journal_records)

        assert index.revision == revision
        assert index.postings.snapshot() == before
        assert report.unchanged == 5
        assert not report.changed

    def test_removes_missing_ids(self, index, journal_records):
        index.sync_from(journal_records)
        report = index.sync_from(journal_records[:2])
        assert report.removed == 3
        assert set(index.documents) == {"1", "2"}
        assert "wanderung" not in index.postings
        assert_postings_consistent(index)

    def test_changed_entry_is_reindexed(self, index, make_record):
        index.sync_from([make_record("1", "Heute Regen")])
        report = index.sync_from([make_record("1", "Heute Sonne")])
        assert report.updated == 1
        assert "regen" not in index.postings
        assert dict(index.postings.get("sonne")) == {"1": 1}
        assert_postings_consistent(index)

    @pytest.mark.parametrize(
        "change",
        [
            {"kind": EntryKind.REFLECTION},
            {"days_ago": 2},
            {"mood_label": "froh"},
            {"ai_question": "Warum?"},
        ],
    )
    def test_any_field_change_counts(self, index, make_record, change):
        index.sync_from([make_record("1", "Heute")])
        report = index.sync_from([make_record("1", "Heute", **change)])
        assert report.updated == 1

    def test_skips_malformed_records(self, index, make_record):
        report = index.sync_from(
            [
                make_record("1", "gut"),
                {"text": "no id", "created_at": 0},
                {"id": "3", "text": "no timestamp"},
                {"id": "4", "created_at": "2026-10-01", "text": None, "mood_label": None},
                {"id": "nan", "created_at": float("nan"), "text": "x"},
                {"id": "inf", "created_at": float("inf"), "text": "x"},
                {"id": "far", "created_at": 10**20, "text": "x"},
            ]
        )
        assert report.skipped == 5
        assert report.added == 2
        assert index.size == 2
        assert index.get("4").text == ""

    def test_duplicate_ids_last_wins(self, index, make_record):
        index.sync_from([make_record("1", "erste"), make_record("1", "zweite")])
        assert index.size == 1
        assert index.get("1").text == "zweite"
        assert "erste" not in index.postings

    def test_accepts_generators(self, index, journal_records):
        index.sync_from(r for r in journal_records)
        assert index.size == 5

    def test_zero_one_zero_leaves_nothing(self, index, make_record):
        index.sync_from([])
        index.sync_from([make_record("1", "Ein einziger Eintrag voller Worte")])
        assert index.size == 1
        index.sync_from([])
        assert index.size == 0
        assert len(index.postings) == 0
        assert index.postings.snapshot() == {}


class TestSingleMutations:
    def test_upsert_new_and_unchanged(self, index, make_record):
        record = make_record("1", "Abendruhe")
        assert index.upsert(record) is True
        assert index.upsert(record) is False
        assert index.size == 1

    def test_upsert_mapping(self, index):
        assert index.upsert({"id": "m", "kind": "story", "created_at": "2026-10-18T09:00:00Z", "text": "Märchen"})
        assert index.get("m").kind is EntryKind.STORY
        assert "maerchen" in index.postings

    def test_upsert_malformed_is_ignored(self, index):
        assert index.upsert({"text": "no id"}) is False
        assert index.size == 0

    def test_remove_by_id(self, index, journal_records):
        index.sync_from(journal_records)
        assert index.remove_by_id("3") is True
        assert index.size == 4
        assert all("3" not in posting for posting in index.postings.snapshot().values())
        assert_postings_consistent(index)

    def test_remove_absent_id(self, index, journal_records):
        index.sync_from(journal_records)
        revision = index.revision
        assert index.remove_by_id("nope") is False
        assert index.size == 5
        assert index.revision == revision

    def test_clear(self, index, journal_records):
        index.sync_from(journal_records)
        index.clear()
        assert index.size == 0
        assert len(index.postings) == 0
        assert len(index.aliases) == 0
        assert index.search("dankbar") == []

    def test_revision_increases_on_mutation(self, index, make_record):
        start = index.revision
        index.upsert(make_record("1", "a"))
        index.upsert(make_record("1", "b"))
        index.remove_by_id("1")
        assert index.revision > start + 2

    def test_aliases_stay_out_of_postings(self, index, make_record):
        index.upsert(make_record("1", "Müdigkeit"))
        assert "mudigkeit" not in index.postings
        assert index.aliases.resolve("mudigkeit") == ["muedigkeit"]
        assert_postings_consistent(index)

    def test_aliases_follow_config(self, make_record):
        plain = SearchIndex(SearchConfig(index_umlaut_aliases=False))
        plain.upsert(make_record("1", "Müdigkeit"))
        assert len(plain.aliases) == 0
        assert "muedigkeit" in plain.postings

    def test_aliases_follow_removal(self, index, make_record):
        index.sync_from([make_record("1", "Müde"), make_record("2", "müde heute")])
        index.remove_by_id("1")
        assert index.aliases.resolve("mude") == ["muede"]
        index.sync_from([make_record("3", "Mut")])
        assert len(index.aliases) == 0
        assert_postings_consistent(index)

    def test_len_and_contains(self, index, journal_records):
        index.sync_from(journal_records)
        assert len(index) == 5
        assert "1" in index
        assert "9" not in index
