"""Tests for zensearch.journal.store."""

import json
import os

import pytest
import yaml

from zensearch.core.exceptions import RecordError
from zensearch.journal.store import EntrySource, FileEntrySource, ListEntrySource

ENTRIES = [
    {"id": "1", "kind": "journal", "created_at": "2026-10-18T08:00:00Z", "text": "Heute dankbar"},
    {"id": "2", "type": "reflection", "createdAt": "2026-10-17T20:00:00Z", "text": "Grenzen setzen"},
]


class TestListEntrySource:
    def test_protocol(self):
        assert isinstance(ListEntrySource(), EntrySource)

    def test_returns_copy(self):
        source = ListEntrySource(ENTRIES)
        listed = source.list_entries()
        listed.clear()
        assert len(source.list_entries()) == 2

    def test_replace_and_append(self):
        source = ListEntrySource()
        source.append(ENTRIES[0])
        assert len(source.list_entries()) == 1
        source.replace(ENTRIES)
        assert len(source.list_entries()) == 2


class TestFileEntrySource:
    def test_protocol(self, tmp_dir):
        assert isinstance(FileEntrySource(os.path.join(tmp_dir, "x.json")), EntrySource)

    def test_json(self, tmp_dir):
        path = os.path.join(tmp_dir, "entries.json")
        with open(path, "w", encoding="utf-8") as f:
            json.dump(ENTRIES, f)
        assert FileEntrySource(path).list_entries() == ENTRIES

    def test_yaml_with_entries_key(self, tmp_dir):
        path = os.path.join(tmp_dir, "entries.yaml")
        with open(path, "w", encoding="utf-8") as f:
            yaml.dump({"entries": ENTRIES}, f, allow_unicode=True)
        assert [e["id"] for e in FileEntrySource(path).list_entries()] == ["1", "2"]

    def test_empty_yaml(self, tmp_dir):
        path = os.path.join(tmp_dir, "entries.yml")
        open(path, "w").close()
        assert FileEntrySource(path).list_entries() == []

    def test_not_a_list(self, tmp_dir):
        path = os.path.join(tmp_dir, "entries.json")
        with open(path, "w", encoding="utf-8") as f:
            json.dump({"entries": "nope"}, f)
        with pytest.raises(RecordError):
            FileEntrySource(path).list_entries()

    def test_missing_file(self, tmp_dir):
        with pytest.raises(FileNotFoundError):
            FileEntrySource(os.path.join(tmp_dir, "missing.json")).list_entries()

    def test_feeds_index(self, tmp_dir, index):
        path = os.path.join(tmp_dir, "entries.json")
        with open(path, "w", encoding="utf-8") as f:
            json.dump(ENTRIES, f)
        index.sync_from(FileEntrySource(path).list_entries())
        assert index.size == 2
        assert [hit.id for hit in index.search("grenzen")] == ["2"]
