"""Shared test fixtures for zensearch."""

import os
import tempfile
from datetime import datetime, timedelta, timezone

import pytest

from zensearch.journal.index import SearchIndex
from zensearch.journal.models import EntryKind, JournalRecord

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def tmp_dir():
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as d:
        yield d


@pytest.fixture
def tmp_config_file(tmp_dir):
    """Create a temporary YAML config file."""
    import yaml

    config_data = {
        "search": {"default_limit": 5, "kind_boosts": {"reflection": 1.1}},
        "logging": {"level": "debug"},
    }
    config_path = os.path.join(tmp_dir, "config.yaml")
    with open(config_path, "w") as f:
        yaml.dump(config_data, f)
    return config_path


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def index():
    """An empty index pinned to UTC and a fixed clock."""
    return SearchIndex(tz=timezone.utc, clock=lambda: NOW)


def _make_record(doc_id, text="", kind=EntryKind.JOURNAL, days_ago=0, mood_label="", ai_question=""):
    return JournalRecord(
        id=doc_id,
        kind=kind,
        created_at=NOW - timedelta(days=days_ago),
        text=text,
        mood_label=mood_label,
        ai_question=ai_question,
    )


@pytest.fixture
def journal_records():
    return [
        _make_record("1", "Ich fühle mich heute dankbar für die kleinen Dinge"),
        _make_record("2", "Dankbarkeit hilft mir, Grenzen zu setzen", kind=EntryKind.REFLECTION),
        _make_record("3", "Lange Wanderung am See, danach Müdigkeit und Ruhe", days_ago=3),
        _make_record(
            "4",
            "Es war einmal ein Panda, der lernte, Nein zu sagen.",
            kind=EntryKind.STORY,
            days_ago=40,
        ),
        _make_record("5", "", mood_label="ruhig", ai_question="Wofür bist du heute dankbar?", days_ago=1),
    ]


@pytest.fixture
def make_record():
    """Factory for JournalRecords created relative to the fixed clock."""
    return _make_record
