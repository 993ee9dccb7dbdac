"""EntrySource protocol: the contract between the host's journal store and the index.

The index never reads storage itself. Anything that can list the current
entries (an app's repository, an export file, a test fixture) implements
this protocol and hands its entries to ``SearchIndex.sync_from``.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

import yaml

from zensearch.core.exceptions import RecordError


@runtime_checkable
class EntrySource(Protocol):
    """Protocol for supplying journal entries.

    Implementations return the complete, authoritative collection on every
    call. Entries may be ``JournalRecord`` objects, mappings, or objects with
    matching attributes.
    """

    def list_entries(self) -> Iterable[Any]:
        """Return every current entry, newest first or in any stable order."""
        ...


class ListEntrySource:
    """In-memory entry collection, e.g. for tests or hosts that already hold a list."""

    def __init__(self, entries: Iterable[Any] = ()):
        self._entries = list(entries)

    def list_entries(self) -> Sequence[Any]:
        return list(self._entries)

    def replace(self, entries: Iterable[Any]) -> None:
        self._entries = list(entries)

    def append(self, entry: Any) -> None:
        self._entries.append(entry)


class FileEntrySource:
    """Entries exported to a JSON or YAML file holding a list of mappings.

    A top-level mapping with an ``entries`` key is accepted as well.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def list_entries(self) -> list[Any]:
        """Read and return the entries.

        Raises:
            FileNotFoundError: If the file does not exist.
            RecordError: If the file does not contain a list of entries.
        """
        with open(self.path, encoding="utf-8") as f:
            if self.path.suffix.lower() in (".yaml", ".yml"):
                data = yaml.safe_load(f)
            else:
                data = json.load(f)

        if isinstance(data, dict):
            data = data.get("entries")
        if data is None:
            return []
        if not isinstance(data, list):
            raise RecordError(f"{self.path} does not contain a list of entries")
        return data
