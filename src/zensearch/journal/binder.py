"""Keeps a SearchIndex in step with a host's journal store.

The host emits ``JOURNAL_CHANGED`` on its EventBus after every mutation of its
entry collection. The binder answers each event with a full diff sync and
announces the outcome as ``JOURNAL_INDEXED``.
"""

from __future__ import annotations

from loguru import logger

from zensearch.core.events import JOURNAL_CHANGED, JOURNAL_INDEXED, Event, EventBus

from .index import SearchIndex
from .models import SyncReport
from .store import EntrySource


class JournalSearchBinder:
    """Re-syncs *index* from *source* whenever the journal changes.

    Example::

        binder = JournalSearchBinder(bus, source, index)
        binder.attach()   # initial sync, then follows JOURNAL_CHANGED
        ...
        binder.detach()
    """

    def __init__(self, bus: EventBus, source: EntrySource, index: SearchIndex):
        self.bus = bus
        self.source = source
        self.index = index
        self._attached = False

    @property
    def attached(self) -> bool:
        return self._attached

    def attach(self) -> SyncReport | None:
        """Run the initial sync and start listening. No-op when already attached."""
        if self._attached:
            return None
        report = self.sync()
        self.bus.on(JOURNAL_CHANGED, self._on_journal_changed)
        self._attached = True
        return report

    def detach(self) -> None:
        """Stop listening. No-op when not attached."""
        if not self._attached:
            return
        self.bus.off(JOURNAL_CHANGED, self._on_journal_changed)
        self._attached = False

    def sync(self) -> SyncReport:
        """Sync the index from the source and announce the result."""
        report = self.index.sync_from(self.source.list_entries())
        self.bus.emit_sync(
            Event(
                name=JOURNAL_INDEXED,
                payload={**report.as_dict(), "size": self.index.size},
                source="search_binder",
            )
        )
        return report

    def _on_journal_changed(self, event: Event) -> None:
        logger.debug(f"Journal changed ({event.source or 'unknown source'}), re-syncing search index")
        self.sync()
