"""Shared setup logic for CLI commands."""

from __future__ import annotations

from datetime import datetime

import click

from zensearch.core.config import Config
from zensearch.core.exceptions import ZenSearchError
from zensearch.core.utils.logging import setup_logging, setup_logging_from_config
from zensearch.journal.config import SearchConfig
from zensearch.journal.index import SearchIndex
from zensearch.journal.models import SyncReport
from zensearch.journal.store import FileEntrySource


def load_config(config_file: str | None, verbose: bool = False) -> Config:
    """Load config and configure logging from it (``--verbose`` forces DEBUG)."""
    config = Config(config_file=config_file)
    try:
        config.validated()
    except ZenSearchError as e:
        raise click.ClickException(str(e)) from e
    if verbose:
        setup_logging(level="DEBUG")
    else:
        setup_logging_from_config(config)
    return config


def build_index(entries_file: str, config: Config) -> tuple[SearchIndex, SyncReport]:
    """Read entries from *entries_file* and index them."""
    try:
        index = SearchIndex(SearchConfig.from_config(config))
        report = index.sync_from(FileEntrySource(entries_file).list_entries())
    except (OSError, ValueError, ZenSearchError) as e:
        raise click.ClickException(f"Could not load entries from {entries_file}: {e}") from e
    return index, report


def parse_local_date(value: str | None) -> datetime | None:
    """Parse ``YYYY-MM-DD`` or a full ISO timestamp as local time."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError as e:
        raise click.BadParameter(f"expected YYYY-MM-DD or ISO timestamp, got {value!r}") from e
