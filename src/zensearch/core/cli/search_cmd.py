"""zensearch search / stats — query an exported journal from the terminal."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from zensearch.journal.models import EntryKind, SearchOptions

_KIND_CHOICES = [kind.value for kind in EntryKind]


@click.command()
@click.argument("entries_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("query")
@click.option("--kind", "kinds", multiple=True, type=click.Choice(_KIND_CHOICES), help="Only these entry kinds.")
@click.option("--from", "from_date", default=None, help="Inclusive start date (local, YYYY-MM-DD).")
@click.option("--to", "to_date", default=None, help="Exclusive end date (local, YYYY-MM-DD).")
@click.option("--limit", default=0, type=int, help="Maximum hits (default from config).")
@click.option("--config", "config_file", default=None, type=click.Path(dir_okay=False), help="YAML/JSON config.")
@click.option("--verbose", is_flag=True, help="Log at DEBUG level.")
def search(entries_file, query, kinds, from_date, to_date, limit, config_file, verbose) -> None:
    """Search journal entries exported to a JSON or YAML file."""
    from zensearch.core.cli.common import build_index, load_config, parse_local_date

    config = load_config(config_file, verbose)
    index, report = build_index(entries_file, config)
    if report.skipped:
        click.echo(f"Skipped {report.skipped} malformed entr{'y' if report.skipped == 1 else 'ies'}.", err=True)

    options = SearchOptions(
        limit=limit,
        kinds=frozenset(kinds) if kinds else None,
        from_local=parse_local_date(from_date),
        to_local=parse_local_date(to_date),
    )
    hits = index.search(query, options)
    if not hits:
        click.echo("No matches.")
        return

    table = Table(title=f"{len(hits)} match(es) for '{query}'")
    table.add_column("Score", justify="right")
    table.add_column("Date")
    table.add_column("Kind")
    table.add_column("Id")
    table.add_column("Snippet")
    for hit in hits:
        table.add_row(
            f"{hit.score:.3f}",
            hit.created_at.astimezone().strftime("%Y-%m-%d"),
            hit.kind.value,
            hit.id,
            hit.snippet,
        )
    Console().print(table)


@click.command()
@click.argument("entries_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--config", "config_file", default=None, type=click.Path(dir_okay=False), help="YAML/JSON config.")
def stats(entries_file, config_file) -> None:
    """Show how many entries and terms an export indexes to."""
    from zensearch.core.cli.common import build_index, load_config

    config = load_config(config_file)
    index, report = build_index(entries_file, config)
    click.echo(f"Documents: {index.size}")
    click.echo(f"Terms: {len(index.postings)}")
    click.echo(f"Skipped: {report.skipped}")
