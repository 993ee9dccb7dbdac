"""zensearch CLI — entry point for the search and stats commands."""

import click

from zensearch import __version__


@click.group()
@click.version_option(version=__version__, package_name="zensearch")
def main() -> None:
    """zensearch — offline full-text search over your journal."""


from .search_cmd import search, stats  # noqa: E402

main.add_command(search)
main.add_command(stats)
