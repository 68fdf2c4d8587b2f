"""Reflection CLI — look back at periodic notes from the terminal."""

import click

from reflection import __version__


@click.group()
@click.version_option(version=__version__, package_name="reflection")
def main() -> None:
    """Reflection — see what you wrote on this day in previous years."""


# Register subcommands
from .index_cmd import index
from .show_cmd import show

main.add_command(show)
main.add_command(index)
