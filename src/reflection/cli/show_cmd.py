"""reflection show — print the notes from this period in earlier years."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import click

from reflection.periodic import Note, Reflection, ReflectionPreview, Suppress, SuppressReason
from reflection.periodic.models import NO_PREVIOUS_NOTES
from reflection.periodic.preview import format_preview

from .common import config_option, create_reflection, load_config, note_for_path, vault_option, verbose_option


async def _look_back(
    reflection: Reflection, note: Note, years: int | None
) -> tuple[SuppressReason | None, ReflectionPreview | None]:
    decision = await reflection.decide(note)
    if isinstance(decision, Suppress):
        return decision.reason, None
    return None, await reflection.preview(note, window_size=years)


@click.command()
@click.argument("note_path", type=click.Path(dir_okay=False, path_type=Path))
@vault_option
@config_option
@click.option("--years", "-n", type=click.IntRange(min=1), default=None, help="How many years back to look.")
@verbose_option
def show(note_path: Path, vault: Path | None, config_file: Path | None, years: int | None, verbose: bool) -> None:
    """Show earlier notes for the same day or week as NOTE_PATH."""
    config = load_config(config_file, vault, verbose)
    reflection = create_reflection(config)
    note = note_for_path(Path(config.get_vault_path()), note_path)

    reason, preview = asyncio.run(_look_back(reflection, note, years))
    if reason is SuppressReason.NOT_READY:
        click.echo(f"Reflection is not ready: {reflection.state.reason}", err=True)
        sys.exit(1)
    if reason is SuppressReason.UNCLASSIFIED:
        click.echo(f"{note.path} is not a daily or weekly note.")
        return
    if preview is None:
        click.echo(NO_PREVIOUS_NOTES)
        return
    click.echo(format_preview(preview))
