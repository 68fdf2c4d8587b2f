"""reflection index — summarize the periodic notes found in the vault."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import click

from reflection.periodic import PeriodType

from .common import config_option, create_reflection, load_config, vault_option, verbose_option


@click.command()
@vault_option
@config_option
@verbose_option
def index(vault: Path | None, config_file: Path | None, verbose: bool) -> None:
    """Count the daily and weekly notes Reflection can see."""
    config = load_config(config_file, vault, verbose)
    reflection = create_reflection(config)

    if not asyncio.run(reflection.ensure_ready()):
        click.echo(f"Reflection is not ready: {reflection.state.reason}", err=True)
        sys.exit(1)

    for period_type in PeriodType:
        settings = reflection.settings.for_type(period_type)
        if settings is None:
            click.echo(f"{period_type.value}: disabled")
            continue
        folder = settings.folder or "(vault root)"
        click.echo(f"{period_type.value}: {reflection.index.count(period_type)} notes in {folder}")
