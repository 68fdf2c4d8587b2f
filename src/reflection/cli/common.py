"""Shared setup logic for CLI commands."""

from __future__ import annotations

from pathlib import Path

import click

from reflection.core.config import Config
from reflection.core.utils.logging import setup_logging_from_config
from reflection.periodic import ConfigSettingsProvider, Note, Reflection, VaultNoteEnumerator

vault_option = click.option(
    "--vault",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Vault root (defaults to vault.path from config, else the current directory).",
)
config_option = click.option(
    "--config",
    "config_file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="YAML or JSON config file.",
)
verbose_option = click.option("-v", "--verbose", is_flag=True, help="Log debug output to stderr.")


def load_config(config_file: Path | None, vault: Path | None, verbose: bool = False) -> Config:
    """Load config, let --vault win over the file, and set up logging."""
    config = Config(config_file=str(config_file) if config_file else None)
    if vault is not None:
        config.set("vault.path", str(vault.expanduser()))

    setup_logging_from_config(config, verbose)
    return config


def create_reflection(config: Config) -> Reflection:
    """Create a Reflection coordinator backed by the configured vault."""
    vault_root = Path(config.get_vault_path()).resolve()
    return Reflection(
        ConfigSettingsProvider(config),
        VaultNoteEnumerator(vault_root),
        window_size=config.get_window_size(),
    )


def note_for_path(vault_root: Path, note_path: Path) -> Note:
    """Turn a CLI path (absolute, or relative to the vault) into a Note."""
    vault_root = vault_root.resolve()
    candidate = note_path.expanduser()
    if not candidate.is_absolute():
        in_vault = vault_root / candidate
        candidate = in_vault if in_vault.exists() else candidate.resolve()

    candidate = candidate.resolve()
    try:
        rel = candidate.relative_to(vault_root)
    except ValueError:
        raise click.BadParameter(f"{note_path} is not inside the vault {vault_root}") from None
    return Note(path=rel.as_posix(), vault_root=vault_root)
