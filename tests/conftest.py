"""Shared test fixtures for reflection."""

from pathlib import Path

import pytest

from reflection.core.config import Config


def _write_note(vault: Path, rel_path: str, body: str = "") -> Path:
    path = vault / rel_path
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(body or f"# {path.stem}\n", encoding="utf-8")
    return path


@pytest.fixture
def write_note():
    """Create a markdown note under a vault: ``write_note(vault, "Daily/x.md", body)``."""
    return _write_note


@pytest.fixture
def vault(tmp_path):
    """An empty vault with Daily/ and Weekly/ periodic folders."""
    root = tmp_path / "vault"
    (root / "Daily").mkdir(parents=True)
    (root / "Weekly").mkdir(parents=True)
    (root / ".obsidian").mkdir()
    return root


@pytest.fixture
def vault_config(vault):
    """Config pointing at the ``vault`` fixture, isolated from env vars."""
    return Config(
        env_prefix="",
        vault_path=str(vault),
        defaults={
            "periodic": {
                "daily": {"folder": "Daily"},
                "weekly": {"folder": "Weekly"},
            },
        },
    )


@pytest.fixture
def config_file(tmp_path, vault):
    """A YAML config file for CLI runs against the ``vault`` fixture."""
    import yaml

    path = tmp_path / "reflection.yaml"
    path.write_text(
        yaml.dump(
            {
                "vault": {"path": str(vault)},
                "periodic": {"daily": {"folder": "Daily"}, "weekly": {"folder": "Weekly"}},
            }
        ),
        encoding="utf-8",
    )
    return path
