"""Session-scoped index of periodic notes, keyed by period start.

The index is a snapshot: it is built once from a full scan and never
updated incrementally. Notes created afterwards are invisible until the
index is rebuilt.
"""

from __future__ import annotations

import os
from collections.abc import Iterable
from datetime import date
from pathlib import Path
from typing import Protocol, runtime_checkable

from loguru import logger

from reflection.core.exceptions import ConfigUnavailableError, IndexUnavailableError

from .dates import extract_period_anchor, period_key
from .models import Note, PeriodicNoteConfig, PeriodicSettings, PeriodType, WeekStart


@runtime_checkable
class NoteEnumerator(Protocol):
    """Full scan of the periodic notes that exist in a vault."""

    def enumerate_daily_notes(self, config: PeriodicNoteConfig) -> Iterable[Note]: ...

    def enumerate_weekly_notes(self, config: PeriodicNoteConfig) -> Iterable[Note]: ...


class VaultNoteEnumerator:
    """Enumerate periodic notes from a directory of markdown files.

    Walks each type's configured folder recursively, skipping hidden
    directories (``.obsidian``, ``.trash``).
    """

    def __init__(self, vault_root: str | Path):
        self.vault_root = Path(vault_root).expanduser()

    def enumerate_daily_notes(self, config: PeriodicNoteConfig) -> list[Note]:
        return self._scan(config)

    def enumerate_weekly_notes(self, config: PeriodicNoteConfig) -> list[Note]:
        return self._scan(config)

    def _scan(self, config: PeriodicNoteConfig | None) -> list[Note]:
        if config is None:
            raise ConfigUnavailableError("Periodic note settings are not loaded")
        if not self.vault_root.is_dir():
            raise IndexUnavailableError(f"Vault not found: {self.vault_root}")

        folder = self.vault_root / config.folder if config.folder else self.vault_root
        if not folder.is_dir():
            logger.debug(f"Periodic note folder does not exist yet: {folder}")
            return []

        notes: list[Note] = []
        for root, dirs, files in os.walk(folder):
            dirs[:] = sorted(d for d in dirs if not d.startswith("."))
            for fname in sorted(files):
                if not fname.endswith(".md"):
                    continue
                rel = Path(root, fname).relative_to(self.vault_root).as_posix()
                notes.append(Note(path=rel, vault_root=self.vault_root))
        return notes


class NoteIndex:
    """Period start -> note, partitioned by period type.

    Build with ``NoteIndex.build()``; query with ``lookup()``.

    Example::

        index = NoteIndex.build(VaultNoteEnumerator("~/Notes"), settings)
        index.lookup(PeriodType.DAILY, date(2023, 6, 15))
    """

    def __init__(
        self,
        partitions: dict[PeriodType, dict[date, Note]] | None = None,
        week_start: WeekStart = WeekStart.MONDAY,
    ):
        self._partitions: dict[PeriodType, dict[date, Note]] = {t: {} for t in PeriodType}
        for period_type, notes in (partitions or {}).items():
            self._partitions[period_type] = dict(notes)
        self._week_start = week_start

    @classmethod
    def build(cls, enumerator: NoteEnumerator, settings: PeriodicSettings) -> NoteIndex:
        """Scan every configured period type once and index the results.

        Raises:
            IndexUnavailableError: If the enumerator cannot scan the vault.
            ConfigUnavailableError: If the enumerator needs settings that are missing.
        """
        weekly_config = settings.weekly
        index = cls(week_start=weekly_config.week_start if weekly_config else WeekStart.MONDAY)

        scanners = {
            PeriodType.DAILY: enumerator.enumerate_daily_notes,
            PeriodType.WEEKLY: enumerator.enumerate_weekly_notes,
        }
        for period_type, scan in scanners.items():
            config = settings.for_type(period_type)
            if config is None:
                continue
            try:
                notes = list(scan(config))
            except OSError as e:
                raise IndexUnavailableError(f"Failed to enumerate {period_type.value} notes: {e}") from e
            index._add_all(period_type, notes, config)

        logger.info(
            f"Indexed {index.count(PeriodType.DAILY)} daily and {index.count(PeriodType.WEEKLY)} weekly notes"
        )
        return index

    def _add_all(self, period_type: PeriodType, notes: list[Note], config: PeriodicNoteConfig) -> None:
        partition = self._partitions[period_type]
        for note in sorted(notes, key=lambda n: n.path):
            anchor = extract_period_anchor(note, period_type.granularity, config)
            if anchor is None:
                logger.debug(f"Skipping {note.path}: no {period_type.granularity} in name")
                continue
            existing = partition.get(anchor)
            if existing is not None:
                logger.warning(
                    f"Duplicate {period_type.value} note for {anchor}: keeping {existing.path}, ignoring {note.path}"
                )
                continue
            partition[anchor] = note

    def lookup(self, period_type: PeriodType, key: date) -> Note | None:
        """Return the note for the period containing *key*, if one exists."""
        partition = self._partitions.get(period_type)
        if partition is None:
            return None
        return partition.get(period_key(key, period_type, self._week_start))

    def partition(self, period_type: PeriodType) -> dict[date, Note]:
        """Read-only copy of one period type's entries."""
        return dict(self._partitions.get(period_type, {}))

    def count(self, period_type: PeriodType) -> int:
        return len(self._partitions.get(period_type, {}))

    def is_empty(self, period_type: PeriodType) -> bool:
        return self.count(period_type) == 0

    @property
    def week_start(self) -> WeekStart:
        return self._week_start

    def __len__(self) -> int:
        return sum(len(p) for p in self._partitions.values())

    def __repr__(self) -> str:
        return f"NoteIndex(daily={self.count(PeriodType.DAILY)}, weekly={self.count(PeriodType.WEEKLY)})"
