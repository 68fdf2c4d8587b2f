"""Decide whether a note is a daily note, a weekly note, or neither."""

from __future__ import annotations

from .models import Note, PeriodicSettings, PeriodType, normalize_folder


def classify(note: Note, settings: PeriodicSettings | None) -> PeriodType | None:
    """Classify *note* by its parent folder.

    Daily is checked before weekly, so a folder configured for both is
    treated as daily. Unloaded settings classify nothing.
    """
    if settings is None:
        return None

    parent = normalize_folder(note.parent_path)
    for period_type in PeriodType:
        config = settings.for_type(period_type)
        if config is None:
            continue
        if normalize_folder(config.folder) == parent:
            return period_type
    return None
