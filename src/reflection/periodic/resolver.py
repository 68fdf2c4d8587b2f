"""Find the notes for the same day or week in previous years."""

from __future__ import annotations

from loguru import logger

from reflection.core.exceptions import InvalidPeriodTypeError

from .dates import extract_period_anchor, subtract_years
from .index import NoteIndex
from .models import Note, PeriodicNoteConfig, PeriodicSettings, PeriodType


class PeriodResolver:
    """Resolve a periodic note to its counterparts N years back.

    Anchors are derived with each period type's naming settings and
    looked up in a ``NoteIndex`` snapshot, so results are deterministic
    for a given index.
    """

    def __init__(self, index: NoteIndex, settings: PeriodicSettings):
        self.index = index
        self.settings = settings

    def resolve_one_year_back(self, note: Note, period_type: PeriodType) -> Note | None:
        """The note for the same period exactly one year earlier."""
        return self.resolve_lookback(note, period_type, 1)

    def resolve_lookback(self, note: Note, period_type: PeriodType, lookback: int) -> Note | None:
        """The note for the same period *lookback* calendar years earlier.

        Raises:
            InvalidPeriodTypeError: If *period_type* is not a PeriodType.
        """
        config = self._config_for(period_type)
        if config is None:
            return None

        anchor = extract_period_anchor(note, period_type.granularity, config)
        if anchor is None:
            logger.debug(f"No {period_type.granularity} anchor for {note.path}")
            return None
        return self.index.lookup(period_type, subtract_years(anchor, lookback))

    def resolve_lookback_window(self, note: Note, period_type: PeriodType, window_size: int) -> dict[int, Note]:
        """Notes for the same period 1..window_size years back (inclusive).

        Years with no note are omitted, so the result can be smaller than
        *window_size*. Keys ascend.

        Raises:
            InvalidPeriodTypeError: If *period_type* is not a PeriodType.
            ValueError: If *window_size* is less than 1.
        """
        self._config_for(period_type)
        if window_size < 1:
            raise ValueError(f"window_size must be at least 1, got {window_size}")

        found: dict[int, Note] = {}
        for lookback in range(1, window_size + 1):
            match = self.resolve_lookback(note, period_type, lookback)
            if match is not None:
                found[lookback] = match
        return found

    def _config_for(self, period_type: PeriodType) -> PeriodicNoteConfig | None:
        if not isinstance(period_type, PeriodType):
            raise InvalidPeriodTypeError(f"Unknown period type: {period_type!r}")
        return self.settings.for_type(period_type)
