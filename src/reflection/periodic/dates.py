"""Period anchors and calendar arithmetic.

A periodic note represents a period (a day or a week). Its *anchor* is
the first day of that period, derived from the filename using the
configured format, with the note's frontmatter ``date:`` as a fallback.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta

from loguru import logger

from reflection.core.utils.file_io import frontmatter_date

from .models import Note, PeriodicNoteConfig, PeriodType, WeekStart

_WEEK_DIRECTIVE = re.compile(r"%[GVUW]")
_WEEKDAY_DIRECTIVE = re.compile(r"%[uwaA]")


def period_key(d: date, period_type: PeriodType, week_start: WeekStart = WeekStart.MONDAY) -> date:
    """Truncate *d* to the start of its day or week."""
    if isinstance(d, datetime):
        d = d.date()
    if period_type is PeriodType.DAILY:
        return d
    if week_start is WeekStart.SUNDAY:
        offset = (d.weekday() + 1) % 7
    else:
        offset = d.weekday()
    return d - timedelta(days=offset)


def subtract_years(d: date, years: int) -> date:
    """Shift *d* back by calendar years.

    Feb 29 landing in a non-leap year clamps to Feb 28.
    """
    target_year = d.year - years
    try:
        return d.replace(year=target_year)
    except ValueError:
        return d.replace(year=target_year, day=28)


def parse_period_name(name: str, fmt: str) -> date | None:
    """Parse a filename stem with a strptime pattern.

    Week-only patterns (``%G-W%V``, ``%Y-W%W``) carry no weekday, which
    strptime cannot resolve on its own, so the first weekday is implied.
    """
    if _WEEK_DIRECTIVE.search(fmt) and not _WEEKDAY_DIRECTIVE.search(fmt):
        fmt = f"{fmt} %u"
        name = f"{name} 1"
    try:
        return datetime.strptime(name, fmt).date()
    except ValueError:
        return None


def format_period(d: date, config: PeriodicNoteConfig) -> str:
    """Render a period start back into its filename stem."""
    return d.strftime(config.format)


def extract_period_anchor(note: Note, granularity: str, config: PeriodicNoteConfig) -> date | None:
    """Return the start date of the period *note* represents.

    Args:
        note: The periodic note.
        granularity: "day" or "week".
        config: Naming settings for the note's period type.

    Returns:
        The period start, or None when no date can be derived.
    """
    if granularity == "day":
        period_type = PeriodType.DAILY
    elif granularity == "week":
        period_type = PeriodType.WEEKLY
    else:
        raise ValueError(f"Unknown granularity: {granularity!r}")

    parsed = parse_period_name(note.basename, config.format)
    if parsed is None and note.absolute_path is not None:
        parsed = frontmatter_date(note.absolute_path)
        if parsed is not None:
            logger.debug(f"Anchored {note.path} from frontmatter date {parsed}")

    if parsed is None:
        return None
    return period_key(parsed, period_type, config.week_start)
