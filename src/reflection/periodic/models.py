"""Data model for periodic notes and the values handed to the presentation layer.

Framework-agnostic: a ``Note`` is a vault-relative path, not an editor
object, so any host (editor plugin, terminal, tests) can build one.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path, PurePosixPath

NO_PREVIOUS_NOTES = "No Previous Notes"


class PeriodType(Enum):
    """Kinds of periodic note, in classification priority order."""

    DAILY = "daily"
    WEEKLY = "weekly"

    @property
    def granularity(self) -> str:
        """Unit the note's anchor date is truncated to: "day" or "week"."""
        return "day" if self is PeriodType.DAILY else "week"


DEFAULT_FORMATS = {
    PeriodType.DAILY: "%Y-%m-%d",
    PeriodType.WEEKLY: "%G-W%V",
}


class WeekStart(Enum):
    MONDAY = "monday"
    SUNDAY = "sunday"


@dataclass
class PeriodicNoteConfig:
    """Where one kind of periodic note lives and how it is named.

    Attributes:
        folder: Vault-relative folder holding the notes ("" = vault root).
        format: strftime/strptime pattern for the note's filename stem.
        week_start: First day of the week, used to normalize weekly anchors.
    """

    folder: str = ""
    format: str = "%Y-%m-%d"
    week_start: WeekStart = WeekStart.MONDAY

    def __post_init__(self):
        self.folder = normalize_folder(self.folder)
        if isinstance(self.week_start, str):
            self.week_start = WeekStart(self.week_start.lower())


@dataclass
class PeriodicSettings:
    """Loaded configuration for both period types. Either side may be unset."""

    daily: PeriodicNoteConfig | None = None
    weekly: PeriodicNoteConfig | None = None

    def for_type(self, period_type: PeriodType) -> PeriodicNoteConfig | None:
        if period_type is PeriodType.DAILY:
            return self.daily
        if period_type is PeriodType.WEEKLY:
            return self.weekly
        return None


def normalize_folder(folder: str | None) -> str:
    """Canonical vault-relative folder: forward slashes, no edge slashes."""
    if not folder:
        return ""
    cleaned = str(folder).replace("\\", "/").strip().strip("/")
    return "" if cleaned == "." else cleaned


@dataclass(frozen=True)
class Note:
    """A read-only reference to a markdown note in the vault.

    Attributes:
        path: Vault-relative POSIX path, e.g. ``Journal/2024-06-15.md``.
        vault_root: Absolute vault root, when the note lives on disk.
    """

    path: str
    vault_root: Path | None = field(default=None, compare=False)

    @property
    def basename(self) -> str:
        return PurePosixPath(self.path).stem

    @property
    def parent_path(self) -> str:
        return normalize_folder(str(PurePosixPath(self.path).parent))

    @property
    def absolute_path(self) -> Path | None:
        if self.vault_root is None:
            return None
        return Path(self.vault_root) / self.path

    def __repr__(self) -> str:
        return f"Note(path='{self.path}')"


@dataclass
class Leaf:
    """A host editor pane. ``file`` is None for panes not showing a note."""

    id: str
    file: Note | None = None


# ---------------------------------------------------------------------------
# Render decisions
# ---------------------------------------------------------------------------


class SuppressReason(Enum):
    NOT_READY = "not_ready"
    UNCLASSIFIED = "unclassified"
    EMPTY_INDEX = "empty_index"


@dataclass(frozen=True)
class Suppress:
    """Nothing should be rendered for this file."""

    reason: SuppressReason


@dataclass(frozen=True)
class Present:
    """Hand the file to the presentation layer as a periodic note of *period_type*."""

    period_type: PeriodType
    file: Note


RenderDecision = Suppress | Present


@dataclass
class ReflectionPreview:
    """What the presentation layer needs to draw a reflection block.

    Attributes:
        current_file: The note being viewed.
        period_type: Its classified period type.
        title: Basename of the most recent earlier note, or "No Previous Notes".
        notes: Years back -> earlier note, only for years that had one.
        contents: Years back -> note body (frontmatter stripped).
    """

    current_file: Note
    period_type: PeriodType
    title: str = NO_PREVIOUS_NOTES
    notes: dict[int, Note] = field(default_factory=dict)
    contents: dict[int, str] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.notes

    @property
    def resolved_note(self) -> Note | None:
        """The nearest earlier note (fewest years back), if any."""
        if not self.notes:
            return None
        return self.notes[min(self.notes)]
