"""Periodic-note resolution: classify, index, and look back across years.

Provides the data model, the vault note index, the lookback resolver,
and the ``Reflection`` coordinator that hosts drive from workspace events.
"""

from .classifier import classify
from .index import NoteEnumerator, NoteIndex, VaultNoteEnumerator
from .models import (
    Leaf,
    Note,
    PeriodicNoteConfig,
    PeriodicSettings,
    PeriodType,
    Present,
    ReflectionPreview,
    Suppress,
    SuppressReason,
    WeekStart,
)
from .orchestrator import NotReady, Ready, Reflection
from .resolver import PeriodResolver
from .settings import ConfigSettingsProvider, SettingsProvider
from .tracker import LeafRegistry

__all__ = [
    "ConfigSettingsProvider",
    "Leaf",
    "LeafRegistry",
    "Note",
    "NoteEnumerator",
    "NoteIndex",
    "NotReady",
    "PeriodResolver",
    "PeriodType",
    "PeriodicNoteConfig",
    "PeriodicSettings",
    "Present",
    "Ready",
    "Reflection",
    "ReflectionPreview",
    "SettingsProvider",
    "Suppress",
    "SuppressReason",
    "VaultNoteEnumerator",
    "WeekStart",
    "classify",
]
