"""Settings providers for periodic notes.

A host that already owns periodic-note settings (an editor plugin, say)
implements ``SettingsProvider``. ``ConfigSettingsProvider`` reads them
from reflection's own YAML/env configuration.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from reflection.core.config import Config
from reflection.core.exceptions import ConfigUnavailableError

from .models import DEFAULT_FORMATS, PeriodicNoteConfig, PeriodicSettings, PeriodType


@runtime_checkable
class SettingsProvider(Protocol):
    """Source of per-type periodic-note settings.

    Either method may raise ``ConfigUnavailableError`` when the settings
    are not ready yet, or return None when that period type is disabled.
    """

    def get_daily_note_config(self) -> PeriodicNoteConfig | None: ...

    def get_weekly_note_config(self) -> PeriodicNoteConfig | None: ...


def load_settings(provider: SettingsProvider) -> PeriodicSettings:
    """Gather both period types from *provider* into one settings value."""
    return PeriodicSettings(
        daily=provider.get_daily_note_config(),
        weekly=provider.get_weekly_note_config(),
    )


class ConfigSettingsProvider:
    """Read ``periodic.daily`` / ``periodic.weekly`` sections from a Config."""

    def __init__(self, config: Config):
        self.config = config

    def get_daily_note_config(self) -> PeriodicNoteConfig | None:
        return self._section(PeriodType.DAILY)

    def get_weekly_note_config(self) -> PeriodicNoteConfig | None:
        return self._section(PeriodType.WEEKLY)

    def _section(self, period_type: PeriodType) -> PeriodicNoteConfig | None:
        key = f"periodic.{period_type.value}"
        section: Any = self.config.get(key)
        if section is None:
            return None
        if not isinstance(section, dict):
            raise ConfigUnavailableError(f"'{key}' must be a mapping, got {type(section).__name__}")
        if str(section.get("enabled", True)).lower() in ("false", "0", "no"):
            return None

        kwargs: dict[str, Any] = {"folder": section.get("folder") or ""}
        kwargs["format"] = str(section.get("format") or DEFAULT_FORMATS[period_type])
        if period_type is PeriodType.WEEKLY and section.get("week_start"):
            kwargs["week_start"] = str(section["week_start"])
        try:
            return PeriodicNoteConfig(**kwargs)
        except ValueError as e:
            raise ConfigUnavailableError(f"Invalid '{key}' settings: {e}") from e
