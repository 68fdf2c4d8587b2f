"""Reflection coordinator — owns session state and decides what to render.

All process-wide state (settings, note index, leaf registry, readiness)
lives on one ``Reflection`` instance that the host constructs once.
Initialization is best-effort: when the settings provider or the vault
scan is not available yet, the coordinator stays ``NotReady`` and tries
again on the next host event instead of raising into the host.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from loguru import logger

from reflection.core.events import (
    ACTIVE_LEAF_CHANGE,
    REFLECTION_READY,
    REFLECTION_RENDERED,
    WINDOW_OPEN,
    Event,
    EventBus,
)
from reflection.core.exceptions import ConfigUnavailableError, IndexUnavailableError

from .classifier import classify
from .index import NoteEnumerator, NoteIndex
from .models import (
    Leaf,
    Note,
    PeriodicSettings,
    Present,
    ReflectionPreview,
    RenderDecision,
    Suppress,
    SuppressReason,
)
from .preview import build_preview, read_note_contents_async
from .resolver import PeriodResolver
from .settings import SettingsProvider, load_settings
from .tracker import LeafRegistry

DEFAULT_WINDOW_SIZE = 5


@dataclass(frozen=True)
class Ready:
    pass


@dataclass(frozen=True)
class NotReady:
    reason: str


class Reflection:
    """Session coordinator for the reflection feature.

    Example::

        reflection = Reflection(ConfigSettingsProvider(config), VaultNoteEnumerator(vault))
        reflection.attach(bus)
        preview = await reflection.preview(Note("Journal/2024-06-15.md", vault))
    """

    def __init__(
        self,
        settings_provider: SettingsProvider,
        enumerator: NoteEnumerator,
        *,
        window_size: int = DEFAULT_WINDOW_SIZE,
        bus: EventBus | None = None,
        read_contents: Callable[[Note], Awaitable[str]] = read_note_contents_async,
    ) -> None:
        if window_size < 1:
            raise ValueError(f"window_size must be at least 1, got {window_size}")
        self.settings_provider = settings_provider
        self.enumerator = enumerator
        self.window_size = window_size
        self.bus = bus
        self.read_contents = read_contents

        self.settings: PeriodicSettings | None = None
        self.index: NoteIndex | None = None
        self.resolver: PeriodResolver | None = None
        self.leaves = LeafRegistry()
        self.state: Ready | NotReady = NotReady("not initialized")

    @property
    def is_ready(self) -> bool:
        return isinstance(self.state, Ready)

    # -- initialization --------------------------------------------------------

    async def ensure_ready(self, force: bool = False) -> bool:
        """Load settings and build the note index unless already done.

        Returns True when ready. Readiness failures are logged, recorded on
        ``state``, and never raised.
        """
        if self.is_ready and not force:
            return True

        loop = asyncio.get_running_loop()
        try:
            settings, index = await loop.run_in_executor(None, self._load)
        except (ConfigUnavailableError, IndexUnavailableError) as e:
            logger.warning(f"Reflection not ready: {e}")
            self.state = NotReady(str(e))
            return False

        self.settings = settings
        self.index = index
        self.resolver = PeriodResolver(index, settings)
        self.state = Ready()
        logger.info(f"Reflection ready: {index!r}")

        if self.bus is not None:
            await self.bus.emit(Event(name=REFLECTION_READY, payload={"index": index}, source="reflection"))
        return True

    def _load(self) -> tuple[PeriodicSettings, NoteIndex]:
        """Blocking half of initialization: settings lookup and the vault scan."""
        settings = load_settings(self.settings_provider)
        return settings, NoteIndex.build(self.enumerator, settings)

    async def reload(self) -> bool:
        """Rebuild settings and index from scratch, forgetting rendered leaves."""
        self.leaves.clear()
        return await self.ensure_ready(force=True)

    # -- decisions -------------------------------------------------------------

    async def decide(self, file: Note) -> RenderDecision:
        """Whether *file* gets a reflection block, and as which period type.

        Initialization is attempted at most once per call.
        """
        if not self.is_ready:
            logger.debug("Not ready, re-initializing")
            await self.ensure_ready()
        if not self.is_ready:
            return Suppress(SuppressReason.NOT_READY)

        period_type = classify(file, self.settings)
        if period_type is None:
            logger.debug(f"{file.path} is not a periodic note")
            return Suppress(SuppressReason.UNCLASSIFIED)
        if self.index.is_empty(period_type):
            return Suppress(SuppressReason.EMPTY_INDEX)
        return Present(period_type=period_type, file=file)

    async def preview(self, file: Note, window_size: int | None = None) -> ReflectionPreview | None:
        """Resolve earlier notes for *file*, or None when rendering is suppressed."""
        decision = await self.decide(file)
        if isinstance(decision, Suppress):
            return None

        size = self.window_size if window_size is None else window_size
        notes = self.resolver.resolve_lookback_window(decision.file, decision.period_type, size)
        preview = build_preview(decision.file, decision.period_type, notes, read=None)
        for years, note in preview.notes.items():
            preview.contents[years] = await self.read_contents(note)
        return preview

    # -- host events -----------------------------------------------------------

    async def run_on_leaf(self, leaf: Leaf) -> ReflectionPreview | None:
        """Handle one leaf activation; skips leaves whose file has not changed.

        A leaf is recorded only after a ready coordinator handled it without
        error, so not-ready or failed activations are retried on the next one.
        """
        if leaf.file is None:
            return None
        if not self.leaves.should_process(leaf.id, leaf.file.path):
            logger.debug(f"Leaf {leaf.id} already shows {leaf.file.path}")
            return None

        preview = await self.preview(leaf.file)
        if self.is_ready:
            self.leaves.record(leaf.id, leaf.file.path)

        if self.bus is not None:
            await self.bus.emit(
                Event(
                    name=REFLECTION_RENDERED,
                    payload={"leaf_id": leaf.id, "preview": preview},
                    source="reflection",
                )
            )
        return preview

    async def update_all_leaves(self, leaves: list[Leaf]) -> dict[str, ReflectionPreview | None]:
        results: dict[str, ReflectionPreview | None] = {}
        for leaf in leaves:
            results[leaf.id] = await self.run_on_leaf(leaf)
        return results

    def attach(self, bus: EventBus) -> None:
        """Subscribe to host workspace events on *bus*."""
        self.bus = bus
        bus.on(ACTIVE_LEAF_CHANGE, self._on_active_leaf_change)
        bus.on(WINDOW_OPEN, self._on_window_open)

    def detach(self) -> None:
        if self.bus is None:
            return
        self.bus.off(ACTIVE_LEAF_CHANGE, self._on_active_leaf_change)
        self.bus.off(WINDOW_OPEN, self._on_window_open)
        self.bus = None

    async def _on_active_leaf_change(self, event: Event) -> None:
        leaf = event.payload.get("leaf")
        if leaf is not None:
            await self.run_on_leaf(leaf)

    async def _on_window_open(self, event: Event) -> None:
        await self.update_all_leaves(list(event.payload.get("leaves", [])))
