"""Tests for reflection.periodic.orchestrator — the Reflection coordinator."""

from __future__ import annotations

import pytest

from reflection.core.events import ACTIVE_LEAF_CHANGE, REFLECTION_READY, REFLECTION_RENDERED, WINDOW_OPEN, Event, EventBus
from reflection.core.exceptions import ConfigUnavailableError
from reflection.periodic.index import VaultNoteEnumerator
from reflection.periodic.models import Leaf, Note, PeriodicNoteConfig, PeriodType, Present, Suppress, SuppressReason
from reflection.periodic.orchestrator import NotReady, Ready, Reflection
from reflection.periodic.preview import read_note_contents_async
from reflection.periodic.settings import ConfigSettingsProvider


class FlakySettingsProvider:
    """Not ready for the first *failures* calls, like a plugin still loading."""

    def __init__(self, failures: int = 1):
        self.failures = failures
        self.calls = 0

    def get_daily_note_config(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise ConfigUnavailableError("periodic notes plugin not loaded")
        return PeriodicNoteConfig(folder="Daily")

    def get_weekly_note_config(self):
        return PeriodicNoteConfig(folder="Weekly", format="%G-W%V")


@pytest.fixture
def journal(vault, write_note):
    write_note(vault, "Daily/2023-06-15.md", "---\ntags: [daily]\n---\n\nLast year at the lake.")
    write_note(vault, "Daily/2024-06-15.md", "This year at home.")
    return vault


@pytest.fixture
def reflection(journal, vault_config):
    return Reflection(ConfigSettingsProvider(vault_config), VaultNoteEnumerator(journal))


class TestReadiness:
    async def test_ensure_ready(self, reflection):
        assert not reflection.is_ready
        assert await reflection.ensure_ready() is True
        assert isinstance(reflection.state, Ready)
        assert reflection.index.count(PeriodType.DAILY) == 2

    async def test_ensure_ready_is_idempotent(self, journal):
        provider = FlakySettingsProvider(failures=0)
        reflection = Reflection(provider, VaultNoteEnumerator(journal))
        await reflection.ensure_ready()
        await reflection.ensure_ready()
        assert provider.calls == 1

    async def test_missing_vault_is_not_ready(self, tmp_path, vault_config):
        reflection = Reflection(ConfigSettingsProvider(vault_config), VaultNoteEnumerator(tmp_path / "gone"))
        assert await reflection.ensure_ready() is False
        assert isinstance(reflection.state, NotReady)
        assert "Vault not found" in reflection.state.reason

    async def test_ready_event_emitted(self, reflection):
        bus = EventBus()
        seen: list[Event] = []
        bus.on(REFLECTION_READY, seen.append)
        reflection.attach(bus)

        await reflection.ensure_ready()
        assert len(seen) == 1
        assert seen[0].payload["index"] is reflection.index

    async def test_reload_sees_new_notes(self, reflection, journal, write_note):
        await reflection.ensure_ready()
        write_note(journal, "Daily/2022-06-15.md")
        preview = await reflection.preview(Note("Daily/2024-06-15.md", vault_root=journal))
        assert list(preview.notes) == [1]

        assert await reflection.reload() is True
        preview = await reflection.preview(Note("Daily/2024-06-15.md", vault_root=journal))
        assert list(preview.notes) == [1, 2]


class TestDecide:
    @pytest.mark.smoke
    async def test_end_to_end_daily(self, reflection, journal):
        current = Note("Daily/2024-06-15.md", vault_root=journal)

        decision = await reflection.decide(current)
        assert decision == Present(period_type=PeriodType.DAILY, file=current)

        preview = await reflection.preview(current)
        assert preview.title == "2023-06-15"
        assert preview.resolved_note == Note("Daily/2023-06-15.md")
        assert preview.contents == {1: "Last year at the lake."}

    async def test_unclassified_file(self, reflection, journal):
        decision = await reflection.decide(Note("Projects/plan.md", vault_root=journal))
        assert decision == Suppress(SuppressReason.UNCLASSIFIED)

    async def test_empty_partition(self, reflection, journal):
        decision = await reflection.decide(Note("Weekly/2024-W24.md", vault_root=journal))
        assert decision == Suppress(SuppressReason.EMPTY_INDEX)
        assert await reflection.preview(Note("Weekly/2024-W24.md", vault_root=journal)) is None

    async def test_suppression_while_ready_does_not_reinitialize(self, journal):
        provider = FlakySettingsProvider(failures=0)
        reflection = Reflection(provider, VaultNoteEnumerator(journal))

        assert await reflection.decide(Note("Projects/plan.md", vault_root=journal)) == Suppress(
            SuppressReason.UNCLASSIFIED
        )
        assert await reflection.decide(Note("Weekly/2024-W24.md", vault_root=journal)) == Suppress(
            SuppressReason.EMPTY_INDEX
        )
        assert provider.calls == 1

    async def test_not_ready_retries_once_per_call(self, journal):
        provider = FlakySettingsProvider(failures=2)
        reflection = Reflection(provider, VaultNoteEnumerator(journal))
        current = Note("Daily/2024-06-15.md", vault_root=journal)

        assert await reflection.decide(current) == Suppress(SuppressReason.NOT_READY)
        assert provider.calls == 1
        assert await reflection.decide(current) == Suppress(SuppressReason.NOT_READY)
        assert provider.calls == 2
        assert isinstance(await reflection.decide(current), Present)
        assert provider.calls == 3

    async def test_no_previous_notes(self, reflection, journal, write_note):
        write_note(journal, "Daily/2024-06-16.md")
        await reflection.ensure_ready()
        preview = await reflection.preview(Note("Daily/2024-06-16.md", vault_root=journal))
        assert preview.is_empty
        assert preview.title == "No Previous Notes"

    async def test_window_size_override(self, reflection, journal, write_note):
        write_note(journal, "Daily/2021-06-15.md")
        current = Note("Daily/2024-06-15.md", vault_root=journal)
        assert list((await reflection.preview(current)).notes) == [1, 3]
        assert list((await reflection.preview(current, window_size=2)).notes) == [1]

    async def test_explicit_zero_window_size_is_rejected(self, reflection, journal):
        with pytest.raises(ValueError, match="at least 1"):
            await reflection.preview(Note("Daily/2024-06-15.md", vault_root=journal), window_size=0)

    @pytest.mark.parametrize("size", [0, -1])
    def test_window_size_must_be_positive(self, journal, vault_config, size):
        with pytest.raises(ValueError, match="at least 1"):
            Reflection(ConfigSettingsProvider(vault_config), VaultNoteEnumerator(journal), window_size=size)

    async def test_custom_content_reader(self, journal, vault_config):
        read: list[str] = []

        async def fake_read(note: Note) -> str:
            read.append(note.path)
            return f"body of {note.basename}"

        reflection = Reflection(
            ConfigSettingsProvider(vault_config), VaultNoteEnumerator(journal), read_contents=fake_read
        )
        preview = await reflection.preview(Note("Daily/2024-06-15.md", vault_root=journal))
        assert read == ["Daily/2023-06-15.md"]
        assert preview.contents == {1: "body of 2023-06-15"}


class TestLeaves:
    async def test_run_on_leaf_skips_unchanged_file(self, reflection, journal):
        leaf = Leaf(id="leaf-1", file=Note("Daily/2024-06-15.md", vault_root=journal))

        first = await reflection.run_on_leaf(leaf)
        assert first.title == "2023-06-15"
        assert await reflection.run_on_leaf(leaf) is None

        leaf.file = Note("Daily/2023-06-15.md", vault_root=journal)
        assert (await reflection.run_on_leaf(leaf)).is_empty

    async def test_leaf_without_file_ignored(self, reflection):
        assert await reflection.run_on_leaf(Leaf(id="empty")) is None
        assert "empty" not in reflection.leaves

    async def test_not_ready_leaf_is_retried(self, journal):
        provider = FlakySettingsProvider(failures=1)
        reflection = Reflection(provider, VaultNoteEnumerator(journal))
        leaf = Leaf(id="leaf-1", file=Note("Daily/2024-06-15.md", vault_root=journal))

        assert await reflection.run_on_leaf(leaf) is None
        # one initialization attempt per activation
        assert provider.calls == 1
        assert "leaf-1" not in reflection.leaves

        preview = await reflection.run_on_leaf(leaf)
        assert provider.calls == 2
        assert preview.title == "2023-06-15"
        assert "leaf-1" in reflection.leaves

    async def test_failed_render_is_not_recorded(self, journal, vault_config):
        async def broken_read(note: Note) -> str:
            raise RuntimeError("disk went away")

        reflection = Reflection(
            ConfigSettingsProvider(vault_config), VaultNoteEnumerator(journal), read_contents=broken_read
        )
        leaf = Leaf(id="leaf-1", file=Note("Daily/2024-06-15.md", vault_root=journal))

        with pytest.raises(RuntimeError):
            await reflection.run_on_leaf(leaf)
        assert "leaf-1" not in reflection.leaves

        reflection.read_contents = read_note_contents_async
        preview = await reflection.run_on_leaf(leaf)
        assert preview.contents == {1: "Last year at the lake."}
        assert "leaf-1" in reflection.leaves

    async def test_zero_window_size_in_config_renders(self, journal, vault_config):
        vault_config.set("lookback.window_size", 0)
        reflection = Reflection(
            ConfigSettingsProvider(vault_config),
            VaultNoteEnumerator(journal),
            window_size=vault_config.get_window_size(),
        )
        leaf = Leaf(id="leaf-1", file=Note("Daily/2024-06-15.md", vault_root=journal))

        preview = await reflection.run_on_leaf(leaf)
        assert preview.title == "2023-06-15"
        assert "leaf-1" in reflection.leaves

    async def test_host_events_drive_rendering(self, reflection, journal):
        bus = EventBus()
        rendered: list[Event] = []
        bus.on(REFLECTION_RENDERED, rendered.append)
        reflection.attach(bus)

        leaf = Leaf(id="leaf-1", file=Note("Daily/2024-06-15.md", vault_root=journal))
        await bus.emit(Event(name=ACTIVE_LEAF_CHANGE, payload={"leaf": leaf}, source="host"))
        await bus.emit(Event(name=ACTIVE_LEAF_CHANGE, payload={"leaf": leaf}, source="host"))

        assert len(rendered) == 1
        assert rendered[0].payload["leaf_id"] == "leaf-1"
        assert rendered[0].payload["preview"].title == "2023-06-15"

    async def test_window_open_updates_all_leaves(self, reflection, journal):
        bus = EventBus()
        rendered: list[str] = []
        bus.on(REFLECTION_RENDERED, lambda e: rendered.append(e.payload["leaf_id"]))
        reflection.attach(bus)

        leaves = [
            Leaf(id="a", file=Note("Daily/2024-06-15.md", vault_root=journal)),
            Leaf(id="b", file=Note("Projects/plan.md", vault_root=journal)),
            Leaf(id="c"),
        ]
        await bus.emit(Event(name=WINDOW_OPEN, payload={"leaves": leaves}, source="host"))
        assert rendered == ["a", "b"]

    async def test_detach(self, reflection, journal):
        bus = EventBus()
        rendered: list[Event] = []
        bus.on(REFLECTION_RENDERED, rendered.append)
        reflection.attach(bus)
        reflection.detach()

        leaf = Leaf(id="leaf-1", file=Note("Daily/2024-06-15.md", vault_root=journal))
        await bus.emit(Event(name=ACTIVE_LEAF_CHANGE, payload={"leaf": leaf}))
        assert rendered == []
