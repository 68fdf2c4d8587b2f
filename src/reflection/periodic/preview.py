"""Build the preview value handed to a presentation layer.

Rendering markdown to HTML belongs to the host; this module only reads
note bodies and, for terminal hosts, formats them as plain markdown.
"""

from __future__ import annotations

from collections.abc import Callable

import aiofiles
from loguru import logger

from reflection.core.utils.file_io import parse_frontmatter, read_text

from .models import NO_PREVIOUS_NOTES, Note, PeriodType, ReflectionPreview


def read_note_contents(note: Note) -> str:
    """Body of *note* with frontmatter removed; "" if it cannot be read."""
    path = note.absolute_path
    if path is None:
        return ""
    try:
        content = read_text(path)
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Could not read {note.path}: {e}")
        return ""
    _, body = parse_frontmatter(content)
    return body


async def read_note_contents_async(note: Note) -> str:
    """Like ``read_note_contents``, without blocking the event loop."""
    path = note.absolute_path
    if path is None:
        return ""
    try:
        async with aiofiles.open(path, encoding="utf-8") as f:
            content = await f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Could not read {note.path}: {e}")
        return ""
    _, body = parse_frontmatter(content)
    return body


def build_preview(
    current_file: Note,
    period_type: PeriodType,
    notes: dict[int, Note],
    read: Callable[[Note], str] | None = read_note_contents,
) -> ReflectionPreview:
    """Assemble a preview; the title is the nearest earlier note's name."""
    preview = ReflectionPreview(
        current_file=current_file,
        period_type=period_type,
        notes=dict(sorted(notes.items())),
    )
    nearest = preview.resolved_note
    preview.title = nearest.basename if nearest is not None else NO_PREVIOUS_NOTES
    if read is not None:
        preview.contents = {years: read(note) for years, note in preview.notes.items()}
    return preview


def format_preview(preview: ReflectionPreview) -> str:
    """Plain-markdown rendering of a preview for terminal output."""
    if preview.is_empty:
        return NO_PREVIOUS_NOTES

    blocks: list[str] = []
    for years, note in preview.notes.items():
        label = "1 year ago" if years == 1 else f"{years} years ago"
        body = preview.contents.get(years, "").strip()
        block = f"## {note.basename} ({label})"
        if body:
            block += f"\n\n{body}"
        blocks.append(block)
    return "\n\n---\n\n".join(blocks)
