"""
Markdown file helpers: frontmatter parsing and note reading.

All functions operate on explicit paths — no implicit vault lookups.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from pathlib import Path

import yaml
from loguru import logger


def parse_frontmatter(content: str) -> tuple[dict, str]:
    """
    Parse YAML frontmatter from markdown content.

    Returns:
        (frontmatter_dict, content_without_frontmatter).
        If no frontmatter found, returns ({}, original_content).
    """
    content = content.strip()
    if not content.startswith("---"):
        return {}, content

    parts = content.split("---", 2)
    if len(parts) < 3:
        return {}, content

    yaml_content = parts[1].strip()
    remaining = parts[2].lstrip()
    if not yaml_content:
        return {}, remaining

    yaml_content = yaml_content.replace("\t", "    ")
    # Obsidian-style #tags in YAML lists
    yaml_content = re.sub(r"(^\s*-\s+)(#.*)$", r"\1'\2'", yaml_content, flags=re.MULTILINE)
    try:
        frontmatter = yaml.safe_load(yaml_content) or {}
    except yaml.YAMLError as e:
        logger.warning(f"Failed to parse markdown frontmatter: {e}")
        return {}, content

    if not isinstance(frontmatter, dict):
        return {}, content
    return frontmatter, remaining


def read_text(path: str | Path) -> str:
    """Read a UTF-8 markdown file."""
    return Path(path).read_text(encoding="utf-8")


def frontmatter_date(path: str | Path, key: str = "date") -> date | None:
    """Read a date from a note's frontmatter, or None if absent/unparseable."""
    try:
        content = read_text(path)
    except (OSError, UnicodeDecodeError):
        return None

    frontmatter, _ = parse_frontmatter(content)
    value = frontmatter.get(key)
    # yaml.safe_load already turns bare ISO dates into date objects
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return datetime.strptime(value.strip()[:10], "%Y-%m-%d").date()
        except ValueError:
            return None
    return None
