"""Per-leaf record of the last file rendered, to skip redundant work."""

from __future__ import annotations


class LeafRegistry:
    """Remembers which file path each editor leaf last showed.

    Memory-only and session scoped; a fresh registry treats every leaf
    as needing an update.
    """

    def __init__(self) -> None:
        self._paths: dict[str, str] = {}

    def should_process(self, leaf_id: str, path: str | None) -> bool:
        """False only when *leaf_id* was last recorded with this same *path*."""
        if leaf_id not in self._paths:
            return True
        return self._paths[leaf_id] != path

    def record(self, leaf_id: str, path: str) -> None:
        self._paths[leaf_id] = path

    def forget(self, leaf_id: str) -> None:
        self._paths.pop(leaf_id, None)

    def clear(self) -> None:
        self._paths.clear()

    def __contains__(self, leaf_id: object) -> bool:
        return leaf_id in self._paths

    def __len__(self) -> int:
        return len(self._paths)
