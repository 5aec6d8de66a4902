"""Mutation types for MindMap operations.

This module provides dataclasses for recording structural edits and
the error raised when an edit would break the tree structure.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import uuid4


class GraphIntegrityError(ValueError):
    """Raised before a link that would orphan, multi-parent or cycle a node."""


@dataclass
class MutationEntry:
    """Single structural edit record.

    Attributes:
        operation: Operation type (e.g., "add_child", "delete_node").
        target_id: Primary node affected by the edit.
        before_state: Relevant state before the edit.
        after_state: Relevant state after the edit.
        id: Unique mutation ID (UUID4 hex).
        timestamp: When the edit was applied.
    """

    operation: str
    target_id: str
    before_state: dict[str, Any]
    after_state: dict[str, Any]
    id: str = field(default_factory=lambda: uuid4().hex)
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        """Human-readable representation."""
        return f"[{self.id[:8]}] {self.operation}({self.target_id})"


class MutationLog:
    """Append-only history of applied edits.

    Rejected edits are never logged, so the log length equals the number
    of edits that changed the document.

    Example:
        >>> log = MutationLog()
        >>> log.append(MutationEntry("add_child", "task_3", {}, {}))
        >>> len(log)
        1
    """

    def __init__(self) -> None:
        """Initialize an empty mutation log."""
        self._entries: list[MutationEntry] = []

    def append(self, entry: MutationEntry) -> None:
        """Append a mutation entry to the log."""
        self._entries.append(entry)

    def __len__(self) -> int:
        """Return the number of entries in the log."""
        return len(self._entries)

    def last(self) -> MutationEntry | None:
        """Return the most recent entry, or None if empty."""
        return self._entries[-1] if self._entries else None


__all__ = ["GraphIntegrityError", "MutationEntry", "MutationLog"]
