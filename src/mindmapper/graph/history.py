"""Snapshot history for undo/redo.

History is a bounded stack of full document snapshots. Saving after an
undo discards the redo tail; once the stack is full the oldest snapshot
is dropped.
"""

from __future__ import annotations

import copy
import logging
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_MAX_STATES = 50


class History:
    """Bounded undo/redo stack of snapshots.

    Snapshots are deep-copied on save and on retrieval, so callers can
    mutate what they pass in or get back.

    Example:
        >>> history = History(max_states=10)
        >>> history.save({"nodes": [1]})
        >>> history.save({"nodes": [1, 2]})
        >>> history.undo()
        {'nodes': [1]}
    """

    def __init__(self, max_states: int = DEFAULT_MAX_STATES) -> None:
        if max_states < 1:
            raise ValueError(f"max_states must be positive, got {max_states}")
        self.max_states = max_states
        self.enabled = True
        self._states: list[dict[str, Any]] = []
        self._current = -1

    def save(self, state: dict[str, Any]) -> None:
        """Push a snapshot, dropping any redo tail."""
        if not self.enabled:
            return
        del self._states[self._current + 1:]
        self._states.append(copy.deepcopy(state))
        if len(self._states) > self.max_states:
            self._states.pop(0)
        self._current = len(self._states) - 1
        logger.debug("Saved snapshot %d of %d", self._current, len(self._states))

    def undo(self) -> dict[str, Any] | None:
        """Step back one snapshot, or None if there is nothing to undo."""
        if not self.can_undo():
            return None
        self._current -= 1
        return copy.deepcopy(self._states[self._current])

    def redo(self) -> dict[str, Any] | None:
        """Step forward one snapshot, or None if there is nothing to redo."""
        if not self.can_redo():
            return None
        self._current += 1
        return copy.deepcopy(self._states[self._current])

    def can_undo(self) -> bool:
        return self._current > 0

    def can_redo(self) -> bool:
        return self._current < len(self._states) - 1

    @property
    def current_index(self) -> int:
        """Index of the current snapshot, -1 when empty."""
        return self._current

    def __len__(self) -> int:
        return len(self._states)

    def clear(self) -> None:
        """Drop all snapshots."""
        self._states.clear()
        self._current = -1


__all__ = ["DEFAULT_MAX_STATES", "History"]
