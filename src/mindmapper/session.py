"""Editing session - keeps the outline text and the MindMap in step.

The session owns the single live document. Text edits made by the user
are debounced and then re-parsed; graph edits rewrite the text from the
document. Text written by the session itself is tagged SYNC and never
reaches the parser, which stops the two views from re-triggering each
other.

Nothing here spawns threads or timers: the host calls ``poll()`` (from
its event loop, a keypress handler, or a test) and the pending
regeneration fires once the quiet period has elapsed on the injected
clock.
"""

from __future__ import annotations

import copy
import logging
import time
from enum import Enum
from typing import Any, Callable

from mindmapper.config import DEFAULT_CONFIG
from mindmapper.graph.builder import Direction, MindMap
from mindmapper.graph.factory import build_mind_map, builder_options, label_style_from_config
from mindmapper.graph.history import History
from mindmapper.graph.mutations import MutationEntry
from mindmapper.graph.reconstructor import reconstruct_outline
from mindmapper.graph.serialize import (
    DocumentMetadata,
    ImportResult,
    Layout,
    document_from_dict,
    export_document,
    from_share_payload,
    import_document,
    serialize_document,
    to_share_payload,
)

logger = logging.getLogger(__name__)

Listener = Callable[["MindMapSession", str], None]


class ChangeSource(Enum):
    """Origin of a text change."""

    USER = "user"
    SYNC = "sync"


class Debouncer:
    """Holds the latest trigger until a quiet period passes.

    A newer trigger supersedes a pending one and restarts the period.

    Args:
        quiet_period: Seconds without triggers before the payload is due.
        clock: Zero-argument callable returning seconds (monotonic).
    """

    def __init__(self, quiet_period: float, clock: Callable[[], float] = time.monotonic) -> None:
        if quiet_period < 0:
            raise ValueError(f"quiet_period must not be negative, got {quiet_period}")
        self.quiet_period = quiet_period
        self._clock = clock
        self._payload: Any = None
        self._deadline: float | None = None

    @property
    def pending(self) -> bool:
        return self._deadline is not None

    def trigger(self, payload: Any) -> None:
        self._payload = payload
        self._deadline = self._clock() + self.quiet_period

    def poll(self) -> Any:
        """Return the pending payload once it is due, else None."""
        if self._deadline is None or self._clock() < self._deadline:
            return None
        payload = self._payload
        self.cancel()
        return payload

    def cancel(self) -> None:
        self._payload = None
        self._deadline = None


class MindMapSession:
    """One outline text and its live MindMap.

    Listeners are called as ``listener(session, event)`` after every
    change; event is "generate", "clear", "import", "undo", "redo",
    "layout", "refresh_styles" or the name of the applied edit.

    Args:
        config: Effective configuration (defaults when omitted).
        clock: Clock for the text debouncer.
    """

    def __init__(
        self,
        config: dict[str, Any] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config if config is not None else copy.deepcopy(DEFAULT_CONFIG)
        generate = self.config.get("generate", {})

        self.text = ""
        self.document: MindMap | None = None
        self.selected_id: str | None = None
        self.metadata = DocumentMetadata(
            layout=Layout.parse(generate.get("layout")),
            auto_group=bool(generate.get("auto_group", True)),
        )
        self.history = History(int(self.config.get("history", {}).get("max_states", 50)))
        self.debouncer = Debouncer(
            float(self.config.get("session", {}).get("debounce_seconds", 0.5)),
            clock,
        )
        self._listeners: list[Listener] = []

    # ─────────────────────────────────────────────────────────────────────────
    # Listeners
    # ─────────────────────────────────────────────────────────────────────────

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, event: str) -> None:
        for listener in list(self._listeners):
            listener(self, event)

    # ─────────────────────────────────────────────────────────────────────────
    # Text view
    # ─────────────────────────────────────────────────────────────────────────

    def text_changed(self, text: str, source: ChangeSource = ChangeSource.USER) -> bool:
        """Record new outline text.

        USER text schedules a debounced regeneration; SYNC text is the
        session's own write-back and is only stored.

        Returns:
            True if a regeneration was scheduled.
        """
        self.text = text
        if source is ChangeSource.SYNC:
            return False
        self.debouncer.trigger(text)
        return True

    def poll(self) -> bool:
        """Run the pending regeneration if its quiet period has elapsed.

        Returns:
            True if a regeneration ran.
        """
        text = self.debouncer.poll()
        if text is None:
            return False
        self.generate(text)
        return True

    def generate(self, text: str | None = None) -> MindMap | None:
        """Build a fresh document from text (defaults to the current text).

        Blank text leaves the current document untouched.

        Returns:
            The new document, or None for blank text.
        """
        if text is not None:
            self.text = text
        self.debouncer.cancel()
        if not self.text.strip():
            logger.info("Nothing to generate: outline is empty")
            return None

        self._install(
            build_mind_map(self.text, config=self.config, auto_group=self.metadata.auto_group)
        )
        self._save_snapshot()
        self._notify("generate")
        return self.document

    def clear(self) -> None:
        """Discard the text, the document and the history."""
        self.text = ""
        self.document = None
        self.selected_id = None
        self.debouncer.cancel()
        self.history.clear()
        self._notify("clear")

    def _sync_text(self) -> None:
        # graph edits win over any user text still waiting on the debouncer
        self.debouncer.cancel()
        if self.document is not None:
            self.text_changed(reconstruct_outline(self.document), ChangeSource.SYNC)

    # ─────────────────────────────────────────────────────────────────────────
    # Presentation settings
    # ─────────────────────────────────────────────────────────────────────────

    def set_layout(self, layout: Layout | str) -> Layout:
        self.metadata.layout = layout if isinstance(layout, Layout) else Layout.parse(layout)
        self._notify("layout")
        return self.metadata.layout

    def set_auto_group(self, auto_group: bool) -> MutationEntry | None:
        """Switch keyword grouping and restyle the current document."""
        self.metadata.auto_group = auto_group
        if self.document is None:
            return None
        entry = self.document.refresh_styles(auto_group)
        if entry is not None:
            self._save_snapshot()
            self._notify("refresh_styles")
        return entry

    # ─────────────────────────────────────────────────────────────────────────
    # Graph edits
    # ─────────────────────────────────────────────────────────────────────────

    def _apply(self, edit: Callable[[MindMap], MutationEntry | None]) -> MutationEntry | None:
        if self.document is None:
            return None
        entry = edit(self.document)
        if entry is None:
            return None
        self._sync_text()
        self._save_snapshot()
        self._notify(entry.operation)
        return entry

    def add_child(self, parent_id: str) -> MutationEntry | None:
        entry = self._apply(lambda doc: doc.add_child(parent_id))
        if entry is not None:
            self.selected_id = entry.target_id
        return entry

    def add_sibling(self, node_id: str) -> MutationEntry | None:
        entry = self._apply(lambda doc: doc.add_sibling(node_id))
        if entry is not None:
            self.selected_id = entry.target_id
        return entry

    def delete_node(self, node_id: str) -> MutationEntry | None:
        entry = self._apply(lambda doc: doc.delete_node(node_id))
        if entry is not None and self.selected_id in entry.before_state["removed_ids"]:
            self.selected_id = entry.before_state["parent_id"]
        return entry

    def move_node(self, node_id: str, new_parent_id: str) -> MutationEntry | None:
        return self._apply(lambda doc: doc.move_node(node_id, new_parent_id))

    def update_text(self, node_id: str, text: str) -> MutationEntry | None:
        return self._apply(lambda doc: doc.update_text(node_id, text))

    def select(self, node_id: str | None) -> bool:
        """Select a node by ID; None clears the selection."""
        if node_id is not None and (self.document is None or not self.document.has_node(node_id)):
            return False
        self.selected_id = node_id
        return True

    def navigate(self, direction: Direction | str) -> str | None:
        """Move the selection one step; with nothing selected, select the root."""
        if self.document is None:
            return None
        if self.selected_id is None:
            self.selected_id = self.document.root.id
            return self.selected_id
        target = self.document.navigate(direction, self.selected_id)
        if target is not None:
            self.selected_id = target
        return target

    # ─────────────────────────────────────────────────────────────────────────
    # History
    # ─────────────────────────────────────────────────────────────────────────

    def _snapshot(self) -> dict[str, Any]:
        assert self.document is not None
        return {
            **serialize_document(self.document),
            "metadata": self.metadata.to_dict(),
            "text": self.text,
        }

    def _save_snapshot(self) -> None:
        if self.document is not None:
            self.history.save(self._snapshot())

    def _restore(self, state: dict[str, Any]) -> None:
        # a restored state supersedes any user text still waiting on the debouncer
        self.debouncer.cancel()
        document = document_from_dict(state, label_style_from_config(self.config))
        if document is None:
            logger.error("History snapshot could not be restored")
            return
        self._install(document)
        self.metadata = DocumentMetadata.from_dict(state.get("metadata"))
        self.text_changed(state.get("text", ""), ChangeSource.SYNC)

    def undo(self) -> bool:
        state = self.history.undo()
        if state is None:
            return False
        self._restore(state)
        self._notify("undo")
        return True

    def redo(self) -> bool:
        state = self.history.redo()
        if state is None:
            return False
        self._restore(state)
        self._notify("redo")
        return True

    # ─────────────────────────────────────────────────────────────────────────
    # Import / export / share
    # ─────────────────────────────────────────────────────────────────────────

    def _install(self, document: MindMap) -> None:
        options = builder_options(self.config)
        document.placeholder_text = options["placeholder_text"]
        document.allow_root_children = options["allow_root_children"]
        self.document = document
        if self.selected_id is not None and not document.has_node(self.selected_id):
            self.selected_id = None

    def _install_import(self, result: ImportResult | None, event: str) -> bool:
        if result is None:
            return False
        self._install(result.document)
        self.metadata = result.metadata
        self.debouncer.cancel()
        self.text_changed(reconstruct_outline(result.document), ChangeSource.SYNC)
        self.metadata.input_text = self.text
        self._save_snapshot()
        self._notify(event)
        return True

    def export(self, fmt: str) -> str | None:
        """Serialize the current document, or None when there is none."""
        if self.document is None:
            return None
        self.metadata.input_text = self.text
        return export_document(fmt, self.document, self.metadata)

    def import_(self, fmt: str, payload: str) -> bool:
        """Replace the document with an imported one.

        Returns:
            False (document untouched) when the payload cannot be imported.
        """
        result = import_document(fmt, payload, label_style_from_config(self.config))
        return self._install_import(result, "import")

    def share_payload(self) -> dict[str, Any] | None:
        if self.document is None:
            return None
        return to_share_payload(self.document, self.metadata)

    def load_share_payload(self, payload: Any) -> bool:
        result = from_share_payload(payload, label_style_from_config(self.config))
        return self._install_import(result, "import")


__all__ = ["ChangeSource", "Debouncer", "MindMapSession"]
