from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from synapse_notes.core.models import NoteSummary
from synapse_notes.session.editor import EditorSession
from synapse_notes.session.state import Bound
from synapse_notes.session.status import Status


@dataclass(frozen=True)
class EditorFields:
    title: str
    content: str
    note_id: str | None
    can_delete: bool
    is_dirty: bool = False


class NotesController:
    """
    Presentation binding: UI gestures in, render state out.

    The delete confirmation is an injected synchronous yes/no callable so the
    window can show a dialog and tests can answer directly.
    """

    def __init__(self, session: EditorSession, *, confirm_delete: Callable[[], bool]):
        self.session = session
        self._confirm_delete = confirm_delete

    # ───────────────────────── gestures ─────────────────────────

    def on_start(self, preferred_id: str | None = None) -> bool:
        return self.session.start(preferred_id)

    def on_new_clicked(self) -> bool:
        return self.session.new_draft()

    def on_note_clicked(self, note_id: str) -> bool:
        return self.session.select(note_id)

    def on_save_clicked(self, title: str, content: str) -> bool:
        return self.session.save(title, content)

    def on_delete_clicked(self) -> bool:
        return self.session.delete(confirm=self._confirm_delete)

    def on_fields_edited(self, title: str, content: str) -> bool:
        return self.session.set_fields(title, content)

    # ───────────────────────── render state ─────────────────────────

    @property
    def controls_enabled(self) -> bool:
        return not self.session.is_busy

    def current_status(self) -> Status:
        return self.session.status.current

    def current_list_snapshot(self, query: str = "") -> tuple[NoteSummary, ...]:
        notes = self.session.list_cache.current()
        q = (query or "").strip().casefold()
        if not q:
            return notes
        return tuple(n for n in notes if q in n.display_title.casefold())

    def current_editor_fields(self) -> EditorFields:
        slot = self.session.slot
        bound = isinstance(slot, Bound)
        return EditorFields(
            title=slot.title,
            content=slot.content,
            note_id=slot.note_id if bound else None,
            can_delete=bound,
            is_dirty=slot.is_dirty,
        )
