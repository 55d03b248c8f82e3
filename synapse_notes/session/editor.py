"""
Editor session: the single open-note slot and its transitions.

The slot is always exactly one of Draft or Bound. While a store call is in
flight the session is busy and every other transition is rejected.
"""

from __future__ import annotations

from dataclasses import replace
from functools import partial
from typing import Any, Callable

from synapse_notes.core.errors import StoreError
from synapse_notes.core.models import LoadedNote, NoteSummary
from synapse_notes.logging_setup import log
from synapse_notes.session.list_cache import NoteListCache
from synapse_notes.session.runner import TaskRunner
from synapse_notes.session.state import Bound, Draft, Slot
from synapse_notes.session.status import DELETING, LOADING, SAVING, StatusReporter
from synapse_notes.store.client import NoteStore

DRAFT = "draft"
BOUND = "bound"


class EditorSession:
    def __init__(
        self,
        store: NoteStore,
        *,
        runner: TaskRunner,
        list_cache: NoteListCache | None = None,
        status: StatusReporter | None = None,
        on_change: Callable[["EditorSession"], None] | None = None,
    ):
        self._store = store
        self._runner = runner
        self.list_cache = list_cache or NoteListCache(store)
        self.status = status or StatusReporter()
        self._on_change = on_change

        self._slot: Slot = Draft()
        # Phase label of the in-flight transition, None when idle.
        self._busy: str | None = None

    # ───────────────────────── observation ─────────────────────────

    @property
    def slot(self) -> Slot:
        return self._slot

    @property
    def state(self) -> str:
        return BOUND if isinstance(self._slot, Bound) else DRAFT

    @property
    def is_busy(self) -> bool:
        return self._busy is not None

    @property
    def busy_phase(self) -> str | None:
        return self._busy

    @property
    def current_note_id(self) -> str | None:
        return self._slot.note_id if isinstance(self._slot, Bound) else None

    @property
    def fields(self) -> tuple[str, str]:
        return self._slot.title, self._slot.content

    def set_on_change(self, callback: Callable[["EditorSession"], None] | None) -> None:
        self._on_change = callback

    # ───────────────────────── transitions ─────────────────────────

    def start(self, preferred_id: str | None = None) -> bool:
        """
        Initial load: fill the list, then open preferred_id if it is listed,
        else the first listed note, else stay on an empty draft.
        """
        if not self._begin(LOADING, "start"):
            return False

        def listed(notes: list[NoteSummary]) -> None:
            self.list_cache.replace(notes)
            ids = [n.id for n in notes]
            target = preferred_id if preferred_id in ids else (ids[0] if ids else None)
            if target is None:
                self._slot = Draft()
                self._finish()
                return
            self._load(target)

        def list_failed(exc: Exception) -> None:
            self.list_cache.replace(())
            self._slot = Draft()
            self._fail(exc)

        self._call(self.list_cache.load, on_done=listed, on_failed=list_failed)
        return True

    def new_draft(self) -> bool:
        if self._reject_if_busy("new_draft"):
            return False
        self._slot = Draft()
        self.status.ready()
        log.debug("Editor switched to new draft")
        self._notify()
        return True

    def set_fields(self, title: str, content: str) -> bool:
        """Record local edits without touching the store."""
        if self._reject_if_busy("set_fields"):
            return False
        self._slot = self._slot.with_fields(title, content)
        return True

    def select(self, note_id: str) -> bool:
        if not self._begin(LOADING, "select"):
            return False
        self._load(note_id)
        return True

    def save(self, title: str, content: str) -> bool:
        if not self._begin(SAVING, "save"):
            return False

        title = title or ""
        content = content or ""
        # Typed text stays as-is until the store accepts it; only the
        # request carries the trimmed title.
        self._slot = self._slot.with_fields(title, content)

        if isinstance(self._slot, Bound):
            self._update(self._slot, title.strip(), content)
        else:
            self._create(title.strip(), content)
        return True

    def delete(self, confirm: Callable[[], bool] | None = None) -> bool:
        if self._reject_if_busy("delete"):
            return False
        if not isinstance(self._slot, Bound):
            log.debug("Delete ignored: draft has nothing persisted")
            return False
        if confirm is not None and not confirm():
            log.info("Delete cancelled by user: id=%s", self._slot.note_id)
            return False

        self._begin(DELETING, "delete")
        note_id = self._slot.note_id

        def deleted(_: Any) -> None:
            self._slot = Draft()
            self._refresh_list(then=self._finish)

        self._call(self._store.soft_delete, note_id, on_done=deleted)
        return True

    # ───────────────────────── internal ─────────────────────────

    def _load(self, note_id: str) -> None:
        def loaded(note: LoadedNote) -> None:
            self._slot = Bound.from_loaded(note)
            log.info("Note opened: id=%s title=%s", note.id, note.summary.title)
            self._finish()

        self._call(self._store.fetch_one, note_id, on_done=loaded)

    def _create(self, title: str, content: str) -> None:
        def created(summary: NoteSummary) -> None:
            # Bind right away: a failing follow-up must not leave the new
            # note behind a draft that would be created a second time.
            self._slot = Bound(
                note=LoadedNote(summary=summary, content=content),
                title=summary.title,
                content=content,
            )
            self._refresh_list(then=partial(self._load, summary.id))

        self._call(self._store.create, title, content, on_done=created)

    def _update(self, bound: Bound, title: str, content: str) -> None:
        def updated(_: Any) -> None:
            # Optimistic: only the title is patched locally; word count and
            # timestamps stay as last fetched until the note is reopened.
            summary = bound.note.summary
            if title:
                summary = replace(summary, title=title)
            self._slot = Bound(
                note=LoadedNote(summary=summary, content=content),
                title=summary.title,
                content=content,
            )
            self._refresh_list(then=self._finish)

        self._call(self._store.update, bound.note_id, title, content, on_done=updated)

    def _refresh_list(self, *, then: Callable[[], None]) -> None:
        def refreshed(notes: list[NoteSummary]) -> None:
            self.list_cache.replace(notes)
            then()

        self._call(self.list_cache.load, on_done=refreshed)

    def _call(
        self,
        fn: Callable[..., Any],
        *args: Any,
        on_done: Callable[[Any], None],
        on_failed: Callable[[Exception], None] | None = None,
    ) -> None:
        self._runner.submit(
            partial(fn, *args),
            on_done=on_done,
            on_failed=on_failed or self._fail,
        )

    def _reject_if_busy(self, transition: str) -> bool:
        if self._busy is None:
            return False
        log.debug("Transition rejected while busy: %s (in flight: %s)", transition, self._busy)
        return True

    def _begin(self, phase: str, transition: str) -> bool:
        if self._reject_if_busy(transition):
            return False
        self._busy = phase
        self.status.set(phase)
        self._notify()
        return True

    def _finish(self) -> None:
        self._busy = None
        self.status.ready()
        self._notify()

    def _fail(self, exc: Exception) -> None:
        self._busy = None
        if isinstance(exc, StoreError):
            log.warning("Store call failed: %s: %s", type(exc).__name__, exc)
        else:
            log.error("Unexpected error in store call", exc_info=exc)
        self.status.error(str(exc) or type(exc).__name__)
        self._notify()

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(self)
