from __future__ import annotations

from typing import Iterable

from synapse_notes.core.models import NoteSummary
from synapse_notes.store.client import NoteStore


class NoteListCache:
    """
    Last fetched non-deleted summaries, in store order.

    Never mutated in place: every refresh swaps the whole snapshot.
    load() and replace() are split so the swap can run on the UI thread
    while the fetch runs on a worker.
    """

    def __init__(self, store: NoteStore) -> None:
        self._store = store
        self._notes: tuple[NoteSummary, ...] = ()

    def load(self) -> list[NoteSummary]:
        return self._store.list_notes(include_deleted=False)

    def replace(self, notes: Iterable[NoteSummary]) -> tuple[NoteSummary, ...]:
        self._notes = tuple(notes)
        return self._notes

    def refresh(self) -> tuple[NoteSummary, ...]:
        return self.replace(self.load())

    def current(self) -> tuple[NoteSummary, ...]:
        return self._notes

    def get(self, note_id: str) -> NoteSummary | None:
        for note in self._notes:
            if note.id == note_id:
                return note
        return None

    def __contains__(self, note_id: object) -> bool:
        return any(note.id == note_id for note in self._notes)

    def __len__(self) -> int:
        return len(self._notes)
