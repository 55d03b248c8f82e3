from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Union

from synapse_notes.core.models import LoadedNote


@dataclass(frozen=True)
class Draft:
    """Nothing persisted yet; fields wait for the first save."""

    title: str = ""
    content: str = ""

    @property
    def is_dirty(self) -> bool:
        return bool(self.title or self.content)

    def with_fields(self, title: str, content: str) -> "Draft":
        return replace(self, title=title, content=content)


@dataclass(frozen=True)
class Bound:
    """An open persisted note plus the locally edited fields."""

    note: LoadedNote
    title: str
    content: str

    @classmethod
    def from_loaded(cls, note: LoadedNote) -> "Bound":
        return cls(note=note, title=note.summary.title, content=note.content)

    @property
    def note_id(self) -> str:
        return self.note.id

    @property
    def is_dirty(self) -> bool:
        return self.title != self.note.summary.title or self.content != self.note.content

    def with_fields(self, title: str, content: str) -> "Bound":
        return replace(self, title=title, content=content)


Slot = Union[Draft, Bound]
