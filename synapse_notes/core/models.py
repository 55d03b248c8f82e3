from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from .errors import StoreCorrupt

UNTITLED = "Untitled"

NOTE_COLUMNS = (
    "id",
    "title",
    "content_path",
    "created_at",
    "updated_at",
    "word_count",
    "is_deleted",
    "deleted_at",
)


@dataclass(frozen=True)
class NoteSummary:
    id: str
    title: str
    content_path: str
    created_at: int
    updated_at: int
    word_count: int = 0
    is_deleted: bool = False
    deleted_at: int | None = None

    def __post_init__(self) -> None:
        if self.is_deleted != (self.deleted_at is not None):
            raise StoreCorrupt(
                f"Note {self.id}: deleted_at must be set iff is_deleted "
                f"(is_deleted={self.is_deleted}, deleted_at={self.deleted_at})"
            )

    @property
    def display_title(self) -> str:
        return self.title or UNTITLED

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "NoteSummary":
        """
        Build a summary from a store record.

        Any record that does not fit the summary shape raises StoreCorrupt.
        """
        try:
            values = {name: row[name] for name in NOTE_COLUMNS}
        except (KeyError, IndexError) as e:
            raise StoreCorrupt(f"Note record is missing column {e}") from e

        note_id = values["id"]
        if not isinstance(note_id, str) or not note_id:
            raise StoreCorrupt(f"Note record has invalid id: {note_id!r}")
        for name in ("title", "content_path"):
            if not isinstance(values[name], str):
                raise StoreCorrupt(f"Note {note_id}: {name} is not text")
        for name in ("created_at", "updated_at", "word_count", "is_deleted"):
            if not isinstance(values[name], int) or isinstance(values[name], bool):
                raise StoreCorrupt(f"Note {note_id}: {name} is not an integer")
        deleted_at = values["deleted_at"]
        if deleted_at is not None and not isinstance(deleted_at, int):
            raise StoreCorrupt(f"Note {note_id}: deleted_at is not an integer")
        if values["is_deleted"] not in (0, 1):
            raise StoreCorrupt(f"Note {note_id}: is_deleted must be 0 or 1")

        return cls(
            id=note_id,
            title=values["title"],
            content_path=values["content_path"],
            created_at=values["created_at"],
            updated_at=values["updated_at"],
            word_count=values["word_count"],
            is_deleted=bool(values["is_deleted"]),
            deleted_at=deleted_at,
        )


@dataclass(frozen=True)
class LoadedNote:
    summary: NoteSummary
    content: str

    @property
    def id(self) -> str:
        return self.summary.id


def _text_or_none(row: Mapping[str, Any], name: str, owner: str) -> str | None:
    value = row[name]
    if value is not None and not isinstance(value, str):
        raise StoreCorrupt(f"{owner}: {name} is not text")
    return value


@dataclass(frozen=True)
class Tag:
    id: str
    name: str
    created_at: int
    color: str | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Tag":
        try:
            tag_id, name, created_at = row["id"], row["name"], row["created_at"]
            color = _text_or_none(row, "color", f"Tag {row['id']}")
        except (KeyError, IndexError) as e:
            raise StoreCorrupt(f"Tag record is missing column {e}") from e
        if not isinstance(tag_id, str) or not isinstance(name, str) or not isinstance(created_at, int):
            raise StoreCorrupt(f"Tag record has invalid fields: id={tag_id!r}")
        return cls(id=tag_id, name=name, created_at=created_at, color=color)


@dataclass(frozen=True)
class Folder:
    """
    A named container for notes. Folders nest; path is the cached
    slash-joined chain of names from the root, e.g. "/work/meetings".
    """

    id: str
    name: str
    path: str
    created_at: int
    updated_at: int
    parent_id: str | None = None
    position: int = 0

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Folder":
        try:
            folder_id = row["id"]
            parent_id = _text_or_none(row, "parent_id", f"Folder {folder_id}")
            values = {name: row[name] for name in ("name", "path", "created_at", "updated_at", "position")}
        except (KeyError, IndexError) as e:
            raise StoreCorrupt(f"Folder record is missing column {e}") from e
        if not isinstance(folder_id, str) or not folder_id:
            raise StoreCorrupt(f"Folder record has invalid id: {folder_id!r}")
        for name in ("name", "path"):
            if not isinstance(values[name], str):
                raise StoreCorrupt(f"Folder {folder_id}: {name} is not text")
        for name in ("created_at", "updated_at", "position"):
            if not isinstance(values[name], int):
                raise StoreCorrupt(f"Folder {folder_id}: {name} is not an integer")
        return cls(id=folder_id, parent_id=parent_id, **values)
