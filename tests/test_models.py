import pytest

from synapse_notes.core.errors import StoreCorrupt
from synapse_notes.core.models import Folder, LoadedNote, NoteSummary, Tag


def _row(**overrides):
    row = {
        "id": "note-1",
        "title": "Title",
        "content_path": "notes/1.md",
        "created_at": 10,
        "updated_at": 20,
        "word_count": 3,
        "is_deleted": 0,
        "deleted_at": None,
    }
    row.update(overrides)
    return row


def test_from_row():
    note = NoteSummary.from_row(_row())

    assert note.id == "note-1"
    assert note.updated_at == 20
    assert note.is_deleted is False
    assert note.deleted_at is None


def test_from_row_deleted():
    note = NoteSummary.from_row(_row(is_deleted=1, deleted_at=30))
    assert note.is_deleted is True
    assert note.deleted_at == 30


@pytest.mark.parametrize(
    "overrides",
    [
        {"is_deleted": 1, "deleted_at": None},
        {"is_deleted": 0, "deleted_at": 30},
        {"is_deleted": 2},
        {"title": None},
        {"word_count": "many"},
        {"id": ""},
    ],
)
def test_from_row_rejects_bad_records(overrides):
    with pytest.raises(StoreCorrupt):
        NoteSummary.from_row(_row(**overrides))


def test_from_row_missing_column():
    row = _row()
    del row["content_path"]
    with pytest.raises(StoreCorrupt):
        NoteSummary.from_row(row)


def test_deleted_invariant_enforced_on_construction():
    with pytest.raises(StoreCorrupt):
        NoteSummary("note-1", "T", "notes/1.md", 1, 1, is_deleted=True)


def test_display_title_falls_back_to_untitled():
    assert NoteSummary("note-1", "", "notes/1.md", 1, 1).display_title == "Untitled"


def test_loaded_note_id():
    summary = NoteSummary.from_row(_row())
    assert LoadedNote(summary=summary, content="x").id == "note-1"


def test_tag_from_row():
    tag = Tag.from_row({"id": "tag-1", "name": "work", "color": None, "created_at": 5})
    assert tag == Tag(id="tag-1", name="work", created_at=5)

    with pytest.raises(StoreCorrupt):
        Tag.from_row({"id": "tag-1", "name": 3, "color": None, "created_at": 5})


def test_folder_from_row():
    row = {
        "id": "folder-1",
        "name": "meetings",
        "parent_id": "folder-0",
        "path": "/work/meetings",
        "created_at": 1,
        "updated_at": 2,
        "position": 0,
    }
    assert Folder.from_row(row).path == "/work/meetings"

    with pytest.raises(StoreCorrupt):
        Folder.from_row({**row, "position": "first"})
    with pytest.raises(StoreCorrupt):
        Folder.from_row({k: v for k, v in row.items() if k != "path"})
