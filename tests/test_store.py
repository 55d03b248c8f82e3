import itertools
import sqlite3

import pytest

from synapse_notes.core.errors import NotFound, StoreCorrupt, StoreUnavailable
from synapse_notes.store import client, schema
from synapse_notes.store.client import NoteStore


@pytest.fixture
def clock(monkeypatch):
    ticks = itertools.count(1_700_000_000)
    monkeypatch.setattr(client, "_now", lambda: next(ticks))


def _raw_insert(store, **overrides):
    row = {
        "id": "note-raw",
        "title": "Raw",
        "content_path": "notes/raw.md",
        "created_at": 1,
        "updated_at": 1,
        "word_count": 0,
        "is_deleted": 0,
        "deleted_at": None,
    }
    row.update(overrides)
    conn = sqlite3.connect(store.db_path)
    with conn:
        conn.execute(
            "INSERT INTO notes (id, title, content_path, created_at, updated_at, word_count, is_deleted, deleted_at) "
            "VALUES (:id, :title, :content_path, :created_at, :updated_at, :word_count, :is_deleted, :deleted_at)",
            row,
        )
    conn.close()


def test_create_blank_title_becomes_untitled(store):
    assert store.create("", "hello").title == "Untitled"
    assert store.create("   ", "hello").title == "Untitled"


def test_create_keeps_exact_title(store):
    note = store.create("My Note", "one two three")
    loaded = store.fetch_one(note.id)

    assert loaded.summary.title == "My Note"
    assert loaded.content == "one two three"
    assert loaded.summary.word_count == 3
    assert note.id.startswith("note-")
    assert not note.is_deleted and note.deleted_at is None


def test_create_writes_content_file(store):
    note = store.create("Hello World", "body")
    path = store.content_file(note)

    assert note.content_path.startswith("notes/")
    assert note.content_path.endswith("-hello-world.md")
    assert path.read_text(encoding="utf-8") == "body"


def test_fetch_missing_content_file_reads_empty(store):
    note = store.create("T", "gone soon")
    store.content_file(note).unlink()

    assert store.fetch_one(note.id).content == ""


def test_fetch_unknown_raises_not_found(store):
    with pytest.raises(NotFound):
        store.fetch_one("note-nope")


def test_update_empty_title_keeps_existing(store):
    note = store.create("Keep me", "a")
    store.update(note.id, title="", content="b c")

    loaded = store.fetch_one(note.id)
    assert loaded.summary.title == "Keep me"
    assert loaded.content == "b c"
    assert loaded.summary.word_count == 2


def test_update_omitted_fields_unchanged(store):
    note = store.create("Title", "body text")
    store.update(note.id, title="Renamed")

    loaded = store.fetch_one(note.id)
    assert loaded.summary.title == "Renamed"
    assert loaded.content == "body text"
    assert loaded.summary.word_count == 2


def test_update_bumps_updated_at(store, clock):
    note = store.create("T", "x")
    store.update(note.id, content="y")

    assert store.fetch_one(note.id).summary.updated_at > note.updated_at


def test_update_unknown_or_deleted_raises_not_found(store):
    with pytest.raises(NotFound):
        store.update("note-nope", title="x")

    note = store.create("T", "x")
    store.soft_delete(note.id)
    with pytest.raises(NotFound):
        store.update(note.id, content="y")


def test_soft_delete_hides_note(store):
    keep = store.create("Keep", "")
    gone = store.create("Gone", "")
    store.soft_delete(gone.id)

    assert [n.id for n in store.list_notes()] == [keep.id]
    with pytest.raises(NotFound):
        store.fetch_one(gone.id)

    everything = {n.id: n for n in store.list_notes(include_deleted=True)}
    assert everything[gone.id].is_deleted
    assert everything[gone.id].deleted_at is not None


def test_soft_delete_is_idempotent(store, clock):
    note = store.create("T", "")
    store.soft_delete(note.id)
    first = store.list_notes(include_deleted=True)[0].deleted_at

    store.soft_delete(note.id)
    assert store.list_notes(include_deleted=True)[0].deleted_at == first


def test_soft_delete_unknown_raises_not_found(store):
    with pytest.raises(NotFound):
        store.soft_delete("note-nope")


def test_restore_brings_note_back(store):
    note = store.create("T", "body")
    store.soft_delete(note.id)
    store.restore(note.id)

    restored = store.fetch_one(note.id)
    assert not restored.summary.is_deleted
    assert restored.summary.deleted_at is None
    assert restored.content == "body"


def test_list_order_most_recently_updated_first(store, clock):
    a = store.create("A", "")
    b = store.create("B", "")
    assert [n.id for n in store.list_notes()] == [b.id, a.id]

    store.update(a.id, content="touched")
    assert [n.id for n in store.list_notes()] == [a.id, b.id]


def test_search_by_title(store):
    store.create("Shopping list", "")
    store.create("Meeting notes", "")
    store.create("100% done", "")
    deleted = store.create("Old shopping", "")
    store.soft_delete(deleted.id)

    assert [n.title for n in store.search_by_title("SHOP")] == ["Shopping list"]
    assert {n.title for n in store.search_by_title("shop", include_deleted=True)} == {
        "Shopping list",
        "Old shopping",
    }
    assert [n.title for n in store.search_by_title("%")] == ["100% done"]


def test_unreachable_database_is_unavailable(tmp_path):
    # a directory cannot be opened as a database file
    store = NoteStore(tmp_path, tmp_path / "data")

    with pytest.raises(StoreUnavailable):
        store.list_notes()


def test_uninitialised_database_is_unavailable(tmp_path):
    store = NoteStore(tmp_path / "empty.db", tmp_path / "data")

    with pytest.raises(StoreUnavailable):
        store.fetch_one("note-x")


def test_failed_create_leaves_no_content_file(tmp_path):
    data_dir = tmp_path / "data"
    store = NoteStore(tmp_path / "empty.db", data_dir)

    with pytest.raises(StoreUnavailable):
        store.create("T", "body")
    assert list(data_dir.rglob("*.md")) == []


def test_deleted_flag_without_timestamp_is_corrupt(store):
    _raw_insert(store, is_deleted=1, deleted_at=None)

    with pytest.raises(StoreCorrupt):
        store.list_notes(include_deleted=True)


def test_mistyped_column_is_corrupt(store):
    _raw_insert(store, created_at="yesterday")

    with pytest.raises(StoreCorrupt):
        store.fetch_one("note-raw")
    with pytest.raises(StoreCorrupt):
        store.list_notes()


def _staged_leftovers(store):
    return list((store.data_dir / "notes").glob(".*.tmp-*"))


def test_update_failing_commit_keeps_old_content(store, monkeypatch):
    note = store.create("T", "original words")
    monkeypatch.setattr(schema, "UPDATE_NOTE", "UPDATE no_such_table SET title = ?")

    with pytest.raises(StoreUnavailable):
        store.update(note.id, content="replacement")

    loaded = store.fetch_one(note.id)
    assert loaded.content == "original words"
    assert loaded.summary.word_count == 2
    assert _staged_leftovers(store) == []


def test_update_and_create_leave_no_staged_files(store):
    note = store.create("T", "a")
    store.update(note.id, content="b")

    assert store.content_file(note).read_text(encoding="utf-8") == "b"
    assert _staged_leftovers(store) == []
