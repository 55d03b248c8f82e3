"""SQLite schema for note metadata. Content lives in Markdown files."""

from __future__ import annotations

SCHEMA_VERSION = 2

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS meta (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS notes (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    content_path TEXT NOT NULL,
    created_at INTEGER NOT NULL,
    updated_at INTEGER NOT NULL,
    word_count INTEGER DEFAULT 0,
    is_deleted INTEGER DEFAULT 0,
    deleted_at INTEGER
);

CREATE INDEX IF NOT EXISTS idx_notes_updated_at ON notes(updated_at);
CREATE INDEX IF NOT EXISTS idx_notes_title ON notes(title);
CREATE INDEX IF NOT EXISTS idx_notes_is_deleted ON notes(is_deleted);

CREATE TABLE IF NOT EXISTS tags (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL UNIQUE,
    color TEXT,
    created_at INTEGER NOT NULL
);

CREATE TABLE IF NOT EXISTS note_tags (
    note_id TEXT NOT NULL REFERENCES notes(id),
    tag_id TEXT NOT NULL REFERENCES tags(id),
    PRIMARY KEY (note_id, tag_id)
);

CREATE TABLE IF NOT EXISTS folders (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    parent_id TEXT REFERENCES folders(id),
    path TEXT NOT NULL,
    created_at INTEGER NOT NULL,
    updated_at INTEGER NOT NULL,
    position INTEGER DEFAULT 0
);

CREATE TABLE IF NOT EXISTS note_folders (
    note_id TEXT NOT NULL REFERENCES notes(id),
    folder_id TEXT NOT NULL REFERENCES folders(id),
    PRIMARY KEY (note_id, folder_id)
);

CREATE INDEX IF NOT EXISTS idx_folders_parent ON folders(parent_id);
CREATE INDEX IF NOT EXISTS idx_note_tags_tag ON note_tags(tag_id);
CREATE INDEX IF NOT EXISTS idx_note_folders_folder ON note_folders(folder_id);
"""

NOTE_FIELDS = "id, title, content_path, created_at, updated_at, word_count, is_deleted, deleted_at"

# Store order: most recently updated first, newest insertion first on ties.
ORDER_BY = "ORDER BY updated_at DESC, rowid DESC"

INSERT_NOTE = f"""
INSERT INTO notes ({NOTE_FIELDS})
VALUES (?, ?, ?, ?, ?, ?, ?, ?)
"""

SELECT_BY_ID = f"SELECT {NOTE_FIELDS} FROM notes WHERE id = ?"
SELECT_BY_ID_NOT_DELETED = f"{SELECT_BY_ID} AND is_deleted = 0"

SELECT_ALL = f"SELECT {NOTE_FIELDS} FROM notes {ORDER_BY}"
SELECT_ALL_NOT_DELETED = f"SELECT {NOTE_FIELDS} FROM notes WHERE is_deleted = 0 {ORDER_BY}"

SEARCH_BY_TITLE = f"SELECT {NOTE_FIELDS} FROM notes WHERE title LIKE ? ESCAPE '\\'"

UPDATE_NOTE = """
UPDATE notes
SET title = ?, updated_at = ?, word_count = ?
WHERE id = ?
"""

SOFT_DELETE = "UPDATE notes SET is_deleted = 1, deleted_at = ? WHERE id = ?"
RESTORE = "UPDATE notes SET is_deleted = 0, deleted_at = NULL WHERE id = ?"

# ───────────────────────── tags ─────────────────────────


def _qualified(fields: str, alias: str) -> str:
    return ", ".join(f"{alias}.{name.strip()}" for name in fields.split(","))


TAG_FIELDS = "id, name, color, created_at"

INSERT_TAG = f"INSERT INTO tags ({TAG_FIELDS}) VALUES (?, ?, ?, ?)"
SELECT_TAG_BY_ID = f"SELECT {TAG_FIELDS} FROM tags WHERE id = ?"
SELECT_TAG_BY_NAME = f"SELECT {TAG_FIELDS} FROM tags WHERE name = ?"
SELECT_TAGS = f"SELECT {TAG_FIELDS} FROM tags ORDER BY name COLLATE NOCASE, rowid"
DELETE_TAG = "DELETE FROM tags WHERE id = ?"

TAG_NOTE = "INSERT OR IGNORE INTO note_tags (note_id, tag_id) VALUES (?, ?)"
UNTAG_NOTE = "DELETE FROM note_tags WHERE note_id = ? AND tag_id = ?"
DELETE_TAG_LINKS = "DELETE FROM note_tags WHERE tag_id = ?"

SELECT_TAGS_FOR_NOTE = f"""
SELECT {_qualified(TAG_FIELDS, "t")}
FROM tags t JOIN note_tags nt ON nt.tag_id = t.id
WHERE nt.note_id = ?
ORDER BY t.name COLLATE NOCASE, t.rowid
"""

SELECT_NOTES_WITH_TAG = f"""
SELECT {_qualified(NOTE_FIELDS, "n")}
FROM notes n JOIN note_tags nt ON nt.note_id = n.id
WHERE nt.tag_id = ? AND n.is_deleted = 0
ORDER BY n.updated_at DESC, n.rowid DESC
"""

# ───────────────────────── folders ─────────────────────────

FOLDER_FIELDS = "id, name, parent_id, path, created_at, updated_at, position"

INSERT_FOLDER = f"INSERT INTO folders ({FOLDER_FIELDS}) VALUES (?, ?, ?, ?, ?, ?, ?)"
SELECT_FOLDER_BY_ID = f"SELECT {FOLDER_FIELDS} FROM folders WHERE id = ?"
SELECT_ROOT_FOLDERS = f"SELECT {FOLDER_FIELDS} FROM folders WHERE parent_id IS NULL ORDER BY position, name COLLATE NOCASE"
SELECT_CHILD_FOLDERS = f"SELECT {FOLDER_FIELDS} FROM folders WHERE parent_id = ? ORDER BY position, name COLLATE NOCASE"
NEXT_FOLDER_POSITION = "SELECT COALESCE(MAX(position) + 1, 0) FROM folders WHERE parent_id IS ?"
DELETE_FOLDER = "DELETE FROM folders WHERE id = ?"

FILE_NOTE = "INSERT OR IGNORE INTO note_folders (note_id, folder_id) VALUES (?, ?)"
UNFILE_NOTE = "DELETE FROM note_folders WHERE note_id = ? AND folder_id = ?"
DELETE_FOLDER_LINKS = "DELETE FROM note_folders WHERE folder_id = ?"

SELECT_NOTES_IN_FOLDER = f"""
SELECT {_qualified(NOTE_FIELDS, "n")}
FROM notes n JOIN note_folders nf ON nf.note_id = n.id
WHERE nf.folder_id = ?
"""
