"""Note store: SQLite metadata plus one Markdown file per note."""

from __future__ import annotations

import sqlite3
import time
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from synapse_notes.core.errors import InvalidInput, NotFound, StoreCorrupt, StoreUnavailable
from synapse_notes.core.models import UNTITLED, Folder, LoadedNote, NoteSummary, Tag
from synapse_notes.core.text import count_words, normalize_title, slugify
from synapse_notes.logging_setup import log
from synapse_notes.store import schema
from synapse_notes.store.filesystem import discard_staged, read_text_or_empty, stage_text

NOTES_SUBDIR = "notes"


def _now() -> int:
    return int(time.time())


def _escape_like(query: str) -> str:
    return query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class NoteStore:
    """
    Store client used by the editing session.

    Every public method is one atomic round trip. A fresh SQLite connection is
    opened per call, so methods are safe to run from worker threads.
    """

    def __init__(self, db_path: Path, data_dir: Path) -> None:
        self.db_path = Path(db_path)
        self.data_dir = Path(data_dir)

    # ───────────────────────── lifecycle ─────────────────────────

    def initialise(self) -> None:
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            (self.data_dir / NOTES_SUBDIR).mkdir(parents=True, exist_ok=True)
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StoreUnavailable(f"Cannot prepare data directory {self.data_dir}: {e}") from e

        with self._cursor() as cur:
            cur.executescript(schema.SCHEMA_SQL)
            cur.execute(
                "INSERT OR REPLACE INTO meta (key, value) VALUES (?, ?)",
                ("schema_version", str(schema.SCHEMA_VERSION)),
            )
        log.info("Note store ready: db=%s data_dir=%s", self.db_path, self.data_dir)

    @contextmanager
    def _cursor(self) -> Iterator[sqlite3.Cursor]:
        try:
            conn = sqlite3.connect(self.db_path)
        except sqlite3.Error as e:
            raise StoreUnavailable(f"Cannot open note database {self.db_path}: {e}") from e

        conn.row_factory = sqlite3.Row
        cur = conn.cursor()
        try:
            yield cur
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise StoreUnavailable(f"Note database error: {e}") from e
        except OSError as e:
            conn.rollback()
            raise StoreUnavailable(f"Note content I/O error: {e}") from e
        except Exception:
            conn.rollback()
            raise
        finally:
            cur.close()
            conn.close()

    def content_file(self, summary: NoteSummary) -> Path:
        return self.data_dir / summary.content_path

    # ───────────────────────── queries ─────────────────────────

    def list_notes(self, include_deleted: bool = False) -> list[NoteSummary]:
        sql = schema.SELECT_ALL if include_deleted else schema.SELECT_ALL_NOT_DELETED
        with self._cursor() as cur:
            cur.execute(sql)
            rows = cur.fetchall()
        return [NoteSummary.from_row(row) for row in rows]

    def search_by_title(self, query: str, include_deleted: bool = False) -> list[NoteSummary]:
        sql = schema.SEARCH_BY_TITLE
        if not include_deleted:
            sql += " AND is_deleted = 0"
        sql += f" {schema.ORDER_BY}"
        with self._cursor() as cur:
            cur.execute(sql, (f"%{_escape_like(query or '')}%",))
            rows = cur.fetchall()
        return [NoteSummary.from_row(row) for row in rows]

    def fetch_one(self, note_id: str) -> LoadedNote:
        with self._cursor() as cur:
            cur.execute(schema.SELECT_BY_ID_NOT_DELETED, (note_id,))
            row = cur.fetchone()
        if row is None:
            raise NotFound(note_id)

        summary = NoteSummary.from_row(row)
        path = self.content_file(summary)
        try:
            content = read_text_or_empty(path)
        except UnicodeDecodeError as e:
            raise StoreCorrupt(f"Note {note_id}: content file is not valid UTF-8") from e
        except OSError as e:
            raise StoreUnavailable(f"Cannot read content of note {note_id}: {e}") from e
        return LoadedNote(summary=summary, content=content)

    # ───────────────────────── mutations ─────────────────────────

    def create(self, title: str, content: str) -> NoteSummary:
        title = normalize_title(title) or UNTITLED
        content = content or ""

        uid = uuid.uuid4()
        slug = slugify(title)
        file_name = f"{uid}-{slug}.md" if slug else f"{uid}.md"
        now = _now()
        summary = NoteSummary(
            id=f"note-{uid}",
            title=title,
            content_path=f"{NOTES_SUBDIR}/{file_name}",
            created_at=now,
            updated_at=now,
            word_count=count_words(content),
        )

        path = self.content_file(summary)
        staged: Path | None = None
        try:
            with self._cursor() as cur:
                staged = stage_text(path, content)
                cur.execute(
                    schema.INSERT_NOTE,
                    (
                        summary.id,
                        summary.title,
                        summary.content_path,
                        summary.created_at,
                        summary.updated_at,
                        summary.word_count,
                        0,
                        None,
                    ),
                )
            try:
                staged.replace(path)
            except OSError as e:
                raise StoreUnavailable(f"Cannot write note content {path}: {e}") from e
        finally:
            discard_staged(staged)

        log.info("Note created: id=%s title=%s words=%d", summary.id, summary.title, summary.word_count)
        return summary

    def update(self, note_id: str, title: str | None = None, content: str | None = None) -> None:
        """
        Update title and/or content. None or a blank title leaves the stored
        title as it is.

        New content is staged next to the note file and only moved into place
        after the metadata commit, so a failed commit leaves the old content.
        """
        title = normalize_title(title)
        target: Path | None = None
        staged: Path | None = None

        try:
            with self._cursor() as cur:
                cur.execute(schema.SELECT_BY_ID_NOT_DELETED, (note_id,))
                row = cur.fetchone()
                if row is None:
                    raise NotFound(note_id)
                summary = NoteSummary.from_row(row)

                if title is None and content is None:
                    log.debug("Update with no changes: id=%s", note_id)
                    return

                new_title = summary.title if title is None else title
                word_count = summary.word_count if content is None else count_words(content)
                if content is not None:
                    target = self.content_file(summary)
                    staged = stage_text(target, content)
                cur.execute(schema.UPDATE_NOTE, (new_title, _now(), word_count, note_id))

            if staged is not None:
                try:
                    staged.replace(target)
                except OSError as e:
                    raise StoreUnavailable(f"Cannot write note content {target}: {e}") from e
        finally:
            discard_staged(staged)

        log.info(
            "Note updated: id=%s title_changed=%s content_changed=%s",
            note_id, title is not None, content is not None,
        )

    def soft_delete(self, note_id: str) -> None:
        with self._cursor() as cur:
            cur.execute(schema.SELECT_BY_ID, (note_id,))
            row = cur.fetchone()
            if row is None:
                raise NotFound(note_id)
            if row["is_deleted"]:
                log.debug("Note already deleted: id=%s", note_id)
                return
            cur.execute(schema.SOFT_DELETE, (_now(), note_id))
        log.info("Note soft-deleted: id=%s", note_id)

    def restore(self, note_id: str) -> None:
        with self._cursor() as cur:
            cur.execute(schema.SELECT_BY_ID, (note_id,))
            if cur.fetchone() is None:
                raise NotFound(note_id)
            cur.execute(schema.RESTORE, (note_id,))
        log.info("Note restored: id=%s", note_id)

    # ───────────────────────── tags ─────────────────────────

    def create_tag(self, name: str, color: str | None = None) -> Tag:
        name = (name or "").strip()
        if not name:
            raise InvalidInput("Tag name must not be empty")

        tag = Tag(id=f"tag-{uuid.uuid4()}", name=name, created_at=_now(), color=color)
        with self._cursor() as cur:
            cur.execute(schema.SELECT_TAG_BY_NAME, (name,))
            if cur.fetchone() is not None:
                raise InvalidInput(f"Tag '{name}' already exists")
            cur.execute(schema.INSERT_TAG, (tag.id, tag.name, tag.color, tag.created_at))
        log.info("Tag created: id=%s name=%s", tag.id, tag.name)
        return tag

    def list_tags(self) -> list[Tag]:
        with self._cursor() as cur:
            cur.execute(schema.SELECT_TAGS)
            rows = cur.fetchall()
        return [Tag.from_row(row) for row in rows]

    def delete_tag(self, tag_id: str) -> None:
        with self._cursor() as cur:
            self._require(cur, schema.SELECT_TAG_BY_ID, tag_id, "Tag")
            cur.execute(schema.DELETE_TAG_LINKS, (tag_id,))
            cur.execute(schema.DELETE_TAG, (tag_id,))
        log.info("Tag deleted: id=%s", tag_id)

    def tag_note(self, note_id: str, tag_id: str) -> None:
        """Attach a tag to a live note. Tagging twice is a no-op."""
        with self._cursor() as cur:
            self._require(cur, schema.SELECT_BY_ID_NOT_DELETED, note_id, "Note")
            self._require(cur, schema.SELECT_TAG_BY_ID, tag_id, "Tag")
            cur.execute(schema.TAG_NOTE, (note_id, tag_id))
        log.info("Note tagged: id=%s tag=%s", note_id, tag_id)

    def untag_note(self, note_id: str, tag_id: str) -> None:
        with self._cursor() as cur:
            cur.execute(schema.UNTAG_NOTE, (note_id, tag_id))

    def tags_for_note(self, note_id: str) -> list[Tag]:
        with self._cursor() as cur:
            cur.execute(schema.SELECT_TAGS_FOR_NOTE, (note_id,))
            rows = cur.fetchall()
        return [Tag.from_row(row) for row in rows]

    def notes_with_tag(self, tag_id: str) -> list[NoteSummary]:
        with self._cursor() as cur:
            self._require(cur, schema.SELECT_TAG_BY_ID, tag_id, "Tag")
            cur.execute(schema.SELECT_NOTES_WITH_TAG, (tag_id,))
            rows = cur.fetchall()
        return [NoteSummary.from_row(row) for row in rows]

    # ───────────────────────── folders ─────────────────────────

    def create_folder(self, name: str, parent_id: str | None = None) -> Folder:
        name = (name or "").strip()
        if not name or "/" in name:
            raise InvalidInput(f"Invalid folder name: {name!r}")

        with self._cursor() as cur:
            if parent_id is None:
                path = f"/{name}"
            else:
                parent = Folder.from_row(self._require(cur, schema.SELECT_FOLDER_BY_ID, parent_id, "Folder"))
                path = f"{parent.path}/{name}"

            cur.execute(schema.NEXT_FOLDER_POSITION, (parent_id,))
            position = cur.fetchone()[0]
            now = _now()
            folder = Folder(
                id=f"folder-{uuid.uuid4()}",
                name=name,
                path=path,
                created_at=now,
                updated_at=now,
                parent_id=parent_id,
                position=position,
            )
            cur.execute(
                schema.INSERT_FOLDER,
                (folder.id, folder.name, folder.parent_id, folder.path,
                 folder.created_at, folder.updated_at, folder.position),
            )
        log.info("Folder created: id=%s path=%s", folder.id, folder.path)
        return folder

    def list_folders(self, parent_id: str | None = None) -> list[Folder]:
        """Root folders, or the direct children of parent_id."""
        with self._cursor() as cur:
            if parent_id is None:
                cur.execute(schema.SELECT_ROOT_FOLDERS)
            else:
                self._require(cur, schema.SELECT_FOLDER_BY_ID, parent_id, "Folder")
                cur.execute(schema.SELECT_CHILD_FOLDERS, (parent_id,))
            rows = cur.fetchall()
        return [Folder.from_row(row) for row in rows]

    def delete_folder(self, folder_id: str) -> None:
        """Delete an empty-of-subfolders folder. Its notes stay, unfiled."""
        with self._cursor() as cur:
            self._require(cur, schema.SELECT_FOLDER_BY_ID, folder_id, "Folder")
            cur.execute(schema.SELECT_CHILD_FOLDERS, (folder_id,))
            if cur.fetchone() is not None:
                raise InvalidInput(f"Cannot delete folder with children: {folder_id}")
            cur.execute(schema.DELETE_FOLDER_LINKS, (folder_id,))
            cur.execute(schema.DELETE_FOLDER, (folder_id,))
        log.info("Folder deleted: id=%s", folder_id)

    def add_to_folder(self, note_id: str, folder_id: str) -> None:
        with self._cursor() as cur:
            self._require(cur, schema.SELECT_BY_ID_NOT_DELETED, note_id, "Note")
            self._require(cur, schema.SELECT_FOLDER_BY_ID, folder_id, "Folder")
            cur.execute(schema.FILE_NOTE, (note_id, folder_id))
        log.info("Note filed: id=%s folder=%s", note_id, folder_id)

    def remove_from_folder(self, note_id: str, folder_id: str) -> None:
        with self._cursor() as cur:
            cur.execute(schema.UNFILE_NOTE, (note_id, folder_id))

    def notes_in_folder(self, folder_id: str, include_deleted: bool = False) -> list[NoteSummary]:
        sql = schema.SELECT_NOTES_IN_FOLDER
        if not include_deleted:
            sql += " AND n.is_deleted = 0"
        sql += " ORDER BY n.updated_at DESC, n.rowid DESC"
        with self._cursor() as cur:
            self._require(cur, schema.SELECT_FOLDER_BY_ID, folder_id, "Folder")
            cur.execute(sql, (folder_id,))
            rows = cur.fetchall()
        return [NoteSummary.from_row(row) for row in rows]

    @staticmethod
    def _require(cur: sqlite3.Cursor, sql: str, item_id: str, kind: str) -> sqlite3.Row:
        cur.execute(sql, (item_id,))
        row = cur.fetchone()
        if row is None:
            raise NotFound(item_id, kind)
        return row
