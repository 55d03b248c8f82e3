"""
Headless command line access to the note store.

Uses SYNAPSE_DB_PATH / SYNAPSE_DATA_DIR (see settings) unless --db and
--data-dir are given.
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

from synapse_notes.core.errors import StoreError
from synapse_notes.core.models import NoteSummary
from synapse_notes.logging_setup import log, setup_logging
from synapse_notes.settings import DATA_DIR, resolve_db_path
from synapse_notes.store.client import NoteStore


def _fmt_ts(ts: int | None) -> str:
    if ts is None:
        return "-"
    return datetime.fromtimestamp(ts, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S")


def _print_summary_line(note: NoteSummary) -> None:
    marker = " [deleted]" if note.is_deleted else ""
    print(f"  - {note.id}: {note.display_title} (updated: {_fmt_ts(note.updated_at)}){marker}")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="synapse-cli", description="Synapse note store CLI")
    p.add_argument("--data-dir", type=Path, default=DATA_DIR)
    p.add_argument("--db", type=Path, default=None)
    p.add_argument("-v", "--verbose", action="store_true", help="Log store activity to stderr")
    sub = p.add_subparsers(dest="command", required=True)

    c = sub.add_parser("create-note", help="Create a new note")
    c.add_argument("title")
    c.add_argument("content")

    g = sub.add_parser("get-note", help="Show a note with its content")
    g.add_argument("id")

    ls = sub.add_parser("list-notes", help="List notes")
    ls.add_argument("--all", action="store_true", help="Include soft-deleted notes")

    u = sub.add_parser("update-note", help="Update title and/or content")
    u.add_argument("id")
    u.add_argument("--title", default=None)
    u.add_argument("--content", default=None)

    d = sub.add_parser("delete-note", help="Soft-delete a note")
    d.add_argument("id")

    r = sub.add_parser("restore-note", help="Restore a soft-deleted note")
    r.add_argument("id")

    s = sub.add_parser("search", help="Search notes by title")
    s.add_argument("query")
    s.add_argument("--all", action="store_true", help="Include soft-deleted notes")

    t = sub.add_parser("create-tag", help="Create a tag")
    t.add_argument("name")
    t.add_argument("--color", default=None, help="Hex colour, e.g. #ff8800")

    sub.add_parser("list-tags", help="List all tags")

    tn = sub.add_parser("tag-note", help="Attach a tag to a note")
    tn.add_argument("id")
    tn.add_argument("tag_id")

    f = sub.add_parser("create-folder", help="Create a folder")
    f.add_argument("name")
    f.add_argument("parent", nargs="?", default=None)

    lf = sub.add_parser("list-folders", help="List root folders, or the children of --parent")
    lf.add_argument("--parent", default=None)

    af = sub.add_parser("add-to-folder", help="File a note into a folder")
    af.add_argument("id")
    af.add_argument("folder_id")
    return p


def run(args: argparse.Namespace, store: NoteStore) -> None:
    cmd = args.command
    if cmd == "create-note":
        note = store.create(args.title, args.content)
        print(f"Created note: {note.id}")
        print(f"Title: {note.title}")
        print(f"Path: {note.content_path}")
    elif cmd == "get-note":
        loaded = store.fetch_one(args.id)
        print(f"Note ID: {loaded.summary.id}")
        print(f"Title: {loaded.summary.title}")
        print(f"Words: {loaded.summary.word_count}")
        tags = store.tags_for_note(loaded.summary.id)
        if tags:
            print(f"Tags: {', '.join(t.name for t in tags)}")
        print(f"Content:\n{loaded.content}")
    elif cmd == "list-notes":
        notes = store.list_notes(include_deleted=args.all)
        print(f"Found {len(notes)} notes:")
        for note in notes:
            _print_summary_line(note)
    elif cmd == "update-note":
        store.update(args.id, title=args.title, content=args.content)
        print(f"Updated note: {args.id}")
    elif cmd == "delete-note":
        store.soft_delete(args.id)
        print(f"Deleted note: {args.id}")
    elif cmd == "restore-note":
        store.restore(args.id)
        print(f"Restored note: {args.id}")
    elif cmd == "search":
        notes = store.search_by_title(args.query, include_deleted=args.all)
        print(f"Found {len(notes)} notes matching '{args.query}':")
        for note in notes:
            _print_summary_line(note)
    elif cmd == "create-tag":
        tag = store.create_tag(args.name, color=args.color)
        print(f"Created tag: {tag.name} ({tag.id})")
    elif cmd == "list-tags":
        tags = store.list_tags()
        print(f"Found {len(tags)} tags:")
        for tag in tags:
            print(f"  - {tag.id}: {tag.name}")
    elif cmd == "tag-note":
        store.tag_note(args.id, args.tag_id)
        print(f"Tagged note: {args.id}")
    elif cmd == "create-folder":
        folder = store.create_folder(args.name, args.parent)
        print(f"Created folder: {folder.name} ({folder.id})")
        print(f"Path: {folder.path}")
    elif cmd == "list-folders":
        folders = store.list_folders(args.parent)
        kind = "child" if args.parent else "root"
        print(f"Found {len(folders)} {kind} folders:")
        for folder in folders:
            print(f"  - {folder.id}: {folder.name} ({folder.path})")
    elif cmd == "add-to-folder":
        store.add_to_folder(args.id, args.folder_id)
        print(f"Filed note: {args.id}")


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    if args.verbose:
        setup_logging(log_path=None, console_level=logging.DEBUG, stream=sys.stderr)
    db_path = resolve_db_path(args.data_dir, args.db)
    store = NoteStore(db_path, args.data_dir)

    try:
        store.initialise()
        run(args, store)
    except StoreError as e:
        log.info("CLI command failed: %s: %s", args.command, e)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
