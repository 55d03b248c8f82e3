from __future__ import annotations

import argparse
from pathlib import Path

from PySide6.QtWidgets import QApplication

from synapse_notes.core.errors import StoreError
from synapse_notes.logging_setup import SESSION_ID, install_global_exception_hooks, log, setup_logging
from synapse_notes.session.editor import EditorSession
from synapse_notes.settings import DATA_DIR, resolve_db_path
from synapse_notes.store.client import NoteStore
from synapse_notes.ui.main_window import MainWindow
from synapse_notes.workers.store_call import QtTaskRunner


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Synapse note manager")
    p.add_argument("--data-dir", type=Path, default=DATA_DIR, help="Folder with note content files")
    p.add_argument("--db", type=Path, default=None, help="SQLite database path (default: <data-dir>/synapse.db)")
    return p.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    setup_logging()
    install_global_exception_hooks()
    args = parse_args(argv)

    db_path = resolve_db_path(args.data_dir, args.db)
    store = NoteStore(db_path, args.data_dir)
    try:
        store.initialise()
    except StoreError as e:
        # the session reports the same failure on its first store call
        log.error("Note store initialisation failed: %s", e)

    app = QApplication([])
    runner = QtTaskRunner()
    session = EditorSession(store, runner=runner)
    win = MainWindow(session)
    win.show()
    win.start()
    log.info("Application started, SID=%s", SESSION_ID)
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
