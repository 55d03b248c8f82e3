from __future__ import annotations

import os
from pathlib import Path

APP_NAME = "synapse-notes"
APP_HOME = Path.home() / f".{APP_NAME}"
LOG_DIR = APP_HOME / "logs"
LOG_PATH = LOG_DIR / f"{APP_NAME}.log"

DATA_DIR = Path(os.environ.get("SYNAPSE_DATA_DIR") or APP_HOME / "data")
DB_PATH = Path(os.environ.get("SYNAPSE_DB_PATH") or DATA_DIR / "synapse.db")


def resolve_db_path(data_dir: Path, db_path: Path | None = None) -> Path:
    """Explicit db path wins; a non-default data dir keeps its own database."""
    if db_path is not None:
        return Path(db_path)
    if Path(data_dir) == DATA_DIR:
        return DB_PATH
    return Path(data_dir) / "synapse.db"
