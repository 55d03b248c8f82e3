from __future__ import annotations

import os
import uuid
from pathlib import Path


def stage_text(path: Path, text: str, *, encoding: str = "utf-8") -> Path:
    """
    Write text to a hidden temp file next to path and fsync it.

    The caller moves it into place with Path.replace() once the rest of
    its work has succeeded, or removes it with discard_staged().
    """
    path = Path(path)
    parent = path.parent
    parent.mkdir(parents=True, exist_ok=True)

    tmp_path = parent / f".{path.name}.tmp-{uuid.uuid4().hex}"
    try:
        with open(tmp_path, "w", encoding=encoding, newline="") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
    except BaseException:
        discard_staged(tmp_path)
        raise
    return tmp_path


def discard_staged(tmp_path: Path | None) -> None:
    if tmp_path is not None and tmp_path.exists():
        tmp_path.unlink()


def read_text_or_empty(path: Path, *, encoding: str = "utf-8") -> str:
    """Missing content files read as an empty note."""
    path = Path(path)
    if not path.exists():
        return ""
    return path.read_text(encoding=encoding)
