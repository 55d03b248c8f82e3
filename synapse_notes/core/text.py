from __future__ import annotations

import re
import unicodedata

SLUG_MAX_LEN = 50

_NON_SLUG_RE = re.compile(r"[^\w-]+")
_DASHES_RE = re.compile(r"-{2,}")


def slugify(title: str | None, *, max_len: int = SLUG_MAX_LEN) -> str:
    """
    Filesystem-safe slug for content file names.

    Lowercase, anything but letters/digits/'-'/'_' becomes '-',
    runs of '-' collapse, edges trimmed. May return "".
    """
    s = unicodedata.normalize("NFKC", str(title or "")).lower()
    s = _NON_SLUG_RE.sub("-", s)
    s = _DASHES_RE.sub("-", s)
    s = s.strip("-")
    return s[:max_len]


def count_words(content: str | None) -> int:
    return len((content or "").split())


def normalize_title(title: str | None) -> str | None:
    """Blank titles mean "not supplied"."""
    if title is None or not title.strip():
        return None
    return title
