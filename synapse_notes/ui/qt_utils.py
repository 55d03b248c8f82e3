from __future__ import annotations

from contextlib import contextmanager


@contextmanager
def blocked_signals(*objs):
    """Temporarily silence Qt signals of the given widgets."""
    for obj in objs:
        obj.blockSignals(True)
    try:
        yield
    finally:
        for obj in objs:
            obj.blockSignals(False)
