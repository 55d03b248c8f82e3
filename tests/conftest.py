from __future__ import annotations

import pytest

from synapse_notes.session.editor import EditorSession
from synapse_notes.session.runner import InlineRunner
from synapse_notes.store.client import NoteStore


class RecordingStore:
    """Real store behind a call log; chosen operations can be made to fail."""

    def __init__(self, inner: NoteStore):
        self.inner = inner
        self.calls: list[str] = []
        self.failures: dict[str, Exception] = {}

    def fail(self, op: str, exc: Exception) -> None:
        self.failures[op] = exc

    def heal(self) -> None:
        self.failures.clear()

    def _run(self, op: str, *args, **kwargs):
        self.calls.append(op)
        exc = self.failures.get(op)
        if exc is not None:
            raise exc
        return getattr(self.inner, op)(*args, **kwargs)

    def list_notes(self, include_deleted: bool = False):
        return self._run("list_notes", include_deleted=include_deleted)

    def fetch_one(self, note_id: str):
        return self._run("fetch_one", note_id)

    def create(self, title: str, content: str):
        return self._run("create", title, content)

    def update(self, note_id: str, title=None, content=None):
        return self._run("update", note_id, title, content)

    def soft_delete(self, note_id: str):
        return self._run("soft_delete", note_id)


class DeferredRunner:
    """Holds submitted calls until the test releases them."""

    def __init__(self):
        self.pending: list[tuple] = []

    def submit(self, fn, *, on_done, on_failed):
        self.pending.append((fn, on_done, on_failed))

    def run_next(self) -> None:
        fn, on_done, on_failed = self.pending.pop(0)
        InlineRunner().submit(fn, on_done=on_done, on_failed=on_failed)

    def run_all(self) -> None:
        while self.pending:
            self.run_next()


@pytest.fixture
def store(tmp_path):
    s = NoteStore(tmp_path / "synapse.db", tmp_path / "data")
    s.initialise()
    return s


@pytest.fixture
def recording(store):
    return RecordingStore(store)


@pytest.fixture
def session(recording):
    return EditorSession(recording, runner=InlineRunner())
