from __future__ import annotations

from typing import Any, Callable

from PySide6.QtCore import QObject, QRunnable, QThreadPool, Signal, Slot

from synapse_notes.session.runner import DoneCallback, FailedCallback


class StoreCallSignals(QObject):
    finished = Signal(int, object)
    failed = Signal(int, object)


class StoreCallWorker(QRunnable):
    """Runs one blocking store call on a pool thread. No UI code here."""

    def __init__(self, *, req_id: int, fn: Callable[[], Any]):
        super().__init__()
        self.req_id = req_id
        self.fn = fn
        self.signals = StoreCallSignals()

    def run(self) -> None:
        try:
            result = self.fn()
        except Exception as exc:
            self.signals.failed.emit(self.req_id, exc)
            return
        self.signals.finished.emit(self.req_id, result)


class QtTaskRunner(QObject):
    """
    TaskRunner backed by QThreadPool.

    Worker signals are connected to slots of this object, which lives on the
    UI thread, so callbacks always run there (queued connection).
    """

    def __init__(self, *, thread_pool: QThreadPool | None = None, parent: QObject | None = None):
        super().__init__(parent)
        self._pool = thread_pool or QThreadPool.globalInstance()
        self._req_id = 0
        self._pending: dict[int, tuple[DoneCallback, FailedCallback]] = {}

    # ───────────────────────── public API ─────────────────────────

    def submit(
        self,
        fn: Callable[[], Any],
        *,
        on_done: DoneCallback,
        on_failed: FailedCallback,
    ) -> None:
        self._req_id += 1
        req_id = self._req_id
        self._pending[req_id] = (on_done, on_failed)

        worker = StoreCallWorker(req_id=req_id, fn=fn)
        worker.signals.finished.connect(self._on_finished)
        worker.signals.failed.connect(self._on_failed)
        self._pool.start(worker)

    # ───────────────────────── internal ─────────────────────────

    @Slot(int, object)
    def _on_finished(self, req_id: int, result: object) -> None:
        callbacks = self._pending.pop(req_id, None)
        if callbacks is None:
            return
        callbacks[0](result)

    @Slot(int, object)
    def _on_failed(self, req_id: int, exc: object) -> None:
        callbacks = self._pending.pop(req_id, None)
        if callbacks is None:
            return
        callbacks[1](exc)
