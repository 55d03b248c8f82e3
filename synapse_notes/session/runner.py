from __future__ import annotations

from typing import Any, Callable, Protocol

DoneCallback = Callable[[Any], None]
FailedCallback = Callable[[Exception], None]


class TaskRunner(Protocol):
    """
    Runs one store call and reports back on the caller's thread.

    on_done receives the call's return value, on_failed the raised exception.
    """

    def submit(
        self,
        fn: Callable[[], Any],
        *,
        on_done: DoneCallback,
        on_failed: FailedCallback,
    ) -> None: ...


class InlineRunner:
    """Runs store calls synchronously. Used headless and in tests."""

    def submit(
        self,
        fn: Callable[[], Any],
        *,
        on_done: DoneCallback,
        on_failed: FailedCallback,
    ) -> None:
        try:
            result = fn()
        except Exception as exc:
            on_failed(exc)
            return
        on_done(result)
