from __future__ import annotations

from dataclasses import dataclass

LOADING = "Loading…"
SAVING = "Saving…"
DELETING = "Deleting…"
READY = "Ready"
ERROR_PREFIX = "Error: "


@dataclass(frozen=True)
class Status:
    text: str
    is_error: bool = False


class StatusReporter:
    """Latest session phase for the presentation layer. No history is kept."""

    def __init__(self) -> None:
        self._status = Status(READY)

    @property
    def current(self) -> Status:
        return self._status

    def set(self, text: str, *, is_error: bool = False) -> None:
        self._status = Status(text, is_error)

    def ready(self) -> None:
        self.set(READY)

    def error(self, message: str) -> None:
        self.set(f"{ERROR_PREFIX}{message}", is_error=True)
