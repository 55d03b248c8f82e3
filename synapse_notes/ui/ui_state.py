from __future__ import annotations

from dataclasses import dataclass

from PySide6.QtCore import QSettings
from PySide6.QtWidgets import QMainWindow, QSplitter

from synapse_notes.logging_setup import log


@dataclass(frozen=True)
class SettingsKeys:
    UI_GEOMETRY: str = "ui/geometry"
    UI_STATE: str = "ui/windowState"
    UI_SPLITTER: str = "ui/splitter_sizes"
    UI_RIGHT_SPLITTER: str = "ui/right_splitter_sizes"
    LAST_NOTE: str = "nav/last_note"


class UiStateStore:
    """Persists window layout and the last opened note in QSettings."""

    def __init__(self, *, owner: QMainWindow, settings: QSettings):
        self._owner = owner
        self._settings = settings

    @staticmethod
    def _coerce_sizes(value) -> list[int] | None:
        if value is None:
            return None
        if isinstance(value, str):
            value = value.replace(",", " ").split()
        if not isinstance(value, (list, tuple)):
            return None
        out: list[int] = []
        for x in value:
            try:
                out.append(int(x))
            except (TypeError, ValueError):
                continue
        return out or None

    def restore(self, *, splitter: QSplitter, right_splitter: QSplitter | None = None) -> None:
        try:
            geo = self._settings.value(SettingsKeys.UI_GEOMETRY)
            if geo:
                self._owner.restoreGeometry(geo)
            else:
                self._owner.resize(1100, 700)

            st = self._settings.value(SettingsKeys.UI_STATE)
            if st:
                self._owner.restoreState(st)

            s1 = self._coerce_sizes(self._settings.value(SettingsKeys.UI_SPLITTER))
            if s1:
                splitter.setSizes(s1)

            s2 = self._coerce_sizes(self._settings.value(SettingsKeys.UI_RIGHT_SPLITTER))
            if s2 and right_splitter is not None:
                right_splitter.setSizes(s2)
        except Exception:
            log.exception("Failed to restore UI state from QSettings")

    def save(self, *, splitter: QSplitter, right_splitter: QSplitter | None = None) -> None:
        try:
            self._settings.setValue(SettingsKeys.UI_GEOMETRY, self._owner.saveGeometry())
            self._settings.setValue(SettingsKeys.UI_STATE, self._owner.saveState())
            self._settings.setValue(SettingsKeys.UI_SPLITTER, splitter.sizes())
            if right_splitter is not None:
                self._settings.setValue(SettingsKeys.UI_RIGHT_SPLITTER, right_splitter.sizes())
        except Exception:
            log.exception("Failed to save UI state to QSettings")

    def last_note(self) -> str | None:
        value = self._settings.value(SettingsKeys.LAST_NOTE)
        return str(value) if value else None

    def set_last_note(self, note_id: str | None) -> None:
        if note_id:
            self._settings.setValue(SettingsKeys.LAST_NOTE, note_id)
        else:
            self._settings.remove(SettingsKeys.LAST_NOTE)
