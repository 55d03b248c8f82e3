from __future__ import annotations

from PySide6.QtCore import QSettings, Qt, QTimer
from PySide6.QtGui import QAction
from PySide6.QtWidgets import (
    QHBoxLayout, QLabel, QLineEdit, QListWidget, QListWidgetItem,
    QMainWindow, QMessageBox, QPushButton, QSplitter, QTextBrowser,
    QTextEdit, QVBoxLayout, QWidget,
)

from synapse_notes.logging_setup import log
from synapse_notes.services.markdown_renderer import MarkdownRenderer
from synapse_notes.session.controller import NotesController
from synapse_notes.session.editor import EditorSession
from synapse_notes.settings import APP_NAME
from synapse_notes.ui.qt_utils import blocked_signals
from synapse_notes.ui.ui_state import UiStateStore

PREVIEW_DEBOUNCE_MS = 250


class MainWindow(QMainWindow):
    """
    Note list on the left, title/editor/preview on the right.

    Every gesture goes through NotesController; the window only re-renders
    when the session reports a change.
    """

    def __init__(self, session: EditorSession, *, settings: QSettings | None = None):
        super().__init__()
        self.setWindowTitle("Synapse")

        self.controller = NotesController(session, confirm_delete=self._confirm_delete)
        self.renderer = MarkdownRenderer()
        self._ui_state = UiStateStore(owner=self, settings=settings or QSettings(APP_NAME, APP_NAME))

        # UI

        self.search = QLineEdit()
        self.search.setPlaceholderText("Filter by title…")
        self.btn_new = QPushButton("+ New note")
        self.listw = QListWidget()

        self.title_edit = QLineEdit()
        self.title_edit.setPlaceholderText("Title")
        self.editor = QTextEdit()
        self.editor.setAcceptRichText(False)
        self.editor.setPlaceholderText("Write in Markdown…")
        self.preview = QTextBrowser()
        self.preview.setOpenExternalLinks(True)

        self.btn_save = QPushButton("Save")
        self.btn_delete = QPushButton("Delete")
        self.status_label = QLabel()

        left = QWidget()
        left_layout = QVBoxLayout(left)
        left_layout.setContentsMargins(8, 8, 8, 8)
        left_layout.addWidget(self.btn_new)
        left_layout.addWidget(self.search)
        left_layout.addWidget(self.listw)

        self.right_splitter = QSplitter(Qt.Vertical)
        self.right_splitter.addWidget(self.editor)
        self.right_splitter.addWidget(self.preview)
        self.right_splitter.setStretchFactor(0, 3)
        self.right_splitter.setStretchFactor(1, 2)

        toolbar = QHBoxLayout()
        toolbar.addWidget(self.btn_save)
        toolbar.addWidget(self.btn_delete)
        toolbar.addStretch(1)

        right = QWidget()
        right_layout = QVBoxLayout(right)
        right_layout.setContentsMargins(8, 8, 8, 8)
        right_layout.addWidget(self.title_edit)
        right_layout.addWidget(self.right_splitter)
        right_layout.addLayout(toolbar)

        self.splitter = QSplitter(Qt.Horizontal)
        self.splitter.addWidget(left)
        self.splitter.addWidget(right)
        self.splitter.setStretchFactor(0, 1)
        self.splitter.setStretchFactor(1, 3)

        root = QWidget()
        root_layout = QHBoxLayout(root)
        root_layout.setContentsMargins(0, 0, 0, 0)
        root_layout.addWidget(self.splitter)
        self.setCentralWidget(root)
        self.statusBar().addWidget(self.status_label, 1)

        # Preview debounce (no markdown render on every keystroke)
        self.preview_timer = QTimer(self)
        self.preview_timer.setInterval(PREVIEW_DEBOUNCE_MS)
        self.preview_timer.setSingleShot(True)
        self.preview_timer.timeout.connect(self._render_preview)

        # Signals
        self.btn_new.clicked.connect(self.controller.on_new_clicked)
        self.btn_save.clicked.connect(self._on_save)
        self.btn_delete.clicked.connect(self.controller.on_delete_clicked)
        self.listw.itemClicked.connect(self._on_item_clicked)
        self.search.textChanged.connect(lambda _: self._render_list())
        self.title_edit.textEdited.connect(lambda _: self._on_fields_edited())
        self.editor.textChanged.connect(self._on_fields_edited)

        self._build_menu()
        self._ui_state.restore(splitter=self.splitter, right_splitter=self.right_splitter)

        session.set_on_change(self._on_session_changed)
        self._render()

    def start(self) -> None:
        self.controller.on_start(self._ui_state.last_note())

    def closeEvent(self, event):  # type: ignore[override]
        self._ui_state.save(splitter=self.splitter, right_splitter=self.right_splitter)
        self._ui_state.set_last_note(self.controller.session.current_note_id)
        super().closeEvent(event)

    def _build_menu(self) -> None:
        filem = self.menuBar().addMenu("File")

        self.act_new = QAction("New note", self)
        self.act_new.setShortcut("Ctrl+N")
        self.act_new.triggered.connect(self.controller.on_new_clicked)

        self.act_save = QAction("Save", self)
        self.act_save.setShortcut("Ctrl+S")
        self.act_save.triggered.connect(self._on_save)

        self.act_delete = QAction("Delete note", self)
        self.act_delete.triggered.connect(self.controller.on_delete_clicked)

        filem.addAction(self.act_new)
        filem.addAction(self.act_save)
        filem.addSeparator()
        filem.addAction(self.act_delete)

    # ───────────────────────── gestures ─────────────────────────

    def _on_item_clicked(self, item: QListWidgetItem) -> None:
        note_id = item.data(Qt.UserRole)
        if note_id:
            self.controller.on_note_clicked(str(note_id))

    def _on_save(self) -> None:
        self.controller.on_save_clicked(self.title_edit.text(), self.editor.toPlainText())

    def _on_fields_edited(self) -> None:
        self.controller.on_fields_edited(self.title_edit.text(), self.editor.toPlainText())
        self._render_window_title()
        self.preview_timer.start()

    def _confirm_delete(self) -> bool:
        answer = QMessageBox.question(
            self,
            "Delete note",
            "Delete this note?",
            QMessageBox.Yes | QMessageBox.No,
            QMessageBox.No,
        )
        return answer == QMessageBox.Yes

    # ───────────────────────── rendering ─────────────────────────

    def _on_session_changed(self, session: EditorSession) -> None:
        self._render()
        if not session.is_busy and session.current_note_id:
            self._ui_state.set_last_note(session.current_note_id)

    def _render(self) -> None:
        self._render_status()
        self._render_fields()
        self._render_list()
        self._render_controls()

    def _render_status(self) -> None:
        status = self.controller.current_status()
        self.status_label.setText(status.text)
        self.status_label.setStyleSheet("color: #c00;" if status.is_error else "color: #666;")
        if status.is_error:
            log.debug("Status error shown: %s", status.text)

    def _render_fields(self) -> None:
        fields = self.controller.current_editor_fields()
        with blocked_signals(self.title_edit, self.editor):
            if self.title_edit.text() != fields.title:
                self.title_edit.setText(fields.title)
            if self.editor.toPlainText() != fields.content:
                self.editor.setPlainText(fields.content)
        self.btn_delete.setVisible(fields.can_delete)
        self.act_delete.setEnabled(fields.can_delete)
        self._render_preview()
        self._render_window_title()

    def _render_list(self) -> None:
        current_id = self.controller.session.current_note_id
        notes = self.controller.current_list_snapshot(self.search.text())

        with blocked_signals(self.listw):
            self.listw.clear()
            for note in notes:
                item = QListWidgetItem(note.display_title)
                item.setData(Qt.UserRole, note.id)
                item.setToolTip(f"{note.word_count} words")
                self.listw.addItem(item)
                if note.id == current_id:
                    self.listw.setCurrentItem(item)

    def _render_controls(self) -> None:
        enabled = self.controller.controls_enabled
        for w in (self.btn_new, self.btn_save, self.btn_delete, self.listw,
                  self.title_edit, self.editor):
            w.setEnabled(enabled)
        for act in (self.act_new, self.act_save):
            act.setEnabled(enabled)
        if not enabled:
            self.act_delete.setEnabled(False)

    def _render_window_title(self) -> None:
        fields = self.controller.current_editor_fields()
        name = fields.title.strip() or ("Untitled" if fields.note_id else "New note")
        marker = " *" if fields.is_dirty else ""
        self.setWindowTitle(f"{name}{marker} - Synapse")

    def _render_preview(self) -> None:
        self.preview.setHtml(self.renderer.render_page(self.editor.toPlainText()))
