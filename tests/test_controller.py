import pytest

from conftest import DeferredRunner
from synapse_notes.session.controller import NotesController
from synapse_notes.session.editor import EditorSession


@pytest.fixture
def answers():
    return []


@pytest.fixture
def controller(session, answers):
    def confirm():
        answers.append("asked")
        return True

    return NotesController(session, confirm_delete=confirm)


def test_draft_fields_cannot_be_deleted(controller):
    fields = controller.current_editor_fields()
    assert fields.note_id is None
    assert not fields.can_delete
    assert (fields.title, fields.content) == ("", "")


def test_save_then_fields_reflect_bound_note(controller):
    controller.on_save_clicked("Plan", "step one")

    fields = controller.current_editor_fields()
    assert fields.can_delete
    assert fields.note_id == controller.session.current_note_id
    assert (fields.title, fields.content) == ("Plan", "step one")
    assert [n.title for n in controller.current_list_snapshot()] == ["Plan"]


def test_delete_asks_for_confirmation(controller, answers):
    controller.on_save_clicked("Plan", "x")

    assert controller.on_delete_clicked()

    assert answers == ["asked"]
    assert controller.current_list_snapshot() == ()
    assert not controller.current_editor_fields().can_delete


def test_delete_on_draft_does_not_ask(controller, answers):
    assert not controller.on_delete_clicked()
    assert answers == []


def test_list_snapshot_filters_by_title(controller, recording):
    recording.inner.create("Shopping", "")
    recording.inner.create("Work log", "")
    controller.on_start()

    assert [n.title for n in controller.current_list_snapshot("shop")] == ["Shopping"]
    assert len(controller.current_list_snapshot("  ")) == 2


def test_fields_edited_are_kept_locally(controller, recording):
    controller.on_fields_edited("typed", "text")

    assert controller.current_editor_fields().title == "typed"
    assert recording.calls == []


def test_controls_disabled_while_busy(recording):
    runner = DeferredRunner()
    controller = NotesController(EditorSession(recording, runner=runner), confirm_delete=lambda: True)

    controller.on_save_clicked("T", "x")
    assert not controller.controls_enabled
    assert controller.current_status().text == "Saving…"
    assert not controller.on_new_clicked()

    runner.run_all()
    assert controller.controls_enabled
    assert controller.current_status().text == "Ready"


def test_dirty_flag_tracks_unsaved_edits(controller):
    assert not controller.current_editor_fields().is_dirty

    controller.on_fields_edited("Plan", "")
    assert controller.current_editor_fields().is_dirty

    controller.on_save_clicked("Plan", "")
    assert not controller.current_editor_fields().is_dirty

    controller.on_fields_edited("Plan", "more")
    assert controller.current_editor_fields().is_dirty
