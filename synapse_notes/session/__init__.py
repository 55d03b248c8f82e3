from .controller import EditorFields, NotesController
from .editor import BOUND, DRAFT, EditorSession
from .list_cache import NoteListCache
from .runner import InlineRunner, TaskRunner
from .state import Bound, Draft, Slot
from .status import Status, StatusReporter

__all__ = ["EditorFields",
           "NotesController",
           "BOUND",
           "DRAFT",
           "EditorSession",
           "NoteListCache",
           "InlineRunner",
           "TaskRunner",
           "Bound",
           "Draft",
           "Slot",
           "Status",
           "StatusReporter"
           ]
