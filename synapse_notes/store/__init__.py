from .client import NoteStore
from .filesystem import discard_staged, stage_text

__all__ = ["NoteStore",
           "discard_staged",
           "stage_text"
           ]
