from .errors import InvalidInput, NotFound, StoreCorrupt, StoreError, StoreUnavailable
from .models import UNTITLED, Folder, LoadedNote, NoteSummary, Tag
from .text import count_words, normalize_title, slugify

__all__ = ["InvalidInput",
           "NotFound",
           "StoreCorrupt",
           "StoreError",
           "StoreUnavailable",
           "UNTITLED",
           "Folder",
           "LoadedNote",
           "NoteSummary",
           "Tag",
           "count_words",
           "normalize_title",
           "slugify"
           ]
