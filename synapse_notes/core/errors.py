from __future__ import annotations


class StoreError(Exception):
    """Base class for every failure reported by the note store."""


class NotFound(StoreError):
    def __init__(self, item_id: str, kind: str = "Note"):
        super().__init__(f"{kind} not found: {item_id}")
        self.item_id = item_id
        self.kind = kind


class InvalidInput(StoreError):
    """Request rejected before touching the store (duplicate names, bad folder moves)."""


class StoreUnavailable(StoreError):
    pass


class StoreCorrupt(StoreError):
    pass
