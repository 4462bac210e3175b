"""Service layer for NacoClip."""

from .dispatcher import ClipboardDispatcher
from .ingestion import FileUpload, IngestionAdapter
from .item_store import ItemStore
from .notepad import Notepad
from .persistence import ENTRIES_KEY, NOTEPAD_KEY, PersistenceLayer
from .reorder import reorder

__all__ = [
    "ClipboardDispatcher",
    "ENTRIES_KEY",
    "FileUpload",
    "IngestionAdapter",
    "ItemStore",
    "NOTEPAD_KEY",
    "Notepad",
    "PersistenceLayer",
    "reorder",
]
