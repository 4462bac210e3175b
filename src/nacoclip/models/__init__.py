"""Data models shared by the NacoClip services."""

from nacoclip.models.entry import ClipboardEntry, EntryKind, NewEntry, new_entry_id
from nacoclip.models.notification import Notification, Notifier

__all__ = [
    'ClipboardEntry',
    'EntryKind',
    'NewEntry',
    'Notification',
    'Notifier',
    'new_entry_id',
]
