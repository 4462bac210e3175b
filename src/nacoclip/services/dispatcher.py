import logging
from typing import Optional

from nacoclip.clipboard.base import PlatformClipboard
from nacoclip.models.entry import ClipboardEntry, EntryKind
from nacoclip.models.notification import Notification, Notifier
from nacoclip.services.item_store import ItemStore
from nacoclip.utils.data_uri import decode_data_uri
from nacoclip.utils.file_manager import FileManager

logger = logging.getLogger(__name__)

FILE_FALLBACK_TEXT = "File"


class ClipboardDispatcher:
    """Writes one entry back to the system clipboard. Never touches the store.

    Text goes to the text slot, images are written as native image data.
    File entries put only their display name on the clipboard unless a
    ``file_manager`` is given, in which case the payload is written to disk
    and placed on the clipboard as a file reference.
    """

    def __init__(
        self,
        clipboard: PlatformClipboard,
        notifier: Optional[Notifier] = None,
        file_manager: Optional[FileManager] = None,
    ) -> None:
        self.clipboard = clipboard
        self.file_manager = file_manager
        self._notify = notifier or (lambda notification: None)

    def copy(self, entry: ClipboardEntry) -> bool:
        if entry.kind is EntryKind.TEXT:
            ok = self.clipboard.write_text(entry.content)
        elif entry.kind is EntryKind.IMAGE:
            ok = self._copy_image(entry)
        else:
            ok = self._copy_file(entry)

        if ok:
            logger.info("Copied %s entry %s", entry.kind.label, entry.id)
            self._notify(Notification(
                title="Copied to Clipboard",
                description=f"The selected {entry.kind.label} has been copied to the clipboard.",
                duration=1500,
            ))
        else:
            logger.warning("Could not copy %s entry %s", entry.kind.label, entry.id)
            self._notify(Notification(
                title="Copy Failed",
                description=f"The selected {entry.kind.label} could not be copied.",
                duration=3000,
                variant="destructive",
            ))
        return ok

    def copy_index(self, store: ItemStore, index: int) -> bool:
        entry = store.get(index)
        if entry is None:
            logger.warning("No entry at index %s", index)
            return False
        return self.copy(entry)

    def _copy_image(self, entry: ClipboardEntry) -> bool:
        try:
            payload, mime = decode_data_uri(entry.content)
        except ValueError as e:
            logger.warning("Image entry %s has unreadable content: %s", entry.id, e)
            return False
        return self.clipboard.write_image(payload, mime)

    def _copy_file(self, entry: ClipboardEntry) -> bool:
        if self.file_manager is not None:
            try:
                payload, _ = decode_data_uri(entry.content)
            except ValueError as e:
                logger.warning("File entry %s has unreadable content: %s", entry.id, e)
            else:
                path = self.file_manager.save_file(payload, entry.name)
                if path is not None and self.clipboard.write_files([path]):
                    return True
            logger.info("Falling back to copying the name of %s", entry.id)

        return self.clipboard.write_text(entry.name or FILE_FALLBACK_TEXT)
