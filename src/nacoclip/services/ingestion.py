"""Turns paste events, file uploads and typed text into clipboard entries.

Paste items are handled one after another: item ``i + 1`` is only read once
item ``i`` has been added to the store, so a multi-item paste always lands
in a deterministic order (the last item of the event ends up first in the
list). Items that cannot be read are dropped; unsupported MIME types are
ignored.
"""

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Union

from nacoclip.clipboard.base import RawClipboardItem
from nacoclip.errors import CapacityExceeded
from nacoclip.models.entry import ClipboardEntry, EntryKind, NewEntry
from nacoclip.models.notification import Notification, Notifier
from nacoclip.services.item_store import ItemStore
from nacoclip.utils.data_uri import encode_data_uri, essence, guess_mime, primary_type

logger = logging.getLogger(__name__)

PASTED_IMAGE_NAME = "Pasted Image"


@dataclass(frozen=True)
class FileUpload:
    mime_type: str
    data: bytes
    name: str
    size: int

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "FileUpload":
        path = Path(path)
        data = path.read_bytes()
        return cls(mime_type=guess_mime(path), data=data, name=path.name, size=len(data))


class IngestionAdapter:

    def __init__(self, store: ItemStore, notifier: Optional[Notifier] = None) -> None:
        self.store = store
        self._notify = notifier or (lambda notification: None)

    async def ingest_paste(self, items: Sequence[RawClipboardItem]) -> List[ClipboardEntry]:
        added: List[ClipboardEntry] = []
        for position, item in enumerate(items):
            new_entry = await self._materialize(item, position)
            if new_entry is None:
                continue
            entry = self._add(new_entry)
            if entry is not None:
                added.append(entry)
        return added

    async def ingest_upload(self, upload: FileUpload) -> Optional[ClipboardEntry]:
        kind = EntryKind.IMAGE if primary_type(upload.mime_type) == "image" else EntryKind.FILE
        try:
            content = await asyncio.to_thread(encode_data_uri, upload.data, upload.mime_type)
        except (TypeError, ValueError) as e:
            logger.warning("Dropping upload %s: %s", upload.name, e)
            return None
        return self._add(NewEntry(kind=kind, content=content, name=upload.name, size=upload.size))

    def ingest_text(self, text: str) -> Optional[ClipboardEntry]:
        if not text or not text.strip():
            logger.debug("Ignoring blank text")
            return None
        return self._add(NewEntry(kind=EntryKind.TEXT, content=text))

    async def _materialize(self, item: RawClipboardItem, position: int) -> Optional[NewEntry]:
        mime = essence(item.mime_type)
        if primary_type(mime) == "image":
            kind = EntryKind.IMAGE
        elif mime == "text/plain":
            kind = EntryKind.TEXT
        else:
            logger.debug("Ignoring paste item %d of type %r", position, item.mime_type)
            return None

        try:
            payload = await item.read()
            if kind is EntryKind.TEXT:
                if isinstance(payload, bytes):
                    payload = payload.decode("utf-8")
                return NewEntry(kind=kind, content=payload)

            if isinstance(payload, str):
                payload = payload.encode("utf-8")
            content = await asyncio.to_thread(encode_data_uri, payload, mime)
            return NewEntry(kind=kind, content=content, name=PASTED_IMAGE_NAME, size=len(payload))
        except Exception as e:
            logger.warning("Dropping paste item %d (%s): %s", position, item.mime_type, e)
            return None

    def _add(self, new_entry: NewEntry) -> Optional[ClipboardEntry]:
        try:
            return self.store.add(new_entry)
        except CapacityExceeded as e:
            logger.warning("Rejected %s entry: %s", new_entry.kind.label, e)
            self._notify(Notification(
                title="Item Rejected",
                description=str(e),
                duration=3000,
                variant="destructive",
            ))
            return None
