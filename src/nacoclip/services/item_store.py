import logging
import threading
from typing import Any, Callable, Iterator, List, Optional, Set, Tuple

from pydantic import ValidationError

from nacoclip.errors import CapacityExceeded, StorageError
from nacoclip.models.entry import ClipboardEntry, NewEntry, new_entry_id
from nacoclip.models.notification import Notification, Notifier
from nacoclip.services.persistence import ENTRIES_KEY, PersistenceLayer
from nacoclip.services.reorder import is_valid_move, reorder

logger = logging.getLogger(__name__)

DEFAULT_MAX_ENTRIES = 500
DEFAULT_MAX_PAYLOAD_BYTES = 10 * 1024 * 1024


class ItemStore:
    """Sole owner of the ordered entry list.

    Every mutation updates the in-memory list and persists it before
    returning, under a lock, so readers never observe a list that differs
    from what is stored.
    """

    def __init__(
        self,
        persistence: PersistenceLayer,
        notifier: Optional[Notifier] = None,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        max_payload_bytes: int = DEFAULT_MAX_PAYLOAD_BYTES,
        id_factory: Callable[[], str] = new_entry_id,
    ) -> None:
        self._persistence = persistence
        self._notify = notifier or self._default_handler
        self._lock = threading.RLock()
        self._id_factory = id_factory
        self.max_entries = max_entries
        self.max_payload_bytes = max_payload_bytes
        self._entries: List[ClipboardEntry] = self._load()

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------
    @property
    def entries(self) -> Tuple[ClipboardEntry, ...]:
        with self._lock:
            return tuple(self._entries)

    def get(self, index: int) -> Optional[ClipboardEntry]:
        with self._lock:
            if 0 <= index < len(self._entries):
                return self._entries[index]
            return None

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __iter__(self) -> Iterator[ClipboardEntry]:
        return iter(self.entries)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def add(self, new_entry: NewEntry) -> ClipboardEntry:
        with self._lock:
            self._check_capacity(new_entry)
            entry = new_entry.with_id(self._fresh_id())
            self._commit([entry] + self._entries)

        logger.info("Added %s entry %s", entry.kind.label, entry.id)
        self._notify(Notification(
            title="Item Added",
            description=f"A new {entry.kind.label} has been added to the clipboard.",
            duration=1500,
        ))
        return entry

    def delete(self, index: int) -> Optional[ClipboardEntry]:
        with self._lock:
            if not 0 <= index < len(self._entries):
                logger.warning(
                    "Ignoring delete of index %s (list has %d entries)", index, len(self._entries))
                return None
            removed = self._entries[index]
            self._commit(self._entries[:index] + self._entries[index + 1:])

        logger.info("Deleted entry %s", removed.id)
        self._notify(Notification(title="Item Deleted", duration=1000, variant="destructive"))
        return removed

    def reorder(self, from_index: int, to_index: int) -> bool:
        with self._lock:
            if not is_valid_move(len(self._entries), from_index, to_index):
                logger.warning(
                    "Ignoring move %s -> %s (list has %d entries)",
                    from_index, to_index, len(self._entries))
                return False
            if from_index == to_index:
                return True
            self._commit(reorder(self._entries, from_index, to_index))

        logger.info("Moved entry from %d to %d", from_index, to_index)
        return True

    def clear(self) -> int:
        with self._lock:
            count = len(self._entries)
            self._commit([])
        return count

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _commit(self, entries: List[ClipboardEntry]) -> None:
        # persist first so a failed write leaves memory and storage in agreement
        self._persistence.save(ENTRIES_KEY, [e.to_record() for e in entries])
        self._entries = entries

    def _check_capacity(self, new_entry: NewEntry) -> None:
        if len(self._entries) >= self.max_entries:
            raise CapacityExceeded(
                f"Clipboard is full ({self.max_entries} entries)",
                limit=self.max_entries,
                actual=len(self._entries) + 1,
            )
        payload_size = new_entry.payload_size
        if payload_size > self.max_payload_bytes:
            raise CapacityExceeded(
                f"Entry payload is {payload_size} bytes, limit is {self.max_payload_bytes}",
                limit=self.max_payload_bytes,
                actual=payload_size,
            )

    def _fresh_id(self) -> str:
        taken = {e.id for e in self._entries}
        entry_id = self._id_factory()
        while entry_id in taken:
            entry_id = self._id_factory()
        return entry_id

    def _load(self) -> List[ClipboardEntry]:
        raw = self._persistence.load(ENTRIES_KEY, [])
        if not isinstance(raw, list):
            logger.warning("Stored entry list is not a list, starting empty")
            return []

        entries: List[ClipboardEntry] = []
        seen: Set[str] = set()
        repaired = False
        for position, record in enumerate(raw):
            entry = self._parse_record(record, position)
            if entry is None:
                continue
            if entry.id in seen:
                logger.warning("Skipping duplicate entry id %s", entry.id)
                continue
            if "id" not in record:
                repaired = True
            seen.add(entry.id)
            entries.append(entry)

        if repaired:
            # records from before ids existed; store the assigned ids
            logger.info("Assigned ids to legacy entries")
            try:
                self._persistence.save(ENTRIES_KEY, [e.to_record() for e in entries])
            except StorageError as e:
                logger.warning("Could not store repaired entries, keeping them in memory: %s", e)

        logger.debug("Loaded %d entries", len(entries))
        return entries

    def _parse_record(self, record: Any, position: int) -> Optional[ClipboardEntry]:
        if not isinstance(record, dict):
            logger.warning("Skipping stored entry %d: not an object", position)
            return None
        if "id" not in record:
            record = {**record, "id": self._id_factory()}
        try:
            return ClipboardEntry.from_record(record)
        except ValidationError as e:
            logger.warning("Skipping stored entry %d: %s", position, e.errors()[0].get("msg"))
            return None

    @staticmethod
    def _default_handler(notification: Notification) -> None:
        logger.debug("Notification: %s", notification.title)
