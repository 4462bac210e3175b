import json
import logging
from typing import Any

from nacoclip.database.storage import KeyValueStorage, StorageError

logger = logging.getLogger(__name__)

ENTRIES_KEY = "clipboardItems"
NOTEPAD_KEY = "notepadContent"


class PersistenceLayer:
    """JSON values on top of a :class:`KeyValueStorage`.

    ``load`` never raises: a missing slot, a backend failure or a value that
    does not decode all yield the caller's default. ``save`` overwrites the
    slot synchronously and lets backend errors propagate.
    """

    def __init__(self, storage: KeyValueStorage):
        self.storage = storage

    def save(self, key: str, value: Any) -> None:
        raw = json.dumps(value, ensure_ascii=False, separators=(",", ":"))
        self.storage.set(key, raw)
        logger.debug("Saved %s (%d bytes)", key, len(raw))

    def load(self, key: str, default: Any = None) -> Any:
        try:
            raw = self.storage.get(key)
        except StorageError as e:
            logger.warning("Could not read %s, using default: %s", key, e)
            return default

        if raw is None:
            return default

        try:
            return json.loads(raw)
        except (ValueError, RecursionError) as e:
            logger.warning("Corrupt data in %s, using default: %s", key, e)
            return default

    def close(self) -> None:
        self.storage.close()
