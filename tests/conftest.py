from pathlib import Path
from typing import List, Sequence

import pytest

from nacoclip.clipboard.base import PlatformClipboard, RawClipboardItem
from nacoclip.database.storage import FileStorage
from nacoclip.models import EntryKind, NewEntry, Notification
from nacoclip.services.item_store import ItemStore
from nacoclip.services.persistence import PersistenceLayer

# smallest valid PNG: 1x1 transparent pixel
PNG_BYTES = bytes.fromhex(
    "89504e470d0a1a0a0000000d4948445200000001000000010806000000"
    "1f15c4890000000d49444154789c63000100000500010d0a2db40000000049454e44ae426082"
)


class FakeClipboard(PlatformClipboard):
    """Records writes instead of touching the system clipboard."""

    def __init__(self, items: Sequence[RawClipboardItem] = (), fail: bool = False,
                 fail_files: bool = False):
        self.items = list(items)
        self.fail = fail
        self.fail_files = fail_files
        self.writes: List[tuple] = []

    def _write_text(self, text):
        self.writes.append(("text", text))
        return not self.fail

    def _write_image(self, payload, mime_type):
        self.writes.append(("image", payload, mime_type))
        return not self.fail

    def _write_files(self, paths):
        self.writes.append(("files", [Path(p) for p in paths]))
        return not (self.fail or self.fail_files)

    def _read_items(self):
        return list(self.items)


@pytest.fixture
def storage(tmp_path: Path) -> FileStorage:
    return FileStorage(tmp_path / "data")


@pytest.fixture
def persistence(storage: FileStorage) -> PersistenceLayer:
    return PersistenceLayer(storage)


@pytest.fixture
def notifications() -> List[Notification]:
    return []


@pytest.fixture
def store(persistence: PersistenceLayer, notifications: List[Notification]) -> ItemStore:
    return ItemStore(persistence, notifier=notifications.append)


@pytest.fixture
def fake_clipboard() -> FakeClipboard:
    return FakeClipboard()


def text_entry(content: str) -> NewEntry:
    return NewEntry(kind=EntryKind.TEXT, content=content)
