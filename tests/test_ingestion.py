import asyncio
import base64

import pytest

from nacoclip.clipboard.base import RawClipboardItem
from nacoclip.models import EntryKind
from nacoclip.services.ingestion import PASTED_IMAGE_NAME, FileUpload, IngestionAdapter
from nacoclip.services.item_store import ItemStore
from nacoclip.utils.data_uri import decode_data_uri

from conftest import PNG_BYTES, text_entry


@pytest.fixture
def adapter(store, notifications):
    return IngestionAdapter(store, notifier=notifications.append)


def failing_item(mime_type):
    async def _read():
        raise OSError("blob went away")
    return RawClipboardItem(mime_type=mime_type, reader=_read)


def test_submit_plain_text(adapter, store):
    entry = adapter.ingest_text("hello")

    assert store.entries == (entry,)
    assert entry.kind is EntryKind.TEXT
    assert entry.content == "hello"
    assert entry.name is None


@pytest.mark.parametrize("text", ["", "   ", "\n\t"])
def test_blank_text_is_ignored(adapter, store, text):
    assert adapter.ingest_text(text) is None
    assert len(store) == 0


def test_text_is_stored_untrimmed(adapter):
    assert adapter.ingest_text("  padded  ").content == "  padded  "


def test_upload_document(adapter, store):
    upload = FileUpload(mime_type="application/pdf", data=b"%" * 2048, name="doc.pdf", size=2048)

    entry = asyncio.run(adapter.ingest_upload(upload))

    assert store.entries[0] == entry
    assert entry.kind is EntryKind.FILE
    assert entry.name == "doc.pdf"
    assert entry.size == 2048
    assert decode_data_uri(entry.content) == (b"%" * 2048, "application/pdf")


def test_upload_image(adapter):
    upload = FileUpload(mime_type="image/jpeg", data=b"\xff\xd8", name="cat.jpg", size=2)

    entry = asyncio.run(adapter.ingest_upload(upload))

    assert entry.kind is EntryKind.IMAGE
    assert entry.name == "cat.jpg"
    assert entry.content.startswith("data:image/jpeg;base64,")


def test_upload_prepends_to_existing(adapter, store):
    store.add(text_entry("older"))
    asyncio.run(adapter.ingest_upload(
        FileUpload(mime_type="text/plain", data=b"x", name="a.txt", size=1)))

    assert [e.kind for e in store.entries] == [EntryKind.FILE, EntryKind.TEXT]


def test_paste_two_text_fragments(adapter, store):
    store.add(text_entry("existing"))
    items = [
        RawClipboardItem.from_value("text/plain", "a"),
        RawClipboardItem.from_value("text/plain", "b"),
    ]

    added = asyncio.run(adapter.ingest_paste(items))

    assert [e.content for e in added] == ["a", "b"]
    assert [e.content for e in store.entries] == ["b", "a", "existing"]


def test_paste_image(adapter, store):
    entry, = asyncio.run(adapter.ingest_paste(
        [RawClipboardItem.from_value("image/png", PNG_BYTES)]))

    assert entry.kind is EntryKind.IMAGE
    assert entry.name == PASTED_IMAGE_NAME
    assert entry.size == len(PNG_BYTES)
    assert entry.content == "data:image/png;base64," + base64.b64encode(PNG_BYTES).decode()


def test_paste_keeps_input_order_across_kinds(adapter, store):
    async def slow_image():
        await asyncio.sleep(0.01)
        return PNG_BYTES

    items = [
        RawClipboardItem(mime_type="image/png", reader=slow_image),
        RawClipboardItem.from_value("text/plain", "caption"),
    ]

    asyncio.run(adapter.ingest_paste(items))

    assert [e.kind for e in store.entries] == [EntryKind.TEXT, EntryKind.IMAGE]


def test_unsupported_types_are_ignored(adapter, store):
    items = [
        RawClipboardItem.from_value("text/html", "<b>x</b>"),
        RawClipboardItem.from_value("application/pdf", b"%PDF"),
        RawClipboardItem.from_value("text/plain", "kept"),
    ]

    added = asyncio.run(adapter.ingest_paste(items))

    assert [e.content for e in added] == ["kept"]
    assert len(store) == 1


def test_text_with_charset_and_bytes_payload(adapter):
    added = asyncio.run(adapter.ingest_paste(
        [RawClipboardItem.from_value("text/plain;charset=utf-8", "héllo".encode("utf-8"))]))

    assert added[0].content == "héllo"


def test_failed_read_drops_only_that_item(adapter, store):
    items = [
        RawClipboardItem.from_value("text/plain", "first"),
        failing_item("image/png"),
        RawClipboardItem.from_value("text/plain", "last"),
    ]

    added = asyncio.run(adapter.ingest_paste(items))

    assert [e.content for e in added] == ["first", "last"]
    assert [e.content for e in store.entries] == ["last", "first"]


def test_unexpected_reader_error_drops_only_that_item(adapter, store):
    async def _broken():
        raise RuntimeError("reader broke")

    items = [
        RawClipboardItem.from_value("text/plain", "a"),
        RawClipboardItem(mime_type="text/plain", reader=_broken),
        RawClipboardItem.from_value("text/plain", "b"),
    ]

    added = asyncio.run(adapter.ingest_paste(items))

    assert [e.content for e in added] == ["a", "b"]
    assert [e.content for e in store.entries] == ["b", "a"]


def test_blocking_reader_runs(adapter):
    item = RawClipboardItem.from_callable("text/plain", lambda: "from a thread")

    added = asyncio.run(adapter.ingest_paste([item]))

    assert added[0].content == "from a thread"


def test_capacity_rejection_is_reported_and_skipped(persistence, notifications):
    store = ItemStore(persistence, max_payload_bytes=8)
    adapter = IngestionAdapter(store, notifier=notifications.append)
    items = [
        RawClipboardItem.from_value("image/png", PNG_BYTES),
        RawClipboardItem.from_value("text/plain", "short"),
    ]

    added = asyncio.run(adapter.ingest_paste(items))

    assert [e.content for e in added] == ["short"]
    assert any(n.title == "Item Rejected" for n in notifications)


def test_upload_from_path(tmp_path):
    path = tmp_path / "notes.txt"
    path.write_bytes(b"some notes")

    upload = FileUpload.from_path(path)

    assert upload.name == "notes.txt"
    assert upload.mime_type == "text/plain"
    assert upload.size == 10
    assert upload.data == b"some notes"
