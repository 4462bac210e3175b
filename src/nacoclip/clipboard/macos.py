import io
import logging
from pathlib import Path
from typing import List, Sequence

from AppKit import (NSPasteboard, NSPasteboardTypeFileURL, NSPasteboardTypePNG,
                    NSPasteboardTypeString, NSPasteboardTypeTIFF)
from Foundation import NSURL, NSData
from PIL import Image

from nacoclip.clipboard.base import PlatformClipboard, RawClipboardItem
from nacoclip.utils.data_uri import essence, guess_mime

logger = logging.getLogger(__name__)


class MacOSClipboard(PlatformClipboard):

    def _pasteboard(self, clear: bool = False):
        pasteboard = NSPasteboard.generalPasteboard()
        if clear:
            pasteboard.clearContents()
        return pasteboard

    def _write_text(self, text: str) -> bool:
        pasteboard = self._pasteboard(clear=True)
        return bool(pasteboard.setString_forType_(text, NSPasteboardTypeString))

    def _write_image(self, payload: bytes, mime_type: str) -> bool:
        mime = essence(mime_type)
        if mime == "image/png":
            pb_type = NSPasteboardTypePNG
        elif mime == "image/tiff":
            pb_type = NSPasteboardTypeTIFF
        else:
            # the pasteboard only understands PNG and TIFF natively
            logger.debug("Converting %s to PNG for the pasteboard", mime or "image")
            output = io.BytesIO()
            Image.open(io.BytesIO(payload)).save(output, "PNG")
            payload = output.getvalue()
            pb_type = NSPasteboardTypePNG

        ns_data = NSData.dataWithBytes_length_(payload, len(payload))
        pasteboard = self._pasteboard(clear=True)
        return bool(pasteboard.setData_forType_(ns_data, pb_type))

    def _write_files(self, paths: Sequence[Path]) -> bool:
        urls = [NSURL.fileURLWithPath_(str(Path(p).resolve())) for p in paths]
        pasteboard = self._pasteboard(clear=True)
        return bool(pasteboard.writeObjects_(urls))

    def _read_items(self) -> List[RawClipboardItem]:
        pasteboard = self._pasteboard()
        types = pasteboard.types() or []
        items: List[RawClipboardItem] = []

        if NSPasteboardTypeFileURL in types:
            urls = pasteboard.readObjectsForClasses_options_([NSURL], None) or []
            for url in urls:
                if url.isFileURL():
                    path = Path(url.path())
                    if path.is_file():
                        items.append(RawClipboardItem.from_callable(
                            guess_mime(path), path.read_bytes))

        for pb_type, mime in ((NSPasteboardTypePNG, "image/png"), (NSPasteboardTypeTIFF, "image/tiff")):
            if pb_type in types:
                data = pasteboard.dataForType_(pb_type)
                if data:
                    items.append(RawClipboardItem.from_value(mime, bytes(data)))
                    break

        if NSPasteboardTypeString in types:
            text = pasteboard.stringForType_(NSPasteboardTypeString)
            if text:
                items.append(RawClipboardItem.from_value("text/plain", str(text)))

        return items
