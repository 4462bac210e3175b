import io
import logging
import struct
import time
from pathlib import Path
from typing import List, Sequence

import win32clipboard as wc
import win32con
from PIL import Image, ImageGrab

from nacoclip.clipboard.base import PlatformClipboard, RawClipboardItem
from nacoclip.utils.data_uri import guess_mime

logger = logging.getLogger(__name__)

# DROPFILES header: pFiles offset, pt.x, pt.y, fNC, fWide
_DROPFILES_HEADER = struct.pack("<IiiII", 20, 0, 0, 0, 1)


class WindowsClipboard(PlatformClipboard):

    def _open(self) -> bool:
        for _ in range(3):
            try:
                wc.OpenClipboard()
                return True
            except Exception:
                time.sleep(0.05)
        logger.warning("Clipboard is locked by another process")
        return False

    def _set(self, fmt: int, data) -> bool:
        if not self._open():
            return False
        try:
            wc.EmptyClipboard()
            wc.SetClipboardData(fmt, data)
            return True
        finally:
            try:
                wc.CloseClipboard()
            except Exception:
                pass

    def _write_text(self, text: str) -> bool:
        return self._set(wc.CF_UNICODETEXT, text)

    def _write_image(self, payload: bytes, mime_type: str) -> bool:
        image = Image.open(io.BytesIO(payload))

        if image.mode == "RGBA":
            background = Image.new(
                "RGB", image.size, (255, 255, 255))
            background.paste(image, mask=image.split()[3])
            image = background
        elif image.mode != "RGB":
            image = image.convert("RGB")

        output = io.BytesIO()
        image.save(output, "BMP")
        bmp_data = output.getvalue()

        if len(bmp_data) <= 14:
            return False
        # CF_DIB is the bitmap without its 14-byte file header
        return self._set(win32con.CF_DIB, bmp_data[14:])

    def _write_files(self, paths: Sequence[Path]) -> bool:
        names = "\0".join(str(Path(p).resolve()) for p in paths)
        data = _DROPFILES_HEADER + (names + "\0\0").encode("utf-16-le")
        return self._set(win32con.CF_HDROP, data)

    def _read_items(self) -> List[RawClipboardItem]:
        items: List[RawClipboardItem] = []

        grabbed = ImageGrab.grabclipboard()
        if isinstance(grabbed, list):
            for name in grabbed:
                path = Path(name)
                if path.is_file():
                    items.append(RawClipboardItem.from_callable(
                        guess_mime(path), path.read_bytes))
        elif grabbed is not None:
            output = io.BytesIO()
            grabbed.save(output, "PNG")
            items.append(RawClipboardItem.from_value("image/png", output.getvalue()))

        if not self._open():
            return items
        try:
            if wc.IsClipboardFormatAvailable(wc.CF_UNICODETEXT):
                text = wc.GetClipboardData(wc.CF_UNICODETEXT)
                if text:
                    items.append(RawClipboardItem.from_value("text/plain", text))
        finally:
            try:
                wc.CloseClipboard()
            except Exception:
                pass

        return items
