import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable, List, Sequence, Union

logger = logging.getLogger(__name__)

Payload = Union[bytes, str]


@dataclass(frozen=True)
class RawClipboardItem:
    """One item of a paste event: a MIME type plus a lazy async reader."""
    mime_type: str
    reader: Callable[[], Awaitable[Payload]]

    async def read(self) -> Payload:
        return await self.reader()

    @classmethod
    def from_value(cls, mime_type: str, value: Payload) -> "RawClipboardItem":
        async def _read() -> Payload:
            return value
        return cls(mime_type=mime_type, reader=_read)

    @classmethod
    def from_callable(cls, mime_type: str, func: Callable[[], Payload]) -> "RawClipboardItem":
        """Wrap a blocking reader; it runs in a worker thread when awaited."""
        async def _read() -> Payload:
            return await asyncio.to_thread(func)
        return cls(mime_type=mime_type, reader=_read)


class PlatformClipboard(ABC):
    """System clipboard access for one platform.

    The public methods never raise: platform failures are logged and
    reported as ``False`` (writes) or an empty list (reads).
    """

    @abstractmethod
    def _write_text(self, text: str) -> bool:
        pass

    @abstractmethod
    def _write_image(self, payload: bytes, mime_type: str) -> bool:
        pass

    @abstractmethod
    def _write_files(self, paths: Sequence[Path]) -> bool:
        pass

    @abstractmethod
    def _read_items(self) -> List[RawClipboardItem]:
        pass

    def write_text(self, text: str) -> bool:
        try:
            return self._write_text(text)
        except Exception:
            logger.exception("Writing text to the clipboard failed")
            return False

    def write_image(self, payload: bytes, mime_type: str) -> bool:
        try:
            return self._write_image(payload, mime_type)
        except Exception:
            logger.exception("Writing image to the clipboard failed")
            return False

    def write_files(self, paths: Sequence[Path]) -> bool:
        if not paths:
            return False
        try:
            return self._write_files(paths)
        except Exception:
            logger.exception("Writing file references to the clipboard failed")
            return False

    def read_items(self) -> List[RawClipboardItem]:
        try:
            return self._read_items()
        except Exception:
            logger.exception("Reading the clipboard failed")
            return []
