import logging
import os
import shutil
import subprocess
from pathlib import Path
from typing import Callable, List, Optional, Sequence
from urllib.parse import unquote, urlparse

from nacoclip.clipboard.base import PlatformClipboard, RawClipboardItem
from nacoclip.utils.data_uri import essence, guess_mime

logger = logging.getLogger(__name__)


class LinuxClipboard(PlatformClipboard):
    _FILE_TARGETS = {"x-special/gnome-copied-files", "text/uri-list"}
    _IMAGE_TARGETS = {
        "image/png": "image/png",
        "image/jpeg": "image/jpeg",
        "image/jpg": "image/jpeg",
        "image/pjpeg": "image/jpeg",
        "image/bmp": "image/bmp",
        "image/x-ms-bmp": "image/bmp",
        "image/webp": "image/webp",
        "image/gif": "image/gif",
    }
    _TEXT_TARGETS = {
        "text/plain",
        "text/plain;charset=utf-8",
        "text/plain;charset=utf8",
        "utf8_string",
        "string",
    }

    def __init__(self, timeout: float = 2.0):
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Backend selection
    # ------------------------------------------------------------------
    def _use_wayland(self) -> bool:
        return bool(os.environ.get("WAYLAND_DISPLAY")) and shutil.which("wl-copy") is not None

    def _copy_command(self, mime_type: Optional[str] = None) -> Optional[List[str]]:
        if self._use_wayland():
            command = ["wl-copy"]
            if mime_type:
                command += ["--type", mime_type]
            return command
        if shutil.which("xclip"):
            command = ["xclip", "-selection", "clipboard"]
            if mime_type:
                command += ["-t", mime_type]
            return command
        logger.warning("Neither wl-copy nor xclip is available")
        return None

    def _copy(self, data: bytes, mime_type: Optional[str] = None) -> bool:
        command = self._copy_command(mime_type)
        if command is None:
            return False
        try:
            subprocess.run(
                command,
                input=data,
                check=True,
                timeout=self.timeout
            )
            return True
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired, FileNotFoundError) as e:
            logger.warning("%s failed: %s", command[0], e)
            return False

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    def _write_text(self, text: str) -> bool:
        return self._copy(text.encode("utf-8"))

    def _write_image(self, payload: bytes, mime_type: str) -> bool:
        return self._copy(payload, essence(mime_type) or "image/png")

    def _write_files(self, paths: Sequence[Path]) -> bool:
        uri_list = "\n".join(Path(p).resolve().as_uri() for p in paths)
        return self._copy(uri_list.encode("utf-8"), "text/uri-list")

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def _read_items(self) -> List[RawClipboardItem]:
        if os.environ.get("WAYLAND_DISPLAY") and shutil.which("wl-paste"):
            types = self._parse_type_list(
                self._run_command(["wl-paste", "--list-types"]))

            def reader(target: str) -> Optional[bytes]:
                command = ["wl-paste", "--type", target]
                if target.lower().startswith("text/"):
                    command.append("--no-newline")
                return self._run_command(command)

        elif shutil.which("xclip"):
            types = self._parse_type_list(
                self._run_command(
                    ["xclip", "-selection", "clipboard", "-t", "TARGETS", "-o"]))

            def reader(target: str) -> Optional[bytes]:
                return self._run_command(
                    ["xclip", "-selection", "clipboard", "-t", target, "-o"])
        else:
            logger.warning("Neither wl-paste nor xclip is available")
            return []

        return self._items_from_types(types, reader)

    def _items_from_types(
        self,
        types: List[str],
        reader: Callable[[str], Optional[bytes]],
    ) -> List[RawClipboardItem]:
        items: List[RawClipboardItem] = []
        lowered = {target.lower(): target for target in types}

        for target_lower, target in lowered.items():
            if target_lower in self._FILE_TARGETS:
                data = reader(target)
                if data:
                    items.extend(self._file_items(data))
                break

        for target_lower, target in lowered.items():
            if target_lower in self._IMAGE_TARGETS:
                items.append(RawClipboardItem.from_callable(
                    self._IMAGE_TARGETS[target_lower],
                    self._required(reader, target)))
                break

        for target_lower, target in lowered.items():
            if target_lower in self._TEXT_TARGETS:
                read_bytes = self._required(reader, target)
                items.append(RawClipboardItem.from_callable(
                    "text/plain",
                    lambda: read_bytes().decode("utf-8", errors="ignore")))
                break

        return items

    def _file_items(self, data: bytes) -> List[RawClipboardItem]:
        items = []
        for path in self._parse_paths(data):
            if path.is_file():
                items.append(RawClipboardItem.from_callable(
                    guess_mime(path), path.read_bytes))
        return items

    @staticmethod
    def _required(reader: Callable[[str], Optional[bytes]], target: str) -> Callable[[], bytes]:
        def read() -> bytes:
            data = reader(target)
            if data is None:
                raise OSError(f"clipboard target {target!r} could not be read")
            return data
        return read

    def _parse_type_list(self, data: Optional[bytes]) -> List[str]:
        if not data:
            return []
        text = data.decode("utf-8", errors="ignore")
        return [line.strip() for line in text.splitlines() if line.strip()]

    def _parse_paths(self, data: bytes) -> List[Path]:
        text = data.decode("utf-8", errors="ignore")
        lines = [line.strip() for line in text.replace(
            "\r", "\n").split("\n") if line.strip()]
        if lines and lines[0].lower() in {"copy", "cut"}:
            lines = lines[1:]

        paths: List[Path] = []
        for entry in lines:
            if entry.startswith("#"):
                continue
            parsed = urlparse(entry)
            if parsed.scheme == "file":
                candidate = Path(unquote(parsed.path))
            else:
                candidate = Path(unquote(entry))

            paths.append(candidate)

        return paths

    def _run_command(self, command: List[str]) -> Optional[bytes]:
        try:
            result = subprocess.run(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                check=True,
                timeout=self.timeout,
            )
            return result.stdout
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired, FileNotFoundError):
            return None
