"""Keyboard shortcuts for NacoClip.

``ctrl+1`` .. ``ctrl+9`` copy the entry at list position 0 .. 8 to the
system clipboard. Hotkeys are registered through the ``keyboard`` package,
whose callbacks run on its own listener thread.
"""

import logging
import threading
from typing import Callable, List

import keyboard

logger = logging.getLogger(__name__)

SHORTCUT_COUNT = 9


def shortcut_for(index: int) -> str:
    return f"ctrl+{index + 1}"


class HotkeyService:
    """Registers the copy-by-position shortcuts and keeps them alive."""

    def __init__(
        self,
        on_shortcut: Callable[[int], object],
        auto_register: bool = False,
    ) -> None:
        """Initialise the service.

        Args:
            on_shortcut: Called with the zero-based list index of the pressed shortcut.
            auto_register: When ``True`` the hotkeys are registered immediately.
        """
        self._on_shortcut = on_shortcut
        self._lock = threading.RLock()
        self._stop_event = threading.Event()
        self._handles: List[object] = []
        self._is_running = False

        if auto_register:
            self.start()

    # ---------------------------------------------------------------------
    # Lifecycle management
    # ---------------------------------------------------------------------
    def start(self) -> None:
        with self._lock:
            if self._is_running:
                logger.debug("HotkeyService already running")
                return

            logger.info("Registering %d copy shortcuts", SHORTCUT_COUNT)
            self._stop_event.clear()
            for index in range(SHORTCUT_COUNT):
                handle = keyboard.add_hotkey(
                    shortcut_for(index), self._handle_shortcut, args=(index,))
                self._handles.append(handle)
            self._is_running = True

    def stop(self) -> None:
        with self._lock:
            if not self._is_running:
                return

            logger.info("Removing copy shortcuts")
            for handle in self._handles:
                try:
                    keyboard.remove_hotkey(handle)
                except (KeyError, ValueError):
                    pass
            self._handles = []
            self._is_running = False
            self._stop_event.set()

    def run_forever(self, poll_interval: float = 0.5) -> None:
        """Block until `stop()` is called or Ctrl+C is pressed."""
        try:
            if not self._is_running:
                self.start()

            while not self._stop_event.wait(timeout=poll_interval):
                continue
        except KeyboardInterrupt:
            logger.info("HotkeyService interrupted by user")
        finally:
            self.stop()

    @property
    def is_running(self) -> bool:
        return self._is_running

    # ---------------------------------------------------------------------
    # Event handling
    # ---------------------------------------------------------------------
    def _handle_shortcut(self, index: int) -> None:
        try:
            self._on_shortcut(index)
        except Exception:
            # an exception here would kill the keyboard listener thread
            logger.exception("Shortcut %s failed", shortcut_for(index))

    def __enter__(self) -> "HotkeyService":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
